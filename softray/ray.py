"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a unit direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from typing import Optional, Sequence, TYPE_CHECKING

from .vec3 import Vec3, Point3, is_zero

if TYPE_CHECKING:
    from .shapes import GeoPoint

# Distance a shadow ray's head is moved off the surface it starts on
DELTA = 1e-4


class Ray:
    """A ray with origin and normalized direction.

    The parametric form is: P(t) = origin + t * direction
    where t > 0 represents points along the ray.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector (normalized on construction)
        """
        self.origin = origin
        self.direction = direction.normalize()

    @classmethod
    def offset(cls, head: Point3, direction: Vec3, normal: Vec3, delta: float = DELTA) -> Ray:
        """Create a ray whose head is pushed off a surface.

        The head moves by delta along the normal, toward the side the
        direction points to, so the ray does not hit the surface it starts on.

        Args:
            head: Point on the surface
            direction: Direction of the new ray
            normal: Surface normal at head
            delta: Offset distance
        """
        n_dot_d = normal.dot(direction)
        if is_zero(n_dot_d):
            return cls(head, direction)
        return cls(head + normal * (delta if n_dot_d > 0 else -delta), direction)

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (the distance, as direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        if is_zero(t):
            return self.origin
        return self.origin + self.direction * t

    def closest_geo_point(self, geo_points: Sequence[GeoPoint]) -> Optional[GeoPoint]:
        """Return the intersection nearest to the origin.

        Scans in order; on equal distance the earlier entry wins, so the
        result follows the scene's geometry insertion order.
        """
        closest: Optional[GeoPoint] = None
        closest_distance = float('inf')

        for geo_point in geo_points:
            distance = self.origin.distance_squared(geo_point.point)
            if distance < closest_distance:
                closest = geo_point
                closest_distance = distance

        return closest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return self.origin == other.origin and self.direction == other.direction

    def __hash__(self) -> int:
        return hash((self.origin, self.direction))

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"
