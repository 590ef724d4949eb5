"""
Geometric shapes for the ray tracer.

Every shape implements the Intersectable protocol: given a ray it returns
the points where the ray crosses its surface. Shapes that own a surface
(everything but the Geometries collection) also answer normal queries and
carry a material and an emission color.

Intersections are only reported for ray parameters 0 < t < max_distance;
points on the ray's own origin are never returned. Degenerate cases
(parallel rays, tangents, misses) give an empty list, never an error.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional
import math

import numpy as np

from .vec3 import EPSILON, Vec3, Point3, Color, is_zero, align_zero
from .ray import Ray
from .materials import Material


@dataclass(frozen=True)
class GeoPoint:
    """An intersection point together with the shape it lies on."""
    geometry: 'Geometry'
    point: Point3


class Intersectable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        """Find where the ray crosses this object.

        Args:
            ray: The ray to test
            max_distance: Only report points closer than this to the ray origin

        Returns:
            Intersections in no particular order (possibly empty)
        """
        pass

    def find_intersections(self, ray: Ray) -> list[Point3]:
        """Intersection points without the owning geometry."""
        return [gp.point for gp in self.find_geo_intersections(ray)]


class Geometry(Intersectable):
    """A single surface with a material and an emission color."""

    def __init__(self, material: Optional[Material] = None, emission: Optional[Color] = None):
        self.material = material if material is not None else Material()
        self.emission = emission if emission is not None else Color.BLACK

    @abstractmethod
    def normal_at(self, point: Point3) -> Vec3:
        """Return the outward unit normal at a point on the surface."""
        pass

    def _geo_points(self, ray: Ray, ts: Iterable[float], max_distance: float) -> list[GeoPoint]:
        """Keep the parameters inside (0, max_distance) and turn them into points."""
        return [
            GeoPoint(self, ray.at(t))
            for t in sorted(ts)
            if align_zero(t) > 0 and align_zero(t - max_distance) < 0
        ]


class Sphere(Geometry):
    """A sphere defined by center and radius."""

    def __init__(
        self,
        center: Point3,
        radius: float,
        material: Optional[Material] = None,
        emission: Optional[Color] = None
    ):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (must be positive)
            material: Material for shading
            emission: Self-illumination color
        """
        super().__init__(material, emission)
        if radius <= 0:
            raise ValueError(f"sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = radius

    def normal_at(self, point: Point3) -> Vec3:
        return (point - self.center).normalize()

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        """Test ray-sphere intersection geometrically.

        With u = C - O, tm = d·u is the parameter of the point nearest the
        center and th = sqrt(r² - |u|² + tm²) the half chord, giving the
        roots tm ± th. A tangent ray (th == 0) does not intersect.
        """
        u = self.center._data - ray.origin._data
        if np.all(np.abs(u) < EPSILON):
            return self._geo_points(ray, (self.radius,), max_distance)

        tm = float(np.dot(ray.direction._data, u))
        d_squared = float(np.dot(u, u)) - tm * tm
        th_squared = align_zero(self.radius * self.radius - d_squared)
        if th_squared <= 0:
            return []

        th = math.sqrt(th_squared)
        return self._geo_points(ray, (tm - th, tm + th), max_distance)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Plane(Geometry):
    """An infinite plane defined by a point and normal."""

    def __init__(
        self,
        point: Point3,
        normal: Vec3,
        material: Optional[Material] = None,
        emission: Optional[Color] = None
    ):
        """Create a plane.

        Args:
            point: Any point on the plane
            normal: The plane's normal vector (will be normalized)
            material: Material for shading
            emission: Self-illumination color
        """
        super().__init__(material, emission)
        self.point = point
        self.normal = normal.normalize()

    @classmethod
    def from_points(cls, p1: Point3, p2: Point3, p3: Point3, **kwargs) -> Plane:
        """Create the plane through three points.

        Raises:
            ZeroVectorError: if the points coincide or are collinear
        """
        normal = (p2 - p1).cross(p3 - p1)
        return cls(p1, normal, **kwargs)

    def normal_at(self, point: Point3) -> Vec3:
        return self.normal

    def plane_parameter(self, ray: Ray) -> Optional[float]:
        """Ray parameter where the ray meets the plane, or None if it doesn't."""
        n = self.normal._data
        n_dot_v = float(np.dot(n, ray.direction._data))
        if is_zero(n_dot_v):
            return None

        numerator = float(np.dot(n, self.point._data - ray.origin._data))
        if is_zero(numerator):
            # Ray starts on the plane
            return None
        return numerator / n_dot_v

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        t = self.plane_parameter(ray)
        if t is None:
            return []
        return self._geo_points(ray, (t,), max_distance)

    def __repr__(self) -> str:
        return f"Plane(point={self.point}, normal={self.normal})"


class Triangle(Geometry):
    """A triangle defined by three vertices."""

    def __init__(
        self,
        p1: Point3,
        p2: Point3,
        p3: Point3,
        material: Optional[Material] = None,
        emission: Optional[Color] = None
    ):
        """Create a triangle from three vertices.

        The normal follows the right-hand rule over p1, p2, p3.

        Raises:
            ZeroVectorError: if the vertices are collinear
        """
        super().__init__(material, emission)
        self.vertices = (p1, p2, p3)
        self.plane = Plane.from_points(p1, p2, p3)

    def normal_at(self, point: Point3) -> Vec3:
        return self.plane.normal

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        """Intersect the supporting plane, then keep the hit if it lies inside.

        The hit is inside when the ray direction is on the same side of all
        three planes spanned by the ray origin and each edge. A hit exactly
        on an edge or vertex is excluded.
        """
        t = self.plane.plane_parameter(ray)
        if t is None or align_zero(t) <= 0 or align_zero(t - max_distance) >= 0:
            return []

        origin = ray.origin._data
        direction = ray.direction._data
        edges = [vertex._data - origin for vertex in self.vertices]

        sign = 0.0
        for i in range(3):
            n = np.cross(edges[i], edges[(i + 1) % 3])
            norm = float(np.linalg.norm(n))
            if is_zero(norm):
                return []
            side = align_zero(float(np.dot(direction, n)) / norm)
            if side == 0 or side * sign < 0:
                return []
            sign = side

        return [GeoPoint(self, ray.at(t))]

    def __repr__(self) -> str:
        return "Triangle({}, {}, {})".format(*self.vertices)


# Helpers shared by the radial shapes (Tube and Cylinder)

def _radial_roots(ray: Ray, axis: Ray, radius: float) -> tuple[float, ...]:
    """Ray parameters where the ray crosses an infinite tube around axis.

    Only the components of the ray perpendicular to the axis matter:
    |v⊥ t + Δp⊥|² = r². A ray parallel to the axis or tangent to the
    tube has no roots.
    """
    va = axis.direction._data
    v = ray.direction._data
    dp = ray.origin._data - axis.origin._data

    v_perp = v - np.dot(v, va) * va
    dp_perp = dp - np.dot(dp, va) * va

    a = float(np.dot(v_perp, v_perp))
    if is_zero(a):
        return ()

    b = 2.0 * float(np.dot(v_perp, dp_perp))
    c = float(np.dot(dp_perp, dp_perp)) - radius * radius
    discriminant = align_zero(b * b - 4.0 * a * c)
    if discriminant <= 0:
        return ()

    sqrt_d = math.sqrt(discriminant)
    return ((-b - sqrt_d) / (2.0 * a), (-b + sqrt_d) / (2.0 * a))


def _axial_distance(point: Point3, axis: Ray) -> float:
    """Signed distance of the point's projection along the axis."""
    return float(np.dot(point._data - axis.origin._data, axis.direction._data))


def _radial_normal(point: Point3, axis: Ray) -> Vec3:
    """Unit vector from the nearest axis point out to the given point."""
    t = _axial_distance(point, axis)
    return (point - axis.at(t)).normalize()


def _check_radius(radius: float) -> None:
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")


class Tube(Geometry):
    """An infinite tube of constant radius around an axis ray."""

    def __init__(
        self,
        radius: float,
        axis: Ray,
        material: Optional[Material] = None,
        emission: Optional[Color] = None
    ):
        super().__init__(material, emission)
        _check_radius(radius)
        self.radius = radius
        self.axis = axis

    def normal_at(self, point: Point3) -> Vec3:
        return _radial_normal(point, self.axis)

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        return self._geo_points(ray, _radial_roots(ray, self.axis, self.radius), max_distance)

    def __repr__(self) -> str:
        return f"Tube(radius={self.radius}, axis={self.axis})"


class Cylinder(Geometry):
    """A finite capped cylinder.

    The base cap is centered on the axis origin; the top cap sits height
    units along the axis direction.
    """

    def __init__(
        self,
        radius: float,
        axis: Ray,
        height: float,
        material: Optional[Material] = None,
        emission: Optional[Color] = None
    ):
        """Create a cylinder.

        Args:
            radius: Radius of the cylinder (must be positive)
            axis: Axis ray; its origin is the center of the base cap
            height: Height of the cylinder (must be positive)
            material: Material for shading
            emission: Self-illumination color
        """
        super().__init__(material, emission)
        _check_radius(radius)
        if height <= 0:
            raise ValueError(f"cylinder height must be positive, got {height}")
        self.radius = radius
        self.axis = axis
        self.height = height
        self.top_center = axis.at(height)

    def normal_at(self, point: Point3) -> Vec3:
        along = _axial_distance(point, self.axis)
        if is_zero(along):
            return -self.axis.direction
        if is_zero(along - self.height):
            return self.axis.direction
        return _radial_normal(point, self.axis)

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        """Side hits strictly between the caps, plus cap hits within the rim."""
        ts = []

        for t in _radial_roots(ray, self.axis, self.radius):
            if align_zero(t) <= 0:
                continue
            along = _axial_distance(ray.at(t), self.axis)
            if align_zero(along) > 0 and align_zero(along - self.height) < 0:
                ts.append(t)

        va = self.axis.direction._data
        v_dot_a = float(np.dot(ray.direction._data, va))
        if not is_zero(v_dot_a):
            r_squared = self.radius * self.radius
            for center in (self.axis.origin, self.top_center):
                t = float(np.dot(va, center._data - ray.origin._data)) / v_dot_a
                if align_zero(t) <= 0:
                    continue
                offset = ray.origin._data + ray.direction._data * t - center._data
                if align_zero(float(np.dot(offset, offset)) - r_squared) <= 0:
                    ts.append(t)

        return self._geo_points(ray, ts, max_distance)

    def __repr__(self) -> str:
        return f"Cylinder(radius={self.radius}, axis={self.axis}, height={self.height})"


class Geometries(Intersectable):
    """An ordered collection of intersectable objects."""

    def __init__(self, *geometries: Intersectable):
        self.geometries: list[Intersectable] = list(geometries)

    def add(self, *geometries: Intersectable) -> Geometries:
        """Append objects to the collection."""
        self.geometries.extend(geometries)
        return self

    def find_geo_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[GeoPoint]:
        """Concatenate the children's intersections in insertion order."""
        result: list[GeoPoint] = []
        for geometry in self.geometries:
            result.extend(geometry.find_geo_intersections(ray, max_distance))
        return result

    def __len__(self) -> int:
        return len(self.geometries)

    def __iter__(self):
        return iter(self.geometries)
