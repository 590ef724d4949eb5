"""
Light sources for the ray tracer.

Implements the light types of the Phong model:
- Ambient light (uniform, scene wide)
- Directional lights (sun)
- Point lights with distance attenuation
- Spot lights (point lights with a preferred direction)

Point and spot lights may have a radius. A nonzero radius turns them into
disk-shaped area lights for soft shadows: the shadow test is repeated from
several sample positions spread over the disk.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import ClassVar
import math

from .vec3 import Vec3, Point3, Color, is_zero

# Angle between successive spiral samples; spreads any count evenly over a disk
GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class AmbientLight:
    """Uniform light applied to every surface regardless of orientation."""

    NONE: ClassVar[AmbientLight]

    def __init__(self, color: Color, ka: float = 1.0):
        """Create an ambient light.

        Args:
            color: Color of the light
            ka: Attenuation factor applied to the color
        """
        self.intensity = color * ka

    def __repr__(self) -> str:
        return f"AmbientLight(intensity={self.intensity})"


AmbientLight.NONE = AmbientLight(Color.BLACK, 0.0)


class LightSource(ABC):
    """Abstract base class for light sources that cast shadows."""

    def __init__(self, intensity: Color):
        self.intensity = intensity

    @abstractmethod
    def intensity_at(self, point: Point3) -> Color:
        """Light intensity arriving at a point (shadows not considered)."""
        pass

    @abstractmethod
    def direction_at(self, point: Point3) -> Vec3:
        """Unit vector from the light toward the point."""
        pass

    @abstractmethod
    def distance(self, point: Point3) -> float:
        """Distance from the point to the light (inf for directional lights)."""
        pass

    def sample_positions(self, point: Point3, count: int) -> list[Point3]:
        """Positions on the light to cast shadow rays at.

        Lights without a position (directional) return an empty list; the
        tracer then tests a single ray along direction_at.
        """
        return []


class DirectionalLight(LightSource):
    """A directional light (like the sun).

    Directional lights have parallel rays and no falloff.
    """

    def __init__(self, intensity: Color, direction: Vec3):
        """Create a directional light.

        Args:
            intensity: Color of the light
            direction: Direction the light travels in
        """
        super().__init__(intensity)
        self.direction = direction.normalize()

    def intensity_at(self, point: Point3) -> Color:
        return self.intensity

    def direction_at(self, point: Point3) -> Vec3:
        return self.direction

    def distance(self, point: Point3) -> float:
        return math.inf

    def __repr__(self) -> str:
        return f"DirectionalLight(intensity={self.intensity}, direction={self.direction})"


class PointLight(LightSource):
    """A point light source with constant, linear and quadratic attenuation.

    With radius 0 it produces hard shadows; with a positive radius its
    shadow tests are spread over a disk and shadows get a penumbra.
    """

    def __init__(
        self,
        intensity: Color,
        position: Point3,
        kc: float = 1.0,
        kl: float = 0.0,
        kq: float = 0.0,
        radius: float = 0.0
    ):
        """Create a point light.

        Args:
            intensity: Color of the light at the source
            position: Position of the light
            kc: Constant attenuation
            kl: Linear attenuation (per unit distance)
            kq: Quadratic attenuation (per squared unit distance)
            radius: Radius of the emitting disk for soft shadows
        """
        super().__init__(intensity)
        if kc < 0 or kl < 0 or kq < 0:
            raise ValueError("attenuation coefficients must be non-negative")
        if is_zero(kc) and is_zero(kl) and is_zero(kq):
            raise ValueError("at least one attenuation coefficient must be positive")
        if radius < 0:
            raise ValueError(f"light radius must be non-negative, got {radius}")
        self.position = position
        self.kc = kc
        self.kl = kl
        self.kq = kq
        self.radius = radius

    def intensity_at(self, point: Point3) -> Color:
        d_squared = self.position.distance_squared(point)
        attenuation = self.kc + self.kl * math.sqrt(d_squared) + self.kq * d_squared
        return self.intensity / attenuation

    def direction_at(self, point: Point3) -> Vec3:
        return (point - self.position).normalize()

    def distance(self, point: Point3) -> float:
        return self.position.distance(point)

    def sample_positions(self, point: Point3, count: int) -> list[Point3]:
        """Spread count positions over the light's disk.

        The disk is centered on the light and faces the point. Samples lie
        on a golden-angle spiral, so the set is fixed for a given count and
        shrinks onto the light's position as the radius goes to zero.
        """
        if count <= 1 or is_zero(self.radius):
            return [self.position]

        tangent, bitangent = self.direction_at(point).orthonormal_basis()
        positions = []
        for i in range(count):
            r = self.radius * math.sqrt((i + 0.5) / count)
            phi = i * GOLDEN_ANGLE
            x = r * math.cos(phi)
            y = r * math.sin(phi)
            sample = self.position
            if not is_zero(x):
                sample = sample + tangent * x
            if not is_zero(y):
                sample = sample + bitangent * y
            positions.append(sample)
        return positions

    def __repr__(self) -> str:
        return f"PointLight(intensity={self.intensity}, position={self.position}, radius={self.radius})"


class SpotLight(PointLight):
    """A point light that shines mostly along one direction.

    Intensity is scaled by max(0, direction·l) ** narrow_beam, where l is
    the direction from the light to the lit point. Larger narrow_beam
    values give a tighter beam.
    """

    def __init__(
        self,
        intensity: Color,
        position: Point3,
        direction: Vec3,
        kc: float = 1.0,
        kl: float = 0.0,
        kq: float = 0.0,
        radius: float = 0.0,
        narrow_beam: float = 1.0
    ):
        super().__init__(intensity, position, kc, kl, kq, radius)
        if narrow_beam < 1:
            raise ValueError(f"narrow_beam must be at least 1, got {narrow_beam}")
        self.direction = direction.normalize()
        self.narrow_beam = narrow_beam

    def intensity_at(self, point: Point3) -> Color:
        if self.position == point:
            return Color.BLACK
        factor = self.direction.dot(self.direction_at(point))
        if factor <= 0:
            return Color.BLACK
        return super().intensity_at(point) * (factor ** self.narrow_beam)

    def __repr__(self) -> str:
        return (f"SpotLight(intensity={self.intensity}, position={self.position}, "
                f"direction={self.direction}, radius={self.radius})")
