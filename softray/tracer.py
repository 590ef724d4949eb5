"""
Ray tracers - turn a primary ray into a pixel color.

Implements:
- RayTracerBase, the interface the camera renders through
- SimpleRayTracer, Phong local illumination with hard and soft shadows
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from .vec3 import Vec3, Point3, Color, is_zero, align_zero
from .ray import Ray
from .scene import Scene
from .shapes import GeoPoint
from .lights import LightSource


class RayTracerBase(ABC):
    """Abstract base class for ray tracers."""

    def __init__(self, scene: Scene):
        self.scene = scene

    @abstractmethod
    def trace_ray(self, ray: Ray, samples: int = 1) -> Color:
        """Compute the color seen along a ray.

        Args:
            ray: The primary ray
            samples: Shadow samples per light (1 = hard shadows)

        Returns:
            The color for this ray
        """
        pass


class SimpleRayTracer(RayTracerBase):
    """Local illumination: emission, ambient, diffuse, specular and shadows.

    No reflection or refraction rays are traced.
    """

    def trace_ray(self, ray: Ray, samples: int = 1) -> Color:
        closest = self._find_closest_intersection(ray)
        if closest is None:
            return self.scene.background
        return self._calc_color(closest, ray, samples)

    def _find_closest_intersection(self, ray: Ray) -> Optional[GeoPoint]:
        """Nearest hit in the scene; ties go to the geometry added first."""
        return ray.closest_geo_point(self.scene.geometries.find_geo_intersections(ray))

    def _calc_color(self, geo_point: GeoPoint, ray: Ray, samples: int) -> Color:
        geometry = geo_point.geometry
        ambient = self.scene.ambient_light.intensity * geometry.material.ka
        return geometry.emission + ambient + self._calc_local_effects(geo_point, ray, samples)

    def _calc_local_effects(self, geo_point: GeoPoint, ray: Ray, samples: int) -> Color:
        """Sum of diffuse and specular terms over all lights.

        A light contributes only when it is on the same side of the surface
        as the viewer; the normal is flipped to face the viewer, so diffuse
        and specular factors are never negative.
        """
        geometry = geo_point.geometry
        point = geo_point.point
        material = geometry.material
        v = ray.direction
        n = geometry.normal_at(point)

        n_dot_v = align_zero(n.dot(v))
        if n_dot_v == 0:
            return Color.BLACK

        color = Color.BLACK
        for light in self.scene.lights:
            if is_zero(light.distance(point)):
                # Point sits on the light itself; it has no direction to shade with
                continue
            l = light.direction_at(point)
            n_dot_l = align_zero(n.dot(l))
            if n_dot_l * n_dot_v <= 0:
                continue

            shadow = self._shadow_factor(light, point, n, l, n_dot_l, samples)
            if shadow == 0:
                continue

            intensity = light.intensity_at(point) * shadow
            diffuse = material.kd * abs(n_dot_l)
            specular = self._specular(material.ks, material.shininess, n, l, n_dot_l, v)
            color = color + intensity * (diffuse + specular)

        return color

    @staticmethod
    def _specular(ks: float, shininess: int, n: Vec3, l: Vec3, n_dot_l: float, v: Vec3) -> float:
        """ks * max(0, -v·r) ** shininess with r the mirror of l about n."""
        if ks == 0:
            return 0.0
        minus_v_dot_r = -(v.dot(l) - 2.0 * n_dot_l * n.dot(v))
        if minus_v_dot_r <= 0:
            return 0.0
        return ks * minus_v_dot_r ** shininess

    def _shadow_factor(
        self, light: LightSource, point: Point3, n: Vec3, l: Vec3, n_dot_l: float, samples: int
    ) -> float:
        """Fraction of shadow rays from point to light that reach it.

        Lights without a position get one ray along -l. Others get one ray
        per sample position; with one sample this is a plain 0/1 test.
        Samples on the far side of the surface from the light's center, or
        in its tangent plane, are blocked by the surface itself.
        """
        positions = light.sample_positions(point, samples)
        if not positions:
            ray = Ray.offset(point, -l, n)
            return 0.0 if self._occluded(ray, light.distance(point)) else 1.0

        unblocked = 0
        for position in positions:
            if position == point:
                continue
            to_sample = position - point
            if align_zero(n.dot(to_sample)) * n_dot_l >= 0:
                continue
            ray = Ray.offset(point, to_sample, n)
            if not self._occluded(ray, ray.origin.distance(position)):
                unblocked += 1
        return unblocked / len(positions)

    def _occluded(self, ray: Ray, distance: float) -> bool:
        return len(self.scene.geometries.find_geo_intersections(ray, distance)) > 0
