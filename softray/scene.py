"""
Scene container: what the tracer looks at.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .vec3 import Color
from .shapes import Geometries
from .lights import AmbientLight, LightSource


@dataclass
class Scene:
    """Geometry, lights and background of a render.

    The scene must not be modified while a render is running.
    """
    name: str
    background: Color = field(default_factory=lambda: Color.BLACK)
    ambient_light: AmbientLight = field(default_factory=lambda: AmbientLight.NONE)
    geometries: Geometries = field(default_factory=Geometries)
    lights: list[LightSource] = field(default_factory=list)
