"""
Surface materials for the Phong local illumination model.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Material:
    """Per-surface shading coefficients.

    Attributes:
        kd: Diffuse reflectivity
        ks: Specular reflectivity
        shininess: Specular exponent
        ka: Scale applied to the scene's ambient light
    """
    kd: float = 0.0
    ks: float = 0.0
    shininess: int = 0
    ka: float = 1.0

    def __post_init__(self):
        for name in ('kd', 'ks', 'ka'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.shininess < 0 or int(self.shininess) != self.shininess:
            raise ValueError(f"shininess must be a non-negative integer, got {self.shininess}")
        object.__setattr__(self, 'shininess', int(self.shininess))
