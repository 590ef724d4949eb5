"""
softray - A Python Ray Tracing Renderer

A brute-force ray tracer with Phong local illumination:
- Spheres, planes, triangles, tubes and cylinders
- Ambient, directional, point and spot lights
- Hard shadows and soft shadows from disk-shaped lights
- Sequential or multi-threaded pixel scheduling
- PNG output through Pillow
"""

__version__ = "0.1.0"
__author__ = "softray Team"

from .errors import SoftrayError, ZeroVectorError, ConfigurationError, CameraBuildError, FieldProblem
from .vec3 import Vec3, Point3, Color, is_zero, align_zero
from .ray import Ray
from .materials import Material
from .shapes import (
    GeoPoint, Intersectable, Geometry, Sphere, Plane, Triangle, Tube, Cylinder, Geometries
)
from .lights import AmbientLight, LightSource, DirectionalLight, PointLight, SpotLight
from .scene import Scene
from .tracer import RayTracerBase, SimpleRayTracer
from .image_writer import ImageWriter
from .pixel_manager import Pixel, PixelManager
from .camera import Camera, CameraBuilder, RenderSettings
