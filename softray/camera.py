"""
Camera module: primary ray construction and the render driver.

Supports:
- A pinhole camera with an orthonormal (to, up, right) basis
- A view plane of given width, height and distance
- Sequential or multi-threaded rendering into an image writer
- Soft shadows through a configurable shadow sample count

Cameras are created through CameraBuilder, which checks every field before
anything is rendered.
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError, CameraBuildError, FieldProblem
from .vec3 import Vec3, Point3, Color, is_zero
from .ray import Ray
from .image_writer import ImageWriter
from .pixel_manager import PixelManager
from .tracer import RayTracerBase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderSettings:
    """Render-time configuration of a camera.

    Attributes:
        threads_count: Worker threads; 0 renders sequentially, -1 uses one per CPU
        samples: Shadow samples per light (1 = hard shadows)
        progress_interval: Log progress every this many percent (0 = never)
    """
    threads_count: int = 0
    samples: int = 1
    progress_interval: float = 0.0

    def __post_init__(self):
        if self.threads_count < -1:
            raise ConfigurationError("threads_count", f"must be -1, 0 or positive, got {self.threads_count}")
        if self.samples < 1:
            raise ConfigurationError("samples", f"must be at least 1, got {self.samples}")
        if self.progress_interval < 0:
            raise ConfigurationError("progress_interval", f"must be non-negative, got {self.progress_interval}")

    @property
    def workers(self) -> int:
        """Number of worker threads to start (0 = render on the calling thread)."""
        if self.threads_count == -1:
            return os.cpu_count() or 4
        return self.threads_count


@dataclass(frozen=True, eq=False)
class Camera:
    """A pinhole camera bound to a ray tracer and an image writer.

    Build instances with Camera.builder().
    """
    location: Point3
    to: Vec3
    up: Vec3
    right: Vec3
    width: float
    height: float
    distance: float
    image_writer: ImageWriter
    ray_tracer: RayTracerBase
    settings: RenderSettings = field(default_factory=RenderSettings)

    @staticmethod
    def builder() -> CameraBuilder:
        return CameraBuilder()

    def construct_ray(self, j: int, i: int, nx: int, ny: int) -> Ray:
        """Build the primary ray through a pixel.

        Args:
            j: Pixel column (0 = left)
            i: Pixel row (0 = top)
            nx: Number of columns
            ny: Number of rows

        Returns:
            A ray from the camera location through the pixel's center
        """
        center = self.location + self.to * self.distance

        x_j = (j - (nx - 1) / 2) * (self.width / nx)
        y_i = -(i - (ny - 1) / 2) * (self.height / ny)

        p_ij = center
        if not is_zero(x_j):
            p_ij = p_ij + self.right * x_j
        if not is_zero(y_i):
            p_ij = p_ij + self.up * y_i

        return Ray(self.location, p_ij - self.location)

    def render_image(self) -> Camera:
        """Trace every pixel and store the colors in the image writer.

        Renders on the calling thread when settings.workers is 0, otherwise
        on that many worker threads sharing one PixelManager. Blocks until
        every pixel is written. An exception in a worker, or an interrupt
        while waiting, stops the remaining workers and is re-raised.
        """
        nx, ny = self.image_writer.dimensions()
        workers = self.settings.workers
        pixel_manager = PixelManager(ny, nx, self.settings.progress_interval)

        logger.info(
            "Rendering %dx%d image %r (threads=%d, samples=%d)",
            nx, ny, self.image_writer.image_name, workers, self.settings.samples
        )
        start = time.perf_counter()

        if workers == 0:
            for i in range(ny):
                for j in range(nx):
                    self._cast_ray(nx, ny, j, i)
                    pixel_manager.pixel_done()
        else:
            self._render_parallel(pixel_manager, workers, nx, ny)

        logger.info("Rendered %d pixels in %.2fs", nx * ny, time.perf_counter() - start)
        return self

    def _render_parallel(self, pixel_manager: PixelManager, workers: int, nx: int, ny: int) -> None:
        abort = threading.Event()

        def worker() -> None:
            try:
                while not abort.is_set():
                    pixel = pixel_manager.next_pixel()
                    if pixel is None:
                        return
                    self._cast_ray(nx, ny, pixel.col, pixel.row)
                    pixel_manager.pixel_done()
            except BaseException:
                abort.set()
                raise

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="softray-render") as executor:
            futures = [executor.submit(worker) for _ in range(workers)]
            try:
                for future in futures:
                    future.result()
            except BaseException:
                abort.set()
                logger.error("Render aborted after %d of %d pixels", pixel_manager.done, pixel_manager.total)
                raise

    def _cast_ray(self, nx: int, ny: int, column: int, row: int) -> None:
        ray = self.construct_ray(column, row, nx, ny)
        color = self.ray_tracer.trace_ray(ray, self.settings.samples)
        self.image_writer.write_pixel(column, row, color)

    def print_grid(self, interval: int, color: Color) -> Camera:
        """Draw grid lines every interval pixels into the image writer."""
        if interval <= 0:
            raise ValueError(f"grid interval must be positive, got {interval}")
        nx, ny = self.image_writer.dimensions()
        for x in range(nx):
            for y in range(ny):
                if x % interval == 0 or y % interval == 0:
                    self.image_writer.write_pixel(x, y, color)
        return self

    def write_to_image(self) -> Path:
        """Save the image writer's raster to disk and return its path."""
        return self.image_writer.write_to_image()


class CameraBuilder:
    """Collects camera fields and validates them all in build()."""

    def __init__(self):
        self._location: Optional[Point3] = None
        self._to: Optional[Vec3] = None
        self._up: Optional[Vec3] = None
        self._width: Optional[float] = None
        self._height: Optional[float] = None
        self._distance: Optional[float] = None
        self._image_writer: Optional[ImageWriter] = None
        self._ray_tracer: Optional[RayTracerBase] = None
        self._threads_count = 0
        self._samples = 1
        self._progress_interval = 0.0

    def set_location(self, location: Point3) -> CameraBuilder:
        self._location = location
        return self

    def set_direction(self, to: Vec3, up: Vec3) -> CameraBuilder:
        """Set the viewing direction and the up vector.

        Raises:
            ConfigurationError: if the vectors are not perpendicular
        """
        to = to.normalize()
        up = up.normalize()
        if not is_zero(to.dot(up)):
            raise ConfigurationError("direction", "the to and up vectors are not perpendicular")
        self._to = to
        self._up = up
        return self

    def set_vp_size(self, width: float, height: float) -> CameraBuilder:
        self._width = width
        self._height = height
        return self

    def set_vp_distance(self, distance: float) -> CameraBuilder:
        self._distance = distance
        return self

    def set_image_writer(self, image_writer: ImageWriter) -> CameraBuilder:
        self._image_writer = image_writer
        return self

    def set_ray_tracer(self, ray_tracer: RayTracerBase) -> CameraBuilder:
        self._ray_tracer = ray_tracer
        return self

    def set_multithreading(self, threads_count: int) -> CameraBuilder:
        """Set the worker thread count (0 = sequential, -1 = one per CPU)."""
        if threads_count < -1:
            raise ConfigurationError("threads_count", f"must be -1, 0 or positive, got {threads_count}")
        self._threads_count = threads_count
        return self

    def set_samples(self, samples: int) -> CameraBuilder:
        """Set the number of shadow samples per light."""
        if samples < 1:
            raise ConfigurationError("samples", f"must be at least 1, got {samples}")
        self._samples = samples
        return self

    def set_progress_interval(self, interval: float) -> CameraBuilder:
        if interval < 0:
            raise ConfigurationError("progress_interval", f"must be non-negative, got {interval}")
        self._progress_interval = interval
        return self

    def set_render_settings(self, settings: RenderSettings) -> CameraBuilder:
        self._threads_count = settings.threads_count
        self._samples = settings.samples
        self._progress_interval = settings.progress_interval
        return self

    def build(self) -> Camera:
        """Validate every field and create the camera.

        Raises:
            CameraBuildError: listing each missing or invalid field
        """
        problems: list[FieldProblem] = []

        if self._location is None:
            problems.append(FieldProblem("location", "missing"))
        if self._to is None or self._up is None:
            problems.append(FieldProblem("direction", "missing"))
        for name, value in (("width", self._width), ("height", self._height), ("distance", self._distance)):
            if value is None:
                problems.append(FieldProblem(name, "missing"))
            elif value <= 0 or is_zero(value):
                problems.append(FieldProblem(name, f"must be positive, got {value}"))
        if self._image_writer is None:
            problems.append(FieldProblem("image_writer", "missing"))
        if self._ray_tracer is None:
            problems.append(FieldProblem("ray_tracer", "missing"))

        if problems:
            logger.debug("Camera validation failed: %s", problems)
            raise CameraBuildError(problems)

        return Camera(
            location=self._location,
            to=self._to,
            up=self._up,
            right=self._to.cross(self._up),
            width=self._width,
            height=self._height,
            distance=self._distance,
            image_writer=self._image_writer,
            ray_tracer=self._ray_tracer,
            settings=RenderSettings(self._threads_count, self._samples, self._progress_interval),
        )
