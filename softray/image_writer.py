"""
Image sink: accumulates pixel colors and writes them out with Pillow.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage

from .vec3 import Color

logger = logging.getLogger(__name__)


class ImageWriter:
    """A fixed-size RGB raster.

    Colors are stored as floats on the 0..255 scale and clamped when the
    image is exported. Writes to distinct pixels may come from different
    threads.
    """

    def __init__(self, image_name: str, nx: int, ny: int, output_dir: Union[str, Path] = "images"):
        """Create an image writer.

        Args:
            image_name: File name without extension
            nx: Width in pixels (number of columns)
            ny: Height in pixels (number of rows)
            output_dir: Directory the image file is written to
        """
        if nx <= 0 or ny <= 0:
            raise ValueError(f"image dimensions must be positive, got {nx}x{ny}")
        self.image_name = image_name
        self.nx = nx
        self.ny = ny
        self.output_dir = Path(output_dir)
        self._buffer = np.zeros((ny, nx, 3), dtype=np.float64)

    def dimensions(self) -> tuple[int, int]:
        """Return (width, height) in pixels."""
        return self.nx, self.ny

    def write_pixel(self, x: int, y: int, color: Color) -> None:
        """Store a color at column x, row y (row 0 is the top)."""
        if not (0 <= x < self.nx and 0 <= y < self.ny):
            raise IndexError(f"pixel ({x}, {y}) outside {self.nx}x{self.ny} image")
        self._buffer[y, x] = color._data

    def pixel(self, x: int, y: int) -> Color:
        """Read back the color stored at column x, row y."""
        return Color.from_array(self._buffer[y, x])

    def to_float_array(self) -> np.ndarray:
        """Return a copy of the unclamped raster, shape (ny, nx, 3)."""
        return self._buffer.copy()

    def to_array(self) -> np.ndarray:
        """Return the image as clamped 8-bit RGB, shape (ny, nx, 3)."""
        return np.clip(np.rint(self._buffer), 0, 255).astype(np.uint8)

    def write_to_image(self, fmt: str = "png") -> Path:
        """Save the raster to output_dir/image_name.fmt.

        Returns:
            Path of the written file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{self.image_name}.{fmt}"
        PILImage.fromarray(self.to_array()).save(path)
        logger.info("Wrote %dx%d image to %s", self.nx, self.ny, path)
        return path

    def __repr__(self) -> str:
        return f"ImageWriter({self.image_name!r}, {self.nx}x{self.ny})"
