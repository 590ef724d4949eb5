"""Tests for the image writer."""

import pytest
import numpy as np
from PIL import Image

from softray.vec3 import Color
from softray.image_writer import ImageWriter


class TestImageWriter:
    """Test ImageWriter raster storage and output."""

    def test_dimensions(self):
        writer = ImageWriter("dims", 4, 3)
        assert writer.dimensions() == (4, 3)

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            ImageWriter("bad", 0, 3)

    def test_starts_black(self):
        writer = ImageWriter("black", 2, 2)
        assert writer.pixel(1, 1) == Color.BLACK

    def test_write_and_read(self):
        writer = ImageWriter("rw", 4, 3)
        writer.write_pixel(3, 2, Color(10, 20, 30))
        assert writer.pixel(3, 2) == Color(10, 20, 30)

    def test_row_column_layout(self):
        writer = ImageWriter("layout", 4, 3)
        writer.write_pixel(3, 0, Color(255, 0, 0))
        assert writer.to_array().shape == (3, 4, 3)
        assert tuple(writer.to_array()[0, 3]) == (255, 0, 0)

    def test_out_of_range(self):
        writer = ImageWriter("range", 4, 3)
        with pytest.raises(IndexError):
            writer.write_pixel(4, 0, Color(1, 1, 1))
        with pytest.raises(IndexError):
            writer.write_pixel(0, -1, Color(1, 1, 1))

    def test_clamped_on_export(self):
        writer = ImageWriter("clamp", 1, 1)
        writer.write_pixel(0, 0, Color(400, 240.4, 0))
        assert tuple(writer.to_array()[0, 0]) == (255, 240, 0)
        assert writer.to_float_array()[0, 0, 0] == 400

    def test_write_to_image(self, tmp_path):
        writer = ImageWriter("out", 4, 3, output_dir=tmp_path / "images")
        writer.write_pixel(1, 2, Color(0, 0, 255))
        path = writer.write_to_image()

        assert path == tmp_path / "images" / "out.png"
        with Image.open(path) as image:
            assert image.size == (4, 3)
            assert image.mode == "RGB"
            assert image.getpixel((1, 2)) == (0, 0, 255)
            assert image.getpixel((0, 0)) == (0, 0, 0)

    def test_float_array_is_copy(self):
        writer = ImageWriter("copy", 1, 1)
        raster = writer.to_float_array()
        raster[0, 0] = 5
        assert writer.pixel(0, 0) == Color.BLACK
