"""
Value types for 3D math.

This is the fundamental building block of the ray tracer:
- Vec3 for directions (never the zero vector)
- Point3 for positions in space
- Color for RGB intensities on the 0..255 raster scale

All three are immutable. Storage is a read-only numpy array.
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np

from .errors import ZeroVectorError

EPSILON = 1e-10


def is_zero(value: float) -> bool:
    """Check whether a number is zero within EPSILON."""
    return abs(value) < EPSILON


def align_zero(value: float) -> float:
    """Snap values within EPSILON of zero to exactly 0.0."""
    return 0.0 if is_zero(value) else value


def _frozen(arr) -> np.ndarray:
    data = np.array(arr, dtype=np.float64)
    data.setflags(write=False)
    return data


class _Triple:
    """Shared storage and comparison for the three value types."""

    __slots__ = ('_data',)

    def __init__(self, x: float, y: float, z: float):
        self._data = _frozen((x, y, z))

    @classmethod
    def from_array(cls, arr: np.ndarray):
        """Create a value from a numpy array of three components."""
        return cls(*np.asarray(arr, dtype=np.float64))

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self):
        return iter(float(c) for c in self._data)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=EPSILON))

    def __hash__(self) -> int:
        """Hash of the components rounded to 9 decimals.

        Equality tolerates EPSILON but the hash does not: values that only
        agree within EPSILON may hash differently. Use exact values as
        dict keys or set members.
        """
        return hash((type(self).__name__,) + tuple(np.round(self._data, 9)))

    def to_array(self) -> np.ndarray:
        """Return the components as a writable numpy array (copy)."""
        return self._data.copy()

    def _fmt(self) -> str:
        return f"{self._data[0]:.4f}, {self._data[1]:.4f}, {self._data[2]:.4f}"


class Vec3(_Triple):
    """A nonzero 3D direction vector.

    Constructing the zero vector, scaling by zero and crossing parallel
    vectors all raise ZeroVectorError.
    """

    __slots__ = ()

    X: Vec3
    Y: Vec3
    Z: Vec3

    def __init__(self, x: float, y: float, z: float):
        super().__init__(x, y, z)
        if is_zero(self._data[0]) and is_zero(self._data[1]) and is_zero(self._data[2]):
            raise ZeroVectorError("cannot create the zero vector")

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"Vec3({self._fmt()})"

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3.from_array(self._data + other._data)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3.from_array(self._data - other._data)

    def __mul__(self, scalar: float) -> Vec3:
        if isinstance(scalar, _Triple):
            return NotImplemented
        return self.scale(scalar)

    def __rmul__(self, scalar: float) -> Vec3:
        return self.__mul__(scalar)

    def scale(self, scalar: float) -> Vec3:
        """Multiply by a nonzero scalar."""
        if is_zero(scalar):
            raise ZeroVectorError("cannot scale a vector by zero")
        return Vec3.from_array(self._data * scalar)

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction."""
        return Vec3.from_array(self._data / self.length())

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector.

        Raises:
            ZeroVectorError: if the vectors are parallel
        """
        result = np.cross(self._data, other._data)
        if np.all(np.abs(result) < EPSILON):
            raise ZeroVectorError("cross product of parallel vectors")
        return Vec3.from_array(result)

    def orthonormal_basis(self) -> tuple[Vec3, Vec3]:
        """Return two unit vectors perpendicular to this one and to each other."""
        direction = self.normalize()
        up = Vec3.Y if abs(direction.y) < 0.999 else Vec3.X
        tangent = up.cross(direction).normalize()
        bitangent = direction.cross(tangent)
        return tangent, bitangent


Vec3.X = Vec3(1, 0, 0)
Vec3.Y = Vec3(0, 1, 0)
Vec3.Z = Vec3(0, 0, 1)


class Point3(_Triple):
    """A position in 3D space."""

    __slots__ = ()

    ZERO: Point3

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        super().__init__(x, y, z)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"Point3({self._fmt()})"

    def __add__(self, other: Vec3) -> Point3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Point3.from_array(self._data + other._data)

    def __sub__(self, other: Point3) -> Vec3:
        """Vector from other to self; equal points raise ZeroVectorError."""
        if not isinstance(other, Point3):
            return NotImplemented
        return Vec3.from_array(self._data - other._data)

    def distance_squared(self, other: Point3) -> float:
        diff = self._data - other._data
        return float(np.dot(diff, diff))

    def distance(self, other: Point3) -> float:
        return math.sqrt(self.distance_squared(other))


Point3.ZERO = Point3(0, 0, 0)


class Color(_Triple):
    """An RGB intensity, channels in the raster's 0..255 scale.

    Channels must be non-negative. Values above 255 are allowed here and
    clamped by the image writer.
    """

    __slots__ = ()

    BLACK: Color

    def __init__(self, r: float = 0.0, g: float = 0.0, b: float = 0.0):
        super().__init__(r, g, b)
        if np.any(self._data < 0):
            raise ValueError(f"color channels must be non-negative, got ({self._fmt()})")

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Create a color from an HTML-style hex string like '#ff8000'."""
        value = value.lstrip('#')
        if len(value) != 6:
            raise ValueError(f"expected 6 hex digits, got {value!r}")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    @property
    def r(self) -> float:
        return float(self._data[0])

    @property
    def g(self) -> float:
        return float(self._data[1])

    @property
    def b(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"Color({self._fmt()})"

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color.from_array(self._data + other._data)

    def __mul__(self, other: Union[Color, float]) -> Color:
        if isinstance(other, Color):
            return Color.from_array(self._data * other._data)
        if isinstance(other, _Triple):
            return NotImplemented
        return Color.from_array(self._data * other)

    def __rmul__(self, other: float) -> Color:
        return self.__mul__(other)

    def __truediv__(self, k: float) -> Color:
        return Color.from_array(self._data / k)

    def is_black(self) -> bool:
        return bool(np.all(np.abs(self._data) < EPSILON))


Color.BLACK = Color(0, 0, 0)
