"""Tests for the Vec3, Point3 and Color value types."""

import pytest
import math
import numpy as np

from softray.errors import ZeroVectorError
from softray.vec3 import Vec3, Point3, Color, is_zero, align_zero


V1 = Vec3(1, 2, 2)
V2 = Vec3(-3, -4, -5)
V3 = Vec3(-1, 2, -3)
V4 = Vec3(0, 2, -2)
V5 = Vec3(2, 4, 4)


class TestTolerance:
    """Test is_zero / align_zero helpers."""

    def test_is_zero(self):
        assert is_zero(0.0)
        assert is_zero(1e-12)
        assert not is_zero(1e-6)

    def test_align_zero(self):
        assert align_zero(-1e-13) == 0.0
        assert align_zero(0.5) == 0.5


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_value_constructor(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert v.x == 1.0
        assert v.y == 2.0
        assert v.z == 3.0

    def test_from_array(self):
        v = Vec3.from_array(np.array([1.0, 2.0, 3.0]))
        assert v == Vec3(1, 2, 3)

    def test_zero_vector_rejected(self):
        with pytest.raises(ZeroVectorError):
            Vec3(0, 0, 0)

    def test_zero_vector_error_is_value_error(self):
        with pytest.raises(ValueError):
            Vec3(0, 0, 0)

    def test_immutable(self):
        v = Vec3(1, 2, 3)
        with pytest.raises(AttributeError):
            v.x = 5

    def test_unpacking(self):
        x, y, z = Vec3(1, 2, 3)
        assert (x, y, z) == (1.0, 2.0, 3.0)

    def test_hashable(self):
        assert len({Vec3(1, 2, 3), Vec3(1, 2, 3), Vec3(3, 2, 1)}) == 2

    def test_hash_matches_for_exact_values(self):
        assert hash(Vec3(1, 2, 3) + Vec3(1, 1, 1)) == hash(Vec3(2, 3, 4))
        assert hash(Point3(1, 1, 1) + Vec3(1, 2, 3)) == hash(Point3(2, 3, 4))
        assert len({Color(10, 20, 30) * 2, Color(20, 40, 60)}) == 1


class TestVec3Arithmetic:
    """Test Vec3 arithmetic operations."""

    def test_addition(self):
        assert V1 + V2 == Vec3(-2, -2, -3)

    def test_addition_to_zero_fails(self):
        with pytest.raises(ZeroVectorError):
            V1 + Vec3(-1, -2, -2)

    def test_subtraction(self):
        assert V5 - V1 == Vec3(1, 2, 2)

    def test_subtraction_of_itself_fails(self):
        with pytest.raises(ZeroVectorError):
            V1 - Vec3(1, 2, 2)

    def test_negation(self):
        assert -V1 == Vec3(-1, -2, -2)

    def test_scale(self):
        assert V3 * 2 == Vec3(-2, 4, -6)
        assert V3.scale(-3) == Vec3(3, -6, 9)
        assert 2 * V3 == Vec3(-2, 4, -6)

    def test_scale_by_zero_fails(self):
        with pytest.raises(ZeroVectorError):
            V3.scale(0)
        with pytest.raises(ZeroVectorError):
            V3 * 0


class TestVec3Operations:
    """Test Vec3 products, lengths and normalization."""

    def test_length_squared(self):
        assert V1.length_squared() == 9
        assert V2.length_squared() == 50
        assert V3.length_squared() == 14

    def test_length(self):
        assert V1.length() == 3
        assert V2.length() == pytest.approx(math.sqrt(50))

    def test_dot(self):
        assert V2.dot(V3) == 10

    def test_dot_perpendicular(self):
        assert V1.dot(V4) == 0

    def test_dot_parallel(self):
        assert V1.dot(V5) == pytest.approx(V1.length() * V5.length())
        assert V1.dot(-V5) == pytest.approx(-V1.length() * V5.length())

    def test_cross(self):
        assert V2.cross(V3) == Vec3(22, -4, -10)

    def test_cross_perpendicular_length(self):
        result = V1.cross(V4)
        assert result.length() == pytest.approx(V1.length() * V4.length())

    def test_cross_is_orthogonal(self):
        result = V2.cross(V3)
        assert result.dot(V2) == pytest.approx(0)
        assert result.dot(V3) == pytest.approx(0)

    def test_cross_parallel_fails(self):
        with pytest.raises(ZeroVectorError):
            V1.cross(V5)

    def test_normalize(self):
        for v in (V1, V2, V3, V4, V5, Vec3(1e-3, 0, 0), Vec3(1e6, -2e6, 3)):
            assert v.normalize().length() == pytest.approx(1.0)

    def test_normalize_keeps_direction(self):
        n = V1.normalize()
        assert n == Vec3(1 / 3, 2 / 3, 2 / 3)

    def test_orthonormal_basis(self):
        for v in (Vec3(0, 0, -1), Vec3(0, 1, 0), Vec3(1, 1, -3)):
            t, b = v.orthonormal_basis()
            assert t.length() == pytest.approx(1.0)
            assert b.length() == pytest.approx(1.0)
            assert t.dot(b) == pytest.approx(0, abs=1e-12)
            assert t.dot(v) == pytest.approx(0, abs=1e-12)
            assert b.dot(v) == pytest.approx(0, abs=1e-12)


class TestPoint3:
    """Test Point3 operations."""

    def test_zero_point_allowed(self):
        assert Point3(0, 0, 0) == Point3.ZERO

    def test_add_vector(self):
        assert Point3(1, 2, 3) + Vec3(1, 1, 1) == Point3(2, 3, 4)

    def test_subtract_point(self):
        result = Point3(2, 3, 4) - Point3(1, 2, 3)
        assert isinstance(result, Vec3)
        assert result == Vec3(1, 1, 1)

    def test_subtract_same_point_fails(self):
        with pytest.raises(ZeroVectorError):
            Point3(1, 2, 3) - Point3(1, 2, 3)

    def test_distance(self):
        p = Point3(1, 2, 3)
        assert p.distance_squared(Point3(2, 4, 5)) == 9
        assert p.distance(Point3(2, 4, 5)) == 3

    def test_point_and_vector_not_equal(self):
        assert Point3(1, 2, 3) != Vec3(1, 2, 3)


class TestColor:
    """Test Color operations."""

    def test_channels(self):
        c = Color(10, 20, 30)
        assert (c.r, c.g, c.b) == (10, 20, 30)

    def test_negative_channel_rejected(self):
        with pytest.raises(ValueError):
            Color(-1, 0, 0)

    def test_no_upper_clamp(self):
        assert Color(400, 240, 0).r == 400

    def test_add(self):
        assert Color(1, 2, 3) + Color(4, 5, 6) == Color(5, 7, 9)

    def test_scale(self):
        assert Color(1, 2, 3) * 2 == Color(2, 4, 6)
        assert 0.5 * Color(2, 4, 6) == Color(1, 2, 3)

    def test_attenuate_per_channel(self):
        assert Color(10, 20, 30) * Color(0.5, 0.0, 1.0) == Color(5, 0, 30)

    def test_reduce(self):
        assert Color(9, 6, 3) / 3 == Color(3, 2, 1)

    def test_black(self):
        assert Color.BLACK.is_black()
        assert not Color(0, 0, 1).is_black()

    def test_from_hex(self):
        assert Color.from_hex('#ff8000') == Color(255, 128, 0)

    def test_from_hex_invalid(self):
        with pytest.raises(ValueError):
            Color.from_hex('#fff')
