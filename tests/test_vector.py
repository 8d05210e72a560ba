"""
Tests for the Vector2 value type.
"""

import math

import pytest

from particle_flow2d.core.vector import ZERO, Vector2


class TestArithmetic:
    """Basic operators return new vectors."""

    def test_add_sub_scale(self):
        a = Vector2(1.0, 2.0)
        b = Vector2(3.0, -1.0)
        assert a + b == Vector2(4.0, 1.0)
        assert a - b == Vector2(-2.0, 3.0)
        assert a * 2.0 == Vector2(2.0, 4.0)
        assert 2.0 * a == Vector2(2.0, 4.0)

    def test_immutable(self):
        v = Vector2(1.0, 1.0)
        with pytest.raises(Exception):
            v.x = 5.0  # type: ignore[misc]

    def test_unpack(self):
        x, y = Vector2(3.0, 4.0)
        assert (x, y) == (3.0, 4.0)


class TestMagnitude:
    """Magnitude helpers."""

    def test_mag(self):
        assert Vector2(3.0, 4.0).mag() == pytest.approx(5.0)

    def test_set_mag(self):
        v = Vector2(3.0, 4.0).set_mag(0.5)
        assert v.mag() == pytest.approx(0.5)
        assert v.x == pytest.approx(0.3)
        assert v.y == pytest.approx(0.4)

    def test_set_mag_zero_stays_zero(self):
        assert ZERO.set_mag(0.5) == ZERO

    def test_limit_only_shrinks(self):
        assert Vector2(1.0, 0.0).limit(4.0) == Vector2(1.0, 0.0)
        limited = Vector2(30.0, 40.0).limit(4.0)
        assert limited.mag() == pytest.approx(4.0)
        assert limited.x == pytest.approx(2.4)

    def test_from_angle_is_unit(self):
        for angle in (0.0, 1.0, math.pi, 7.5):
            assert Vector2.from_angle(angle).mag() == pytest.approx(1.0)


class TestGeometry:
    """Interpolation, rotation and distance."""

    def test_lerp_endpoints(self):
        a = Vector2(0.0, 0.0)
        b = Vector2(10.0, -4.0)
        assert a.lerp(b, 0.0) == a
        assert a.lerp(b, 1.0) == b
        assert a.lerp(b, 0.5) == Vector2(5.0, -2.0)

    def test_rotate_quarter_turn(self):
        v = Vector2(0.0, -1.0).rotate(math.pi / 2)
        assert v.x == pytest.approx(1.0)
        assert v.y == pytest.approx(0.0, abs=1e-12)

    def test_dist(self):
        assert Vector2(1.0, 1.0).dist(Vector2(4.0, 5.0)) == pytest.approx(5.0)

    def test_is_finite(self):
        assert Vector2(1.0, 2.0).is_finite()
        assert not Vector2(float("nan"), 0.0).is_finite()
