import math

import pytest

from swirl.coords import Axis
from swirl.vector import Vector2


def test_arithmetic():
    a = Vector2(1.0, 2.0)
    b = Vector2(0.5, -1.0)
    assert a + b == Vector2(1.5, 1.0)
    assert a - b == Vector2(0.5, 3.0)
    assert a * 2 == Vector2(2.0, 4.0)
    assert 2 * a == Vector2(2.0, 4.0)
    assert a / 2 == Vector2(0.5, 1.0)
    assert -a == Vector2(-1.0, -2.0)


def test_magnitude_and_normalize():
    v = Vector2(3.0, 4.0)
    assert v.magnitude() == 5.0
    unit = v.normalize()
    assert unit.x == pytest.approx(0.6)
    assert unit.y == pytest.approx(0.8)


def test_normalize_zero_vector_is_a_no_op():
    assert Vector2().normalize() == Vector2()


def test_max_mag_clamps_but_keeps_direction():
    v = Vector2(3.0, 4.0)
    clamped = v.max_mag(1.0)
    assert clamped.magnitude() == pytest.approx(1.0)
    assert clamped.x / clamped.y == pytest.approx(0.75)
    assert v.max_mag(10.0) == v


def test_from_angle():
    v = Vector2.from_angle(math.pi / 2)
    assert v.x == pytest.approx(0.0, abs=1e-12)
    assert v.y == pytest.approx(1.0)


def test_mirrored_negates_one_axis():
    v = Vector2(1.0, -2.0)
    assert v.mirrored(Axis.X) == Vector2(-1.0, -2.0)
    assert v.mirrored(Axis.Y) == Vector2(1.0, 2.0)


def test_of_accepts_pairs():
    assert Vector2.of((1, 2)) == Vector2(1.0, 2.0)
    v = Vector2(3.0, 4.0)
    assert Vector2.of(v) is v
    assert tuple(v) == (3.0, 4.0)
