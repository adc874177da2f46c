import numpy as np
import pytest

from swirl.coords import Rect
from swirl.grid import FieldShapeError, ScalarField, VectorField
from swirl.solver import compute_divergence, measure_divergence, project
from swirl.vector import Vector2


def _fields(width, height=None):
    rect = Rect(width, height or width)
    velocity = VectorField(rect, fill=Vector2())
    pressure = ScalarField(rect, fill=0.0)
    divergence = ScalarField(rect, fill=0.0)
    return velocity, pressure, divergence


def test_divergence_right_hand_side():
    velocity, _, divergence = _fields(8)
    velocity.set((3, 3), Vector2(1.0, 0.0))

    compute_divergence(velocity, divergence)

    # Fluid leaves the cell behind the push and arrives in the one ahead.
    assert divergence.get((2, 3)) == pytest.approx(-0.5 / 8)
    assert divergence.get((4, 3)) == pytest.approx(0.5 / 8)
    assert divergence.get((3, 3)) == pytest.approx(0.0)


def test_measure_is_negated_right_hand_side():
    velocity, _, divergence = _fields(8, 6)
    velocity.set((3, 2), Vector2(0.4, -0.7))
    compute_divergence(velocity, divergence)
    np.testing.assert_allclose(measure_divergence(velocity),
                               -divergence.values[1:-1, 1:-1])


def test_still_fluid_stays_still():
    velocity, pressure, divergence = _fields(10)
    metrics = project(velocity, pressure, divergence)
    assert np.all(velocity.values == 0.0)
    assert metrics["divergence_after_max"] == 0.0


def test_projection_reduces_divergence():
    velocity, pressure, divergence = _fields(16)
    velocity.set((8, 8), Vector2(1.0, 0.5))

    before = measure_divergence(velocity)
    metrics = project(velocity, pressure, divergence)
    after = measure_divergence(velocity)

    assert np.abs(after).max() < np.abs(before).max()
    assert np.square(after).sum() < np.square(before).sum()
    assert metrics["divergence_before_max"] == pytest.approx(np.abs(before).max())
    assert metrics["divergence_after_max"] == pytest.approx(np.abs(after).max())
    assert np.all(np.isfinite(velocity.values))


def test_projection_keeps_mirror_walls():
    velocity, pressure, divergence = _fields(12)
    velocity.set((2, 6), Vector2(-1.0, 0.3))
    project(velocity, pressure, divergence)

    for y in range(1, 11):
        assert velocity.get((0, y)).x == -velocity.get((1, y)).x
        assert velocity.get((0, y)).y == velocity.get((1, y)).y


def test_projection_rejects_mismatched_scratch_fields():
    velocity, pressure, divergence = _fields(8)
    with pytest.raises(FieldShapeError):
        project(velocity, ScalarField(Rect(9, 9), fill=0.0), divergence)
    with pytest.raises(FieldShapeError):
        project(velocity, ScalarField(Rect(9, 9), fill=0.0), ScalarField(Rect(9, 9), fill=0.0))
