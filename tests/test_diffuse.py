import numpy as np
import pytest

from swirl.coords import Rect
from swirl.diffuse import diffuse, lin_solve
from swirl.grid import FieldShapeError, ScalarField, VectorField
from swirl.vector import Vector2


def _point_source(size=9, amount=1.0):
    rect = Rect(size, size)
    prev = ScalarField(rect, fill=0.0)
    prev.set((size // 2, size // 2), amount)
    field = prev.copy()
    return field, prev


def test_constant_field_is_a_fixed_point():
    rect = Rect(7, 6)
    field = ScalarField(rect, fill=2.0)
    prev = ScalarField(rect, fill=2.0)

    diffuse(field, prev, rate=0.5, dt=0.1)

    np.testing.assert_allclose(field.values, 2.0)


def test_constant_vector_field_is_a_fixed_point():
    rect = Rect(6, 6)
    field = VectorField(rect, fill=Vector2(0.3, -0.2))
    prev = field.copy()

    lin_solve(field, prev, a=1.5, c=7.0)

    np.testing.assert_allclose(field.values[1:-1, 1:-1, 0], 0.3)
    np.testing.assert_allclose(field.values[1:-1, 1:-1, 1], -0.2)


def test_zero_rate_leaves_interior_unchanged():
    field, prev = _point_source()
    diffuse(field, prev, rate=0.0, dt=0.1)
    np.testing.assert_array_equal(field.values[1:-1, 1:-1], prev.values[1:-1, 1:-1])


def test_diffusion_spreads_without_creating_mass():
    field, prev = _point_source()
    diffuse(field, prev, rate=0.01, dt=0.1)

    centre = field.get((4, 4))
    assert 0.0 < centre < 1.0
    for _, value in field.neighbors((4, 4)):
        assert value > 0.0

    assert field.values[1:-1, 1:-1].sum() <= 1.0 + 1e-9
    assert field.total() <= 1.0 + 1e-3


def test_more_diffusion_spreads_further():
    slow, slow_prev = _point_source()
    fast, fast_prev = _point_source()
    diffuse(slow, slow_prev, rate=0.001, dt=0.1)
    diffuse(fast, fast_prev, rate=0.05, dt=0.1)
    assert fast.get((4, 4)) < slow.get((4, 4))
    assert fast.get((5, 4)) > slow.get((5, 4))


def test_relaxation_ignores_unset_neighbours():
    rect = Rect(5, 5)
    prev = ScalarField(rect)
    prev.set((2, 2), 1.0)
    field = ScalarField(rect)
    field.set((2, 2), 0.0)

    lin_solve(field, prev, a=1.0, c=5.0, iterations=3)

    # No neighbours are set, so only the right-hand side contributes.
    assert field.get((2, 2)) == pytest.approx(0.2)
    assert field.get((2, 1)) is None


def test_mismatched_fields_are_rejected():
    with pytest.raises(FieldShapeError):
        lin_solve(ScalarField(Rect(4, 4)), ScalarField(Rect(5, 5)), 1.0, 4.0)
