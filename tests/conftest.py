import os
import sys

import numpy as np
import pytest

# Ensure the repo root is importable without installing
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from swirl.coords import Coord2, Rect
from swirl.grid import ScalarField, VectorField
from swirl.vector import Vector2


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scalar_grid(rng):
    """6x5 scalar field with a distinct random value in every cell."""
    field = ScalarField(Rect(6, 5))
    for y in range(5):
        for x in range(6):
            field.set(Coord2(x, y), float(rng.uniform(-1.0, 1.0)))
    return field


@pytest.fixture
def vector_grid(rng):
    """6x5 vector field with a distinct random vector in every cell."""
    field = VectorField(Rect(6, 5))
    for y in range(5):
        for x in range(6):
            field.set(Coord2(x, y), Vector2(*rng.uniform(-1.0, 1.0, size=2)))
    return field
