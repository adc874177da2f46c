"""
diffuse.py — Diffusion via Red-Black Gauss-Seidel
==================================================
Diffusion makes values spread into their neighbours over time.
  - High diffusion  → dye bleeds out fast (watercolor)
  - Zero diffusion  → dye stays exactly where it is until advected

The math: solve the implicit heat equation

  (I - a·L) x = x_prev      with  a = dt · rate · (W-2)(H-2)

Implicit diffusion is stable for any dt. We don't solve it exactly; instead
each interior cell is relaxed toward

  x = (x_prev + a · Σ neighbours) / c      with  c = 1 + 4a

for a fixed number of sweeps. The same relaxation, with a = 1 and c = 4,
solves the pressure Poisson equation in solver.py.

Sweeps use red-black ordering: cells are coloured like a checkerboard, all
red cells are updated from their (black) neighbours, then all black cells
from the freshly updated red ones. That is Gauss-Seidel, but each
half-sweep is a single vectorised NumPy update and no cell is ever read and
written in the same half-sweep.

Neighbours that were never set are left out of the sum.
"""

import logging

import numpy as np

from .boundary import set_boundary
from .config import ITER
from .grid import Field

logger = logging.getLogger(__name__)


def _neighbor_sum(dense: np.ndarray) -> np.ndarray:
    """Sum of the 4 face neighbours of every cell; off-grid neighbours add nothing."""
    total = np.zeros_like(dense)
    total[1:, :] += dense[:-1, :]    # y-1 neighbour
    total[:-1, :] += dense[1:, :]    # y+1 neighbour
    total[:, 1:] += dense[:, :-1]    # x-1 neighbour
    total[:, :-1] += dense[:, 1:]    # x+1 neighbour
    return total


def _checkerboard(field: Field):
    """(red, black) masks over the interior cells that are set."""
    height, width = field.present.shape
    ys, xs = np.indices((height, width))
    interior = np.zeros((height, width), dtype=bool)
    interior[1:-1, 1:-1] = True
    interior &= field.present
    red = interior & ((xs + ys) % 2 == 0)
    black = interior & ((xs + ys) % 2 == 1)
    return red, black


def lin_solve(field: Field, field_prev: Field, a: float, c: float, iterations: int = ITER):
    """
    Relax `field` toward the solution of (c·x - a·Σneighbours) = field_prev.

    Modifies: field (in-place). Boundary conditions are applied once, after
    all sweeps.
    """
    field.require_same_shape(field_prev)

    rhs = field_prev.dense()
    red, black = _checkerboard(field)
    c_reciprocal = 1.0 / c

    for _ in range(iterations):
        for colour in (red, black):
            total = _neighbor_sum(field.dense())
            relaxed = (rhs + a * total) * c_reciprocal
            field.values[colour] = relaxed[colour]

    set_boundary(field)


def diffuse(field: Field, field_prev: Field, rate: float, dt: float, iterations: int = ITER):
    """
    Spread `field` according to `rate`, using `field_prev` as the right-hand side.

    Modifies: field (in-place)
    """
    height, width = field.present.shape
    a = dt * rate * (width - 2) * (height - 2)

    if a == 0.0:
        # Nothing spreads; the exact solution is the right-hand side itself.
        field.copy_from(field_prev)
        set_boundary(field)
        return

    logger.debug("diffuse %r: a=%.5f over %d sweeps", field, a, iterations)
    lin_solve(field, field_prev, a, 1.0 + 4.0 * a, iterations)
