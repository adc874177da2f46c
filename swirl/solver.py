"""
solver.py — Pressure Projection
================================
The pressure projection step enforces INCOMPRESSIBILITY:
  div(v) ≈ 0 everywhere

After diffusion or advection the velocity field generally has sources and
sinks (fluid "piles up" in some cells). We fix this by:
  1. Computing the divergence of the current velocity field
  2. Solving the Poisson equation for pressure: ∇²p = div(v)
  3. Subtracting the pressure gradient from velocity: v = v - ∇p

This is the Helmholtz-Hodge decomposition: any vector field is a
divergence-free part plus a gradient. We keep the divergence-free part.

Velocity lives at cell centres (collocated grid), so all derivatives are
central differences over the two neighbours on each axis. Only interior
cells are touched; the walls are handled by set_boundary().
"""

import logging
import time

import numpy as np

from .boundary import set_boundary
from .config import ITER
from .diffuse import lin_solve
from .grid import FieldShapeError, ScalarField, VectorField

logger = logging.getLogger(__name__)


def measure_divergence(velocity: VectorField) -> np.ndarray:
    """
    Discrete divergence du/dx + dv/dy at every interior cell, scaled the same
    way as the pressure solve sees it (the negation of compute_divergence).

    Returns: (H-2, W-2) array. Used for diagnostics and benchmarking.
    """
    v = velocity.dense()
    height, width = velocity.present.shape
    du = v[1:-1, 2:, 0] - v[1:-1, :-2, 0]
    dv = v[2:, 1:-1, 1] - v[:-2, 1:-1, 1]
    return 0.5 * (du / width + dv / height)


def compute_divergence(velocity: VectorField, divergence: ScalarField):
    """
    Fill `divergence` with the right-hand side of the pressure solve:

      div = -0.5 · ((u[x+1] - u[x-1]) / W + (v[y+1] - v[y-1]) / H)

    Modifies: divergence (in-place, every cell set; walls mirrored)
    """
    velocity_dense = velocity.dense()
    height, width = velocity.present.shape

    du = velocity_dense[1:-1, 2:, 0] - velocity_dense[1:-1, :-2, 0]
    dv = velocity_dense[2:, 1:-1, 1] - velocity_dense[:-2, 1:-1, 1]

    divergence.fill(0.0)
    divergence.values[1:-1, 1:-1] = -0.5 * (du / width + dv / height)
    set_boundary(divergence)


def _subtract_pressure_gradient(velocity: VectorField, pressure: ScalarField):
    """
    v_new = v_old - ∇p

    Scaled by the grid size on each axis so it undoes exactly what
    compute_divergence() measured.
    """
    height, width = velocity.present.shape
    p = pressure.dense()
    interior = velocity.present[1:-1, 1:-1]

    grad_x = 0.5 * width * (p[1:-1, 2:] - p[1:-1, :-2])
    grad_y = 0.5 * height * (p[2:, 1:-1] - p[:-2, 1:-1])

    velocity.values[1:-1, 1:-1, 0] -= np.where(interior, grad_x, 0.0)
    velocity.values[1:-1, 1:-1, 1] -= np.where(interior, grad_y, 0.0)


def project(velocity: VectorField, pressure: ScalarField, divergence: ScalarField,
            iterations: int = ITER) -> dict:
    """
    Pressure projection: make the velocity field (approximately) divergence-free.

    This is the most expensive step in the simulation, two relaxation
    solves' worth of sweeps per tick.

    Args:
        velocity   : The VectorField to modify in-place
        pressure   : Scratch field; holds the solved pressure afterwards
        divergence : Scratch field; holds the Poisson right-hand side afterwards
        iterations : Relaxation sweeps (more = more accurate, slower)

    Returns:
        dict with timing and divergence metrics (for benchmarking)
    """
    pressure.require_same_shape(divergence)
    if pressure.values.shape != velocity.present.shape:
        raise FieldShapeError(
            f"pressure grid {pressure.values.shape} does not match velocity grid "
            f"{velocity.present.shape}"
        )

    t_start = time.perf_counter()
    div_before = measure_divergence(velocity)

    compute_divergence(velocity, divergence)
    pressure.fill(0.0)
    set_boundary(pressure)
    lin_solve(pressure, divergence, 1.0, 4.0, iterations)

    _subtract_pressure_gradient(velocity, pressure)
    set_boundary(velocity)

    t_end = time.perf_counter()
    div_after = measure_divergence(velocity)

    metrics = {
        "time_ms"               : (t_end - t_start) * 1000,
        "iterations"            : iterations,
        "divergence_before_max" : float(np.abs(div_before).max()),
        "divergence_after_max"  : float(np.abs(div_after).max()),
        "divergence_after_mean" : float(np.abs(div_after).mean()),
    }
    logger.debug("project: max |div| %.6f -> %.6f",
                 metrics["divergence_before_max"], metrics["divergence_after_max"])
    return metrics
