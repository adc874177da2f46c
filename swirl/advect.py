"""
advect.py — Semi-Lagrangian Advection
======================================
This is what makes the fluid look like it's *actually flowing*.

The algorithm (per interior cell):
  1. Look at the current cell position.
  2. Trace BACKWARD along the velocity field by one timestep (dt).
     → "Where did the stuff in this cell come FROM?"
  3. Clamp the traced position to [0.5, dim - 1.5] on each axis, so the
     four cells used for interpolation never include the outer frame of
     edge cells.
  4. Sample the source field there with bilinear interpolation
     (it'll land between grid cells) and write it to this cell.

Reads only ever come from `src` and writes only go to `dst`, so the order
cells are visited in doesn't matter. The outer frame is rebuilt afterwards
by set_boundary().

Key reference: Jos Stam, "Stable Fluids" (SIGGRAPH 1999)
"""

import logging

import numpy as np

from .boundary import set_boundary
from .config import TRACE_MARGIN
from .grid import Field, FieldShapeError, VectorField

logger = logging.getLogger(__name__)


def trace_back(velocity: VectorField, dt: float):
    """
    Back-traced LOCAL positions of every interior cell.

    Multiply dt by the grid size to convert from world-space velocity
    to grid-index displacement.

    Returns: (x_back, y_back), each of shape (H-2, W-2)
    """
    height, width = velocity.present.shape
    ys, xs = np.mgrid[1:height - 1, 1:width - 1].astype(np.float64)
    vel = velocity.dense()[1:-1, 1:-1]

    x_back = xs - vel[..., 0] * dt * width
    y_back = ys - vel[..., 1] * dt * height

    x_back = np.clip(x_back, TRACE_MARGIN, width - 1 - TRACE_MARGIN)
    y_back = np.clip(y_back, TRACE_MARGIN, height - 1 - TRACE_MARGIN)
    return x_back, y_back


def advect(dst: Field, src: Field, velocity: VectorField, dt: float):
    """
    Transport `src` along `velocity` for one timestep, into `dst`.

    Used both for dye (advect(density, density_prev, velocity)) and for
    velocity carrying itself (advect(velocity, velocity_prev, velocity_prev)).

    Modifies: dst (interior cells, then its boundary)
    """
    if dst is src:
        raise ValueError("advect() needs separate source and destination fields")
    dst.require_same_shape(src)
    if velocity.present.shape != dst.present.shape:
        raise FieldShapeError(
            f"velocity grid {velocity.present.shape} does not match {dst.present.shape}"
        )

    x_back, y_back = trace_back(velocity, dt)
    interior = dst.present[1:-1, 1:-1] | src.present[1:-1, 1:-1]

    sampled = src.sample(x_back, y_back)
    dst.values[1:-1, 1:-1] = np.where(dst.expand(interior), sampled, dst.values[1:-1, 1:-1])
    dst.present[1:-1, 1:-1] |= interior

    set_boundary(dst)
    logger.debug("advect %r along %r (dt=%s)", src, velocity, dt)
