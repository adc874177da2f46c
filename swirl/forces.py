"""
forces.py — Point Sources & Pointer Input
==========================================
How the outside world pushes on the simulation between ticks.

  - add_to_cell     : bounds-checked "+=" on a single cell
  - splat           : the same, over a small square brush
  - viewport_to_grid: map a pointer position in pixels to a grid cell

Nothing here ever raises for an off-grid coordinate; the caller gets False
(or None) back instead. Pointer events routinely land outside the grid and
that is not an error.
"""

import logging
import math
from typing import Optional, Tuple

from .config import SPLAT_RADIUS
from .coords import Coord2, Rect, as_coord
from .grid import Field

logger = logging.getLogger(__name__)


def add_to_cell(field: Field, coord, amount) -> bool:
    """
    field[coord] += amount, if coord is inside the domain and already set.

    Returns: True if the cell was changed
    """
    coord = as_coord(coord)
    if not field.rect.contains(coord):
        logger.debug("ignoring source at %s: outside %s", tuple(coord), field.rect)
        return False
    return field.update(coord, lambda current: current + amount) is not None


def splat(field: Field, center, amount, radius: int = SPLAT_RADIUS) -> int:
    """
    Add `amount` to every in-domain cell within `radius` cells of `center`
    (a square brush, like a smoke injector).

    Returns: number of cells changed
    """
    cx, cy = as_coord(center)
    changed = 0
    for y in range(cy - radius, cy + radius + 1):
        for x in range(cx - radius, cx + radius + 1):
            if x < 0 or y < 0:
                continue
            if add_to_cell(field, Coord2(x, y), amount):
                changed += 1
    return changed


def viewport_to_grid(viewport_size: Tuple[float, float], point: Tuple[float, float],
                     rect: Rect) -> Optional[Coord2]:
    """
    Scale a pointer position from viewport pixels to the cell under it.

    Args:
        viewport_size : (width, height) of the drawing surface in pixels
        point         : (x, y) pointer position in the same pixels
        rect          : the simulation domain

    Returns: the Coord2 under the pointer, or None if it's off the grid
    """
    viewport_width, viewport_height = viewport_size
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError(f"viewport must have a positive size, got {viewport_size}")

    px, py = point
    if not (math.isfinite(px) and math.isfinite(py)):
        return None

    x = math.floor(px * rect.width / viewport_width) + rect.origin.x
    y = math.floor(py * rect.height / viewport_height) + rect.origin.y
    coord = Coord2(x, y)
    return coord if rect.contains(coord) else None
