"""
boundary.py — Reflective Wall Conditions
=========================================
Keeps fluid inside the box.

Two passes, in this order:

  1. EDGES   : every edge cell copies its single inward neighbour.
               For velocity, the component along the wall's normal axis is
               negated (no flow through the wall); the tangential component
               is kept. Scalars are copied unchanged.
  2. CORNERS : every corner becomes the mean of its two adjacent edge cells,
               read AFTER pass 1 has been committed.

Each pass computes all its new values before writing any of them, so no
cell is read after it has already been overwritten in the same pass.
"""

import logging

from .coords import Corner, OnEdge, corner_coordinate, inward
from .grid import Field

logger = logging.getLogger(__name__)


def _mirror_edge(field: Field):
    def mirrored(cls, coord, value):
        if not isinstance(cls, OnEdge):
            return None
        neighbour = field.get(inward(coord, cls.edge))
        if neighbour is None:
            return None
        return field.reflect(neighbour, cls.edge)

    return field.map_boundary(mirrored)


def _average_corners(field: Field) -> int:
    pending = []
    for corner in Corner:
        coord = corner_coordinate(corner, field.rect)
        # Row neighbour sits on the TOP/BOTTOM wall, column neighbour on LEFT/RIGHT.
        row_neighbour = field.get(inward(coord, corner.vertical))
        column_neighbour = field.get(inward(coord, corner.horizontal))
        if row_neighbour is None or column_neighbour is None:
            continue
        pending.append((corner, (row_neighbour + column_neighbour) * 0.5))

    for corner, value in pending:
        field.set_corner(corner, value)
    return len(pending)


def set_boundary(field: Field):
    """Apply the mirror condition to every edge, then average the corners."""
    edges = _mirror_edge(field)
    corners = _average_corners(field)
    logger.debug("set_boundary(%r): %d edge cells, %d corners", field, edges, corners)
