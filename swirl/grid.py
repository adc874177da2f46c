"""
grid.py — Dense 2D Fields with an Absent-Cell Bitmap
=====================================================
The storage every solver step reads from and writes into.

Layout:
  - `values`  : float64 array, shape (H, W) for scalars, (H, W, 2) for vectors
  - `present` : bool array, shape (H, W). False = the cell was never set.

Arrays are indexed [y, x] in LOCAL coordinates (relative to the rect origin);
the public get/set API takes absolute Coord2s.

"Absent" is not the same as zero. A read of an unset cell returns None, and
neighbour queries skip it. Only bilinear interpolation folds absent cells in
as zero, which biases samples near an unset region toward zero.

The same Field code serves dye and velocity: subclasses supply the value
kind (zero, boxing to Python values, and how a value reflects off a wall).
"""

from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from .coords import (
    BoundaryClass, Coord2, Corner, Edge, NeighborStrategy, Rect,
    corner_coordinate, neighbor_candidates,
)
from .vector import Vector2


class FieldShapeError(RuntimeError):
    """Two fields that must share dimensions don't. A construction bug."""


class Field:
    components = 1
    zero = None

    def __init__(self, rect: Rect, fill=None):
        self.rect = rect
        shape = (rect.height, rect.width)
        if self.components > 1:
            shape += (self.components,)
        self.values = np.zeros(shape, dtype=np.float64)
        self.present = np.zeros((rect.height, rect.width), dtype=bool)
        if fill is not None:
            self.fill(fill)

    # ── Value kind hooks ──────────────────────────────────────────────────────

    def _box(self, raw):
        raise NotImplementedError

    def _unbox(self, value):
        raise NotImplementedError

    def reflect(self, value, edge: Edge):
        """The value an edge cell takes when mirroring its inward neighbour."""
        raise NotImplementedError

    # ── Point access ──────────────────────────────────────────────────────────

    def _index(self, coord) -> Optional[Tuple[int, int]]:
        x, y = coord
        lx = x - self.rect.origin.x
        ly = y - self.rect.origin.y
        if 0 <= lx < self.rect.width and 0 <= ly < self.rect.height:
            return ly, lx
        return None

    def get(self, coord):
        idx = self._index(coord)
        if idx is None or not self.present[idx]:
            return None
        return self._box(self.values[idx])

    def set(self, coord, value):
        """Store `value` and return whatever was there before (None if unset)."""
        idx = self._index(coord)
        if idx is None:
            raise IndexError(f"{tuple(coord)} is outside {self.rect}")
        previous = self._box(self.values[idx]) if self.present[idx] else None
        self.values[idx] = self._unbox(value)
        self.present[idx] = True
        return previous

    def update(self, coord, func: Callable):
        """Replace a set cell's value with func(value). Absent cells are left alone."""
        current = self.get(coord)
        if current is None:
            return None
        new_value = func(current)
        self.set(coord, new_value)
        return new_value

    def __contains__(self, coord) -> bool:
        idx = self._index(coord)
        return idx is not None and bool(self.present[idx])

    def __len__(self) -> int:
        return int(self.present.sum())

    # ── Topology queries ──────────────────────────────────────────────────────

    def neighbors(self, coord,
                  strategy: NeighborStrategy = NeighborStrategy.ADJACENT) -> List[Tuple[Coord2, object]]:
        """Set neighbours only; missing ones are excluded, never wrapped."""
        found = []
        for candidate in neighbor_candidates(coord, strategy):
            value = self.get(candidate)
            if value is not None:
                found.append((candidate, value))
        return found

    def corner(self, corner: Corner):
        coord = corner_coordinate(corner, self.rect)
        value = self.get(coord)
        if value is None:
            return None
        return coord, value

    def set_corner(self, corner: Corner, value):
        return self.set(corner_coordinate(corner, self.rect), value)

    # ── Iteration ─────────────────────────────────────────────────────────────

    def items(self) -> Iterator[Tuple[Coord2, object]]:
        """Every set cell, row-major."""
        ox, oy = self.rect.origin
        ys, xs = np.nonzero(self.present)
        for ly, lx in zip(ys.tolist(), xs.tolist()):
            yield Coord2(lx + ox, ly + oy), self._box(self.values[ly, lx])

    __iter__ = items

    def boundary_items(self) -> Iterator[Tuple[BoundaryClass, Coord2, object]]:
        for cls, coord in self.rect.boundary():
            value = self.get(coord)
            if value is not None:
                yield cls, coord, value

    def map_boundary(self, func: Callable) -> int:
        """
        Rewrite every set boundary cell with func(cls, coord, value).

        All new values are computed before any is stored, so func always
        sees the field as it was when the call started. Returning None
        leaves a cell untouched.
        """
        pending = [(coord, func(cls, coord, value))
                   for cls, coord, value in self.boundary_items()]
        written = 0
        for coord, value in pending:
            if value is not None:
                self.set(coord, value)
                written += 1
        return written

    # ── Bulk operations ───────────────────────────────────────────────────────

    def fill(self, value):
        self.values[...] = self._unbox(value)
        self.present[...] = True

    def clear(self):
        self.values[...] = 0.0
        self.present[...] = False

    def zero_out(self):
        """Set every cell to this value kind's zero."""
        self.fill(self.zero)

    def require_same_shape(self, other: "Field"):
        if type(self) is not type(other) or self.values.shape != other.values.shape:
            raise FieldShapeError(
                f"{type(self).__name__}{self.values.shape} vs "
                f"{type(other).__name__}{other.values.shape}"
            )

    def copy_from(self, other: "Field"):
        self.require_same_shape(other)
        np.copyto(self.values, other.values)
        np.copyto(self.present, other.present)

    def copy(self) -> "Field":
        clone = type(self)(self.rect)
        clone.copy_from(self)
        return clone

    def expand(self, arr: np.ndarray) -> np.ndarray:
        """Broadcast a per-cell array against the component axis, if any."""
        return arr[..., None] if self.components > 1 else arr

    def dense(self) -> np.ndarray:
        """`values` with absent cells read as zero."""
        return np.where(self.expand(self.present), self.values, 0.0)

    def total(self):
        """Sum over every set cell."""
        return self._box(self.dense().sum(axis=(0, 1)))

    # ── Interpolation ─────────────────────────────────────────────────────────

    def _gather(self, dense: np.ndarray, ix: np.ndarray, iy: np.ndarray) -> np.ndarray:
        height, width = self.present.shape
        inside = (ix >= 0) & (ix < width) & (iy >= 0) & (iy < height)
        vals = dense[np.clip(iy, 0, height - 1), np.clip(ix, 0, width - 1)]
        return np.where(self.expand(inside), vals, 0.0)

    def sample(self, xs, ys) -> np.ndarray:
        """
        Bilinear samples at fractional LOCAL positions (array index space).

        Each sample blends the 4 surrounding cells. A corner that is absent
        or off the grid contributes zero at its bilinear weight.
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        dense = self.dense()

        x0 = np.floor(xs).astype(np.intp)
        y0 = np.floor(ys).astype(np.intp)
        x1 = x0 + 1
        y1 = y0 + 1

        tx = self.expand(xs - x0)
        ty = self.expand(ys - y0)

        c00 = self._gather(dense, x0, y0)
        c10 = self._gather(dense, x1, y0)
        c01 = self._gather(dense, x0, y1)
        c11 = self._gather(dense, x1, y1)

        row0 = c00 * (1 - tx) + c10 * tx
        row1 = c01 * (1 - tx) + c11 * tx
        return row0 * (1 - ty) + row1 * ty

    def interpolate(self, point: Tuple[float, float]):
        px, py = point
        local_x = np.array([px - self.rect.origin.x])
        local_y = np.array([py - self.rect.origin.y])
        return self._box(self.sample(local_x, local_y)[0])

    def __repr__(self):
        return (f"{type(self).__name__}({self.rect.width}x{self.rect.height}, "
                f"set={len(self)}/{self.rect.area()})")


class ScalarField(Field):
    """Dye, pressure, divergence. Walls never flip the sign of a scalar."""
    components = 1
    zero = 0.0

    def _box(self, raw):
        return float(raw)

    def _unbox(self, value):
        return float(value)

    def reflect(self, value, edge: Edge):
        return value


class VectorField(Field):
    """Velocity. The component along a wall's normal axis flips sign at the wall."""
    components = 2
    zero = Vector2()

    def _box(self, raw):
        return Vector2(float(raw[0]), float(raw[1]))

    def _unbox(self, value):
        return tuple(Vector2.of(value))

    def reflect(self, value, edge: Edge):
        return Vector2.of(value).mirrored(edge.axis)
