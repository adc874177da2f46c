"""
coords.py — Grid Coordinates & Boundary Topology
=================================================
Everything the solver needs to know about *where* a cell sits.

A W×H domain is split into three kinds of cell:

  C E E E E C      C = corner   (touches two walls)
  E . . . . E      E = edge     (touches one wall)
  E . . . . E      . = interior (framed by cells on all 4 sides)
  C E E E E C

Each wall has a NORMAL axis: the left/right walls are crossed by moving in X,
the top/bottom walls by moving in Y. The mirror boundary condition negates
the velocity component along that normal axis and keeps the tangential one.

Convention: y = 0 is the TOP row, y = H-1 the BOTTOM row.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple, Tuple, Union


class Coord2(NamedTuple):
    """Integer grid coordinate. Immutable; equal and hashed by component."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Coord2":
        return Coord2(self.x + dx, self.y + dy)


def as_coord(coord) -> Coord2:
    """
    Accept a Coord2 or any (x, y) pair. Fractional positions land in the
    cell that contains them, so (-0.5, 3) is cell (-1, 3), not (0, 3).
    """
    if isinstance(coord, Coord2):
        return coord
    x, y = coord
    return Coord2(math.floor(x), math.floor(y))


class Axis(Enum):
    X = "x"
    Y = "y"


class Edge(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def axis(self) -> Axis:
        """The wall's normal axis (the direction you cross it in)."""
        return Axis.X if self in (Edge.LEFT, Edge.RIGHT) else Axis.Y

    @property
    def inward_step(self) -> Tuple[int, int]:
        return _INWARD[self]


_INWARD = {
    Edge.LEFT: (1, 0),
    Edge.RIGHT: (-1, 0),
    Edge.TOP: (0, 1),
    Edge.BOTTOM: (0, -1),
}


class Corner(Enum):
    TOP_LEFT = (Edge.TOP, Edge.LEFT)
    TOP_RIGHT = (Edge.TOP, Edge.RIGHT)
    BOTTOM_LEFT = (Edge.BOTTOM, Edge.LEFT)
    BOTTOM_RIGHT = (Edge.BOTTOM, Edge.RIGHT)

    @classmethod
    def of(cls, first: Edge, second: Edge) -> "Corner":
        """Build a corner from two walls on different axes, in either order."""
        if not perpendicular(first, second):
            raise ValueError(f"{first.name} and {second.name} do not meet at a corner")
        horizontal, vertical = (first, second) if first.axis is Axis.Y else (second, first)
        return cls((horizontal, vertical))

    @property
    def horizontal(self) -> Edge:
        """The TOP/BOTTOM wall of this corner."""
        return self.value[0]

    @property
    def vertical(self) -> Edge:
        """The LEFT/RIGHT wall of this corner."""
        return self.value[1]


class NeighborStrategy(Enum):
    ADJACENT = "adjacent"
    INCLUDE_DIAGONAL = "include_diagonal"


_ADJACENT_STEPS = ((0, -1), (0, 1), (-1, 0), (1, 0))   # up, down, left, right
_DIAGONAL_STEPS = ((-1, -1), (1, -1), (-1, 1), (1, 1))


# ── Boundary classification (tagged variant) ─────────────────────────────────

@dataclass(frozen=True)
class Interior:
    pass


@dataclass(frozen=True)
class OnEdge:
    edge: Edge


@dataclass(frozen=True)
class OnCorner:
    corner: Corner


BoundaryClass = Union[Interior, OnEdge, OnCorner]


@dataclass(frozen=True)
class Rect:
    """
    Rectangular domain. The solver needs at least one interior row and column
    framed by boundary cells, so both dimensions must be >= 3.
    """
    width: int
    height: int
    origin: Coord2 = Coord2(0, 0)

    def __post_init__(self):
        if self.width < 3 or self.height < 3:
            raise ValueError(f"Domain must be at least 3x3, got {self.width}x{self.height}")
        object.__setattr__(self, "origin", as_coord(self.origin))

    @classmethod
    def square(cls, size: int) -> "Rect":
        return cls(size, size)

    def contains(self, coord) -> bool:
        x, y = coord
        return (self.origin.x <= x < self.origin.x + self.width and
                self.origin.y <= y < self.origin.y + self.height)

    def area(self) -> int:
        return self.width * self.height

    def interior(self) -> Iterator[Coord2]:
        """Every interior coordinate, row-major. Each call starts over."""
        ox, oy = self.origin
        for y in range(oy + 1, oy + self.height - 1):
            for x in range(ox + 1, ox + self.width - 1):
                yield Coord2(x, y)

    def boundary(self) -> Iterator[Tuple[BoundaryClass, Coord2]]:
        """
        Every boundary cell exactly once: the top and bottom rows
        (corners included), then the left and right columns without
        their corner cells.
        """
        ox, oy = self.origin
        top, bottom = oy, oy + self.height - 1
        left, right = ox, ox + self.width - 1

        for x in range(left, right + 1):
            for y in (top, bottom):
                coord = Coord2(x, y)
                yield classify(coord, self), coord
        for y in range(top + 1, bottom):
            for x in (left, right):
                coord = Coord2(x, y)
                yield classify(coord, self), coord


def classify(coord, rect: Rect) -> BoundaryClass:
    """Interior, edge or corner. Raises ValueError for a cell outside `rect`."""
    if not rect.contains(coord):
        raise ValueError(f"{tuple(coord)} is outside {rect}")
    x = coord[0] - rect.origin.x
    y = coord[1] - rect.origin.y

    if x == 0:
        vertical = Edge.LEFT
    elif x == rect.width - 1:
        vertical = Edge.RIGHT
    else:
        vertical = None

    if y == 0:
        horizontal = Edge.TOP
    elif y == rect.height - 1:
        horizontal = Edge.BOTTOM
    else:
        horizontal = None

    if vertical and horizontal:
        return OnCorner(Corner((horizontal, vertical)))
    if vertical or horizontal:
        return OnEdge(vertical or horizontal)
    return Interior()


def corner_coordinate(corner: Corner, rect: Rect) -> Coord2:
    x = 0 if corner.vertical is Edge.LEFT else rect.width - 1
    y = 0 if corner.horizontal is Edge.TOP else rect.height - 1
    return Coord2(rect.origin.x + x, rect.origin.y + y)


def perpendicular(a: Union[Edge, Axis], b: Union[Edge, Axis]) -> bool:
    """True iff the two walls/axes lie on different axes."""
    axis_a = a.axis if isinstance(a, Edge) else a
    axis_b = b.axis if isinstance(b, Edge) else b
    return axis_a is not axis_b


def inward(coord, edge: Edge) -> Coord2:
    """The single neighbour one step into the domain from an edge cell."""
    dx, dy = edge.inward_step
    return as_coord(coord).offset(dx, dy)


def neighbor_candidates(coord, strategy: NeighborStrategy = NeighborStrategy.ADJACENT) -> Iterator[Coord2]:
    """
    Candidate neighbour coordinates. Steps that would go below zero are
    dropped rather than clamped, so a cell is never its own neighbour.
    """
    coord = as_coord(coord)
    steps = _ADJACENT_STEPS
    if strategy is NeighborStrategy.INCLUDE_DIAGONAL:
        steps = _ADJACENT_STEPS + _DIAGONAL_STEPS
    for dx, dy in steps:
        x, y = coord.x + dx, coord.y + dy
        if x < 0 or y < 0:
            continue
        yield Coord2(x, y)
