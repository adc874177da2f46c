"""
vector.py — 2D Vector Primitive
================================
Minimal vector algebra for velocities and pointer forces.
"""

import math
from dataclasses import dataclass

from .coords import Axis


@dataclass(frozen=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_angle(cls, angle: float) -> "Vector2":
        """Unit vector pointing at `angle` radians."""
        return cls(math.cos(angle), math.sin(angle))

    @classmethod
    def of(cls, value) -> "Vector2":
        """Accept a Vector2 or any (x, y) pair."""
        if isinstance(value, Vector2):
            return value
        x, y = value
        return cls(float(x), float(y))

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vector2":
        # The zero vector has no direction; leave it alone.
        mag = self.magnitude()
        if mag == 0.0:
            return self
        return self / mag

    def set_mag(self, mag: float) -> "Vector2":
        return self.normalize() * mag

    def max_mag(self, limit: float) -> "Vector2":
        """Clamp the magnitude to at most `limit`, keeping the direction."""
        if self.magnitude() > limit:
            return self.set_mag(limit)
        return self

    def mirrored(self, axis: Axis) -> "Vector2":
        """Negate the component along `axis`."""
        if axis is Axis.X:
            return Vector2(-self.x, self.y)
        return Vector2(self.x, -self.y)

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vector2":
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y
