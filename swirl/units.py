"""
units.py — Named Scalars
=========================
Plain floats with a name attached, so a diffusion rate can't be passed where
a timestep is expected without it showing at the call site.

  TimeDelta  : seconds per tick, finite and > 0
  Diffusion  : how fast values bleed into their neighbours, finite and >= 0
  Viscosity  : reserved; carried through but not used by the solver
"""

import math


class _NonNegative(float):
    def __new__(cls, value):
        self = super().__new__(cls, value)
        if not math.isfinite(self) or self < 0.0:
            raise ValueError(f"{cls.__name__} must be finite and >= 0, got {value!r}")
        return self

    def __repr__(self):
        return f"{type(self).__name__}({float(self)!r})"


class TimeDelta(_NonNegative):
    def __new__(cls, value):
        self = super().__new__(cls, value)
        if self == 0.0:
            raise ValueError(f"TimeDelta must be > 0, got {value!r}")
        return self


class Diffusion(_NonNegative):
    pass


class Viscosity(_NonNegative):
    pass
