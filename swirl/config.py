"""
config.py — Simulation Constants & Settings
============================================
Central place for the tuning knobs. Everything else imports from here
instead of hardcoding numbers.
"""

from dataclasses import dataclass

from .units import Diffusion, TimeDelta, Viscosity


# ── Grid & solver ─────────────────────────────────────────────────────────────
GRID_SIZE = 64            # cells per side (square domain)
ITER      = 20            # relaxation sweeps per lin_solve call

# ── Physical defaults ─────────────────────────────────────────────────────────
DEFAULT_DT        = 0.1   # seconds per tick
DEFAULT_DIFFUSION = 0.0   # dye/velocity spreading rate
DEFAULT_VISCOSITY = 0.0   # reserved, currently inert

# ── Advection ─────────────────────────────────────────────────────────────────
# Back-traced positions stay this far inside the grid on each axis, so all four
# cells a bilinear sample blends are real grid cells.
TRACE_MARGIN = 0.5

# ── Host input (pointer brush) ────────────────────────────────────────────────
SPLAT_DYE       = 1.0     # dye added per pointer event
SPLAT_RADIUS    = 1       # brush half-width in cells
MAX_SPLAT_SPEED = 0.5     # drag velocities are clamped to this magnitude

# ── Bookkeeping ───────────────────────────────────────────────────────────────
PERF_LOG_LIMIT = 1000     # per-tick metric dicts kept in memory


@dataclass
class SimulationConfig:
    """
    Everything needed to build a Fluid. Validated on construction so a bad
    value fails here rather than halfway through a tick.
    """
    size: int = GRID_SIZE
    dt: float = DEFAULT_DT
    diffusion: float = DEFAULT_DIFFUSION
    viscosity: float = DEFAULT_VISCOSITY
    iterations: int = ITER

    def __post_init__(self):
        if self.size < 3:
            raise ValueError(f"size must be >= 3, got {self.size}")
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        self.dt = TimeDelta(self.dt)
        self.diffusion = Diffusion(self.diffusion)
        self.viscosity = Viscosity(self.viscosity)
