"""
simulation.py — Master Physics Loop
====================================
The complete simulation step that ties everything together.
One call to `tick()` advances the fluid by dt seconds.

Physics pipeline per tick:
  1. Diffuse velocity
  2. Project velocity (enforce incompressibility)
  3. Advect velocity (self-advection)
  4. Project again (clean up after advection)
  5. Diffuse density (dye spreading)
  6. Advect density (dye movement)

This follows the "Stable Fluids" paper by Jos Stam.

The host owns a Fluid instance: it injects dye and velocity between ticks
(add_dye / add_velocity), calls tick() once per frame, and reads dye() to
paint pixels. A tick is all-or-nothing; if any phase raises, every field is
put back the way it was before the tick started.
"""

import logging
import math
import time
from collections import deque
from typing import Iterator, Optional, Tuple

import numpy as np

from .advect import advect
from .config import (
    DEFAULT_DIFFUSION, DEFAULT_DT, DEFAULT_VISCOSITY, GRID_SIZE, ITER,
    PERF_LOG_LIMIT, SPLAT_RADIUS, SimulationConfig,
)
from .coords import Coord2, Rect
from .diffuse import diffuse
from .forces import add_to_cell, splat
from .grid import ScalarField, VectorField
from .solver import measure_divergence, project
from .units import Diffusion, TimeDelta, Viscosity
from .vector import Vector2

logger = logging.getLogger(__name__)


class Fluid:
    """
    The 2D fluid simulation.

    Usage:
        fluid = Fluid(dt=0.1, diffusion=0.0001, viscosity=0.0, size=64)
        fluid.add_dye((32, 32), 1.0)
        fluid.add_velocity((32, 32), (0.0, -0.5))
        for frame in range(100):
            fluid.tick()
            for coord, dye in fluid.dye():   # hand to the renderer
                ...
    """

    def __init__(self, dt: float = DEFAULT_DT, diffusion: float = DEFAULT_DIFFUSION,
                 viscosity: float = DEFAULT_VISCOSITY, size=GRID_SIZE, iterations: int = ITER):
        """
        Args:
            dt         : Timestep in seconds (finite, > 0)
            diffusion  : How fast dye and velocity spread (0 = no spreading)
            viscosity  : Reserved. Stored, but the solver does not use it
            size       : Cells per side, or a Rect for a non-square domain
            iterations : Relaxation sweeps per linear solve
        """
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")

        self.dt = TimeDelta(dt)
        self.diffusion = Diffusion(diffusion)
        self.viscosity = Viscosity(viscosity)
        self.iterations = int(iterations)
        self.rect = size if isinstance(size, Rect) else Rect.square(int(size))

        # ── Simulation state (fixed dimensions for the lifetime of the Fluid) ──
        self.velocity      = VectorField(self.rect, fill=Vector2())
        self.velocity_prev = VectorField(self.rect, fill=Vector2())
        self.density       = ScalarField(self.rect, fill=0.0)
        self.density_prev  = ScalarField(self.rect, fill=0.0)

        # ── Projection scratch space ───────────────────────────────────────
        self.pressure   = ScalarField(self.rect, fill=0.0)
        self.divergence = ScalarField(self.rect, fill=0.0)

        self.frame = 0
        self.perf_log = deque(maxlen=PERF_LOG_LIMIT)
        self.last_metrics: Optional[dict] = None
        self._ticking = False

        logger.info("Fluid created: %dx%d, dt=%s, diffusion=%s, viscosity=%s",
                    self.rect.width, self.rect.height,
                    float(self.dt), float(self.diffusion), float(self.viscosity))

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "Fluid":
        return cls(dt=config.dt, diffusion=config.diffusion, viscosity=config.viscosity,
                   size=config.size, iterations=config.iterations)

    # ── Point sources ─────────────────────────────────────────────────────────

    def add_dye(self, coord, amount: float) -> bool:
        """
        Add `amount` of dye at `coord`.

        Returns: False (and changes nothing) if coord is outside the domain
        """
        if not math.isfinite(amount):
            raise ValueError(f"dye amount must be finite, got {amount!r}")
        return add_to_cell(self.density, coord, float(amount))

    def add_velocity(self, coord, vector) -> bool:
        """
        Add `vector` to the velocity at `coord`.

        Returns: False (and changes nothing) if coord is outside the domain
        """
        vector = Vector2.of(vector)
        if not (math.isfinite(vector.x) and math.isfinite(vector.y)):
            raise ValueError(f"velocity must be finite, got {vector!r}")
        return add_to_cell(self.velocity, coord, vector)

    def splat_dye(self, center, amount: float, radius: int = SPLAT_RADIUS) -> int:
        """Add dye over a square brush around `center`. Returns cells changed."""
        if not math.isfinite(amount):
            raise ValueError(f"dye amount must be finite, got {amount!r}")
        return splat(self.density, center, float(amount), radius)

    # ── Stepping ──────────────────────────────────────────────────────────────

    def _fields(self):
        return (self.velocity, self.velocity_prev, self.density, self.density_prev,
                self.pressure, self.divergence)

    def _snapshot(self):
        return [field.copy() for field in self._fields()]

    def _restore(self, snapshot):
        for field, saved in zip(self._fields(), snapshot):
            field.copy_from(saved)

    def tick(self) -> None:
        """
        Advance the simulation by one timestep (dt seconds).

        Not re-entrant. If a phase raises, or Ctrl-C lands mid-tick, the fields
        are restored to their pre-tick state and the exception propagates.
        """
        if self._ticking:
            raise RuntimeError("Fluid.tick() is not re-entrant")

        self._ticking = True
        snapshot = self._snapshot()
        try:
            metrics = self._step()
        except BaseException:
            logger.error("tick %d failed; restoring pre-tick state", self.frame + 1)
            self._restore(snapshot)
            raise
        finally:
            self._ticking = False

        self.frame += 1
        metrics["frame"] = self.frame
        self.perf_log.append(metrics)
        self.last_metrics = metrics

    def _step(self) -> dict:
        t_total_start = time.perf_counter()
        dt, rate, n = float(self.dt), float(self.diffusion), self.iterations

        # ── Step 1: Diffuse velocity ───────────────────────────────────────
        t0 = time.perf_counter()
        self.velocity_prev.copy_from(self.velocity)
        diffuse(self.velocity, self.velocity_prev, rate, dt, n)
        t_diffuse_vel = (time.perf_counter() - t0) * 1000

        # ── Step 2: Project velocity ───────────────────────────────────────
        t0 = time.perf_counter()
        project(self.velocity, self.pressure, self.divergence, n)
        t_project1 = (time.perf_counter() - t0) * 1000

        # ── Step 3: Advect velocity (self-advection) ───────────────────────
        t0 = time.perf_counter()
        self.velocity_prev.copy_from(self.velocity)
        advect(self.velocity, self.velocity_prev, self.velocity_prev, dt)
        t_advect_vel = (time.perf_counter() - t0) * 1000

        # ── Step 4: Project again (clean up post-advection divergence) ─────
        t0 = time.perf_counter()
        proj_metrics = project(self.velocity, self.pressure, self.divergence, n)
        t_project2 = (time.perf_counter() - t0) * 1000

        # ── Step 5: Diffuse density ────────────────────────────────────────
        t0 = time.perf_counter()
        self.density_prev.copy_from(self.density)
        diffuse(self.density, self.density_prev, rate, dt, n)
        t_diffuse_den = (time.perf_counter() - t0) * 1000

        # ── Step 6: Advect density ─────────────────────────────────────────
        t0 = time.perf_counter()
        self.density_prev.copy_from(self.density)
        advect(self.density, self.density_prev, self.velocity, dt)
        t_advect_den = (time.perf_counter() - t0) * 1000

        t_total = (time.perf_counter() - t_total_start) * 1000
        logger.debug("tick %d done in %.1fms", self.frame + 1, t_total)

        return {
            "total_ms"         : t_total,
            "fps"              : 1000.0 / t_total if t_total > 0 else 0,
            "diffuse_vel_ms"   : t_diffuse_vel,
            "project1_ms"      : t_project1,
            "advect_vel_ms"    : t_advect_vel,
            "project2_ms"      : t_project2,
            "diffuse_den_ms"   : t_diffuse_den,
            "advect_den_ms"    : t_advect_den,
            "divergence_max"   : proj_metrics["divergence_after_max"],
            "divergence_mean"  : proj_metrics["divergence_after_mean"],
            "density_total"    : float(self.density.total()),
        }

    # ── Read access for rendering ─────────────────────────────────────────────

    def dye(self) -> Iterator[Tuple[Coord2, float]]:
        """(coordinate, dye) for every set dye cell, row-major."""
        return self.density.items()

    def dye_array(self) -> np.ndarray:
        """Dye as an (H, W) array, unset cells as zero. Indexed [y, x]."""
        return self.density.dense()

    def reset(self):
        """Zero every field and the frame counter. Dimensions are unchanged."""
        for field in self._fields():
            field.zero_out()
        self.frame = 0
        self.perf_log.clear()
        self.last_metrics = None

    def __repr__(self):
        max_div = float(np.abs(measure_divergence(self.velocity)).max())
        speed = np.linalg.norm(self.velocity.dense(), axis=-1)
        return (
            f"Fluid({self.rect.width}x{self.rect.height}, dt={float(self.dt)}, frame={self.frame})\n"
            f"  density  : max={self.density.dense().max():.4f}, sum={float(self.density.total()):.4f}\n"
            f"  velocity : max_magnitude={speed.max():.4f}\n"
            f"  divergence: max={max_div:.6f} (target: ~0)"
        )
