"""
main.py — Master Entry Point
=============================
Top-level script that drives the simulation as a host would.

Usage:
    python main.py                    # Headless run (default)
    python main.py --mode live        # Live window; drag the mouse to stir
    python main.py --mode benchmark   # Per-phase timing breakdown
"""

import argparse
import logging

import numpy as np

from swirl import Fluid, SimulationConfig, Vector2
from swirl.config import DEFAULT_DIFFUSION, DEFAULT_DT, DEFAULT_VISCOSITY, GRID_SIZE, ITER
from swirl.logging_config import setup_logging


def _stir(fluid: Fluid, frame: int):
    """A rotating dye + velocity source at the centre, standing in for a pointer."""
    cx, cy = fluid.rect.width // 2, fluid.rect.height // 2
    fluid.add_dye((cx, cy), 1.0)
    fluid.add_velocity((cx, cy), Vector2.from_angle(frame * 0.1) * 0.2)


def run_live(config: SimulationConfig):
    """Live interactive visualization."""
    from visualizer import FluidVisualizer

    print(f"Starting live simulation ({config.size}x{config.size})...")
    print("Drag in the window to add dye. Close the window to exit.\n")

    fluid = Fluid.from_config(config)
    viz = FluidVisualizer(fluid)
    viz.run(fps=30)


def run_headless(config: SimulationConfig, frames: int = 100):
    """Run simulation without display — prints stats every few frames."""
    print(f"\nHeadless simulation | {config.size}x{config.size} | {frames} frames")
    print(f"{'─'*60}")

    fluid = Fluid.from_config(config)
    total_times = []

    for f in range(frames):
        _stir(fluid, f)
        fluid.tick()
        metrics = fluid.last_metrics
        total_times.append(metrics["total_ms"])

        if f % 10 == 0:
            print(f"  Frame {f:03d} | {metrics['total_ms']:6.1f}ms "
                  f"({metrics['fps']:.1f} FPS) | "
                  f"div_max={metrics['divergence_max']:.5f} | "
                  f"dye={metrics['density_total']:.2f}")

    print(f"\n{'─'*60}")
    print(f"  Average: {np.mean(total_times):.1f}ms/frame ({1000/np.mean(total_times):.1f} FPS)")
    print(f"  Min:     {np.min(total_times):.1f}ms")
    print(f"  Max:     {np.max(total_times):.1f}ms")
    print(fluid)


def run_benchmark(config: SimulationConfig, frames: int = 50):
    """
    Detailed performance breakdown.
    Shows how long each physics phase takes.
    """
    print(f"\n{'='*60}")
    print(f"  BENCHMARK | {config.size}x{config.size} | {frames} frames")
    print(f"{'='*60}")

    fluid = Fluid.from_config(config)

    # Warm up
    for f in range(5):
        _stir(fluid, f)
        fluid.tick()

    logs = []
    for f in range(frames):
        _stir(fluid, f)
        fluid.tick()
        logs.append(fluid.last_metrics)

    keys = ["diffuse_vel_ms", "project1_ms", "advect_vel_ms", "project2_ms",
            "diffuse_den_ms", "advect_den_ms", "total_ms"]

    print(f"\n{'Step':<20} {'Mean':>8} {'Min':>8} {'Max':>8}")
    print(f"{'─'*50}")
    for k in keys:
        vals = [m[k] for m in logs]
        print(f"  {k:<18} {np.mean(vals):>7.1f}ms {np.min(vals):>7.1f}ms {np.max(vals):>7.1f}ms")

    total_vals = [m["total_ms"] for m in logs]
    print(f"\n{'─'*50}")
    print(f"  FPS (physics only): {1000/np.mean(total_vals):.1f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D Stable Fluids simulation")
    parser.add_argument(
        "--mode", choices=["live", "headless", "benchmark"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--size",       type=int,   default=GRID_SIZE,         help=f"Cells per side (default: {GRID_SIZE})")
    parser.add_argument("--frames",     type=int,   default=100,               help="Number of frames")
    parser.add_argument("--dt",         type=float, default=DEFAULT_DT,        help="Timestep in seconds")
    parser.add_argument("--diffusion",  type=float, default=DEFAULT_DIFFUSION, help="Diffusion rate")
    parser.add_argument("--viscosity",  type=float, default=DEFAULT_VISCOSITY, help="Viscosity (reserved)")
    parser.add_argument("--iterations", type=int,   default=ITER,              help="Relaxation sweeps per solve")
    parser.add_argument("--log-level",  default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file",   default=None, help="Also write logs to this file")
    return parser


if __name__ == "__main__":
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        config = SimulationConfig(size=args.size, dt=args.dt, diffusion=args.diffusion,
                                  viscosity=args.viscosity, iterations=args.iterations)
    except ValueError as exc:
        parser.error(str(exc))

    if args.mode == "live":
        run_live(config)
    elif args.mode == "headless":
        run_headless(config, frames=args.frames)
    elif args.mode == "benchmark":
        run_benchmark(config, frames=args.frames)
