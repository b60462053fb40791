"""
Command-line entry point.

Usage:
    nbodysim [num_bodies] [num_steps] [theta] [num_workers] [-g] [-r]

Examples:
    nbodysim                          # 500 bodies, 1000 steps, θ=0.5, 1 worker
    nbodysim 200 5000 0.5 4           # Barnes-Hut on 4 worker threads
    nbodysim 100 2000 0.0 1 -r        # θ=0 (exact) on a ring formation
    nbodysim 100 500 --method brute-force -g

θ = 0.5 is the usual choice; θ = 0 turns Barnes-Hut into brute force.
Counts above their ceiling are clamped to it with a warning.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from nbodysim.core.errors import NBodyError
from nbodysim.core.settings import (
    DEFAULT_THETA,
    MAX_NUM_BODIES,
    MAX_NUM_STEPS,
    MAX_NUM_WORKERS,
    Settings,
)
from nbodysim.formations import generate_bodies
from nbodysim.simulation.driver import METHODS, SimulationDriver

logger = logging.getLogger(__name__)

DEFAULT_NUM_STEPS = 1000


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _non_negative_float(text: str) -> float:
    value = float(text)
    if not value >= 0.0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nbodysim",
        description="Simulate the gravitational n-body problem with Barnes-Hut.",
    )
    parser.add_argument("num_bodies", nargs="?", type=_positive_int, default=MAX_NUM_BODIES,
                        help=f"Number of bodies (max {MAX_NUM_BODIES})")
    parser.add_argument("num_steps", nargs="?", type=_positive_int, default=DEFAULT_NUM_STEPS,
                        help=f"Number of time steps (max {MAX_NUM_STEPS})")
    parser.add_argument("theta", nargs="?", type=_non_negative_float, default=DEFAULT_THETA,
                        help="Barnes-Hut threshold; 0 is exact")
    parser.add_argument("num_workers", nargs="?", type=_positive_int, default=1,
                        help=f"Worker threads (max {MAX_NUM_WORKERS})")
    parser.add_argument("-g", "--gui", action="store_true", help="Show the simulation")
    parser.add_argument("-r", "--ring", action="store_true",
                        help="Ring formation around a massive central body")
    parser.add_argument("--method", choices=METHODS, default="barnes-hut")
    parser.add_argument("--sequential", action="store_true",
                        help="Use the single-threaded scheduler regardless of num_workers")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for body generation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _clamp(name: str, value: int, ceiling: int) -> int:
    if value > ceiling:
        logger.warning("%s=%d exceeds the maximum; using %d", name, value, ceiling)
        return ceiling
    return value


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        num_bodies=_clamp("num_bodies", args.num_bodies, MAX_NUM_BODIES),
        num_steps=_clamp("num_steps", args.num_steps, MAX_NUM_STEPS),
        theta=args.theta,
        num_workers=_clamp("num_workers", args.num_workers, MAX_NUM_WORKERS),
        gui=args.gui,
        ring=args.ring,
    )


def _make_view(settings: Settings, bodies, parallel: bool):
    """
    Repaint callback for -g.

    matplotlib windows must be driven from the main thread, so parallel runs
    record positions and show the trajectories when the run ends.
    """
    if parallel:
        from nbodysim.analysis.recording import TrajectoryRecorder

        recorder = TrajectoryRecorder(every=max(1, settings.num_steps // 500))
        recorder.record_initial(bodies)
        return recorder

    from nbodysim.viz.bodies import LiveBodyView

    return LiveBodyView(bodies, settings)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = settings_from_args(args)
    except NBodyError as exc:
        logger.error("Invalid settings: %s", exc)
        return 2

    print("\n> Simulating the gravitational n-body problem with the following settings:")
    print(settings.describe())

    rng = np.random.default_rng(args.seed)
    bodies = generate_bodies(settings, rng)
    parallel = False if args.sequential else settings.num_workers > 1

    view = _make_view(settings, bodies, parallel) if settings.gui else None
    driver = SimulationDriver(
        settings, bodies, method=args.method, parallel=parallel, on_step=view,
    )

    try:
        stats = driver.run_steps()
    except NBodyError as exc:
        logger.error("Simulation failed: %s", exc)
        return 1

    print(f"> Execution time: {stats['elapsed']}")

    if settings.gui and parallel:
        import matplotlib.pyplot as plt
        from nbodysim.viz.bodies import plot_trajectories

        plot_trajectories(view, settings)
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
