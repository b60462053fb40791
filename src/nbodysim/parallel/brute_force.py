"""
BruteForceStepCoordinator: exact O(N²) steps split across worker threads.

Two phases per step:

A. Forces: worker w visits rows i ≡ w (mod num_workers) of the pair
   triangle (i < j). Each pair's pull is added to forces[w, i] and
   subtracted from forces[w, j]. Column j can lie outside the worker's
   stride, but the row is the worker's own, so no two workers ever write
   the same cell.
B. Integration: worker w owns bodies i ≡ w (mod num_workers). It sums
   column i over all worker rows, zeroes that column, and integrates.

The force table is a partial-sums array of shape (workers, bodies, 2),
reduced after the first barrier.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading

import numpy as np

from nbodysim.core.body import Body
from nbodysim.core.schedule import (
    StepCallback,
    check_bodies,
    finish_run,
    owned_indices,
    pairwise_forces,
)
from nbodysim.core.settings import Settings
from nbodysim.parallel.sync import run_workers

logger = logging.getLogger(__name__)

COORDINATOR_ID = 0


@dataclass
class BruteForceStepCoordinator:
    """Runs settings.num_workers threads through the two brute-force phases."""

    bodies: list[Body]
    settings: Settings
    on_step: StepCallback | None = None

    current_step: int = field(default=0, init=False)
    forces: np.ndarray = field(default=None, init=False, repr=False)
    _degenerate: list[int] = field(default_factory=list, init=False, repr=False)
    _barrier: threading.Barrier | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        check_bodies(self.bodies)
        self.forces = np.zeros(
            (self.settings.num_workers, len(self.bodies), 2), dtype=np.float64
        )

    @property
    def num_workers(self) -> int:
        return self.settings.num_workers

    def run(self, n_steps: int | None = None) -> dict:
        """
        Run for n_steps (default: settings.num_steps).

        Raises:
            SimulationAbortedError: if any worker fails
        """
        if n_steps is None:
            n_steps = self.settings.num_steps
        logger.info(
            "Brute force (parallel): %d bodies, %d steps, %d workers",
            len(self.bodies), n_steps, self.num_workers,
        )

        self.forces.fill(0.0)
        self._degenerate = [0] * self.num_workers
        self._barrier = threading.Barrier(self.num_workers)
        first_step = self.current_step

        run_workers(
            lambda worker_id: self._work(worker_id, n_steps, first_step),
            self.num_workers,
            self._barrier,
            name="brute-force-worker",
        )

        # Coincident pairs are counted per worker; body counters are never shared
        degenerate = sum(self._degenerate)
        return finish_run("Brute force (parallel)", {
            "method": "brute-force",
            "parallel": True,
            "n_steps": n_steps,
            "steps_completed": self.current_step,
            "num_workers": self.num_workers,
            "degenerate_interactions": degenerate,
        })

    def _work(self, worker_id: int, n_steps: int, first_step: int) -> None:
        barrier = self._barrier
        owned = owned_indices(worker_id, self.num_workers, len(self.bodies))

        for step in range(n_steps):
            self._accumulate_row(worker_id)
            barrier.wait()
            self._reduce_and_integrate(owned)
            barrier.wait()
            if worker_id == COORDINATOR_ID:
                if self.on_step is not None:
                    self.on_step(first_step + step, self.bodies)
                self.current_step = first_step + step + 1

    def _accumulate_row(self, worker_id: int) -> None:
        """Phase A: partial forces into this worker's private row."""
        row = self.forces[worker_id]
        for i, j, pull in pairwise_forces(
            self.bodies, self.settings.G, start=worker_id, stride=self.num_workers
        ):
            if pull is None:
                self._degenerate[worker_id] += 2
                continue
            fx, fy = pull
            row[i, 0] += fx
            row[i, 1] += fy
            row[j, 0] -= fx
            row[j, 1] -= fy

    def _reduce_and_integrate(self, owned: range) -> None:
        """Phase B: sum each owned column over all rows, clear it, integrate."""
        forces = self.forces
        dt = self.settings.dt
        for i in owned:
            fx = 0.0
            fy = 0.0
            for w in range(self.num_workers):
                fx += forces[w, i, 0]
                fy += forces[w, i, 1]
            forces[:, i, :] = 0.0

            body = self.bodies[i]
            body.apply_force(float(fx), float(fy))
            body.integrate(dt)
