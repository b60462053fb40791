"""
ParallelStepCoordinator: Barnes-Hut steps split across worker threads.

Every step runs the same barrier-separated phases on all workers:

1. Bounds: worker 0 computes the padded bounding quadrant of all bodies and
   resets the shared tree root; the others wait.
2. Population: workers claim top-level quadrants (0..3 → NW, NE, SW, SE)
   from an atomic counter. Whoever claims quadrant k scans the whole body
   list and inserts the bodies on that side of the root centre. At most
   four workers do useful work here; the rest go straight to the barrier.
   Worker 0 then re-arms the counter.
3. Forces: each worker queries the finished tree for the bodies it owns
   (i ≡ id mod num_workers). The tree is read-only in this phase.
4. Integration: each worker moves the same bodies it computed forces for.

A barrier separates 3 and 4 because force queries read the positions of
bodies held in the tree's leaves, which integration overwrites.

Worker 0 invokes the on_step callback for the previous step at the start
of the next step (and once more after the last), while every other worker
is blocked at a barrier, so the callback sees a consistent body list.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading

from nbodysim.core.body import Body
from nbodysim.core.quadrant import bounding_quadrant
from nbodysim.core.quadtree import QuadTree
from nbodysim.core.schedule import (
    StepCallback,
    check_bodies,
    degenerate_total,
    finish_run,
    owned_indices,
)
from nbodysim.core.settings import Settings
from nbodysim.parallel.sync import AtomicCounter, run_workers

logger = logging.getLogger(__name__)

NUM_TOP_LEVEL_QUADRANTS = 4
COORDINATOR_ID = 0


@dataclass
class ParallelStepCoordinator:
    """
    Runs settings.num_workers threads through the four Barnes-Hut phases.

    Produces the same trajectories as SequentialBarnesHut: the tree is built
    from the same insertion order and every body is owned by exactly one
    worker in both the force and integration phases.
    """

    bodies: list[Body]
    settings: Settings
    on_step: StepCallback | None = None

    current_step: int = field(default=0, init=False)
    tree: QuadTree = field(default_factory=QuadTree, init=False)
    counter: AtomicCounter = field(default_factory=AtomicCounter, init=False)
    _barrier: threading.Barrier | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        check_bodies(self.bodies)

    @property
    def num_workers(self) -> int:
        return self.settings.num_workers

    def run(self, n_steps: int | None = None) -> dict:
        """
        Run for n_steps (default: settings.num_steps) on a fresh worker pool.

        Returns:
            Statistics dictionary

        Raises:
            SimulationAbortedError: if any worker fails
        """
        if n_steps is None:
            n_steps = self.settings.num_steps
        degenerate_before = degenerate_total(self.bodies)
        logger.info(
            "Barnes-Hut (parallel): %d bodies, %d steps, theta=%s, %d workers",
            len(self.bodies), n_steps, self.settings.theta, self.num_workers,
        )

        self.counter.reset()
        self._barrier = threading.Barrier(self.num_workers)
        first_step = self.current_step

        run_workers(
            lambda worker_id: self._work(worker_id, n_steps, first_step),
            self.num_workers,
            self._barrier,
            name="barnes-hut-worker",
        )

        return finish_run("Barnes-Hut (parallel)", {
            "method": "barnes-hut",
            "parallel": True,
            "n_steps": n_steps,
            "steps_completed": self.current_step,
            "num_workers": self.num_workers,
            "degenerate_interactions": degenerate_total(self.bodies) - degenerate_before,
        })

    # ─────────────────────────────────────────────────────────────────
    # Worker
    # ─────────────────────────────────────────────────────────────────

    def _work(self, worker_id: int, n_steps: int, first_step: int) -> None:
        barrier = self._barrier
        is_coordinator = worker_id == COORDINATOR_ID
        owned = owned_indices(worker_id, self.num_workers, len(self.bodies))

        for step in range(n_steps):
            barrier.wait()
            if is_coordinator:
                if step > 0:
                    self._complete_step(first_step + step - 1)
                self._rebuild_root()

            barrier.wait()
            self._populate_claimed_quadrants()

            barrier.wait()
            if is_coordinator:
                self.counter.reset()
            self._calculate_forces(owned)

            barrier.wait()
            self._integrate(owned)

        barrier.wait()
        if is_coordinator and n_steps > 0:
            self._complete_step(first_step + n_steps - 1)

    def _rebuild_root(self) -> None:
        """Phase 1, coordinator only."""
        quadrant = bounding_quadrant(self.bodies, self.settings.bounds_padding)
        self.tree.reset(quadrant, self.bodies)

    def _populate_claimed_quadrants(self) -> None:
        """Phase 2: claim top-level quadrants until none are left."""
        tree = self.tree
        claimed = self.counter.fetch_and_increment()
        while claimed < NUM_TOP_LEVEL_QUADRANTS:
            tree.populate_child(claimed, self.bodies)
            claimed = self.counter.fetch_and_increment()

    def _calculate_forces(self, owned: range) -> None:
        """Phase 3: read-only tree queries for owned bodies."""
        tree = self.tree
        theta, G = self.settings.theta, self.settings.G
        bodies = self.bodies
        for i in owned:
            tree.calculate_force(bodies[i], theta, G)

    def _integrate(self, owned: range) -> None:
        """Phase 4: move owned bodies."""
        dt = self.settings.dt
        bodies = self.bodies
        for i in owned:
            bodies[i].integrate(dt)

    def _complete_step(self, step: int) -> None:
        if self.on_step is not None:
            self.on_step(step, self.bodies)
        self.current_step = step + 1
