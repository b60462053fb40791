"""
Sequential schedulers: one thread, the same step semantics as the parallel
coordinators.

- SequentialBarnesHut: bounds → reset → populate → forces → integrate
- SequentialBruteForce: exact O(N²) summation, Newton's third law per pair

SequentialBarnesHut runs exactly the arithmetic the parallel Barnes-Hut
coordinator runs (same tree, same insertion order, same traversal), so the
two produce identical trajectories. SequentialBruteForce is the reference
the Barnes-Hut engine converges to as θ → 0.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from nbodysim.core.body import Body
from nbodysim.core.quadrant import bounding_quadrant
from nbodysim.core.quadtree import QuadTree
from nbodysim.core.schedule import (
    StepCallback,
    check_bodies,
    degenerate_total,
    finish_run,
    pairwise_forces,
)
from nbodysim.core.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class SequentialBarnesHut:
    """Single-threaded Barnes-Hut scheduler."""

    bodies: list[Body]
    settings: Settings
    on_step: StepCallback | None = None

    current_step: int = field(default=0, init=False)
    tree: QuadTree = field(default_factory=QuadTree, init=False)

    def __post_init__(self):
        check_bodies(self.bodies)

    def run(self, n_steps: int | None = None) -> dict:
        """
        Run for n_steps (default: settings.num_steps).

        Returns:
            Statistics dictionary
        """
        if n_steps is None:
            n_steps = self.settings.num_steps
        degenerate_before = degenerate_total(self.bodies)
        logger.info(
            "Barnes-Hut (sequential): %d bodies, %d steps, theta=%s",
            len(self.bodies), n_steps, self.settings.theta,
        )

        for _ in range(n_steps):
            self.step()

        return finish_run("Barnes-Hut (sequential)", {
            "method": "barnes-hut",
            "parallel": False,
            "n_steps": n_steps,
            "steps_completed": self.current_step,
            "num_workers": 1,
            "degenerate_interactions": degenerate_total(self.bodies) - degenerate_before,
        })

    def build_tree(self) -> QuadTree:
        """Rebuild the tree around the current body positions."""
        quadrant = bounding_quadrant(self.bodies, self.settings.bounds_padding)
        self.tree.reset(quadrant, self.bodies)
        self.tree.populate(self.bodies)
        return self.tree

    def step(self) -> None:
        """Advance every body by one time step."""
        s = self.settings
        tree = self.build_tree()
        for body in self.bodies:
            tree.calculate_force(body, s.theta, s.G)
        for body in self.bodies:
            body.integrate(s.dt)

        if self.on_step is not None:
            self.on_step(self.current_step, self.bodies)
        self.current_step += 1


@dataclass
class SequentialBruteForce:
    """Single-threaded exact O(N²) scheduler."""

    bodies: list[Body]
    settings: Settings
    on_step: StepCallback | None = None

    current_step: int = field(default=0, init=False)

    def __post_init__(self):
        check_bodies(self.bodies)

    def run(self, n_steps: int | None = None) -> dict:
        if n_steps is None:
            n_steps = self.settings.num_steps
        degenerate_before = degenerate_total(self.bodies)
        logger.info(
            "Brute force (sequential): %d bodies, %d steps",
            len(self.bodies), n_steps,
        )

        for _ in range(n_steps):
            self.step()

        return finish_run("Brute force (sequential)", {
            "method": "brute-force",
            "parallel": False,
            "n_steps": n_steps,
            "steps_completed": self.current_step,
            "num_workers": 1,
            "degenerate_interactions": degenerate_total(self.bodies) - degenerate_before,
        })

    def accumulate_forces(self) -> None:
        """Add every pairwise pull into the bodies' force vectors."""
        bodies = self.bodies
        for i, j, pull in pairwise_forces(bodies, self.settings.G):
            if pull is None:
                bodies[i].degenerate_interactions += 1
                bodies[j].degenerate_interactions += 1
                continue
            fx, fy = pull
            bodies[i].apply_force(fx, fy)
            bodies[j].apply_force(-fx, -fy)

    def step(self) -> None:
        self.accumulate_forces()
        for body in self.bodies:
            body.integrate(self.settings.dt)

        if self.on_step is not None:
            self.on_step(self.current_step, self.bodies)
        self.current_step += 1
