"""
Pieces shared by every scheduler, sequential or parallel.

A scheduler owns the body list for the duration of a run, advances it
step by step, and optionally reports each completed step to a callback
(visualization, trajectory recording). The callback always runs from a
single thread while no body is being mutated.
"""

from __future__ import annotations
import logging
from typing import Callable, Sequence

from nbodysim.core.body import Body, gravitational_pull
from nbodysim.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# on_step(step_index, bodies), called after each completed step
StepCallback = Callable[[int, Sequence[Body]], None]


def check_bodies(bodies: Sequence[Body]) -> None:
    """Structural precondition shared by all schedulers."""
    if len(bodies) == 0:
        raise ConfigurationError("a simulation needs at least one body")


def owned_indices(worker_id: int, num_workers: int, num_bodies: int) -> range:
    """
    Body indices owned by a worker: i ≡ worker_id (mod num_workers).

    Every phase that partitions bodies uses this one formula, so the worker
    that accumulated a body's force is the worker that integrates it.
    """
    return range(worker_id, num_bodies, num_workers)


def degenerate_total(bodies: Sequence[Body]) -> int:
    return sum(body.degenerate_interactions for body in bodies)


def pairwise_forces(bodies: Sequence[Body], G: float, start: int = 0, stride: int = 1):
    """
    Yield (i, j, pull) for the pull of body j on body i, for j > i.

    Only rows i in range(start, n - 1, stride) are visited. Body j feels the
    negated pull. `pull` is None for a coincident pair; the caller decides
    where to count it.
    """
    n = len(bodies)
    for i in range(start, n - 1, stride):
        b1 = bodies[i]
        for j in range(i + 1, n):
            yield i, j, gravitational_pull(b1, bodies[j], G)


def finish_run(name: str, stats: dict) -> dict:
    """Log the end of a run and warn about skipped zero-distance pairs."""
    if stats.get("degenerate_interactions"):
        logger.warning(
            "%s: %d zero-distance interactions were skipped",
            name, stats["degenerate_interactions"],
        )
    logger.info("%s: completed %d steps", name, stats["steps_completed"])
    return stats
