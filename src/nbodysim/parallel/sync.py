"""
Synchronization helpers for the worker pool.

Workers meet at a threading.Barrier between phases. The only value they
contend on inside a phase is the work counter used to hand out top-level
quadrants during tree construction.

A failure in any worker is fatal to the run: the barrier is aborted so
every other worker is released with BrokenBarrierError, and the run
raises SimulationAbortedError once the pool has drained.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
import logging
import threading
from typing import Callable

from nbodysim.core.errors import SimulationAbortedError

logger = logging.getLogger(__name__)


class AtomicCounter:
    """Integer counter with an atomic fetch-and-increment."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def fetch_and_increment(self) -> int:
        """Return the current value and add one, as a single step."""
        with self._lock:
            value = self._value
            self._value += 1
            return value

    def reset(self, value: int = 0) -> None:
        with self._lock:
            self._value = value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def run_workers(
    work: Callable[[int], None],
    num_workers: int,
    barrier: threading.Barrier,
    name: str = "nbody-worker",
) -> None:
    """
    Run work(worker_id) once per worker on a fixed thread pool and wait.

    Each worker lives for the whole run. If any worker raises, the barrier
    is aborted and SimulationAbortedError is raised, chained to the first
    failure that was not itself a broken barrier.

    Raises:
        SimulationAbortedError: if any worker failed
    """

    def guarded(worker_id: int) -> None:
        try:
            work(worker_id)
        except threading.BrokenBarrierError:
            raise
        except BaseException:
            logger.exception("Worker %d failed; aborting the run", worker_id)
            barrier.abort()
            raise

    with ThreadPoolExecutor(max_workers=num_workers, thread_name_prefix=name) as pool:
        futures = [pool.submit(guarded, worker_id) for worker_id in range(num_workers)]

    errors = [
        (worker_id, future.exception())
        for worker_id, future in enumerate(futures)
        if future.exception() is not None
    ]
    if not errors:
        return

    root = next(
        ((wid, exc) for wid, exc in errors if not isinstance(exc, threading.BrokenBarrierError)),
        errors[0],
    )
    worker_id, cause = root
    raise SimulationAbortedError(
        f"worker {worker_id} failed: {cause!r}; simulation aborted"
    ) from cause
