"""
Parallel coordinators: the same steps as the sequential schedulers, split
across a fixed pool of worker threads that meet at a cyclic barrier.

- ParallelStepCoordinator: Barnes-Hut, four phases per step
- BruteForceStepCoordinator: exact O(N²), two phases per step
"""

from nbodysim.parallel.sync import AtomicCounter, run_workers
from nbodysim.parallel.barnes_hut import ParallelStepCoordinator
from nbodysim.parallel.brute_force import BruteForceStepCoordinator

__all__ = [
    "AtomicCounter",
    "run_workers",
    "ParallelStepCoordinator",
    "BruteForceStepCoordinator",
]
