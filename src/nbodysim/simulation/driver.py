"""
SimulationDriver: owns the body list, picks a scheduler and runs it.

The driver is the seam between the core and its collaborators:
- initial conditions come in as a body list
- a visualization or recording callback goes out as on_step
- benchmark numbers go out through `timer` and `steps_completed`
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Literal, Protocol

from nbodysim.core.body import Body
from nbodysim.core.errors import ConfigurationError
from nbodysim.core.schedule import StepCallback, check_bodies
from nbodysim.core.sequential import SequentialBarnesHut, SequentialBruteForce
from nbodysim.core.settings import Settings
from nbodysim.parallel.barnes_hut import ParallelStepCoordinator
from nbodysim.parallel.brute_force import BruteForceStepCoordinator
from nbodysim.simulation.timer import Timer

logger = logging.getLogger(__name__)

Method = Literal["barnes-hut", "brute-force"]
METHODS: tuple[str, ...] = ("barnes-hut", "brute-force")


class Scheduler(Protocol):
    """What the driver needs from a scheduler."""

    current_step: int

    def run(self, n_steps: int | None = None) -> dict:
        ...


_SCHEDULERS = {
    ("barnes-hut", False): SequentialBarnesHut,
    ("barnes-hut", True): ParallelStepCoordinator,
    ("brute-force", False): SequentialBruteForce,
    ("brute-force", True): BruteForceStepCoordinator,
}


def create_scheduler(
    bodies: list[Body],
    settings: Settings,
    method: Method = "barnes-hut",
    parallel: bool | None = None,
    on_step: StepCallback | None = None,
) -> Scheduler:
    """
    Factory for the scheduler matching a method and threading mode.

    Args:
        parallel: None selects the parallel coordinator iff
                  settings.num_workers > 1

    Raises:
        ConfigurationError: for an unknown method
    """
    if method not in METHODS:
        raise ConfigurationError(f"unknown method {method!r}; expected one of {METHODS}")
    if parallel is None:
        parallel = settings.num_workers > 1
    return _SCHEDULERS[(method, parallel)](bodies, settings, on_step=on_step)


@dataclass
class SimulationDriver:
    """
    Runs a configured simulation from start to finish.

    Usage:
        settings = Settings(num_bodies=100, num_steps=500, num_workers=4)
        driver = SimulationDriver(settings, generate_bodies(settings))
        stats = driver.run_steps()
        print(driver.timer.elapsed)
    """

    settings: Settings
    bodies: list[Body]
    method: Method = "barnes-hut"
    parallel: bool | None = None
    on_step: StepCallback | None = None

    timer: Timer = field(default_factory=Timer, init=False)
    scheduler: Scheduler = field(default=None, init=False, repr=False)

    def __post_init__(self):
        check_bodies(self.bodies)
        if len(self.bodies) != self.settings.num_bodies:
            logger.warning(
                "settings.num_bodies=%d but %d bodies were given; simulating the given bodies",
                self.settings.num_bodies, len(self.bodies),
            )
        self.scheduler = create_scheduler(
            self.bodies, self.settings, self.method, self.parallel, self.on_step
        )

    @property
    def steps_completed(self) -> int:
        return self.scheduler.current_step

    def run_steps(self, n_steps: int | None = None) -> dict:
        """
        Run n_steps (default: settings.num_steps) under the timer.

        Returns:
            The scheduler's statistics plus "elapsed" seconds

        Raises:
            SimulationAbortedError: if a parallel worker fails
        """
        self.timer.start()
        try:
            stats = self.scheduler.run(n_steps)
        finally:
            self.timer.stop()
        stats["elapsed"] = self.timer.elapsed
        return stats
