"""
Simulation harness: the driver that runs a scheduler end to end, and the
timer it reports through.
"""

from nbodysim.simulation.timer import Timer
from nbodysim.simulation.driver import (
    SimulationDriver,
    Scheduler,
    create_scheduler,
    METHODS,
)

__all__ = [
    "Timer",
    "SimulationDriver",
    "Scheduler",
    "create_scheduler",
    "METHODS",
]
