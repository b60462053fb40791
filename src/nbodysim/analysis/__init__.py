"""
Analysis layer: derived quantities for checking a run.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.

- snapshot / total_momentum / total_energy: conservation checks
- brute_force_forces / barnes_hut_forces: approximation error for a given θ
- TrajectoryRecorder: on_step callback collecting positions for plotting
"""

from nbodysim.analysis.diagnostics import (
    snapshot,
    total_momentum,
    center_of_mass,
    kinetic_energy,
    potential_energy,
    total_energy,
    minimum_separation,
    brute_force_forces,
    barnes_hut_forces,
    max_relative_force_error,
)
from nbodysim.analysis.recording import TrajectoryRecorder

__all__ = [
    "snapshot",
    "total_momentum",
    "center_of_mass",
    "kinetic_energy",
    "potential_energy",
    "total_energy",
    "minimum_separation",
    "brute_force_forces",
    "barnes_hut_forces",
    "max_relative_force_error",
    "TrajectoryRecorder",
]
