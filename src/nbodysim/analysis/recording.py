"""
TrajectoryRecorder: an on_step callback that keeps a history of positions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from nbodysim.core.body import Body
from nbodysim.core.errors import ConfigurationError


@dataclass
class TrajectoryRecorder:
    """
    Records body positions every `every` steps.

    Pass the recorder as a scheduler's on_step callback. Call `record_initial`
    first to include the starting positions.
    """

    every: int = 1
    steps: list[int] = field(default_factory=list)
    frames: list[np.ndarray] = field(default_factory=list)

    def __post_init__(self):
        if self.every < 1:
            raise ConfigurationError(f"every must be >= 1, got {self.every}")

    def record_initial(self, bodies: Sequence[Body]) -> None:
        self._record(-1, bodies)

    def __call__(self, step: int, bodies: Sequence[Body]) -> None:
        if step % self.every == 0:
            self._record(step, bodies)

    def _record(self, step: int, bodies: Sequence[Body]) -> None:
        self.steps.append(step)
        self.frames.append(
            np.array([(b.position.x, b.position.y) for b in bodies], dtype=np.float64)
        )

    def __len__(self) -> int:
        return len(self.frames)

    def positions(self) -> np.ndarray:
        """
        Recorded positions.

        Returns:
            Array [n_frames, n_bodies, 2]
        """
        if not self.frames:
            return np.empty((0, 0, 2))
        return np.stack(self.frames)

    def trajectory(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        """(x_array, y_array) of one body over the recorded frames."""
        traj = self.positions()
        if traj.size == 0:
            return np.array([]), np.array([])
        return traj[:, index, 0], traj[:, index, 1]
