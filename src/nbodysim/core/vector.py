"""
Vector2: the 2D value type embedded in every body and quadrant.

Components are mutable so a body can update its position, velocity and
force in place every step without allocating.
"""

from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass
class Vector2:
    """A 2D vector (x, y)."""

    x: float = 0.0
    y: float = 0.0

    def get_x(self) -> float:
        return self.x

    def get_y(self) -> float:
        return self.y

    def set_x(self, x: float) -> None:
        self.x = x

    def set_y(self, y: float) -> None:
        self.y = y

    def set(self, x: float, y: float) -> None:
        """Overwrite both components."""
        self.x = x
        self.y = y

    def copy(self) -> Vector2:
        return Vector2(self.x, self.y)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def as_tuple(self) -> tuple[float, float]:
        return self.x, self.y

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__
