"""
Settings: the read-only configuration record shared by every component.

Settings are constructed once per run and passed explicitly to whatever
needs them. Construction validates every field, so a Settings instance
that exists is always usable by the core.
"""

from __future__ import annotations
from dataclasses import dataclass, replace

from nbodysim.core.errors import ConfigurationError


# Ceilings enforced at the boundary
MAX_NUM_BODIES = 500
MAX_NUM_STEPS = 10_000_000
MAX_NUM_WORKERS = 16

# Defaults
DEFAULT_THETA = 0.5
DEFAULT_DT = 1.0
DEFAULT_G = 6.67e-11
DEFAULT_MASS = 100.0
DEFAULT_SPACE_RADIUS = 1_000_000.0
DEFAULT_BOUNDS_PADDING = 100.0  # Keeps bodies on the bounding edge inside the root quadrant


@dataclass(frozen=True)
class Settings:
    """Configuration for a simulation run."""

    num_bodies: int = MAX_NUM_BODIES
    num_steps: int = 1000
    theta: float = DEFAULT_THETA  # Barnes-Hut threshold: 0 = exact, higher = coarser
    num_workers: int = 1
    dt: float = DEFAULT_DT  # Time step
    G: float = DEFAULT_G  # Gravitational constant
    mass: float = DEFAULT_MASS  # Default body mass
    space_radius: float = DEFAULT_SPACE_RADIUS  # Bodies are generated in [0, 2R)²
    gui: bool = False
    ring: bool = False  # Ring formation instead of a uniform random field
    bounds_padding: float = DEFAULT_BOUNDS_PADDING

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Reject settings the core cannot run with.

        Raises:
            ConfigurationError: naming the first offending field
        """
        if not 0 < self.num_bodies <= MAX_NUM_BODIES:
            raise ConfigurationError(
                f"num_bodies must be in [1, {MAX_NUM_BODIES}], got {self.num_bodies}"
            )
        if not 0 < self.num_steps <= MAX_NUM_STEPS:
            raise ConfigurationError(
                f"num_steps must be in [1, {MAX_NUM_STEPS}], got {self.num_steps}"
            )
        if not 0 < self.num_workers <= MAX_NUM_WORKERS:
            raise ConfigurationError(
                f"num_workers must be in [1, {MAX_NUM_WORKERS}], got {self.num_workers}"
            )
        if not self.theta >= 0.0:
            raise ConfigurationError(f"theta must be >= 0, got {self.theta}")
        for name in ("dt", "G", "mass", "space_radius"):
            value = getattr(self, name)
            if not value > 0.0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        if not self.bounds_padding > 0.0:
            raise ConfigurationError(
                f"bounds_padding must be positive, got {self.bounds_padding}"
            )

    def with_overrides(self, **changes) -> Settings:
        """Return a validated copy with some fields replaced."""
        return replace(self, **changes)

    def describe(self) -> str:
        """Multi-line summary printed at start-up."""
        lines = [
            f"\t- num_bodies={self.num_bodies}",
            f"\t- num_steps={self.num_steps}",
            f"\t- theta={self.theta}",
            f"\t- num_workers={self.num_workers}",
            f"\t- gui={self.gui}",
            f"\t- ring={self.ring}",
            f"\t- dt={self.dt}",
            f"\t- G={self.G}",
            f"\t- mass={self.mass}",
            f"\t- space_radius={self.space_radius}",
        ]
        return ",\n".join(lines)
