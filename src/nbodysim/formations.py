"""
Initial conditions: generate the body list a simulation starts from.

- random_field: bodies scattered uniformly over [0, 2R)² with small random
  velocities
- ring_formation: one massive body at rest at (R, R) and the rest on a
  ring around it, moving tangentially
"""

from __future__ import annotations
import math

import numpy as np

from nbodysim.core.body import Body
from nbodysim.core.settings import Settings

RANDOM_SPEED = 12.5  # Velocity components drawn from [-12.5, 12.5)
RING_CENTER_MASS = 1e18
RING_INNER = 0.6  # Ring radius range, as a fraction of space_radius
RING_OUTER = 0.8
RING_SPEED = 10.0


def random_field(
    settings: Settings,
    rng: np.random.Generator | None = None,
    n_bodies: int | None = None,
) -> list[Body]:
    """
    Bodies with uniform random positions and velocities.

    Args:
        settings: Supplies space_radius, mass and (by default) num_bodies
        rng: Random generator (fresh unseeded generator if None)
        n_bodies: Override settings.num_bodies

    Returns:
        List of bodies, all of mass settings.mass
    """
    if rng is None:
        rng = np.random.default_rng()
    if n_bodies is None:
        n_bodies = settings.num_bodies

    extent = settings.space_radius * 2.0
    positions = rng.random((n_bodies, 2)) * extent
    velocities = rng.random((n_bodies, 2)) * (2 * RANDOM_SPEED) - RANDOM_SPEED

    return [
        Body(x, y, vx, vy, settings.mass)
        for (x, y), (vx, vy) in zip(positions.tolist(), velocities.tolist())
    ]


def ring_formation(
    settings: Settings,
    rng: np.random.Generator | None = None,
    n_bodies: int | None = None,
    center_mass: float = RING_CENTER_MASS,
) -> list[Body]:
    """
    A massive central body with a ring of lighter bodies around it.

    Body 0 sits at rest at (R, R). Every other body is placed at a random
    angle and a radius in [0.6R, 0.8R), with velocity RING_SPEED along the
    clockwise tangent.

    Returns:
        List of bodies; index 0 is the central mass
    """
    if rng is None:
        rng = np.random.default_rng()
    if n_bodies is None:
        n_bodies = settings.num_bodies

    r = settings.space_radius
    bodies = [Body(r, r, 0.0, 0.0, center_mass)]

    for _ in range(n_bodies - 1):
        angle = rng.random() * 2.0 * math.pi
        ux, uy = math.cos(angle), math.sin(angle)
        distance = r * RING_INNER + (r * RING_OUTER - r * RING_INNER) * rng.random()

        # Orthogonal to the radial unit vector
        vx, vy = uy * RING_SPEED, -ux * RING_SPEED
        bodies.append(Body(ux * distance + r, uy * distance + r, vx, vy, settings.mass))

    return bodies


def generate_bodies(
    settings: Settings,
    rng: np.random.Generator | None = None,
) -> list[Body]:
    """Ring formation if settings.ring is set, random field otherwise."""
    if settings.ring:
        return ring_formation(settings, rng)
    return random_field(settings, rng)
