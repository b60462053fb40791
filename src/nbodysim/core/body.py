"""
Body: a point mass and the physics operators that act on it.

Three operators:
- integrate: advance velocity and position from the accumulated force
- merge_mass: fold another body into this one (for quadtree group bodies)
- accumulate_force: add the Newtonian pull of another body

Zero-distance pairs (a body against itself, or two coincident bodies)
contribute no force. They are counted on the target body in
`degenerate_interactions` so schedulers can report them, instead of
letting a non-finite force corrupt the rest of the run.
"""

from __future__ import annotations
import math

from nbodysim.core.vector import Vector2


def gravitational_pull(
    target: "Body",
    source: "Body",
    G: float,
) -> tuple[float, float] | None:
    """
    Newtonian force exerted by `source` on `target`.

    F = G·m_t·m_s / d², directed from target towards source.

    Returns:
        (fx, fy), or None when the two positions coincide
    """
    dir_x = source.position.x - target.position.x
    dir_y = source.position.y - target.position.y
    distance = math.sqrt(dir_x * dir_x + dir_y * dir_y)
    if distance == 0.0:
        return None

    magnitude = (G * target.mass * source.mass) / (distance * distance)
    return magnitude * dir_x / distance, magnitude * dir_y / distance


class Body:
    """
    A particle with position, velocity, accumulated force and mass.

    Bodies are compared by identity: two distinct bodies at the same
    position with the same mass are still different bodies.
    """

    __slots__ = ("position", "velocity", "force", "mass", "degenerate_interactions")

    def __init__(
        self,
        x: float,
        y: float,
        vx: float = 0.0,
        vy: float = 0.0,
        mass: float = 1.0,
    ):
        self.position = Vector2(float(x), float(y))
        self.velocity = Vector2(float(vx), float(vy))
        self.force = Vector2(0.0, 0.0)
        self.mass = float(mass)
        self.degenerate_interactions = 0

    def __repr__(self) -> str:
        return (
            f"Body(x={self.position.x!r}, y={self.position.y!r}, "
            f"vx={self.velocity.x!r}, vy={self.velocity.y!r}, mass={self.mass!r})"
        )

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def momentum(self) -> tuple[float, float]:
        return self.mass * self.velocity.x, self.mass * self.velocity.y

    @property
    def kinetic_energy(self) -> float:
        vx, vy = self.velocity.x, self.velocity.y
        return 0.5 * self.mass * (vx * vx + vy * vy)

    def copy(self) -> Body:
        """Independent copy including the accumulated force."""
        clone = Body(
            self.position.x, self.position.y,
            self.velocity.x, self.velocity.y,
            self.mass,
        )
        clone.force.set(self.force.x, self.force.y)
        return clone

    def integrate(self, dt: float) -> None:
        """
        Move the body under its accumulated force, then clear the force.

        v' = v + a·dt
        p' = p + (v + a·dt/2)·dt

        The position update uses the mean of the old and new velocity.
        Mass must be positive.
        """
        dvx = (self.force.x / self.mass) * dt
        dvy = (self.force.y / self.mass) * dt
        dpx = (self.velocity.x + dvx / 2.0) * dt
        dpy = (self.velocity.y + dvy / 2.0) * dt

        self.velocity.set(self.velocity.x + dvx, self.velocity.y + dvy)
        self.position.set(self.position.x + dpx, self.position.y + dpy)
        self.force.set(0.0, 0.0)

    def apply_force(self, fx: float, fy: float) -> None:
        """Add an externally computed force."""
        self.force.set(self.force.x + fx, self.force.y + fy)

    def merge_mass(self, other: Body) -> None:
        """
        Absorb `other` into this body: centroid weighted by mass, summed mass.

        Must be applied exactly once per contributing body.
        """
        total = self.mass + other.mass
        center_x = (self.position.x * self.mass + other.position.x * other.mass) / total
        center_y = (self.position.y * self.mass + other.position.y * other.mass) / total
        self.mass = total
        self.position.set(center_x, center_y)

    def accumulate_force(self, source: Body, G: float) -> bool:
        """
        Add the gravitational pull of `source` into this body's force.

        Returns:
            False if the pair was skipped because the distance is zero
        """
        pull = gravitational_pull(self, source, G)
        if pull is None:
            self.degenerate_interactions += 1
            return False
        self.apply_force(*pull)
        return True
