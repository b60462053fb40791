"""
Quadrant: an axis-aligned square region of the plane.

A quadrant with center (cx, cy) and half-width r covers the half-open
square [cx-r, cx+r) × [cy-r, cy+r). Half-open edges mean the four children
of a quadrant tile it exactly: a point on a shared edge belongs to exactly
one child.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from nbodysim.core.errors import QuadTreeError

if TYPE_CHECKING:
    from nbodysim.core.body import Body


@dataclass(frozen=True)
class Quadrant:
    """Square region with center (x, y) and half-width `radius`."""

    x: float
    y: float
    radius: float

    @property
    def width(self) -> float:
        """Full side length (2 × radius)."""
        return 2.0 * self.radius

    def contains(self, x: float, y: float) -> bool:
        """True if the point lies inside the half-open square."""
        r = self.radius
        return (
            self.x - r <= x < self.x + r
            and self.y - r <= y < self.y + r
        )

    def contains_body(self, body: "Body") -> bool:
        return self.contains(body.position.x, body.position.y)

    def subdivide(self) -> tuple[Quadrant, Quadrant, Quadrant, Quadrant]:
        """
        Quarter this region.

        Returns:
            (north_west, north_east, south_west, south_east); "north" is the
            lower-y half, matching screen coordinates
        """
        half = self.radius / 2.0
        return (
            Quadrant(self.x - half, self.y - half, half),
            Quadrant(self.x + half, self.y - half, half),
            Quadrant(self.x - half, self.y + half, half),
            Quadrant(self.x + half, self.y + half, half),
        )


def bounding_quadrant(bodies: Sequence["Body"], padding: float) -> Quadrant:
    """
    Square quadrant covering every body, padded by a fixed margin.

    The extent is taken over both axes together, so the square is centred on
    ((min+max)/2, (min+max)/2) where min and max range over all x and y
    coordinates. The padding keeps bodies exactly on the maximum edge inside
    the half-open region and gives coincident bodies a non-degenerate square.

    Raises:
        QuadTreeError: if `bodies` is empty
    """
    if not bodies:
        raise QuadTreeError("cannot bound an empty set of bodies")

    lo = float("inf")
    hi = float("-inf")
    for body in bodies:
        x, y = body.position.x, body.position.y
        lo = min(lo, x, y)
        hi = max(hi, x, y)

    center = (lo + hi) / 2.0
    radius = (hi - lo) / 2.0 + padding
    return Quadrant(center, center, radius)
