"""
QuadTree: recursive spatial index for Barnes-Hut force approximation.

Each node covers a Quadrant and is either:
- external: no children, holding zero or one body (more only at
  MAX_TREE_DEPTH, see below)
- internal: exactly four children (NW, NE, SW, SE) and a group body whose
  mass is the total mass of the subtree and whose position is its centre
  of mass

A node moves Empty → LeafWithBody → Internal as bodies arrive, and only a
reset returns it to Empty. The whole tree is rebuilt every step.

A body goes to the child on its side of the node's centre: west if
x < cx, north if y < cy. This is the half-open rule of Quadrant, decided
against one pair of numbers, so every body lands in exactly one child.

Force evaluation walks the tree from the root. An internal node whose width
s and distance d from the body satisfy s/d < θ is treated as a single point
mass at its group body; otherwise its children are visited. θ = 0 always
opens every node, reducing to exact pairwise summation.

Usage:
    tree = QuadTree()
    tree.reset(bounding_quadrant(bodies, padding=100.0), bodies)
    tree.populate(bodies)
    for body in bodies:
        tree.calculate_force(body, theta=0.5, G=6.67e-11)
"""

from __future__ import annotations
import logging
import math
from typing import Iterable, Iterator, Sequence

from nbodysim.core.body import Body
from nbodysim.core.errors import QuadTreeError
from nbodysim.core.quadrant import Quadrant

logger = logging.getLogger(__name__)

# Leaves at this depth stop splitting and keep every further body in a
# bucket. Coincident bodies (and bodies closer than radius / 2**96) end up
# there instead of splitting forever.
MAX_TREE_DEPTH = 96


class QuadTree:
    """A node of the Barnes-Hut quadtree (the root is also the tree)."""

    __slots__ = (
        "quadrant",
        "depth",
        "north_west",
        "north_east",
        "south_west",
        "south_east",
        "body",
        "bucket",
        "group_body",
    )

    def __init__(self, quadrant: Quadrant | None = None, depth: int = 0):
        self.quadrant = quadrant
        self.depth = depth
        self.north_west: QuadTree | None = None
        self.north_east: QuadTree | None = None
        self.south_west: QuadTree | None = None
        self.south_east: QuadTree | None = None
        self.body: Body | None = None  # Not owned: belongs to the simulation's body list
        self.bucket: list[Body] | None = None  # Bodies sharing a leaf at MAX_TREE_DEPTH
        self.group_body: Body | None = None  # Owned aggregate

    # ─────────────────────────────────────────────────────────────────
    # Structure
    # ─────────────────────────────────────────────────────────────────

    @property
    def is_internal(self) -> bool:
        """True if the node has children (all four exist or none do)."""
        return self.north_west is not None

    @property
    def is_external(self) -> bool:
        return self.north_west is None

    @property
    def is_empty(self) -> bool:
        return self.north_west is None and self.body is None

    def children(self) -> tuple[QuadTree, QuadTree, QuadTree, QuadTree]:
        """
        The four children in NW, NE, SW, SE order.

        The work-distribution layer hands one top-level child to each idle
        worker.

        Raises:
            QuadTreeError: if the node is external
        """
        if self.north_west is None:
            raise QuadTreeError("external node has no children")
        return self.north_west, self.north_east, self.south_west, self.south_east

    @property
    def total_mass(self) -> float:
        """Mass of everything in this subtree."""
        if self.group_body is not None:
            return self.group_body.mass
        if self.body is not None:
            return self.body.mass
        return 0.0

    @property
    def center_of_mass(self) -> tuple[float, float] | None:
        """Centre of mass of the subtree, or None if it is empty."""
        source = self.group_body if self.group_body is not None else self.body
        if source is None:
            return None
        return source.position.x, source.position.y

    def _split(self) -> None:
        nw, ne, sw, se = self.quadrant.subdivide()
        depth = self.depth + 1
        self.north_west = QuadTree(nw, depth)
        self.north_east = QuadTree(ne, depth)
        self.south_west = QuadTree(sw, depth)
        self.south_east = QuadTree(se, depth)

    def child_index(self, body: Body) -> int:
        """
        Index into children() of the child on the body's side of the centre.

        0=NW, 1=NE, 2=SW, 3=SE
        """
        east = body.position.x >= self.quadrant.x
        south = body.position.y >= self.quadrant.y
        return (2 if south else 0) + (1 if east else 0)

    # ─────────────────────────────────────────────────────────────────
    # Building
    # ─────────────────────────────────────────────────────────────────

    def reset(self, quadrant: Quadrant, bodies: Sequence[Body]) -> None:
        """
        Discard the tree and prepare a fresh root over `quadrant`.

        The group body becomes the centre of mass of all `bodies`, folded in
        sequence order. Four empty top-level children are created so that
        workers can populate them independently; populate through
        `populate_child` (or `populate`), not through `insert` on this node,
        which would count every mass twice.

        Raises:
            QuadTreeError: if `bodies` is empty
        """
        if not bodies:
            raise QuadTreeError("cannot reset a quadtree with no bodies")

        self.quadrant = quadrant
        self.north_west = self.north_east = self.south_west = self.south_east = None
        self.body = None
        self.bucket = None

        first = bodies[0]
        group = Body(first.position.x, first.position.y, 0.0, 0.0, first.mass)
        for body in bodies[1:]:
            group.merge_mass(body)
        self.group_body = group

        self._split()

    def insert(self, body: Body) -> None:
        """
        Insert one body into this subtree.

        In priority order:
        1. Outside this node's quadrant: ignored.
        2. Empty leaf: the body is held directly.
        3. Internal node: merged into the group body, then passed to the
           child on its side of the centre.
        4. Leaf already holding a body: split into four children, push both
           bodies down, and aggregate the pair. At MAX_TREE_DEPTH the leaf
           keeps the new body in its bucket instead of splitting.

        Raises:
            QuadTreeError: if the node has never been given a boundary
        """
        if self.quadrant is None:
            raise QuadTreeError("quadtree has no boundary; call reset() first")

        if not self.quadrant.contains_body(body):
            return
        self._place(body)

    def _place(self, body: Body) -> None:
        if self.north_west is None and self.body is None:
            self.body = body
        elif self.north_west is not None:
            self.group_body.merge_mass(body)
            self.children()[self.child_index(body)]._place(body)
        elif self.depth >= MAX_TREE_DEPTH:
            logger.debug(
                "Body at (%r, %r) shares a leaf at depth %d",
                body.position.x, body.position.y, self.depth,
            )
            if self.bucket is None:
                held = self.body
                self.bucket = []
                self.group_body = Body(held.position.x, held.position.y, 0.0, 0.0, held.mass)
            self.bucket.append(body)
            self.group_body.merge_mass(body)
        else:
            held = self.body
            self._split()
            self.body = None
            children = self.children()
            children[self.child_index(held)]._place(held)
            children[self.child_index(body)]._place(body)

            group = Body(held.position.x, held.position.y, 0.0, 0.0, held.mass)
            group.merge_mass(body)
            self.group_body = group

    def insert_all(self, bodies: Iterable[Body]) -> None:
        """Insert every body in iteration order."""
        for body in bodies:
            self.insert(body)

    def populate_child(self, index: int, bodies: Sequence[Body]) -> None:
        """
        Fill one top-level child after `reset` with the bodies on its side.

        Bodies outside this node's quadrant are skipped. The parallel
        population phase calls this once per claimed quadrant.
        """
        child = self.children()[index]
        quadrant = self.quadrant
        for body in bodies:
            if quadrant.contains_body(body) and self.child_index(body) == index:
                child._place(body)

    def populate(self, bodies: Sequence[Body]) -> None:
        """
        Fill the four top-level children after `reset`, one after another.

        This is the single-threaded equivalent of the parallel population
        phase.
        """
        for index in range(4):
            self.populate_child(index, bodies)

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    def calculate_force(self, body: Body, theta: float, G: float) -> None:
        """
        Accumulate into `body` the approximated pull of this subtree.

        `body` itself never contributes. Read-only on the tree, so any number
        of threads may query concurrently once building has finished.
        """
        if self.north_west is None:
            held = self.body
            if held is not None and held is not body:
                body.accumulate_force(held, G)
            if self.bucket is not None:
                for other in self.bucket:
                    if other is not body:
                        body.accumulate_force(other, G)
            return

        group = self.group_body
        s = self.quadrant.width
        dx = body.position.x - group.position.x
        dy = body.position.y - group.position.y
        d = math.sqrt(dx * dx + dy * dy)

        if d > 0.0 and s / d < theta:
            body.accumulate_force(group, G)
        else:
            self.north_west.calculate_force(body, theta, G)
            self.north_east.calculate_force(body, theta, G)
            self.south_west.calculate_force(body, theta, G)
            self.south_east.calculate_force(body, theta, G)

    def calculate_forces(self, bodies: Iterable[Body], theta: float, G: float) -> None:
        for body in bodies:
            self.calculate_force(body, theta, G)

    def iter_nodes(self) -> Iterator[QuadTree]:
        """Pre-order traversal of this subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.north_west is not None:
                stack.extend(
                    (node.south_east, node.south_west, node.north_east, node.north_west)
                )

    def iter_bodies(self) -> Iterator[Body]:
        """Bodies held by the leaves of this subtree."""
        for node in self.iter_nodes():
            if node.north_west is None and node.body is not None:
                yield node.body
                if node.bucket is not None:
                    yield from node.bucket

    def count_bodies(self) -> int:
        return sum(1 for _ in self.iter_bodies())

    def max_depth(self) -> int:
        """Depth of the deepest node, relative to the tree root."""
        return max(node.depth for node in self.iter_nodes())
