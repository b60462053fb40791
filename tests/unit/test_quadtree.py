"""Unit tests for QuadTree."""

import numpy as np
import pytest

from nbodysim.analysis.diagnostics import barnes_hut_forces, brute_force_forces
from nbodysim.core.body import Body, gravitational_pull
from nbodysim.core.errors import QuadTreeError
from nbodysim.core.quadrant import Quadrant, bounding_quadrant
from nbodysim.core.quadtree import MAX_TREE_DEPTH, QuadTree


def build(bodies, padding=100.0):
    tree = QuadTree()
    tree.reset(bounding_quadrant(bodies, padding), bodies)
    tree.populate(bodies)
    return tree


class TestQuadTreeStructure:
    """Tests for node states and insertion."""

    def test_new_node_is_empty(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        assert tree.is_empty
        assert tree.is_external
        assert not tree.is_internal
        assert tree.total_mass == 0.0
        assert tree.center_of_mass is None

    def test_insert_without_boundary_raises(self):
        with pytest.raises(QuadTreeError):
            QuadTree().insert(Body(0.0, 0.0))

    def test_children_of_external_raises(self):
        with pytest.raises(QuadTreeError):
            QuadTree(Quadrant(0.0, 0.0, 10.0)).children()

    def test_first_insert_is_held(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        body = Body(1.0, 1.0, mass=3.0)
        tree.insert(body)

        assert tree.body is body
        assert tree.is_external
        assert tree.total_mass == 3.0

    def test_second_insert_splits(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        a = Body(1.0, 1.0, mass=1.0)
        b = Body(-1.0, -1.0, mass=3.0)
        tree.insert(a)
        tree.insert(b)

        assert tree.is_internal
        assert tree.body is None
        assert tree.north_west.body is b
        assert tree.south_east.body is a
        assert tree.total_mass == 4.0
        cx, cy = tree.center_of_mass
        assert cx == pytest.approx(-0.5)
        assert cy == pytest.approx(-0.5)

    def test_children_depth(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        tree.insert(Body(1.0, 1.0))
        tree.insert(Body(-1.0, -1.0))
        assert all(child.depth == 1 for child in tree.children())

    def test_outside_body_is_ignored(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        tree.insert(Body(10.0, 0.0))  # Upper edge is excluded
        tree.insert(Body(50.0, 50.0))
        assert tree.is_empty

    def test_internal_insert_updates_group(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        tree.insert_all([Body(1.0, 1.0), Body(-1.0, -1.0), Body(5.0, -5.0)])
        assert tree.total_mass == 3.0
        assert tree.count_bodies() == 3

    def test_coincident_bodies_share_leaf_at_max_depth(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 100.0))
        a = Body(0.0, 0.0, mass=2.0)
        b = Body(0.0, 0.0, mass=3.0)
        tree.insert(a)
        tree.insert(b)

        assert tree.max_depth() == MAX_TREE_DEPTH
        assert tree.count_bodies() == 2
        assert tree.total_mass == 5.0

        leaf = next(node for node in tree.iter_nodes() if node.body is a)
        assert leaf.depth == MAX_TREE_DEPTH
        assert leaf.bucket == [b]
        assert leaf.total_mass == 5.0

    def test_nearly_coincident_bodies_are_kept(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 100.0))
        tree.insert_all([Body(0.0, 0.0), Body(1e-30, 0.0), Body(10.0, 0.0)])

        assert tree.count_bodies() == 3
        assert tree.total_mass == 3.0

    def test_aggregates_match_stored_bodies(self):
        """Each node's mass is the mass of the bodies stored below it."""
        bodies = [Body(0.0, 0.0, mass=1e6), Body(0.0, 0.0, mass=1e6), Body(10.0, 0.0, mass=1.0)]
        tree = build(bodies)

        for node in tree.iter_nodes():
            stored = sum(b.mass for b in node.iter_bodies())
            assert node.total_mass == pytest.approx(stored)

    def test_child_index(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        assert tree.child_index(Body(-1.0, -1.0)) == 0
        assert tree.child_index(Body(0.0, -1.0)) == 1
        assert tree.child_index(Body(-1.0, 0.0)) == 2
        assert tree.child_index(Body(0.0, 0.0)) == 3

    def test_iter_nodes_is_preorder(self):
        tree = QuadTree(Quadrant(0.0, 0.0, 10.0))
        tree.insert_all([Body(1.0, 1.0), Body(-1.0, -1.0)])
        nodes = list(tree.iter_nodes())

        assert nodes[0] is tree
        assert nodes[1:] == list(tree.children())


class TestQuadTreeAggregate:
    """Tests for reset, populate and the group body."""

    def test_reset_empty_raises(self):
        with pytest.raises(QuadTreeError):
            QuadTree().reset(Quadrant(0.0, 0.0, 1.0), [])

    def test_reset_creates_children(self):
        bodies = [Body(0.0, 0.0), Body(5.0, 5.0)]
        tree = QuadTree()
        tree.reset(bounding_quadrant(bodies, 100.0), bodies)

        assert tree.is_internal
        assert all(child.is_empty for child in tree.children())
        assert tree.total_mass == 2.0

    def test_root_aggregate_matches_bodies(self, field_bodies):
        tree = build(field_bodies)

        masses = np.array([b.mass for b in field_bodies])
        positions = np.array([(b.x, b.y) for b in field_bodies])
        expected = (masses[:, None] * positions).sum(axis=0) / masses.sum()

        assert tree.total_mass == pytest.approx(masses.sum())
        assert tree.center_of_mass == pytest.approx(tuple(expected))

    def test_children_partition_bodies(self, field_bodies):
        tree = build(field_bodies)

        assert tree.count_bodies() == len(field_bodies)
        assert sum(child.total_mass for child in tree.children()) == pytest.approx(
            tree.total_mass
        )
        assert {id(b) for b in tree.iter_bodies()} == {id(b) for b in field_bodies}

    def test_aggregate_independent_of_order(self, field_bodies, rng):
        quadrant = bounding_quadrant(field_bodies, 100.0)
        reference = QuadTree(quadrant)
        reference.insert_all(field_bodies)

        for _ in range(3):
            order = rng.permutation(len(field_bodies))
            tree = QuadTree(quadrant)
            tree.insert_all([field_bodies[i] for i in order])

            assert tree.total_mass == pytest.approx(reference.total_mass)
            assert tree.center_of_mass == pytest.approx(reference.center_of_mass)
            assert tree.count_bodies() == len(field_bodies)


class TestQuadTreeForces:
    """Tests for calculate_force."""

    def test_single_body_feels_nothing(self):
        body = Body(3.0, 3.0)
        tree = build([body])
        tree.calculate_force(body, theta=0.5, G=1.0)

        assert body.force.as_tuple() == (0.0, 0.0)
        assert body.degenerate_interactions == 0

    def test_two_bodies_exact(self, two_body_system):
        heavy, light = two_body_system
        expected = gravitational_pull(heavy, light, G=6.67e-11)

        tree = build(two_body_system)
        tree.calculate_forces(two_body_system, theta=0.5, G=6.67e-11)

        assert heavy.force.as_tuple() == pytest.approx(expected)
        assert light.force.as_tuple() == pytest.approx((-expected[0], -expected[1]))

    def test_theta_zero_matches_brute_force(self, field_bodies):
        exact = brute_force_forces(field_bodies, G=6.67e-11)
        approx = barnes_hut_forces(field_bodies, theta=0.0, G=6.67e-11)
        np.testing.assert_allclose(approx, exact, rtol=1e-9, atol=0.0)

    def test_distant_cluster_uses_group(self):
        cluster = [
            Body(0.0, 0.0, mass=5.0),
            Body(1.0, 0.0, mass=3.0),
            Body(0.0, 1.0, mass=2.0),
            Body(1.0, 1.0, mass=4.0),
        ]
        far = Body(1000.0, 0.0, mass=1.0)
        bodies = cluster + [far]

        tree = build(bodies)
        # Root spans [-100, 1100) on both axes; the cluster sits in NW of NW
        group_node = tree.north_west.north_west
        assert group_node.quadrant.width == 300.0
        assert group_node.count_bodies() == 4

        tree.calculate_force(far, theta=0.5, G=1.0)

        # One pull from the cluster aggregate, not four from its members
        assert far.force.as_tuple() == gravitational_pull(far, group_node.group_body, G=1.0)
        exact = brute_force_forces(bodies, G=1.0)[-1]
        assert far.force.x == pytest.approx(exact[0], rel=1e-4)
        assert far.force.x != exact[0]

    def test_theta_zero_opens_distant_cluster(self):
        cluster = [Body(0.0, 0.0, mass=5.0), Body(1.0, 0.0, mass=3.0), Body(0.0, 1.0, mass=2.0)]
        far = Body(1000.0, 0.0, mass=1.0)
        tree = build(cluster + [far])

        tree.calculate_force(far, theta=0.0, G=1.0)

        fx = fy = 0.0
        for member in cluster:
            px, py = gravitational_pull(far, member, G=1.0)
            fx += px
            fy += py
        assert far.force.x == pytest.approx(fx, rel=1e-12)
        assert far.force.y == pytest.approx(fy, rel=1e-12)

    def test_query_does_not_modify_tree(self, field_bodies):
        tree = build(field_bodies)
        mass_before = tree.total_mass
        nodes_before = sum(1 for _ in tree.iter_nodes())

        tree.calculate_forces(field_bodies, theta=0.5, G=6.67e-11)

        assert tree.total_mass == mass_before
        assert sum(1 for _ in tree.iter_nodes()) == nodes_before
