"""Unit tests for Body and the force law."""

import math

import pytest

from nbodysim.core.body import Body, gravitational_pull


class TestGravitationalPull:
    """Tests for gravitational_pull."""

    def test_magnitude_and_direction(self):
        target = Body(0.0, 0.0, mass=2.0)
        source = Body(3.0, 4.0, mass=5.0)

        fx, fy = gravitational_pull(target, source, G=1.0)

        magnitude = 1.0 * 2.0 * 5.0 / 25.0
        assert fx == pytest.approx(magnitude * 3.0 / 5.0)
        assert fy == pytest.approx(magnitude * 4.0 / 5.0)

    def test_points_towards_source(self):
        target = Body(10.0, 10.0)
        source = Body(0.0, 10.0)
        fx, fy = gravitational_pull(target, source, G=1.0)
        assert fx < 0.0
        assert fy == 0.0

    def test_coincident_returns_none(self):
        a = Body(1.0, 1.0)
        b = Body(1.0, 1.0)
        assert gravitational_pull(a, b, G=1.0) is None

    def test_antisymmetric(self):
        a = Body(0.0, 0.0, mass=3.0)
        b = Body(7.0, -2.0, mass=11.0)
        fab = gravitational_pull(a, b, G=6.67e-11)
        fba = gravitational_pull(b, a, G=6.67e-11)
        assert fab[0] == pytest.approx(-fba[0])
        assert fab[1] == pytest.approx(-fba[1])


class TestBody:
    """Tests for Body state and operators."""

    def test_creation(self):
        body = Body(1.0, 2.0, 3.0, 4.0, mass=5.0)
        assert body.x == 1.0
        assert body.y == 2.0
        assert body.velocity.as_tuple() == (3.0, 4.0)
        assert body.force.as_tuple() == (0.0, 0.0)
        assert body.mass == 5.0
        assert body.degenerate_interactions == 0

    def test_momentum_and_kinetic_energy(self):
        body = Body(0.0, 0.0, 3.0, 4.0, mass=2.0)
        assert body.momentum == (6.0, 8.0)
        assert body.kinetic_energy == pytest.approx(25.0)

    def test_copy_is_independent(self):
        body = Body(1.0, 2.0, 3.0, 4.0, mass=5.0)
        body.apply_force(1.0, -1.0)
        clone = body.copy()

        assert clone is not body
        assert clone.force.as_tuple() == (1.0, -1.0)
        clone.position.set(0.0, 0.0)
        assert body.position.as_tuple() == (1.0, 2.0)

    def test_integrate_without_force(self):
        body = Body(0.0, 0.0, 2.0, -1.0, mass=1.0)
        body.integrate(dt=0.5)
        assert body.position.as_tuple() == (1.0, -0.5)
        assert body.velocity.as_tuple() == (2.0, -1.0)

    def test_integrate_uses_mean_velocity(self):
        body = Body(0.0, 0.0, 1.0, 0.0, mass=2.0)
        body.apply_force(4.0, 0.0)  # a = 2

        body.integrate(dt=1.0)

        assert body.velocity.x == pytest.approx(3.0)
        assert body.position.x == pytest.approx(2.0)  # (1 + 3) / 2
        assert body.force.as_tuple() == (0.0, 0.0)

    def test_apply_force_accumulates(self):
        body = Body(0.0, 0.0)
        body.apply_force(1.0, 2.0)
        body.apply_force(0.5, -3.0)
        assert body.force.as_tuple() == (1.5, -1.0)

    def test_merge_mass(self):
        group = Body(0.0, 0.0, mass=1.0)
        group.merge_mass(Body(4.0, 8.0, mass=3.0))
        assert group.mass == 4.0
        assert group.position.as_tuple() == (3.0, 6.0)

    def test_merge_mass_order_independent(self):
        parts = [Body(1.0, 2.0, mass=2.0), Body(-3.0, 5.0, mass=7.0), Body(4.0, 0.0, mass=1.0)]

        forward = parts[0].copy()
        for b in parts[1:]:
            forward.merge_mass(b)
        backward = parts[2].copy()
        for b in (parts[1], parts[0]):
            backward.merge_mass(b)

        assert forward.mass == backward.mass
        assert forward.x == pytest.approx(backward.x)
        assert forward.y == pytest.approx(backward.y)

    def test_accumulate_force(self):
        body = Body(0.0, 0.0, mass=1.0)
        assert body.accumulate_force(Body(2.0, 0.0, mass=4.0), G=1.0)
        assert body.force.x == pytest.approx(1.0)
        assert body.force.y == 0.0

    def test_accumulate_force_zero_distance_is_skipped(self):
        body = Body(5.0, 5.0)
        other = Body(5.0, 5.0)

        assert not body.accumulate_force(other, G=1.0)

        assert body.force.as_tuple() == (0.0, 0.0)
        assert body.degenerate_interactions == 1
        assert all(math.isfinite(c) for c in body.force.as_tuple())

    def test_repr(self):
        assert repr(Body(1.0, 2.0, mass=3.0)).startswith("Body(x=1.0, y=2.0")
