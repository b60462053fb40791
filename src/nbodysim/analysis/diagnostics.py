"""
Conservation and accuracy diagnostics.

None of this feeds back into the simulation. It is used to check a run:
- momentum and energy before/after a run (conservation)
- Barnes-Hut forces against brute-force forces (approximation error)
- minimum separation (how close the run came to a degenerate pair)
"""

from __future__ import annotations
from typing import Sequence

import numpy as np
from scipy.spatial.distance import pdist

from nbodysim.core.body import Body
from nbodysim.core.quadrant import bounding_quadrant
from nbodysim.core.quadtree import QuadTree
from nbodysim.core.schedule import pairwise_forces


def snapshot(bodies: Sequence[Body]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Copy body state into arrays.

    Returns:
        (positions [n, 2], velocities [n, 2], masses [n])
    """
    positions = np.array([(b.position.x, b.position.y) for b in bodies], dtype=np.float64)
    velocities = np.array([(b.velocity.x, b.velocity.y) for b in bodies], dtype=np.float64)
    masses = np.array([b.mass for b in bodies], dtype=np.float64)
    return positions, velocities, masses


def total_momentum(bodies: Sequence[Body]) -> np.ndarray:
    """Σ mᵢvᵢ as a 2-vector."""
    _, velocities, masses = snapshot(bodies)
    return (masses[:, np.newaxis] * velocities).sum(axis=0)


def center_of_mass(bodies: Sequence[Body]) -> np.ndarray:
    positions, _, masses = snapshot(bodies)
    return (masses[:, np.newaxis] * positions).sum(axis=0) / masses.sum()


def kinetic_energy(bodies: Sequence[Body]) -> float:
    _, velocities, masses = snapshot(bodies)
    return float(0.5 * np.sum(masses * np.sum(velocities ** 2, axis=1)))


def potential_energy(bodies: Sequence[Body], G: float) -> float:
    """
    Gravitational potential energy -Σ_{i<j} G·mᵢ·mⱼ / rᵢⱼ.

    Coincident pairs are left out, matching the force law's policy.
    """
    if len(bodies) < 2:
        return 0.0
    positions, _, masses = snapshot(bodies)
    distances = pdist(positions)
    # pdist's condensed order is the row-major upper triangle
    rows, cols = np.triu_indices(len(bodies), k=1)
    mass_products = masses[rows] * masses[cols]
    valid = distances > 0.0
    return float(-G * np.sum(mass_products[valid] / distances[valid]))


def total_energy(bodies: Sequence[Body], G: float) -> float:
    return kinetic_energy(bodies) + potential_energy(bodies, G)


def minimum_separation(bodies: Sequence[Body]) -> float:
    """Smallest distance between any two bodies (inf for fewer than two)."""
    if len(bodies) < 2:
        return float("inf")
    positions, _, _ = snapshot(bodies)
    return float(pdist(positions).min())


def brute_force_forces(bodies: Sequence[Body], G: float) -> np.ndarray:
    """
    Exact net force on every body, without touching the bodies.

    Returns:
        Array [n, 2]
    """
    forces = np.zeros((len(bodies), 2), dtype=np.float64)
    for i, j, pull in pairwise_forces(bodies, G):
        if pull is None:
            continue
        forces[i] += pull
        forces[j] -= pull
    return forces


def barnes_hut_forces(
    bodies: Sequence[Body],
    theta: float,
    G: float,
    padding: float = 100.0,
) -> np.ndarray:
    """
    Barnes-Hut net force on every body, without touching the bodies.

    The tree is built over the real bodies but queried with copies, so the
    bodies' accumulated forces are left as they were.

    Returns:
        Array [n, 2]
    """
    tree = QuadTree()
    tree.reset(bounding_quadrant(bodies, padding), bodies)
    tree.populate(bodies)

    forces = np.zeros((len(bodies), 2), dtype=np.float64)
    for i, body in enumerate(bodies):
        stand_in = _stand_in(body)
        tree.calculate_force(stand_in, theta, G)
        forces[i] = stand_in.force.x, stand_in.force.y
    return forces


def _stand_in(body: Body) -> Body:
    """
    A stand-in for `body` in force queries.

    The stand-in is a distinct object, so a leaf holding `body` would count as
    another body at zero distance. Those pairs are skipped by the force law,
    which is exactly the self-exclusion the real body would get.
    """
    return Body(body.position.x, body.position.y, 0.0, 0.0, body.mass)


def max_relative_force_error(reference: np.ndarray, approx: np.ndarray) -> float:
    """
    Largest |approx - reference| / |reference| over all bodies.

    Bodies with zero reference force are ignored.
    """
    ref_norm = np.linalg.norm(reference, axis=1)
    err_norm = np.linalg.norm(approx - reference, axis=1)
    mask = ref_norm > 0.0
    if not np.any(mask):
        return 0.0
    return float(np.max(err_norm[mask] / ref_norm[mask]))
