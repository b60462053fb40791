"""
Core engine primitives.

This layer knows nothing about threads, plotting or the command line.
It only knows:
- Bodies and the Newtonian force law between them
- Quadrants and the quadtree built over them
- Settings, validated once and passed explicitly
- Sequential schedulers that advance a body list step by step

Two sequential schedulers are available:
- SequentialBarnesHut: quadtree approximation controlled by θ
- SequentialBruteForce: exact O(N²) summation (reference for cross-checks)
"""

from nbodysim.core.vector import Vector2
from nbodysim.core.body import Body, gravitational_pull
from nbodysim.core.quadrant import Quadrant, bounding_quadrant
from nbodysim.core.quadtree import QuadTree, MAX_TREE_DEPTH
from nbodysim.core.settings import (
    Settings,
    MAX_NUM_BODIES,
    MAX_NUM_STEPS,
    MAX_NUM_WORKERS,
)
from nbodysim.core.errors import (
    NBodyError,
    ConfigurationError,
    QuadTreeError,
    SimulationAbortedError,
)
from nbodysim.core.schedule import StepCallback, owned_indices
from nbodysim.core.sequential import SequentialBarnesHut, SequentialBruteForce

__all__ = [
    "Vector2",
    "Body",
    "gravitational_pull",
    "Quadrant",
    "bounding_quadrant",
    "QuadTree",
    "MAX_TREE_DEPTH",
    "Settings",
    "MAX_NUM_BODIES",
    "MAX_NUM_STEPS",
    "MAX_NUM_WORKERS",
    "NBodyError",
    "ConfigurationError",
    "QuadTreeError",
    "SimulationAbortedError",
    "StepCallback",
    "owned_indices",
    "SequentialBarnesHut",
    "SequentialBruteForce",
]
