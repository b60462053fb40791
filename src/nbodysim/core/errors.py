"""Exceptions raised by the simulator."""


class NBodyError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(NBodyError, ValueError):
    """Invalid settings or a violated structural precondition."""


class QuadTreeError(NBodyError):
    """A quadtree was used before it had a boundary, or reset with no bodies."""


class SimulationAbortedError(NBodyError, RuntimeError):
    """A worker thread failed; the whole run is abandoned."""
