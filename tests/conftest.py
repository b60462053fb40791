"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def small_settings():
    """Settings for a quick 40-body run."""
    from nbodysim.core import Settings
    return Settings(num_bodies=40, num_steps=5, theta=0.5, num_workers=1)


@pytest.fixture
def field_bodies(small_settings, rng):
    """Uniform random field matching small_settings."""
    from nbodysim.formations import random_field
    return random_field(small_settings, rng)


@pytest.fixture
def two_body_system():
    """Heavy body at the origin, light body 1e7 m away on the x axis, both at rest."""
    from nbodysim.core import Body
    heavy = Body(0.0, 0.0, 0.0, 0.0, mass=5e24)
    light = Body(1e7, 0.0, 0.0, 0.0, mass=1e22)
    return [heavy, light]
