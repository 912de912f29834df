"""Shared pytest fixtures for the galaxyscope test suite.

Forces the non-interactive Agg backend so render tests run without a display.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from galaxyscope import config
from galaxyscope.core.galaxy_params import GalaxyParams, preset


@pytest.fixture(autouse=True)
def reset_global_state():
    """CLI runs mutate config globals; restore them around every test."""
    config.initialize_global_state()
    yield
    config.initialize_global_state()


@pytest.fixture
def spiral_params():
    return GalaxyParams(
        type="spiral", stars_count=10000, radius=5.0, branches=3, spin=1.0,
        randomness=0.2, randomness_power=3.0,
        inside_color="#ff0000", outside_color="#0000ff",
    )


@pytest.fixture
def small_preset():
    """Preset lookup with a particle count small enough for fast tests."""
    def _make(galaxy_type, **overrides):
        overrides.setdefault("stars_count", 600)
        return preset(galaxy_type, **overrides)
    return _make


class FakeTime:
    """Manually advanced time source for AnimationClock."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def fake_time():
    return FakeTime(100.0)
