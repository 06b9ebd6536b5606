"""Pytest configuration and fixtures for attract loop tests."""

import random

import pytest

from goldenmunch.animation.attract_loop import AttractLoop
from goldenmunch.animation.scheduler import ManualFrameHost
from goldenmunch.animation.state import SimulationState
from goldenmunch.config.settings import AttractTuning, get_tuning
from goldenmunch.core.events import EventBus
from goldenmunch.graphics.surface import BufferSurface


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def tuning():
    """Private copy of the default preset."""
    return get_tuning("optimized")


@pytest.fixture
def quiet_tuning():
    """Tuning that never spawns on its own; tests place pastries by hand."""
    return AttractTuning(initial_spawn_count=0, max_collectibles=0)


@pytest.fixture
def make_state(seeded_rng):
    """Factory for SimulationState on a given arena."""
    def _make(tuning, width=800.0, height=600.0):
        return SimulationState.create(tuning, width, height, seeded_rng)
    return _make


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def host():
    return ManualFrameHost()


@pytest.fixture
def make_loop(seeded_rng, event_bus, host):
    """Factory for an AttractLoop wired to a manual host and a buffer surface."""
    def _make(tuning, width=900, height=500, surface=True):
        return AttractLoop(
            tuning,
            width,
            height,
            event_bus=event_bus,
            rng=seeded_rng,
            surface=BufferSurface(width, height) if surface else None,
            host=host,
        )
    return _make
