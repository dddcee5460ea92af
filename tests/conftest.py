"""Shared fixtures for the PigWorld test suite."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from numpy.random import Generator

from pigworld.simulation.config import SimulationConfig
from pigworld.simulation.engine import World, new_world
from pigworld.simulation.events import EventQueue

DEMO_DIR = Path(__file__).resolve().parent.parent / "config" / "demos"


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def world() -> World:
    """An empty 9x9 world with no walls and a fixed seed."""
    return new_world(9, 9, seed=12345)


@pytest.fixture
def events(world: World) -> EventQueue:
    """Buffers every event the world publishes."""
    return EventQueue(world.bus)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def demo_dir() -> Path:
    return DEMO_DIR
