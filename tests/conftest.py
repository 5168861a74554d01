"""Shared test fixtures for the natsel test suite."""

from __future__ import annotations

import random

import pytest

from natsel.config import SimulationConfig
from natsel.genetics.gene import GenePool
from natsel.population.collection import BunnyCollection
from natsel.simulation.clock import GenerationClock
from natsel.simulation.engine import SimulationEngine


@pytest.fixture
def config() -> SimulationConfig:
    """Default config with a fixed seed."""
    return SimulationConfig(seed=42)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def gene_pool() -> GenePool:
    """A fresh gene pool with no mutations."""
    return GenePool()


@pytest.fixture
def collection(config: SimulationConfig, gene_pool: GenePool, rng: random.Random) -> BunnyCollection:
    """An empty bunny collection."""
    return BunnyCollection(config, gene_pool, rng)


@pytest.fixture
def clock(config: SimulationConfig) -> GenerationClock:
    """A stopped generation clock at time 0."""
    return GenerationClock(config.seconds_per_generation, config.min_steps_per_generation)


@pytest.fixture
def engine(config: SimulationConfig) -> SimulationEngine:
    """A staged engine with the default single bunny."""
    return SimulationEngine(config)
