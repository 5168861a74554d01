"""Tests for wolves and the environment."""

from __future__ import annotations

import random

import pytest

from natsel.config import SimulationConfig
from natsel.genetics.allele import BROWN_FUR, WHITE_FUR
from natsel.genetics.gene import GenePool
from natsel.population.collection import BunnyCollection
from natsel.selection.environment import Environment
from natsel.selection.wolves import WolfCollection
from natsel.simulation.clock import GenerationClock
from tests.helpers import FixedDrawRandom, add_bunnies, genotype


def _make_wolves(
    config: SimulationConfig, clock: GenerationClock, rng: random.Random
) -> tuple[WolfCollection, BunnyCollection]:
    collection = BunnyCollection(config, GenePool(), rng)
    return WolfCollection(config, clock, collection, rng), collection


def _add_white_and_brown(collection: BunnyCollection, white: int, brown: int) -> None:
    pool = collection.gene_pool
    add_bunnies(collection, white, genotype(pool, fur=(WHITE_FUR, WHITE_FUR)))
    add_bunnies(collection, brown, genotype(pool, fur=(BROWN_FUR, BROWN_FUR)))


def _step_to(clock: GenerationClock, seconds: int) -> None:
    clock.is_running = True
    while clock.time_in_seconds < seconds:
        clock.step(1.0)


class TestEnvironment:
    """Test camouflage."""

    def test_camouflaged_fur(self):
        assert Environment.EQUATOR.camouflaged_fur is BROWN_FUR
        assert Environment.ARCTIC.camouflaged_fur is WHITE_FUR

    def test_value(self):
        assert Environment("arctic") is Environment.ARCTIC


class TestHunting:
    """Test when wolves exist."""

    def test_no_wolves_when_disabled(self, config, clock, rng):
        wolves, collection = _make_wolves(config, clock, rng)
        add_bunnies(collection, 100)

        _step_to(clock, 3)

        assert not wolves.is_hunting
        assert wolves.count == 0

    def test_wolves_exist_inside_slice(self, config, clock, rng):
        """Wolves appear at 2:00 and disappear after 6:00."""
        wolves, collection = _make_wolves(config, clock, rng)
        add_bunnies(collection, 100)
        created = []
        wolves.wolf_created.add_listener(created.append)
        wolves.enabled = True

        _step_to(clock, 1)
        assert wolves.count == 0

        _step_to(clock, 2)
        assert wolves.is_hunting
        # 1 wolf per 10 bunnies
        assert wolves.count == 10
        assert len(created) == 10

        _step_to(clock, 6)
        assert not wolves.is_hunting
        assert wolves.count == 0

    def test_minimum_number_of_wolves(self, config, clock, rng):
        wolves, collection = _make_wolves(config, clock, rng)
        add_bunnies(collection, 12)
        wolves.enabled = True

        _step_to(clock, 2)

        assert wolves.count == config.min_wolves

    def test_enabled_mid_slice(self, config, clock, rng):
        """Enabling wolves inside the slice creates them immediately."""
        wolves, collection = _make_wolves(config, clock, rng)
        add_bunnies(collection, 100)
        _step_to(clock, 3)

        wolves.enabled = True
        assert wolves.is_hunting
        assert wolves.count == 10

        wolves.enabled = False
        assert wolves.count == 0

    def test_eaten_at_slice_midpoint(self, config, clock, rng):
        wolves, collection = _make_wolves(config, clock, rng)
        add_bunnies(collection, 100)
        eaten_at = []
        wolves.bunnies_eaten.add_listener(eaten_at.append)
        wolves.enabled = True

        _step_to(clock, 3)
        assert collection.number_of_live_bunnies == 100

        _step_to(clock, 4)
        assert eaten_at == [pytest.approx(1 / 3)]
        assert collection.number_of_live_bunnies < 100

        # Once per generation.
        _step_to(clock, 9)
        assert len(eaten_at) == 1

    def test_reset(self, config, clock, rng):
        wolves, collection = _make_wolves(config, clock, rng)
        add_bunnies(collection, 10)
        wolves.enabled = True
        _step_to(clock, 3)

        wolves.reset()

        assert not wolves.enabled
        assert wolves.count == 0


class TestEatBunnies:
    """Test predation rates."""

    def test_uncamouflaged_fur_eaten_faster(self, config, clock):
        """percent_to_eat = 0.36, so the uncamouflaged rate is 0.36 * 2.3 = 0.828."""
        wolves, collection = _make_wolves(config, clock, FixedDrawRandom(0.2))
        _add_white_and_brown(collection, 100, 100)

        assert wolves.eat_bunnies(0.5) == 36 + 83

        counts = collection.get_live_bunny_counts()
        assert counts.brown_fur == 100 - 36
        assert counts.white_fur == 100 - 83

    def test_arctic_favors_white(self, config, clock):
        wolves, collection = _make_wolves(config, clock, FixedDrawRandom(0.2))
        wolves.environment = Environment.ARCTIC
        _add_white_and_brown(collection, 100, 100)

        wolves.eat_bunnies(0.5)

        counts = collection.get_live_bunny_counts()
        assert counts.white_fur == 100 - 36
        assert counts.brown_fur == 100 - 83

    def test_small_cohorts_spared_while_other_prey_exists(self, config, clock, rng):
        wolves, collection = _make_wolves(config, clock, rng)
        wolves.environment = Environment.ARCTIC
        _add_white_and_brown(collection, 5, 1)
        eaten = []
        wolves.bunnies_eaten.add_listener(eaten.append)

        assert wolves.eat_bunnies(0.5) == 0
        assert collection.number_of_live_bunnies == 6
        assert eaten == []

    def test_small_cohort_eaten_when_alone(self, config, clock):
        """A cohort below the floor is still eaten when it is the only prey."""
        wolves, collection = _make_wolves(config, clock, FixedDrawRandom(0.2))
        _add_white_and_brown(collection, 3, 0)

        # round(0.828 * 3) = 2
        assert wolves.eat_bunnies(0.5) == 2
        assert collection.number_of_live_bunnies == 1

    def test_small_cohort_spared_large_cohort_eaten(self, config, clock):
        wolves, collection = _make_wolves(config, clock, FixedDrawRandom(0.2))
        _add_white_and_brown(collection, 20, 3)

        wolves.eat_bunnies(0.5)

        counts = collection.get_live_bunny_counts()
        assert counts.brown_fur == 3
        # round(0.828 * 20) = 17
        assert counts.white_fur == 3

    def test_no_bunnies(self, config, clock, rng):
        wolves, _ = _make_wolves(config, clock, rng)
        assert wolves.eat_bunnies(0.5) == 0
