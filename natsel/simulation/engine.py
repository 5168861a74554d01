"""Simulation engine for the bunny population.

Wires the generation clock, gene pool, bunny collection and selection pressures
together, and owns the single random source that all of them draw from.
"""

from __future__ import annotations

import logging
import random
import time
from enum import Enum
from typing import TYPE_CHECKING

from natsel.config import SimulationConfig
from natsel.errors import EngineStateError
from natsel.events import Emitter
from natsel.genetics.gene import GenePool
from natsel.population.collection import BunnyCollection
from natsel.population.parser import parse_initial_population
from natsel.selection.environment import Environment
from natsel.selection.food import Food
from natsel.selection.wolves import WolfCollection
from natsel.simulation.clock import GenerationClock
from natsel.simulation.history import PopulationHistory, ProportionsHistory

if TYPE_CHECKING:
    from natsel.genetics.gene import Gene
    from natsel.population.bunny import Bunny

logger = logging.getLogger(__name__)


class SimulationMode(str, Enum):
    STAGED = "staged"  # ready to start, clock not running
    ACTIVE = "active"  # clock running
    COMPLETED = "completed"  # run is over, clock stopped


class TimeSpeed(str, Enum):
    NORMAL = "normal"
    FAST = "fast"


class SimulationEngine:
    """Top-level model of the simulation. Advance it by calling step(dt)."""

    def __init__(self, config: SimulationConfig | None = None, rng: random.Random | None = None):
        self.config = config or SimulationConfig()
        self.rng = rng or random.Random(self.config.seed)

        self.clock = GenerationClock(
            self.config.seconds_per_generation, self.config.min_steps_per_generation
        )
        self.gene_pool = GenePool()
        self._initial_varieties = parse_initial_population(
            self.gene_pool,
            self.config.initial_mutations,
            self.config.initial_population,
            self.config.max_population,
        )

        self.bunny_collection = BunnyCollection(self.config, self.gene_pool, self.rng)
        self.wolf_collection = WolfCollection(
            self.config, self.clock, self.bunny_collection, self.rng
        )
        self.food = Food(self.config, self.clock, self.bunny_collection, self.rng)

        self.population_history = PopulationHistory()
        self.proportions_history = ProportionsHistory()

        self._mode = SimulationMode.STAGED
        self.is_playing = True
        self.time_speed = TimeSpeed.NORMAL

        # Seconds spent in the most recent mate_bunnies call.
        self.time_to_mate = 0.0

        self.mode_changed = Emitter("mode_changed")
        self.memory_limit = Emitter("memory_limit")

        self.clock.clock_generation_changed.add_listener(self._on_clock_generation_changed)
        self.wolf_collection.bunnies_eaten.add_listener(self._record_counts)
        self.food.bunnies_starved.add_listener(self._record_counts)
        self.bunny_collection.extinct.add_listener(self._on_extinct)
        self.bunny_collection.overflow.add_listener(self._on_overflow)

        logger.info("====== Generation 0 ======")
        self._initialize_generation_zero()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> SimulationMode:
        return self._mode

    @mode.setter
    def mode(self, mode: SimulationMode) -> None:
        if mode == self._mode:
            return
        if mode == SimulationMode.ACTIVE and self._mode != SimulationMode.STAGED:
            raise EngineStateError(f"cannot go from {self._mode.value} to {mode.value}")
        if mode == SimulationMode.COMPLETED and self._mode != SimulationMode.ACTIVE:
            raise EngineStateError(f"cannot go from {self._mode.value} to {mode.value}")

        logger.debug(f"Simulation mode {self._mode.value} -> {mode.value}")
        self._mode = mode

        if mode == SimulationMode.ACTIVE:
            counts = self.bunny_collection.get_live_bunny_counts()
            generation = self.clock.clock_generation
            self.proportions_history.record_start_counts(generation, counts)
            self.population_history.record_counts(generation, counts)
            self.clock.is_running = True
        elif mode == SimulationMode.STAGED:
            self.is_playing = True
            self.clock.is_running = False
        else:
            self.is_playing = False
            self.clock.is_running = False

        self.mode_changed.emit(mode)

    @property
    def environment(self) -> Environment:
        return self.wolf_collection.environment

    @environment.setter
    def environment(self, environment: Environment) -> None:
        self.wolf_collection.environment = environment

    @property
    def time_scale(self) -> float:
        return self.config.fast_forward_scale if self.time_speed == TimeSpeed.FAST else 1.0

    @property
    def generation(self) -> int:
        return self.clock.clock_generation

    def start(self) -> None:
        """Convenience for mode = ACTIVE."""
        self.mode = SimulationMode.ACTIVE

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Advance the simulation by dt seconds of wall time."""
        if self.is_playing:
            dt = self.clock.constrain_dt(dt)
            self.clock.step(dt * self.time_scale)

    def _on_clock_generation_changed(self, generation: int, previous: int) -> None:
        if generation >= self.config.max_generations:
            logger.info(f"Reached the memory limit of {self.config.max_generations} generations")
            self.memory_limit.emit()

        if generation == 0:
            return

        logger.info(f"====== Generation {generation} ======")
        collection = self.bunny_collection

        # Counts at the end of the previous generation, before aging and mating.
        self.proportions_history.record_end_counts(
            generation - 1, collection.get_live_bunny_counts()
        )
        logger.debug(
            f"live bunnies = {collection.number_of_live_bunnies}, "
            f"dead bunnies = {collection.number_of_dead_bunnies}, "
            f"recessive mutants = {collection.number_of_recessive_mutants}"
        )

        # Aging first, so bunnies that die of old age do not mate.
        collection.age_bunnies()
        collection.prune_dead_bunnies(generation)

        start = time.perf_counter()
        collection.mate_bunnies(generation)
        self.time_to_mate = time.perf_counter() - start

        counts = collection.get_live_bunny_counts()
        self.proportions_history.record_start_counts(generation, counts)
        self.population_history.record_counts(generation, counts)

    def _record_counts(self, time_in_generations: float) -> None:
        self.population_history.record_counts(
            time_in_generations, self.bunny_collection.get_live_bunny_counts()
        )

    def _on_extinct(self) -> None:
        if self._mode == SimulationMode.ACTIVE:
            self.mode = SimulationMode.COMPLETED

    def _on_overflow(self) -> None:
        if self._mode == SimulationMode.ACTIVE:
            self.mode = SimulationMode.COMPLETED

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def add_a_mate(self) -> Bunny:
        """Add a generation-zero mate for a lone starting bunny."""
        if self.bunny_collection.number_of_live_bunnies != 1 or self.clock.clock_generation != 0:
            raise EngineStateError("a mate can only be added to a single bunny in generation 0")
        return self.bunny_collection.create_bunny_zero()

    def add_mutation(self, gene: Gene, dominant: bool) -> None:
        """Schedule a mutation that will appear in the next generation."""
        if self._mode == SimulationMode.COMPLETED:
            raise EngineStateError("cannot add a mutation to a completed simulation")
        gene.introduce_mutation(dominant)

    def cancel_mutation(self, gene: Gene) -> None:
        gene.cancel_mutation()

    def reset(self) -> None:
        """Reset everything, including settings that start_over keeps."""
        self.time_speed = TimeSpeed.NORMAL
        self.environment = Environment.EQUATOR
        self.start_over()

    def start_over(self) -> None:
        """Return to generation 0 with the initial population."""
        logger.info("====== Generation 0 ======")
        self.is_playing = True
        self.clock.reset()
        # Bunnies are disposed while dominance still matches their genotypes.
        self.bunny_collection.reset()
        self.gene_pool.reset()
        self._initialize_generation_zero()
        self.wolf_collection.reset()
        self.food.reset()
        self.population_history.reset()
        self.proportions_history.reset()
        self.time_to_mate = 0.0
        self._mode = SimulationMode.STAGED
        self.mode_changed.emit(self._mode)

    def _initialize_generation_zero(self) -> None:
        for variety in self._initial_varieties:
            logger.debug(
                f"Creating {variety.count} bunnies with genotype {variety.genotype_string!r}"
            )
            for _ in range(variety.count):
                self.bunny_collection.create_bunny_zero(alleles=variety.alleles)
