"""Tests for SimulationEngine integration."""

from __future__ import annotations

import random

import pytest

from natsel.config import SimulationConfig
from natsel.errors import EngineStateError, MutationError
from natsel.genetics.allele import BROWN_FUR
from natsel.selection.environment import Environment
from natsel.simulation.engine import SimulationEngine, SimulationMode, TimeSpeed


def _run_generations(engine: SimulationEngine, generations: int) -> None:
    if engine.mode == SimulationMode.STAGED:
        engine.start()
    while engine.mode == SimulationMode.ACTIVE and engine.generation < generations:
        engine.step(1.0)


class TestEngineConstruction:
    """Test engine initialization."""

    def test_staged_defaults(self, engine: SimulationEngine):
        assert engine.mode == SimulationMode.STAGED
        assert engine.generation == 0
        assert engine.is_playing
        assert engine.time_speed == TimeSpeed.NORMAL
        assert engine.environment == Environment.EQUATOR
        assert engine.bunny_collection.number_of_live_bunnies == 1
        assert not engine.wolf_collection.enabled
        assert not engine.food.enabled

    def test_staged_engine_does_not_advance(self, engine: SimulationEngine):
        engine.step(1.0)
        assert engine.clock.time_in_seconds == 0

    def test_initial_population_with_mutations(self):
        """Generation zero is built from the initial mutations and population."""
        config = SimulationConfig(seed=1, initial_mutations="F", initial_population=["5FF", "5ff"])
        engine = SimulationEngine(config)

        counts = engine.bunny_collection.get_live_bunny_counts()
        assert engine.gene_pool.fur.dominant_allele is BROWN_FUR
        assert counts.total == 10
        assert counts.brown_fur == 5
        assert counts.white_fur == 5

    def test_invalid_initial_population_uses_defaults(self):
        config = SimulationConfig(seed=1, initial_mutations="X", initial_population=["5FF"])
        engine = SimulationEngine(config)

        assert engine.bunny_collection.number_of_live_bunnies == 1
        assert not any(gene.has_dominance() for gene in engine.gene_pool.genes)

    def test_injected_rng(self, config: SimulationConfig):
        rng = random.Random(5)
        engine = SimulationEngine(config, rng=rng)
        assert engine.rng is rng


class TestAddAMate:
    """Test adding a mate for a lone bunny."""

    def test_add_a_mate(self, engine: SimulationEngine):
        mate = engine.add_a_mate()

        assert mate.generation == 0
        assert engine.bunny_collection.number_of_live_bunnies == 2

    def test_only_for_a_single_bunny(self, engine: SimulationEngine):
        engine.add_a_mate()
        with pytest.raises(EngineStateError):
            engine.add_a_mate()


class TestModes:
    """Test simulation mode transitions."""

    def test_start(self, engine: SimulationEngine):
        modes = []
        engine.mode_changed.add_listener(modes.append)

        engine.start()

        assert engine.mode == SimulationMode.ACTIVE
        assert engine.clock.is_running
        assert modes == [SimulationMode.ACTIVE]

    def test_cannot_complete_from_staged(self, engine: SimulationEngine):
        with pytest.raises(EngineStateError):
            engine.mode = SimulationMode.COMPLETED

    def test_cannot_restart_completed(self, engine: SimulationEngine):
        engine.start()
        engine.mode = SimulationMode.COMPLETED
        assert not engine.is_playing
        assert not engine.clock.is_running

        with pytest.raises(EngineStateError):
            engine.mode = SimulationMode.ACTIVE

    def test_start_over(self, engine: SimulationEngine):
        engine.add_a_mate()
        engine.wolf_collection.enabled = True
        _run_generations(engine, 2)

        engine.start_over()

        assert engine.mode == SimulationMode.STAGED
        assert engine.generation == 0
        assert engine.bunny_collection.number_of_live_bunnies == 1
        assert engine.bunny_collection.number_of_dead_bunnies == 0
        assert len(engine.population_history) == 0
        assert len(engine.proportions_history) == 0
        assert not engine.wolf_collection.enabled

    @pytest.mark.parametrize(
        "gene_name, dominant", [("fur", True), ("ears", False), ("teeth", True)]
    )
    def test_start_over_after_mutants_are_born(self, gene_name, dominant):
        """Heterozygous offspring do not block starting over or resetting."""
        engine = SimulationEngine(SimulationConfig(seed=3, initial_population=["10"]))
        gene = getattr(engine.gene_pool, gene_name)
        engine.add_mutation(gene, dominant=dominant)
        _run_generations(engine, 1)
        assert gene.has_dominance()

        engine.start_over()

        assert engine.mode == SimulationMode.STAGED
        assert engine.bunny_collection.number_of_live_bunnies == 10
        assert not gene.has_dominance()

        engine.add_mutation(gene, dominant=dominant)
        _run_generations(engine, 1)
        engine.reset()

        assert engine.generation == 0
        assert engine.bunny_collection.number_of_live_bunnies == 10
        assert engine.bunny_collection.number_of_dead_bunnies == 0
        assert not gene.has_dominance()

    def test_start_over_keeps_settings(self, engine: SimulationEngine):
        engine.environment = Environment.ARCTIC
        engine.time_speed = TimeSpeed.FAST

        engine.start_over()

        assert engine.environment == Environment.ARCTIC
        assert engine.time_speed == TimeSpeed.FAST

    def test_reset_restores_settings(self, engine: SimulationEngine):
        engine.environment = Environment.ARCTIC
        engine.time_speed = TimeSpeed.FAST
        engine.gene_pool.fur.introduce_mutation(dominant=True)

        engine.reset()

        assert engine.environment == Environment.EQUATOR
        assert engine.time_speed == TimeSpeed.NORMAL
        assert not engine.gene_pool.fur.has_dominance()
        assert engine.mode == SimulationMode.STAGED


class TestStepping:
    """Test generation rollover."""

    def test_one_generation(self, engine: SimulationEngine):
        engine.add_a_mate()
        engine.start()

        for _ in range(10):
            engine.step(1.0)

        assert engine.generation == 1
        assert engine.bunny_collection.number_of_live_bunnies == 6

        proportions = engine.proportions_history.get(0)
        assert proportions.start_counts.total == 2
        assert proportions.end_counts.total == 2
        assert engine.proportions_history.current_start_counts.total == 6

        assert [p.time_in_generations for p in engine.population_history.points] == [0, 1]
        assert engine.time_to_mate >= 0

    def test_rollover_order(self, engine: SimulationEngine, monkeypatch):
        """Bunnies age, then dead bunnies are pruned, then the survivors mate."""
        collection = engine.bunny_collection
        calls = []

        def record(name, method):
            def wrapper(*args):
                calls.append(name)
                return method(*args)

            return wrapper

        for name in ("age_bunnies", "prune_dead_bunnies", "mate_bunnies"):
            monkeypatch.setattr(collection, name, record(name, getattr(collection, name)))

        engine.add_a_mate()
        _run_generations(engine, 1)

        assert calls == ["age_bunnies", "prune_dead_bunnies", "mate_bunnies"]

    def test_dt_is_constrained(self, engine: SimulationEngine):
        engine.start()
        engine.step(5.0)
        assert engine.clock.time_in_seconds == 1.0

    def test_fast_forward(self, engine: SimulationEngine):
        engine.time_speed = TimeSpeed.FAST
        engine.start()

        engine.step(1.0)

        assert engine.time_scale == 4.0
        assert engine.clock.time_in_seconds == 4.0

    def test_memory_limit(self):
        config = SimulationConfig(seed=1, max_generations=2, initial_population=["2"])
        engine = SimulationEngine(config)
        reached = []
        engine.memory_limit.add_listener(lambda: reached.append(engine.generation))

        _run_generations(engine, 2)

        assert reached == [2]

    def test_extinction_completes(self):
        config = SimulationConfig(seed=1, max_age=1, initial_population=["2"])
        engine = SimulationEngine(config)

        _run_generations(engine, 3)

        assert engine.mode == SimulationMode.COMPLETED
        assert engine.generation == 1
        assert engine.bunny_collection.number_of_live_bunnies == 0

    def test_overflow_completes(self):
        config = SimulationConfig(seed=1, max_population=5, initial_population=["2"])
        engine = SimulationEngine(config)

        _run_generations(engine, 3)

        assert engine.mode == SimulationMode.COMPLETED
        assert engine.bunny_collection.number_of_live_bunnies == 6

    def test_selection_events_recorded(self):
        config = SimulationConfig(seed=2, initial_population=["40"])
        engine = SimulationEngine(config)
        engine.wolf_collection.enabled = True
        engine.food.is_limited = True

        _run_generations(engine, 1)

        times = [p.time_in_generations for p in engine.population_history.points]
        assert times[0] == 0
        assert times[1] == pytest.approx(1 / 3)
        assert times[-1] == 1


class TestMutations:
    """Test user-scheduled mutations."""

    def test_dominant_mutation_appears_next_generation(self):
        config = SimulationConfig(seed=3, initial_population=["10"])
        engine = SimulationEngine(config)
        engine.add_mutation(engine.gene_pool.fur, dominant=True)

        _run_generations(engine, 1)

        # 20 newborns, round(20 / 7) = 3 of them mutated
        assert engine.bunny_collection.get_live_bunny_counts().brown_fur == 3

    def test_cancel_mutation(self, engine: SimulationEngine):
        engine.add_mutation(engine.gene_pool.ears, dominant=False)
        engine.cancel_mutation(engine.gene_pool.ears)

        assert not engine.gene_pool.ears.has_dominance()

    def test_mutation_only_once(self, engine: SimulationEngine):
        engine.add_mutation(engine.gene_pool.teeth, dominant=True)
        with pytest.raises(MutationError):
            engine.add_mutation(engine.gene_pool.teeth, dominant=False)

    def test_no_mutation_after_completion(self, engine: SimulationEngine):
        engine.start()
        engine.mode = SimulationMode.COMPLETED
        with pytest.raises(EngineStateError):
            engine.add_mutation(engine.gene_pool.fur, dominant=True)


class TestLongRun:
    """Run many generations with every selection pressure enabled."""

    def test_deterministic_for_seed(self):
        def run():
            config = SimulationConfig(seed=7, initial_population=["10"])
            engine = SimulationEngine(config)
            engine.wolf_collection.enabled = True
            _run_generations(engine, 3)
            return [(p.time_in_generations, p.counts) for p in engine.population_history.points]

        assert run() == run()

    def test_twenty_generations(self):
        config = SimulationConfig(seed=11, initial_population=["20"])
        engine = SimulationEngine(config)
        engine.environment = Environment.ARCTIC
        engine.wolf_collection.enabled = True
        engine.food.is_limited = True
        engine.add_mutation(engine.gene_pool.fur, dominant=False)

        checked = []

        def check(current, previous):
            engine.bunny_collection.check_counts()
            checked.append(current)

        engine.clock.clock_generation_changed.add_listener(check)

        _run_generations(engine, 20)

        assert engine.mode == SimulationMode.ACTIVE
        assert checked == list(range(1, 21))
        assert len(engine.proportions_history) == 20
        assert engine.bunny_collection.total_pruned > 0
        assert engine.bunny_collection.number_of_live_bunnies < config.max_population
