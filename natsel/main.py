"""Entry point for a headless natsel run."""

from __future__ import annotations

import logging
import sys

from natsel import __version__
from natsel.config import SimulationConfig
from natsel.errors import NatselError
from natsel.renderer import Renderer
from natsel.selection.environment import Environment
from natsel.simulation.engine import SimulationEngine, SimulationMode

# Fixed wall-clock step, in seconds
STEP_DT = 0.5

USAGE = """\
natsel v{version}

Usage: python -m natsel.main [OPTIONS]

Options:
  --generations=N       Generations to run (default: 10)
  --seed=N              Random seed (default: unseeded)
  --wolves              Enable wolves
  --tough-food          Enable tough food
  --limited-food        Enable limited food
  --arctic              Arctic environment (default: equator)
  --mutate=X            Mutate in generation 1: F|f (fur), E|e (ears), T|t (teeth).
                        Uppercase = dominant. May be repeated.
  --mutations=XY        Initial mutations, e.g. --mutations=Fe
  --population=A,B      Initial population, e.g. --population=5FfEe,10ffee
  --verbose             Debug logging

Environment variables (override any setting):
  NATSEL_MAX_AGE, NATSEL_MAX_POPULATION, NATSEL_SEED, etc.
"""


def main(argv: list[str] | None = None) -> int:
    """Run the simulation."""
    args = sys.argv[1:] if argv is None else argv

    generations = 10
    wolves = False
    tough_food = False
    limited_food = False
    environment = Environment.EQUATOR
    mutate: list[str] = []
    log_level = logging.INFO
    overrides: dict = {}

    for arg in args:
        if arg.startswith("--generations="):
            generations = int(arg.split("=")[1])
        elif arg.startswith("--seed="):
            overrides["seed"] = int(arg.split("=")[1])
        elif arg == "--wolves":
            wolves = True
        elif arg == "--tough-food":
            tough_food = True
        elif arg == "--limited-food":
            limited_food = True
        elif arg == "--arctic":
            environment = Environment.ARCTIC
        elif arg.startswith("--mutate="):
            mutate.append(arg.split("=", 1)[1])
        elif arg.startswith("--mutations="):
            overrides["initial_mutations"] = arg.split("=", 1)[1]
        elif arg.startswith("--population="):
            overrides["initial_population"] = arg.split("=", 1)[1].split(",")
        elif arg == "--verbose":
            log_level = logging.DEBUG
        elif arg in ("--help", "-h"):
            print(USAGE.format(version=__version__))
            return 0
        else:
            print(f"Unknown option: {arg}", file=sys.stderr)
            return 2

    logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")

    config = SimulationConfig(**overrides)
    engine = SimulationEngine(config)
    engine.environment = environment
    engine.wolf_collection.enabled = wolves
    engine.food.is_tough = tough_food
    engine.food.is_limited = limited_food

    # A lone bunny cannot mate.
    if engine.bunny_collection.number_of_live_bunnies == 1:
        engine.add_a_mate()

    genes_by_letter = {}
    for gene in engine.gene_pool.genes:
        genes_by_letter[gene.dominant_abbreviation] = (gene, True)
        genes_by_letter[gene.recessive_abbreviation] = (gene, False)

    try:
        for letter in "".join(mutate):
            if letter not in genes_by_letter:
                print(f"Invalid --mutate value: {letter!r}", file=sys.stderr)
                return 2
            gene, dominant = genes_by_letter[letter]
            engine.add_mutation(gene, dominant=dominant)
    except NatselError as e:
        print(f"Invalid --mutate value: {e}", file=sys.stderr)
        return 2

    renderer = Renderer()
    print(f"  natsel v{__version__} | Seed: {config.seed} | Generations: {generations}")

    engine.start()
    try:
        while engine.mode == SimulationMode.ACTIVE and engine.generation < generations:
            engine.step(STEP_DT)
    except KeyboardInterrupt:
        print(f"\n  Stopped at generation {engine.generation}")

    renderer.print_table(engine)
    renderer.print_summary(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
