"""Configuration settings for the natural selection engine.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via NATSEL_* environment variables.
"""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

# Number of cells in a Punnett square for 2 alleles x 2 alleles.
PUNNETT_SQUARE_SIZE = 4


class SimulationConfig(BaseSettings):
    """Global configuration for the bunny population simulation."""

    # Random source (None = unseeded)
    seed: int | None = None

    # Generation clock
    seconds_per_generation: float = Field(default=10.0, gt=0)
    min_steps_per_generation: int = Field(default=10, gt=0)
    fast_forward_scale: float = Field(default=4.0, ge=1)
    max_generations: int = Field(default=1000, gt=0)

    # Clock slices, as percentages [0,1] of a generation
    clock_wolves_range: tuple[float, float] = (2 / 12, 6 / 12)  # 2:00-6:00
    clock_food_range: tuple[float, float] = (6 / 12, 10 / 12)  # 6:00-10:00

    # Population
    max_age: int = Field(default=5, gt=0)
    max_population: int = Field(default=750, gt=0)
    litter_size: int = PUNNETT_SQUARE_SIZE
    pedigree_tree_depth: int = Field(default=4, gt=0)

    # Mutation: percentage of newborns that receive a pending mutation
    mutation_percentage: float = 1 / 7

    # Wolves
    wolves_percent_to_eat_range: tuple[float, float] = (0.35, 0.4)
    wolves_environment_multiplier: float = Field(default=2.3, gt=1)
    wolves_min_bunnies: int = 6  # floor below which a cohort is spared if other prey exists
    min_wolves: int = 5
    bunnies_per_wolf: int = Field(default=10, gt=0)

    # Food
    tough_food_percent_to_starve_range: tuple[float, float] = (0.4, 0.45)
    short_teeth_multiplier: float = Field(default=2.0, gt=1)
    tough_food_min_long_teeth: int = 5
    limited_food_population_range: tuple[float, float] = (90, 110)

    # Initial population, as parsed by natsel.population.parser
    initial_mutations: str = ""
    initial_population: list[str] = Field(default=["1"])

    model_config = {"env_prefix": "NATSEL_"}

    @field_validator(
        "clock_wolves_range",
        "clock_food_range",
        "wolves_percent_to_eat_range",
        "tough_food_percent_to_starve_range",
    )
    @classmethod
    def _check_percent_range(cls, value: tuple[float, float]) -> tuple[float, float]:
        low, high = value
        if not (0 <= low <= high <= 1):
            raise ValueError(f"invalid percent range: {value}")
        return value

    @field_validator("limited_food_population_range")
    @classmethod
    def _check_population_range(cls, value: tuple[float, float]) -> tuple[float, float]:
        low, high = value
        if not (0 < low < high):
            raise ValueError(f"invalid population range: {value}")
        return value

    @field_validator("mutation_percentage")
    @classmethod
    def _check_mutation_percentage(cls, value: float) -> float:
        # A bunny receives at most one of 3 mutations, so at most 1/3 can get a specific one.
        if not (0 < value <= 1 / 3):
            raise ValueError(f"mutation_percentage must be in (0, 1/3]: {value}")
        return value

    @field_validator("litter_size")
    @classmethod
    def _check_litter_size(cls, value: int) -> int:
        if value != PUNNETT_SQUARE_SIZE:
            raise ValueError(f"litter_size must be {PUNNETT_SQUARE_SIZE}, the size of a Punnett square")
        return value

    @model_validator(mode="after")
    def _check_wolves_multiplier(self) -> SimulationConfig:
        if self.wolves_environment_multiplier * self.wolves_percent_to_eat_range[1] > 1:
            raise ValueError(
                "wolves_environment_multiplier * wolves_percent_to_eat_range max must be <= 1"
            )
        return self

    @model_validator(mode="after")
    def _check_fast_forward_scale(self) -> SimulationConfig:
        # A fast-forwarded step must still be shorter than a generation.
        if self.fast_forward_scale >= self.min_steps_per_generation:
            raise ValueError("fast_forward_scale must be < min_steps_per_generation")
        return self

    @property
    def max_dt(self) -> float:
        """Largest time step that still gives min_steps_per_generation steps per generation."""
        return self.seconds_per_generation / self.min_steps_per_generation

    @property
    def max_dead_bunny_generations(self) -> int:
        """Generations a dead bunny is retained, based on pedigree depth."""
        return self.max_age * (self.pedigree_tree_depth - 1)
