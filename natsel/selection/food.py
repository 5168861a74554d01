"""Food: starvation as a selection pressure.

Tough food favors long teeth. Limited food caps the population at a random carrying
capacity, without regard to phenotype. Both are applied once per generation, when
the clock crosses the middle of the food slice.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from natsel.events import Emitter
from natsel.selection.pressure import kill_percentage
from natsel.utils import center, next_double_in_range, round_symmetric

if TYPE_CHECKING:
    from natsel.config import SimulationConfig
    from natsel.population.collection import BunnyCollection
    from natsel.simulation.clock import GenerationClock

logger = logging.getLogger(__name__)


class Food:
    """The food supply. Tough and limited are independent toggles."""

    def __init__(
        self,
        config: SimulationConfig,
        clock: GenerationClock,
        bunny_collection: BunnyCollection,
        rng: random.Random,
    ):
        self.config = config
        self._clock = clock
        self._bunny_collection = bunny_collection
        self._rng = rng
        self._midpoint = center(config.clock_food_range)

        self.is_tough = False
        self.is_limited = False

        self.bunnies_starved = Emitter("bunnies_starved")  # param: time in generations

        clock.time_in_percent_changed.add_listener(self._on_time_in_percent_changed)

    @property
    def enabled(self) -> bool:
        return self.is_tough or self.is_limited

    def reset(self) -> None:
        self.is_tough = False
        self.is_limited = False

    def _on_time_in_percent_changed(self, current: float, previous: float) -> None:
        if self.enabled and previous < self._midpoint <= current:
            self.starve_bunnies(self._clock.clock_generation + self._midpoint)

    def starve_bunnies(self, time_in_generations: float) -> int:
        """Apply tough food, then limited food.

        Args:
            time_in_generations: When the event happened, for the population history

        Returns:
            Number of bunnies that starved
        """
        total_starved = 0
        if self.is_tough:
            total_starved += self.apply_tough_food()
        if self.is_limited:
            total_starved += self.apply_limited_food()

        if total_starved > 0:
            self.bunnies_starved.emit(time_in_generations)
        return total_starved

    def apply_tough_food(self) -> int:
        """Short teeth starve at a multiple of the rate of long teeth.

        Long teeth are spared entirely while there are only a few of them.
        """
        bunnies = self._bunny_collection.get_selection_candidates()
        if not bunnies:
            return 0

        teeth = self._bunny_collection.gene_pool.teeth
        short_teeth = [b for b in bunnies if b.phenotype.has(teeth.normal_allele)]
        long_teeth = [b for b in bunnies if b.phenotype.has(teeth.mutant_allele)]
        logger.debug(
            f"Applying tough food: {len(short_teeth)} short teeth, {len(long_teeth)} long teeth"
        )

        percent_to_starve = next_double_in_range(
            self._rng, self.config.tough_food_percent_to_starve_range
        )
        logger.debug(
            f"Randomly selected {percent_to_starve:.3f} from tough_food_percent_to_starve_range"
        )

        percent_short_teeth = min(1.0, percent_to_starve * self.config.short_teeth_multiplier)
        percent_long_teeth = percent_to_starve
        if len(long_teeth) < self.config.tough_food_min_long_teeth:
            logger.debug(
                f"Ignoring tough food for long teeth because their count {len(long_teeth)} "
                f"is < {self.config.tough_food_min_long_teeth}"
            )
            percent_long_teeth = 0.0

        starved_short = kill_percentage(short_teeth, percent_short_teeth)
        logger.debug(f"{starved_short} of {len(short_teeth)} short teeth died from tough food")
        starved_long = kill_percentage(long_teeth, percent_long_teeth)
        logger.debug(f"{starved_long} of {len(long_teeth)} long teeth died from tough food")
        return starved_short + starved_long

    def apply_limited_food(self) -> int:
        """Kill the bunnies that exceed a randomly chosen carrying capacity."""
        bunnies = self._bunny_collection.get_selection_candidates()
        total = len(bunnies)
        carrying_capacity = round_symmetric(
            next_double_in_range(self._rng, self.config.limited_food_population_range)
        )
        if total == 0:
            return 0

        logger.debug(
            f"Applying limited food: population is {total}, carrying capacity is {carrying_capacity}"
        )
        if total <= carrying_capacity:
            return 0

        number_to_starve = total - carrying_capacity
        for bunny in bunnies[:number_to_starve]:
            bunny.die()
        logger.debug(f"Carrying capacity exceeded, {number_to_starve} bunnies died from limited food")
        return number_to_starve
