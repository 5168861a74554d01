"""Wolves: predation as a selection pressure on fur color.

Wolves exist only while they are enabled and the clock is inside the wolves slice of
the generation. They eat once, when the clock crosses the middle of that slice.
Bunnies whose fur does not match the environment are easier to find, so they are
eaten at a higher rate.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from natsel.events import Emitter
from natsel.selection.environment import Environment
from natsel.selection.pressure import kill_percentage
from natsel.utils import center, in_range, next_double_in_range, round_symmetric

if TYPE_CHECKING:
    from natsel.config import SimulationConfig
    from natsel.genetics.allele import Allele
    from natsel.population.bunny import Bunny
    from natsel.population.collection import BunnyCollection
    from natsel.simulation.clock import GenerationClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Wolf:
    """A wolf. Only its identity matters to the engine."""

    id: int


class WolfCollection:
    """The wolves, and the predation they cause."""

    def __init__(
        self,
        config: SimulationConfig,
        clock: GenerationClock,
        bunny_collection: BunnyCollection,
        rng: random.Random,
        environment: Environment = Environment.EQUATOR,
    ):
        self.config = config
        self.environment = environment
        self._clock = clock
        self._bunny_collection = bunny_collection
        self._rng = rng

        self._enabled = False
        self._is_hunting = False
        self._wolves: list[Wolf] = []
        self._ids = itertools.count(1)
        self._midpoint = center(config.clock_wolves_range)

        self.wolf_created = Emitter("wolf_created")
        self.bunnies_eaten = Emitter("bunnies_eaten")  # param: time in generations

        clock.time_in_percent_changed.add_listener(self._on_time_in_percent_changed)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value
        self._update_hunting()

    @property
    def is_hunting(self) -> bool:
        return self._is_hunting

    @property
    def count(self) -> int:
        return len(self._wolves)

    @property
    def wolves(self) -> list[Wolf]:
        return list(self._wolves)

    def reset(self) -> None:
        self._wolves.clear()
        self._is_hunting = False
        self._enabled = False

    def _on_time_in_percent_changed(self, current: float, previous: float) -> None:
        self._update_hunting()
        if self._enabled and previous < self._midpoint <= current:
            self.eat_bunnies(self._clock.clock_generation + self._midpoint)

    def _update_hunting(self) -> None:
        is_hunting = self._enabled and in_range(
            self._clock.time_in_percent, self.config.clock_wolves_range
        )
        if is_hunting == self._is_hunting:
            return
        self._is_hunting = is_hunting

        if is_hunting:
            number_of_wolves = max(
                self.config.min_wolves,
                round_symmetric(
                    self._bunny_collection.number_of_live_bunnies / self.config.bunnies_per_wolf
                ),
            )
            for _ in range(number_of_wolves):
                wolf = Wolf(next(self._ids))
                self._wolves.append(wolf)
                self.wolf_created.emit(wolf)
            logger.debug(f"{number_of_wolves} wolves were created")
        else:
            logger.debug(f"{len(self._wolves)} wolves were disposed")
            self._wolves.clear()

    def eat_bunnies(self, time_in_generations: float) -> int:
        """Wolves eat some of the live bunnies.

        Args:
            time_in_generations: When the event happened, for the population history

        Returns:
            Number of bunnies eaten
        """
        bunnies = self._bunny_collection.get_selection_candidates()
        total = len(bunnies)
        if total == 0:
            return 0

        gene_pool = self._bunny_collection.gene_pool
        white = [b for b in bunnies if b.phenotype.has(gene_pool.fur.normal_allele)]
        brown = [b for b in bunnies if b.phenotype.has(gene_pool.fur.mutant_allele)]
        logger.debug(
            f"Applying wolves: {len(white)} white, {len(brown)} brown, "
            f"environment={self.environment.value}"
        )

        percent_to_eat = next_double_in_range(self._rng, self.config.wolves_percent_to_eat_range)
        logger.debug(f"Randomly selected {percent_to_eat:.3f} from wolves_percent_to_eat_range")

        number_eaten = 0
        for cohort, fur in ((white, gene_pool.fur.normal_allele), (brown, gene_pool.fur.mutant_allele)):
            eaten = self._eat_cohort(cohort, total, fur, percent_to_eat)
            logger.debug(f"{eaten} of {len(cohort)} {fur.label.lower()} bunnies were eaten by wolves")
            number_eaten += eaten

        if number_eaten > 0:
            self.bunnies_eaten.emit(time_in_generations)
        return number_eaten

    def _eat_cohort(
        self, cohort: list[Bunny], total: int, fur: Allele, percent_to_eat: float
    ) -> int:
        if not cohort:
            return 0

        # A small cohort is spared while there is other prey. This applies to
        # either fur colour, not only the one that matches the environment.
        if len(cohort) < self.config.wolves_min_bunnies and total > len(cohort):
            logger.debug(
                f"Wolves ignored {fur.label.lower()} bunnies because their count is "
                f"< {self.config.wolves_min_bunnies} and there are other bunnies to eat"
            )
            return 0

        if fur is self.environment.camouflaged_fur:
            percent = percent_to_eat
        else:
            percent = percent_to_eat * self.config.wolves_environment_multiplier
        return kill_percentage(cohort, min(1.0, percent))
