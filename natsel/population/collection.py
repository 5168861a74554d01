"""BunnyCollection: the population of bunnies and everything that changes it.

Orchestrates the bunny lifecycle:
- Creation of generation-zero bunnies and offspring
- Aging, and death of old age
- Pruning of long-dead bunnies, to bound memory
- Mating, including eager mating of recessive mutants and mutation injection
"""

from __future__ import annotations

import itertools
import logging
import random
from collections.abc import Mapping
from typing import TYPE_CHECKING

from natsel.errors import InvariantError, ValidationError
from natsel.events import Emitter
from natsel.genetics.genotype import Genotype
from natsel.genetics.punnett import PunnettSquare
from natsel.population.bunny import Bunny
from natsel.population.bunny_list import BunnyList
from natsel.utils import round_symmetric, shuffled

if TYPE_CHECKING:
    from natsel.config import SimulationConfig
    from natsel.genetics.allele import Allele
    from natsel.genetics.gene import Gene, GenePool
    from natsel.population.counts import BunnyCounts

logger = logging.getLogger(__name__)


class BunnyCollection:
    """Owns the live bunnies, the dead bunnies, and the recessive mutants waiting to mate.

    Selection pressures read candidates from here and call bunny.die(); they never
    modify the lists directly.
    """

    def __init__(self, config: SimulationConfig, gene_pool: GenePool, rng: random.Random):
        """Initialize the collection.

        Args:
            config: Simulation configuration
            gene_pool: The engine's gene pool
            rng: Shared random source
        """
        self.config = config
        self.gene_pool = gene_pool
        self._rng = rng

        self.live_bunnies = BunnyList("live_bunnies")
        self.dead_bunnies = BunnyList("dead_bunnies")

        # Original mutants with a recessive mutation, waiting to be mated eagerly.
        self.recessive_mutants: list[Bunny] = []

        # Pinned for display elsewhere, so never pruned.
        self.selected_bunny: Bunny | None = None

        self.bunny_created = Emitter("bunny_created")
        self.extinct = Emitter("extinct")
        self.overflow = Emitter("overflow")

        self._ids = itertools.count(1)
        self.total_created = 0
        self.total_pruned = 0

    def reset(self) -> None:
        """Dispose of every bunny and clear the selection."""
        for bunny in self.live_bunnies.to_list() + self.dead_bunnies.to_list():
            bunny.dispose()
        self.recessive_mutants.clear()
        self.selected_bunny = None
        self._ids = itertools.count(1)
        self.total_created = 0
        self.total_pruned = 0
        self.check_counts()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_bunny(
        self,
        generation: int,
        father: Bunny | None = None,
        mother: Bunny | None = None,
        alleles: Mapping[Gene, tuple[Allele, Allele]] | None = None,
        mutate: Gene | None = None,
        age: int = 0,
        is_alive: bool = True,
    ) -> Bunny:
        """Create a bunny and add it to the population.

        Args:
            generation: Generation the bunny is born in
            father: Father, or None for generation zero
            mother: Mother, or None for generation zero
            alleles: (father allele, mother allele) for each gene
            mutate: Gene whose mutation this bunny receives
            age: Initial age, non-zero only when restoring saved state
            is_alive: False only when restoring a bunny that is already dead

        Returns:
            The new bunny

        Raises:
            ValidationError: If exactly one parent is given, or a value is out of range
        """
        if (father is None) != (mother is None):
            raise ValidationError("father and mother must both be given, or both be None")
        if father is not None and mother is not None:
            if father is mother:
                raise ValidationError(f"bunny {father.id} cannot mate with itself")
            if father.is_disposed or mother.is_disposed:
                raise ValidationError("parents must not be disposed")

        genotype = Genotype(self.gene_pool, alleles, mutate=mutate, rng=self._rng)
        bunny = Bunny(
            next(self._ids), generation, genotype, father, mother, age=age, is_alive=is_alive
        )
        bunny.disposed.add_listener(self._on_bunny_disposed)

        if is_alive:
            bunny.died.add_listener(self._on_bunny_died)
            self.live_bunnies.add(bunny)
        else:
            # Only when restoring saved state.
            self.dead_bunnies.add(bunny)

        self.total_created += 1
        self.bunny_created.emit(bunny)
        return bunny

    def create_bunny_zero(
        self,
        alleles: Mapping[Gene, tuple[Allele, Allele]] | None = None,
        mutate: Gene | None = None,
    ) -> Bunny:
        """Create a generation-zero bunny, which has no parents."""
        return self.create_bunny(0, alleles=alleles, mutate=mutate)

    def _on_bunny_died(self, bunny: Bunny) -> None:
        self.live_bunnies.remove(bunny)
        self.dead_bunnies.add(bunny)
        if bunny in self.recessive_mutants:
            self.recessive_mutants.remove(bunny)

        if len(self.live_bunnies) == 0:
            logger.info("All bunnies have died")
            self.extinct.emit()

    def _on_bunny_disposed(self, bunny: Bunny) -> None:
        if bunny in self.live_bunnies:
            self.live_bunnies.remove(bunny)
            if bunny in self.recessive_mutants:
                self.recessive_mutants.remove(bunny)
        elif bunny in self.dead_bunnies:
            self.dead_bunnies.remove(bunny)
        if self.selected_bunny is bunny:
            self.selected_bunny = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def age_bunnies(self) -> int:
        """Age every live bunny by 1. Bunnies that reach max age die.

        Returns:
            Number of bunnies that died of old age
        """
        max_age = self.config.max_age
        died_count = 0

        # Iterate over a copy, since dying removes a bunny from live_bunnies.
        for bunny in self.live_bunnies.to_list():
            age = bunny.increment_age()
            if age > max_age:
                raise InvariantError(f"bunny {bunny.id} age {age} exceeds max age {max_age}")
            if age == max_age:
                bunny.die()
                died_count += 1

        if died_count:
            logger.debug(f"{died_count} bunnies died of old age")
        self.check_counts()
        return died_count

    def prune_dead_bunnies(self, generation: int) -> int:
        """Permanently dispose of dead bunnies that are too old to appear in a pedigree.

        Args:
            generation: Current generation

        Returns:
            Number of bunnies pruned
        """
        if generation < 0:
            raise ValidationError(f"invalid generation: {generation}")

        horizon = self.config.max_dead_bunny_generations
        number_pruned = 0

        # Backwards, oldest bunnies are at the front.
        for bunny in reversed(self.dead_bunnies.to_list()):
            if generation - bunny.generation > horizon and bunny is not self.selected_bunny:
                bunny.dispose()
                number_pruned += 1

        self.total_pruned += number_pruned
        if number_pruned:
            logger.debug(f"{number_pruned} dead bunnies pruned")
        self.check_counts()
        return number_pruned

    def mate_bunnies(self, generation: int) -> int:
        """Mate all live bunnies, producing the given generation.

        Recessive mutants are mated eagerly first. The remaining bunnies are paired
        in random order, and each pair produces a litter. Any pending mutations are
        distributed across the newborns, at most one mutation per newborn.

        Args:
            generation: Generation of the newborns

        Returns:
            Number of bunnies born
        """
        if generation < 0:
            raise ValidationError(f"invalid generation: {generation}")

        litter_size = self.config.litter_size

        # Worklist of bunnies still available to mate.
        bunnies = self.get_selection_candidates()

        number_born = 0
        if self.recessive_mutants:
            number_born += self._mate_eagerly(generation, bunnies)

        number_to_be_born = (len(bunnies) // 2) * litter_size
        mutate_at = self._choose_mutation_indices(number_to_be_born)

        born_index = 0
        for i in range(1, len(bunnies), 2):
            father = bunnies[i]
            mother = bunnies[i - 1]
            squares = self._punnett_squares(father, mother)

            for j in range(litter_size):
                bunny = self.create_bunny(
                    generation,
                    father=father,
                    mother=mother,
                    alleles={gene: square.get_cell(j) for gene, square in squares.items()},
                    mutate=mutate_at.get(born_index),
                )
                born_index += 1

                if bunny.is_original_mutant() and self.gene_pool.is_recessive_mutation(
                    bunny.genotype.mutation
                ):
                    self.recessive_mutants.append(bunny)

        if born_index != number_to_be_born:
            raise InvariantError(f"expected {number_to_be_born} bunnies to be born, got {born_index}")
        number_born += born_index

        logger.debug(f"{number_born} bunnies born in generation {generation}")
        self.check_counts()

        if len(self.live_bunnies) >= self.config.max_population:
            logger.info(f"Bunnies have taken over the world: {len(self.live_bunnies)}")
            self.overflow.emit()

        return number_born

    def _choose_mutation_indices(self, number_to_be_born: int) -> dict[int, Gene]:
        """Decide which newborns receive a pending mutation, and reset the pending flags.

        Indices are drawn without replacement, so no newborn receives 2 mutations.
        """
        pending = [gene for gene in self.gene_pool.genes if gene.mutation_pending]
        self.gene_pool.reset_mutation_pending()
        if not pending:
            return {}

        number_to_mutate = max(
            1, round_symmetric(self.config.mutation_percentage * number_to_be_born)
        )
        indices = shuffled(self._rng, range(number_to_be_born))

        mutate_at: dict[int, Gene] = {}
        for gene in pending:
            chosen, indices = indices[:number_to_mutate], indices[number_to_mutate:]
            if len(chosen) < number_to_mutate:
                logger.warning(
                    f"{gene.name} mutation applied to {len(chosen)} of {number_to_mutate} bunnies"
                )
            for index in chosen:
                mutate_at[index] = gene
        return mutate_at

    def _mate_eagerly(self, generation: int, bunnies: list[Bunny]) -> int:
        """Mate recessive mutants with bunnies that carry the same mutant allele.

        Each mated pair produces a normal litter plus 1 additional bunny that is likely
        to be homozygous recessive, so the mutation shows up in the phenotype sooner.
        Mated bunnies are removed from the worklist and from recessive_mutants.

        Returns:
            Number of bunnies born
        """
        number_mated = 0
        number_born = 0

        waiting = list(self.recessive_mutants)
        while waiting:
            father = waiting.pop(0)
            mutant_allele = father.genotype.mutation
            if mutant_allele is None:
                raise InvariantError(f"recessive mutant {father.id} has no mutation")

            mother = next(
                (b for b in bunnies if b is not father and b.genotype.has_allele(mutant_allele)),
                None,
            )
            if mother is None:
                continue

            number_mated += 1
            squares = self._punnett_squares(father, mother)

            for j in range(self.config.litter_size):
                self.create_bunny(
                    generation,
                    father=father,
                    mother=mother,
                    alleles={gene: square.get_cell(j) for gene, square in squares.items()},
                )
                number_born += 1

            self.create_bunny(
                generation,
                father=father,
                mother=mother,
                alleles={
                    gene: square.get_additional_cell(mutant_allele, gene.dominant_allele)
                    for gene, square in squares.items()
                },
            )
            number_born += 1

            bunnies.remove(father)
            bunnies.remove(mother)

            self.recessive_mutants.remove(father)
            if mother in self.recessive_mutants:
                self.recessive_mutants.remove(mother)
                number_mated += 1
                if mother in waiting:
                    waiting.remove(mother)

        if number_mated:
            logger.debug(f"{number_mated} recessive mutants mated eagerly, {number_born} born")
        return number_born

    def _punnett_squares(self, father: Bunny, mother: Bunny) -> dict[Gene, PunnettSquare]:
        # One square per gene, so the genes assort independently.
        return {
            gene: PunnettSquare(
                father.genotype.pair_for(gene), mother.genotype.pair_for(gene), self._rng
            )
            for gene in self.gene_pool.genes
        }

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_selection_candidates(self) -> list[Bunny]:
        """Live bunnies in a fresh random order."""
        return shuffled(self._rng, self.live_bunnies)

    def get_live_bunny_counts(self) -> BunnyCounts:
        return self.live_bunnies.counts

    @property
    def number_of_live_bunnies(self) -> int:
        return len(self.live_bunnies)

    @property
    def number_of_dead_bunnies(self) -> int:
        return len(self.dead_bunnies)

    @property
    def number_of_recessive_mutants(self) -> int:
        return len(self.recessive_mutants)

    def check_counts(self) -> None:
        """Verify the population bookkeeping.

        Raises:
            InvariantError: If the lists and counters disagree
        """
        live = len(self.live_bunnies)
        dead = len(self.dead_bunnies)
        expected = self.total_created - self.total_pruned
        if live + dead != expected:
            raise InvariantError(
                f"bunny counts out of sync: live={live}, dead={dead}, expected total={expected}"
            )
        self.live_bunnies.check_counts()
        self.dead_bunnies.check_counts()
