"""Genes and the gene pool.

A Gene identifies the normal (wild type) and mutant alleles for one trait and, once
the gene has mutated, which of the two is dominant. Dominance is a relationship
between 2 alleles, so it cannot exist until a mutation has been introduced.
"""

from __future__ import annotations

import logging

from natsel.errors import MutationError, ValidationError
from natsel.genetics.allele import (
    BROWN_FUR,
    FLOPPY_EARS,
    LONG_TEETH,
    SHORT_TEETH,
    STRAIGHT_EARS,
    WHITE_FUR,
    Allele,
)

logger = logging.getLogger(__name__)


class Gene:
    """One of the 3 heritable traits.

    dominant_allele is None until a mutation is introduced. After that it is set at
    most once per run; only reset() restores it.
    """

    def __init__(
        self,
        name: str,
        normal_allele: Allele,
        mutant_allele: Allele,
        dominant_abbreviation: str,
        recessive_abbreviation: str,
    ):
        self.name = name
        self.normal_allele = normal_allele
        self.mutant_allele = mutant_allele
        self.dominant_abbreviation = dominant_abbreviation
        self.recessive_abbreviation = recessive_abbreviation

        # Initial dominance may be configured by the initial-population parser.
        self._initial_dominant_allele: Allele | None = None
        self._dominant_allele: Allele | None = None

        # Is a mutation coming in the next generation of bunnies?
        self.mutation_pending = False

    def __repr__(self) -> str:
        return f"Gene({self.name!r})"

    @property
    def alleles(self) -> tuple[Allele, Allele]:
        return (self.normal_allele, self.mutant_allele)

    @property
    def dominant_allele(self) -> Allele | None:
        return self._dominant_allele

    @property
    def recessive_allele(self) -> Allele | None:
        if self._dominant_allele is None:
            return None
        return self.mutant_allele if self._dominant_allele is self.normal_allele else self.normal_allele

    def has_dominance(self) -> bool:
        return self._dominant_allele is not None

    def introduce_mutation(self, dominant: bool) -> Allele:
        """Schedule a mutation for the next generation and fix the dominance relationship.

        Args:
            dominant: True if the mutant allele is dominant, False if recessive

        Returns:
            The allele that is now dominant

        Raises:
            MutationError: If dominance was already set in this run
        """
        if self._dominant_allele is not None:
            raise MutationError(f"{self.name} gene has already mutated")
        self._dominant_allele = self.mutant_allele if dominant else self.normal_allele
        self.mutation_pending = True
        logger.debug(
            f"{self.name} mutation scheduled, {self.mutant_allele} is "
            f"{'dominant' if dominant else 'recessive'}"
        )
        return self._dominant_allele

    def cancel_mutation(self) -> None:
        """Cancel a mutation that has been scheduled but not yet applied."""
        if not self.mutation_pending:
            raise MutationError(f"{self.name} mutation is not scheduled")
        self.reset()

    def set_initial_dominance(self, dominant_allele: Allele | None) -> None:
        """Set both the current and the reset value of dominance."""
        if dominant_allele is not None and dominant_allele not in self.alleles:
            raise ValidationError(f"{dominant_allele} is not an allele of the {self.name} gene")
        self._initial_dominant_allele = dominant_allele
        self._dominant_allele = dominant_allele

    def allele_for_abbreviation(self, abbreviation: str) -> Allele | None:
        """Map 'F'/'f' style abbreviations to an allele, using the current dominance."""
        if self._dominant_allele is None:
            return None
        if abbreviation == self.dominant_abbreviation:
            return self._dominant_allele
        if abbreviation == self.recessive_abbreviation:
            return self.recessive_allele
        return None

    def reset(self) -> None:
        self._dominant_allele = self._initial_dominant_allele
        self.mutation_pending = False

    @classmethod
    def create_fur_gene(cls) -> Gene:
        return cls("fur", WHITE_FUR, BROWN_FUR, "F", "f")

    @classmethod
    def create_ears_gene(cls) -> Gene:
        return cls("ears", STRAIGHT_EARS, FLOPPY_EARS, "E", "e")

    @classmethod
    def create_teeth_gene(cls) -> Gene:
        return cls("teeth", SHORT_TEETH, LONG_TEETH, "T", "t")


class GenePool:
    """The pool of genes for the bunny population. One instance per engine."""

    def __init__(self):
        self.fur = Gene.create_fur_gene()
        self.ears = Gene.create_ears_gene()
        self.teeth = Gene.create_teeth_gene()

        # Iteration order is fur, ears, teeth everywhere.
        self.genes: tuple[Gene, Gene, Gene] = (self.fur, self.ears, self.teeth)

    def __iter__(self):
        return iter(self.genes)

    def reset(self) -> None:
        for gene in self.genes:
            gene.reset()

    def reset_mutation_pending(self) -> None:
        """Called after a mating cycle has decided which mutations to apply."""
        for gene in self.genes:
            gene.mutation_pending = False

    def clear_initial_dominance(self) -> None:
        """Revert any dominance configured by the initial-population parser."""
        for gene in self.genes:
            gene.set_initial_dominance(None)

    def gene_for_allele(self, allele: Allele) -> Gene:
        for gene in self.genes:
            if allele is gene.normal_allele or allele is gene.mutant_allele:
                return gene
        raise ValidationError(f"{allele} does not belong to any gene")

    def gene_named(self, name: str) -> Gene:
        for gene in self.genes:
            if gene.name == name:
                return gene
        raise ValidationError(f"unknown gene: {name!r}")

    def is_recessive_mutation(self, allele: Allele | None) -> bool:
        """Is the allele a mutant allele that is currently recessive?"""
        if allele is None:
            return False
        return any(
            gene.mutant_allele is allele and gene.recessive_allele is allele for gene in self.genes
        )
