"""Genotype: the genetic blueprint of a bunny, one gene pair for each gene."""

from __future__ import annotations

import random
from collections.abc import Mapping
from typing import TYPE_CHECKING

from natsel.errors import GeneticsError, ValidationError
from natsel.genetics.gene_pair import GenePair

if TYPE_CHECKING:
    from natsel.genetics.allele import Allele
    from natsel.genetics.gene import Gene, GenePool


class Genotype:
    """An individual's 3 gene pairs (fur, ears, teeth).

    Args:
        gene_pool: The engine's gene pool
        alleles: (father allele, mother allele) for each gene. Genes not present
            default to the normal allele in both slots.
        mutate: Gene whose mutant allele replaces one allele of its pair. A bunny that
            receives a mutation this way is an original mutant.
        rng: Random source, required when mutate is given
    """

    def __init__(
        self,
        gene_pool: GenePool,
        alleles: Mapping[Gene, tuple[Allele, Allele]] | None = None,
        mutate: Gene | None = None,
        rng: random.Random | None = None,
    ):
        alleles = alleles or {}
        unknown = [gene for gene in alleles if gene not in gene_pool.genes]
        if unknown:
            raise ValidationError(f"genes not in gene pool: {unknown}")

        self.gene_pool = gene_pool
        self._pairs: dict[Gene, GenePair] = {}
        for gene in gene_pool.genes:
            father_allele, mother_allele = alleles.get(gene, (gene.normal_allele, gene.normal_allele))
            self._pairs[gene] = GenePair(gene, father_allele, mother_allele)

        # The mutant allele that this bunny received at birth, if it is an original mutant.
        self.mutation: Allele | None = None
        if mutate is not None:
            if rng is None:
                raise GeneticsError("a random source is required to apply a mutation")
            self._pairs[mutate].mutate(mutate.mutant_allele, rng)
            self.mutation = mutate.mutant_allele

    def __repr__(self) -> str:
        return f"Genotype({self.abbreviation() or 'wild type'})"

    @property
    def fur_pair(self) -> GenePair:
        return self._pairs[self.gene_pool.fur]

    @property
    def ears_pair(self) -> GenePair:
        return self._pairs[self.gene_pool.ears]

    @property
    def teeth_pair(self) -> GenePair:
        return self._pairs[self.gene_pool.teeth]

    @property
    def pairs(self) -> tuple[GenePair, ...]:
        return tuple(self._pairs[gene] for gene in self.gene_pool.genes)

    def pair_for(self, gene: Gene) -> GenePair:
        try:
            return self._pairs[gene]
        except KeyError:
            raise ValidationError(f"{gene} is not in this genotype's gene pool") from None

    def has_allele(self, allele: Allele | None) -> bool:
        """Does the genotype contain the allele in either slot of any pair?"""
        return any(pair.has_allele(allele) for pair in self._pairs.values())

    def abbreviation(self) -> str:
        """e.g. 'FfEEtt'. Genes without dominance are omitted.

        Within a pair the dominant letter is listed first, so 'fF' reads as 'Ff'.
        """
        parts = []
        for pair in self.pairs:
            letters = pair.abbreviation()
            if letters and letters[0].islower() and letters[1].isupper():
                letters = letters[::-1]
            parts.append(letters)
        return "".join(parts)
