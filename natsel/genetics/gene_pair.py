"""GenePair: the 2 alleles an individual holds for one gene, one from each parent."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from natsel.errors import ValidationError
from natsel.genetics.phenotype import expressed_allele

if TYPE_CHECKING:
    from natsel.genetics.allele import Allele
    from natsel.genetics.gene import Gene


class GenePair:
    """A pair of alleles for a specific gene.

    Identical alleles make the pair homozygous, different alleles heterozygous.
    """

    def __init__(self, gene: Gene, father_allele: Allele, mother_allele: Allele):
        for allele in (father_allele, mother_allele):
            if allele is None or allele not in gene.alleles:
                raise ValidationError(f"{allele} is not an allele of the {gene.name} gene")
        self.gene = gene
        self.father_allele = father_allele
        self.mother_allele = mother_allele

    def __repr__(self) -> str:
        return f"GenePair({self.gene.name}: {self.father_allele}, {self.mother_allele})"

    def mutate(self, mutant_allele: Allele, rng: random.Random) -> None:
        """Replace either the father or the mother allele (never both) with the mutant allele.

        A recessive mutation therefore does not change appearance until a later
        generation produces a homozygous recessive bunny.
        """
        if rng.random() < 0.5:
            self.father_allele = mutant_allele
        else:
            self.mother_allele = mutant_allele

    def is_homozygous(self) -> bool:
        return self.father_allele is self.mother_allele

    def is_heterozygous(self) -> bool:
        return self.father_allele is not self.mother_allele

    def has_allele(self, allele: Allele | None) -> bool:
        return self.father_allele is allele or self.mother_allele is allele

    def visible_allele(self) -> Allele:
        return expressed_allele(self, self.gene.dominant_allele)

    def abbreviation(self) -> str:
        """e.g. 'Ff'. Empty if the gene has no dominance relationship yet."""
        dominant = self.gene.dominant_allele
        if dominant is None:
            return ""

        def letter(allele: Allele) -> str:
            if allele is dominant:
                return self.gene.dominant_abbreviation
            return self.gene.recessive_abbreviation

        return letter(self.father_allele) + letter(self.mother_allele)
