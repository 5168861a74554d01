"""Phenotype: the appearance of a bunny, the manifestation of its genotype.

The expressed allele is derived on every query from the gene pair and the gene's
current dominance, so it never goes stale.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from natsel.errors import GeneticsError

if TYPE_CHECKING:
    from natsel.genetics.allele import Allele
    from natsel.genetics.gene import Gene
    from natsel.genetics.gene_pair import GenePair
    from natsel.genetics.genotype import Genotype


def expressed_allele(gene_pair: GenePair, dominant_allele: Allele | None) -> Allele:
    """Which allele of a gene pair is visible, given the gene's dominant allele.

    Homozygous pairs express their only allele. Heterozygous pairs express the
    dominant allele, which must exist because a second allele only appears after
    a mutation has fixed dominance.
    """
    if gene_pair.father_allele is gene_pair.mother_allele:
        return gene_pair.father_allele
    if dominant_allele is None:
        raise GeneticsError(f"heterozygous {gene_pair.gene.name} pair has no dominant allele")
    return dominant_allele


class Phenotype:
    """Read-only view of expressed traits."""

    def __init__(self, genotype: Genotype):
        self._genotype = genotype

    def expressed(self, gene: Gene) -> Allele:
        return expressed_allele(self._genotype.pair_for(gene), gene.dominant_allele)

    def has(self, allele: Allele) -> bool:
        """Does this phenotype show the allele? e.g. phenotype.has(WHITE_FUR)"""
        gene = self._genotype.gene_pool.gene_for_allele(allele)
        return self.expressed(gene) is allele

    @property
    def fur_allele(self) -> Allele:
        return self.expressed(self._genotype.gene_pool.fur)

    @property
    def ears_allele(self) -> Allele:
        return self.expressed(self._genotype.gene_pool.ears)

    @property
    def teeth_allele(self) -> Allele:
        return self.expressed(self._genotype.gene_pool.teeth)

    def as_dict(self) -> dict[str, str]:
        return {gene.name: self.expressed(gene).name for gene in self._genotype.gene_pool.genes}
