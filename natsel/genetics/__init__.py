"""Mendelian genetics for the bunny population.

This package implements the 3-gene, 2-allele model:
- Allele: a variant of a gene (white fur, brown fur, ...)
- Gene / GenePool: the 3 heritable traits and their dominance relationships
- GenePair / Genotype: an individual's diploid genetic state
- Phenotype: expressed traits derived from genotype + current dominance
- PunnettSquare: the shuffled 2x2 cross of two gene pairs
"""

from __future__ import annotations

from natsel.genetics.allele import (
    BROWN_FUR,
    FLOPPY_EARS,
    LONG_TEETH,
    SHORT_TEETH,
    STRAIGHT_EARS,
    WHITE_FUR,
    Allele,
)
from natsel.genetics.gene import Gene, GenePool
from natsel.genetics.gene_pair import GenePair
from natsel.genetics.genotype import Genotype
from natsel.genetics.phenotype import Phenotype, expressed_allele
from natsel.genetics.punnett import Cell, PunnettSquare

__all__ = [
    "Allele",
    "WHITE_FUR",
    "BROWN_FUR",
    "STRAIGHT_EARS",
    "FLOPPY_EARS",
    "SHORT_TEETH",
    "LONG_TEETH",
    "Gene",
    "GenePool",
    "GenePair",
    "Genotype",
    "Phenotype",
    "expressed_allele",
    "Cell",
    "PunnettSquare",
]
