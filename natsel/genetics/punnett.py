"""Punnett square: the possible genotypes that result from crossing 2 gene pairs.

The square has 4 cells, describing the ways 2 pairs of alleles may be crossed.
For 2 bunnies that are heterozygous ('Ff') for fur:

       F    f
  F | FF | Ff |
  f | Ff | ff |

This models Mendel's Law of Segregation. Cell order is shuffled per instance, and a
separate square is built for each gene, which models the Law of Independent Assortment.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from natsel.genetics.allele import Allele
    from natsel.genetics.gene_pair import GenePair


class Cell(NamedTuple):
    """One specific cross: a (father allele, mother allele) combination."""

    father_allele: Allele
    mother_allele: Allele


class PunnettSquare:
    """The 4-cell cross of a father gene pair and a mother gene pair, in random order."""

    def __init__(self, father_pair: GenePair, mother_pair: GenePair, rng: random.Random):
        self._rng = rng
        cells = [
            Cell(father_pair.father_allele, mother_pair.father_allele),
            Cell(father_pair.father_allele, mother_pair.mother_allele),
            Cell(father_pair.mother_allele, mother_pair.father_allele),
            Cell(father_pair.mother_allele, mother_pair.mother_allele),
        ]
        rng.shuffle(cells)
        self._cells: tuple[Cell, ...] = tuple(cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self):
        return iter(self._cells)

    def get_cell(self, index: int) -> Cell:
        """Get a cell by index. The order is fixed for the lifetime of this square."""
        if not 0 <= index < len(self._cells):
            raise IndexError(f"invalid cell index: {index}")
        return self._cells[index]

    def get_random_cell(self) -> Cell:
        return self._cells[self._rng.randint(0, len(self._cells) - 1)]

    def get_additional_cell(self, mutant_allele: Allele, dominant_allele: Allele | None) -> Cell:
        """Cell for the extra offspring born when a recessive mutant mates eagerly.

        First choice is a homozygous mutant cell. Second choice is a cell containing
        the dominant allele. A random cell is the last resort.
        """
        for cell in self._cells:
            if cell.father_allele is mutant_allele and cell.mother_allele is mutant_allele:
                return cell

        if dominant_allele is not None:
            for cell in self._cells:
                if cell.father_allele is dominant_allele or cell.mother_allele is dominant_allele:
                    return cell

        return self.get_random_cell()
