"""Shared test helpers for natsel test suites."""

from __future__ import annotations

from random import Random

from natsel.genetics.allele import Allele
from natsel.genetics.gene import GenePool
from natsel.population.bunny import Bunny
from natsel.population.collection import BunnyCollection


class FixedDrawRandom(Random):
    """Seeded random whose uniform draws always return value.

    Shuffles still use the seeded bit generator, so candidate order stays random.
    """

    def __init__(self, value: float, seed: int = 0):
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value

    # Keeps shuffle and randint on the bit generator rather than random().
    getrandbits = Random.getrandbits


def genotype(
    gene_pool: GenePool,
    fur: tuple[Allele, Allele] | None = None,
    ears: tuple[Allele, Allele] | None = None,
    teeth: tuple[Allele, Allele] | None = None,
) -> dict:
    """Alleles mapping for BunnyCollection.create_bunny. Omitted genes are wild type."""
    alleles = {}
    if fur is not None:
        alleles[gene_pool.fur] = fur
    if ears is not None:
        alleles[gene_pool.ears] = ears
    if teeth is not None:
        alleles[gene_pool.teeth] = teeth
    return alleles


def add_bunnies(collection: BunnyCollection, count: int, alleles: dict | None = None) -> list[Bunny]:
    """Create count generation-zero bunnies with the same genotype."""
    return [collection.create_bunny_zero(alleles=alleles) for _ in range(count)]
