"""Immutable snapshots of phenotype counts for a group of bunnies."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from natsel.errors import InvariantError

if TYPE_CHECKING:
    from natsel.population.bunny import Bunny


@dataclass(frozen=True)
class BunnyCounts:
    """Counts of each phenotype in a group of bunnies.

    Each gene's 2 counts always sum to the total.
    """

    total: int = 0
    white_fur: int = 0
    brown_fur: int = 0
    straight_ears: int = 0
    floppy_ears: int = 0
    short_teeth: int = 0
    long_teeth: int = 0

    def __post_init__(self):
        values = asdict(self)
        negative = [name for name, value in values.items() if value < 0]
        if negative:
            raise InvariantError(f"negative counts: {negative}")
        if not (
            self.white_fur + self.brown_fur == self.total
            and self.straight_ears + self.floppy_ears == self.total
            and self.short_teeth + self.long_teeth == self.total
        ):
            raise InvariantError(f"counts do not sum to total: {values}")

    @classmethod
    def zero(cls) -> BunnyCounts:
        return cls()

    @classmethod
    def from_bunnies(cls, bunnies: Iterable[Bunny]) -> BunnyCounts:
        """Full recount. Used to verify the incrementally maintained counts."""
        counts = cls.zero()
        for bunny in bunnies:
            counts = counts.plus(bunny)
        return counts

    def plus(self, bunny: Bunny) -> BunnyCounts:
        return self._add(bunny, 1)

    def minus(self, bunny: Bunny) -> BunnyCounts:
        return self._add(bunny, -1)

    def _add(self, bunny: Bunny, delta: int) -> BunnyCounts:
        phenotype = bunny.phenotype
        pool = bunny.genotype.gene_pool
        white = phenotype.expressed(pool.fur) is pool.fur.normal_allele
        straight = phenotype.expressed(pool.ears) is pool.ears.normal_allele
        short = phenotype.expressed(pool.teeth) is pool.teeth.normal_allele
        return BunnyCounts(
            total=self.total + delta,
            white_fur=self.white_fur + (delta if white else 0),
            brown_fur=self.brown_fur + (0 if white else delta),
            straight_ears=self.straight_ears + (delta if straight else 0),
            floppy_ears=self.floppy_ears + (0 if straight else delta),
            short_teeth=self.short_teeth + (delta if short else 0),
            long_teeth=self.long_teeth + (0 if short else delta),
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
