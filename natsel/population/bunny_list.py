"""A list of bunnies whose phenotype counts are maintained incrementally."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from natsel.errors import InvariantError
from natsel.population.counts import BunnyCounts

if TYPE_CHECKING:
    from natsel.population.bunny import Bunny


class BunnyList:
    """Ordered bunnies plus their BunnyCounts, updated on every add and remove."""

    def __init__(self, name: str):
        self.name = name
        self._bunnies: list[Bunny] = []
        self._ids: set[int] = set()
        self._counts = BunnyCounts.zero()

    def __len__(self) -> int:
        return len(self._bunnies)

    def __iter__(self) -> Iterator[Bunny]:
        return iter(self._bunnies)

    def __getitem__(self, index: int) -> Bunny:
        return self._bunnies[index]

    def __contains__(self, bunny: object) -> bool:
        return getattr(bunny, "id", None) in self._ids

    @property
    def counts(self) -> BunnyCounts:
        return self._counts

    def add(self, bunny: Bunny) -> None:
        if bunny.id in self._ids:
            raise InvariantError(f"bunny {bunny.id} is already in {self.name}")
        self._bunnies.append(bunny)
        self._ids.add(bunny.id)
        self._counts = self._counts.plus(bunny)

    def remove(self, bunny: Bunny) -> None:
        if bunny.id not in self._ids:
            raise InvariantError(f"bunny {bunny.id} is not in {self.name}")
        self._bunnies.remove(bunny)
        self._ids.discard(bunny.id)
        self._counts = self._counts.minus(bunny)

    def to_list(self) -> list[Bunny]:
        """Snapshot copy, safe to iterate while the list changes."""
        return list(self._bunnies)

    def check_counts(self) -> None:
        """Verify the incremental counts against a full recount."""
        recount = BunnyCounts.from_bunnies(self._bunnies)
        if recount != self._counts:
            raise InvariantError(f"{self.name} counts out of sync: {self._counts} != {recount}")
