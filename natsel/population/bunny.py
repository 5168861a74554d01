"""Bunny: an individual in the population."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from natsel.errors import InvariantError, ValidationError
from natsel.events import Emitter
from natsel.genetics.phenotype import Phenotype

if TYPE_CHECKING:
    from natsel.genetics.genotype import Genotype

logger = logging.getLogger(__name__)


class Bunny:
    """A bunny with a genotype, an age and links to its parents.

    Parent links are cleared (never re-pointed) when a parent is disposed. Bunnies are
    created only by BunnyCollection, which also owns aging.
    """

    def __init__(
        self,
        bunny_id: int,
        generation: int,
        genotype: Genotype,
        father: Bunny | None = None,
        mother: Bunny | None = None,
        age: int = 0,
        is_alive: bool = True,
    ):
        if generation < 0:
            raise ValidationError(f"invalid generation: {generation}")
        if age < 0:
            raise ValidationError(f"invalid age: {age}")
        if (father is None) != (mother is None):
            raise ValidationError("bunny must have 2 parents or no parents")

        self.id = bunny_id
        self.generation = generation
        self.genotype = genotype
        self.phenotype = Phenotype(genotype)
        self._age = age
        self._is_alive = is_alive

        self.died = Emitter("died")
        self.disposed = Emitter("disposed")

        self.father: Bunny | None = None
        self.mother: Bunny | None = None
        if father is not None and mother is not None:
            self.father = father
            self.mother = mother
            father.disposed.add_listener(self._on_father_disposed)
            mother.disposed.add_listener(self._on_mother_disposed)

    def __repr__(self) -> str:
        status = "alive" if self._is_alive else "dead"
        return f"Bunny(id={self.id}, generation={self.generation}, age={self._age}, {status})"

    @property
    def age(self) -> int:
        return self._age

    @property
    def is_alive(self) -> bool:
        return self._is_alive

    @property
    def is_disposed(self) -> bool:
        return self.disposed.is_disposed

    def increment_age(self) -> int:
        if not self._is_alive:
            raise InvariantError(f"cannot age dead bunny {self.id}")
        self._age += 1
        return self._age

    def die(self) -> None:
        """Kill this bunny. A bunny dies exactly once."""
        if not self._is_alive:
            raise InvariantError(f"bunny {self.id} is already dead")
        self._is_alive = False
        self.died.emit(self)

    def is_original_mutant(self) -> bool:
        """Is this the first bunny in its lineage to carry a newly introduced mutation?"""
        return self.genotype.mutation is not None

    def dispose(self) -> None:
        """Permanently remove this bunny. Children lose their reference to it."""
        if self.is_disposed:
            raise InvariantError(f"bunny {self.id} is already disposed")
        self._detach_parents()
        self.disposed.emit(self)
        self.disposed.dispose()
        self.died.dispose()

    def _detach_parents(self) -> None:
        if self.father is not None:
            self.father.disposed.remove_listener(self._on_father_disposed)
            self.father = None
        if self.mother is not None:
            self.mother.disposed.remove_listener(self._on_mother_disposed)
            self.mother = None

    def _on_father_disposed(self, father: Bunny) -> None:
        father.disposed.remove_listener(self._on_father_disposed)
        self.father = None

    def _on_mother_disposed(self, mother: Bunny) -> None:
        mother.disposed.remove_listener(self._on_mother_disposed)
        self.mother = None
