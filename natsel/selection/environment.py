"""Abiotic environments that bunnies live in."""

from __future__ import annotations

from enum import Enum

from natsel.genetics.allele import BROWN_FUR, WHITE_FUR, Allele


class Environment(str, Enum):
    """Where the bunnies live. Fur that matches the environment is camouflaged."""

    EQUATOR = "equator"
    ARCTIC = "arctic"

    @property
    def camouflaged_fur(self) -> Allele:
        return BROWN_FUR if self is Environment.EQUATOR else WHITE_FUR
