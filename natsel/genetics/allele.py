"""Alleles: the variant forms of a gene.

There is exactly one instance of each allele, defined here as module constants.
Alleles are compared by identity throughout the engine.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Allele:
    """An immutable trait variant, e.g. white fur."""

    name: str  # "white_fur"
    label: str  # "White Fur"

    def __str__(self) -> str:
        return self.name


WHITE_FUR = Allele("white_fur", "White Fur")
BROWN_FUR = Allele("brown_fur", "Brown Fur")
STRAIGHT_EARS = Allele("straight_ears", "Straight Ears")
FLOPPY_EARS = Allele("floppy_ears", "Floppy Ears")
SHORT_TEETH = Allele("short_teeth", "Short Teeth")
LONG_TEETH = Allele("long_teeth", "Long Teeth")

ALL_ALLELES = (WHITE_FUR, BROWN_FUR, STRAIGHT_EARS, FLOPPY_EARS, SHORT_TEETH, LONG_TEETH)
