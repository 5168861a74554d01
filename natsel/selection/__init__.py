"""Selection pressures: environmental factors that kill bunnies based on phenotype."""

from __future__ import annotations

from natsel.selection.environment import Environment
from natsel.selection.food import Food
from natsel.selection.wolves import Wolf, WolfCollection

__all__ = ["Environment", "Food", "Wolf", "WolfCollection"]
