"""The bunny population: individuals, counts, and the collection that manages them."""

from __future__ import annotations

from natsel.population.bunny import Bunny
from natsel.population.bunny_list import BunnyList
from natsel.population.collection import BunnyCollection
from natsel.population.counts import BunnyCounts
from natsel.population.parser import BunnyVariety, parse_initial_population

__all__ = [
    "Bunny",
    "BunnyList",
    "BunnyCollection",
    "BunnyCounts",
    "BunnyVariety",
    "parse_initial_population",
]
