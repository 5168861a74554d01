"""Helpers shared by the selection pressures."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from natsel.errors import InvariantError
from natsel.utils import round_symmetric

if TYPE_CHECKING:
    from natsel.population.bunny import Bunny


def kill_percentage(bunnies: Sequence[Bunny], percent: float) -> int:
    """Kill a percentage of bunnies, taken from the front of the sequence.

    At least 1 bunny dies if there are any bunnies and percent > 0, so that a
    pressure always has a visible effect on a small population.

    Args:
        bunnies: Candidates, already in random order
        percent: Fraction to kill, in [0, 1]

    Returns:
        Number of bunnies killed
    """
    if not 0 <= percent <= 1:
        raise InvariantError(f"invalid percent: {percent}")
    if not bunnies or percent == 0:
        return 0

    number_to_kill = max(1, round_symmetric(percent * len(bunnies)))
    for bunny in bunnies[:number_to_kill]:
        bunny.die()
    return number_to_kill
