"""Small numeric helpers shared by the engine."""

from __future__ import annotations

import math
import random


def round_symmetric(value: float) -> int:
    """Round half away from zero, so 0.5 -> 1 and -0.5 -> -1.

    Python's round() uses banker's rounding, which would bias counts derived from percentages.
    """
    rounded = math.floor(abs(value) + 0.5)
    return int(rounded if value >= 0 else -rounded)


def next_double_in_range(rng: random.Random, value_range: tuple[float, float]) -> float:
    """Uniform draw from [min, max)."""
    low, high = value_range
    return low + (high - low) * rng.random()


def shuffled(rng: random.Random, items) -> list:
    """Return a new shuffled list, leaving items untouched."""
    result = list(items)
    rng.shuffle(result)
    return result


def in_range(value: float, value_range: tuple[float, float]) -> bool:
    """Inclusive range check."""
    return value_range[0] <= value <= value_range[1]


def center(value_range: tuple[float, float]) -> float:
    return (value_range[0] + value_range[1]) / 2
