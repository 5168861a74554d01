"""Population data recorded for graphing.

PopulationHistory holds a point every time the population changes in a way worth
plotting: at each generation boundary and after each selection event.
ProportionsHistory holds the counts at the start and end of each generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from natsel.errors import InvariantError

if TYPE_CHECKING:
    from natsel.population.counts import BunnyCounts


@dataclass(frozen=True)
class PopulationPoint:
    time_in_generations: float
    counts: BunnyCounts


class PopulationHistory:
    """Time series of live-bunny counts."""

    def __init__(self):
        self._points: list[PopulationPoint] = []

    def __len__(self) -> int:
        return len(self._points)

    @property
    def points(self) -> list[PopulationPoint]:
        return list(self._points)

    def record_counts(self, time_in_generations: float, counts: BunnyCounts) -> None:
        if self._points and time_in_generations < self._points[-1].time_in_generations:
            raise InvariantError(
                f"time went backwards: {time_in_generations} < {self._points[-1].time_in_generations}"
            )
        self._points.append(PopulationPoint(time_in_generations, counts))

    def series(self, field_name: str) -> list[tuple[float, int]]:
        """(time, value) pairs for one BunnyCounts field, e.g. "brown_fur"."""
        return [(p.time_in_generations, getattr(p.counts, field_name)) for p in self._points]

    def latest(self) -> PopulationPoint | None:
        return self._points[-1] if self._points else None

    def reset(self) -> None:
        self._points.clear()


@dataclass(frozen=True)
class ProportionsCounts:
    """Counts at the start and end of one generation."""

    generation: int
    start_counts: BunnyCounts
    end_counts: BunnyCounts


class ProportionsHistory:
    """Start and end counts for every completed generation, plus the current start counts."""

    def __init__(self):
        self._previous: list[ProportionsCounts] = []
        self.current_start_counts: BunnyCounts | None = None

    def __len__(self) -> int:
        return len(self._previous)

    def record_start_counts(self, generation: int, counts: BunnyCounts) -> None:
        if generation != len(self._previous):
            raise InvariantError(
                f"start counts for generation {generation}, expected {len(self._previous)}"
            )
        self.current_start_counts = counts

    def record_end_counts(self, generation: int, counts: BunnyCounts) -> None:
        """Close out a generation, using the start counts recorded for it."""
        if generation != len(self._previous):
            raise InvariantError(
                f"end counts for generation {generation}, expected {len(self._previous)}"
            )
        if self.current_start_counts is None:
            raise InvariantError(f"no start counts recorded for generation {generation}")
        self._previous.append(ProportionsCounts(generation, self.current_start_counts, counts))
        self.current_start_counts = None

    def get(self, generation: int) -> ProportionsCounts:
        return self._previous[generation]

    @property
    def generations(self) -> list[ProportionsCounts]:
        return list(self._previous)

    def reset(self) -> None:
        self._previous.clear()
        self.current_start_counts = None
