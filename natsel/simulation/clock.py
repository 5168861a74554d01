"""The generation clock.

Time runs continuously, but a generation boundary is never crossed by more than one
generation in a single step: a step that would cross a boundary snaps to it exactly.
"""

from __future__ import annotations

import logging
import math

from natsel.errors import InvariantError, ValidationError
from natsel.events import Emitter

logger = logging.getLogger(__name__)


def seconds_to_generations(seconds: float, seconds_per_generation: float) -> float:
    """Convert time to generations.

    A small epsilon is added to non-integer results to compensate for floating-point
    error, so that e.g. 2.9999999 generations counts as generation 3.
    """
    generations = 0.0
    if seconds > 0:
        generations = seconds / seconds_per_generation
        if generations % 1 != 0:
            generations += 0.0001
    return generations


class GenerationClock:
    """Repeating timeline of seconds_per_generation seconds.

    Emits time_in_percent_changed(current, previous) whenever time changes, then
    clock_generation_changed(current, previous) when a generation boundary is reached.
    """

    def __init__(self, seconds_per_generation: float = 10.0, min_steps_per_generation: int = 10):
        if seconds_per_generation <= 0:
            raise ValidationError(f"invalid seconds_per_generation: {seconds_per_generation}")
        if min_steps_per_generation <= 0:
            raise ValidationError(f"invalid min_steps_per_generation: {min_steps_per_generation}")

        self.seconds_per_generation = seconds_per_generation
        self.max_dt = seconds_per_generation / min_steps_per_generation
        self.is_running = False
        self._time_in_seconds = 0.0

        self.time_in_percent_changed = Emitter("time_in_percent_changed")
        self.clock_generation_changed = Emitter("clock_generation_changed")

    @property
    def time_in_seconds(self) -> float:
        return self._time_in_seconds

    @property
    def time_in_percent(self) -> float:
        """Percent of the current generation that has elapsed, in [0, 1)."""
        return (self._time_in_seconds % self.seconds_per_generation) / self.seconds_per_generation

    @property
    def time_in_generations(self) -> float:
        return seconds_to_generations(self._time_in_seconds, self.seconds_per_generation)

    @property
    def clock_generation(self) -> int:
        return math.floor(self.time_in_generations)

    def reset(self) -> None:
        self.is_running = False
        self._set_time(0.0)

    def step(self, dt: float) -> None:
        """Advance the clock by dt seconds, if it is running.

        Raises:
            ValidationError: If dt is negative, or at least a whole generation
        """
        if dt < 0:
            raise ValidationError(f"invalid dt: {dt}")
        if dt >= self.seconds_per_generation:
            raise ValidationError(
                f"dt={dt} exceeded seconds_per_generation={self.seconds_per_generation}"
            )
        if self.is_running:
            self._step_time(dt)

    def _step_time(self, dt: float) -> None:
        next_time = self._time_in_seconds + dt
        next_generation = math.floor(seconds_to_generations(next_time, self.seconds_per_generation))
        if next_generation > self.clock_generation:
            # Snap to the boundary, so that no part of a generation is skipped.
            self._set_time(next_generation * self.seconds_per_generation)
        else:
            self._set_time(next_time)

    def _set_time(self, time_in_seconds: float) -> None:
        previous_percent = self.time_in_percent
        previous_generation = self.clock_generation

        self._time_in_seconds = time_in_seconds

        current_percent = self.time_in_percent
        current_generation = self.clock_generation

        if current_percent != previous_percent:
            self.time_in_percent_changed.emit(current_percent, previous_percent)

        if current_generation != previous_generation:
            if current_generation != 0 and current_generation != previous_generation + 1:
                raise InvariantError(
                    f"skipped a generation, current={current_generation}, previous={previous_generation}"
                )
            self.clock_generation_changed.emit(current_generation, previous_generation)

    def constrain_dt(self, dt: float) -> float:
        """Limit dt so that a generation takes at least min_steps_per_generation steps."""
        return min(dt, self.max_dt)
