"""Simulation driver: generation clock, history recording, and the engine."""

from __future__ import annotations

from natsel.simulation.clock import GenerationClock
from natsel.simulation.engine import SimulationEngine, SimulationMode, TimeSpeed
from natsel.simulation.history import PopulationHistory, ProportionsCounts, ProportionsHistory

__all__ = [
    "GenerationClock",
    "SimulationEngine",
    "SimulationMode",
    "TimeSpeed",
    "PopulationHistory",
    "ProportionsCounts",
    "ProportionsHistory",
]
