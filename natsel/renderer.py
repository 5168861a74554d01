"""Rich terminal renderer for the population simulation."""

from __future__ import annotations

import io
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from natsel.population.counts import BunnyCounts
    from natsel.simulation.engine import SimulationEngine


def _make_console() -> Console:
    """Create a Rich Console that works on Windows (force UTF-8)."""
    if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
        utf8_stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
        return Console(file=utf8_stdout, force_terminal=True)
    return Console()


# Column header, BunnyCounts field, style
COUNT_COLUMNS = [
    ("Total", "total", "bold"),
    ("White", "white_fur", "white"),
    ("Brown", "brown_fur", "dark_orange3"),
    ("Straight", "straight_ears", "cyan"),
    ("Floppy", "floppy_ears", "magenta"),
    ("Short", "short_teeth", "green"),
    ("Long", "long_teeth", "yellow"),
]


class Renderer:
    """Prints per-generation counts and a run summary."""

    def __init__(self, console: Console | None = None):
        self.console = console or _make_console()

    def build_table(self, engine: SimulationEngine) -> Table:
        """One row per generation, using the counts recorded at the start of each."""
        table = Table(title="Bunny population by generation")
        table.add_column("Gen", justify="right")
        for header, _, style in COUNT_COLUMNS:
            table.add_column(header, justify="right", style=style)

        for point in engine.population_history.points:
            # Whole-number times are generation boundaries, the rest are selection events.
            if point.time_in_generations % 1 == 0:
                table.add_row(str(int(point.time_in_generations)), *self._cells(point.counts))
        return table

    def _cells(self, counts: BunnyCounts) -> list[str]:
        return [str(getattr(counts, field)) for _, field, _ in COUNT_COLUMNS]

    def print_table(self, engine: SimulationEngine) -> None:
        self.console.print(self.build_table(engine))

    def render_summary(self, engine: SimulationEngine) -> str:
        collection = engine.bunny_collection
        counts = collection.get_live_bunny_counts()
        dominance = ", ".join(
            f"{gene.name}={gene.dominant_allele.name if gene.dominant_allele else '-'}"
            for gene in engine.gene_pool.genes
        )
        lines = [
            f"  Generation: {engine.generation} | Mode: {engine.mode.value} | "
            f"Environment: {engine.environment.value}",
            f"  Live: {counts.total} | Dead (retained): {collection.number_of_dead_bunnies} | "
            f"Created: {collection.total_created} | Pruned: {collection.total_pruned}",
            f"  Dominant alleles: {dominance}",
        ]
        return "\n".join(lines)

    def print_summary(self, engine: SimulationEngine) -> None:
        self.console.print(self.render_summary(engine), highlight=False)
