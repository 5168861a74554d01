"""natsel: a population-genetics engine for simulating natural selection in bunnies."""

__version__ = "0.1.0"
