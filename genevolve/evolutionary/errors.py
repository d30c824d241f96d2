"""
Error types raised by the GenEvolve evolution engine and its operators.

All of them are terminal for an ``evolve`` call: the engine never retries
or partially recovers a generation.
"""


class EvolutionError(Exception):
    """Base class for every error raised by the evolution engine."""


class ContractViolation(EvolutionError, ValueError):
    """
    An operator or caller broke the population contract.

    Raised for empty populations, fitness/population length mismatches,
    selection results of the wrong size and crossover operators that
    produce no children.
    """


class NonComparableFitness(EvolutionError, ValueError):
    """A fitness value cannot be ordered (e.g. NaN)."""


class MissingGenerator(EvolutionError, RuntimeError):
    """No initial population was supplied and no individual factory is configured."""
