"""
Selection mechanisms for the GenEvolve evolutionary algorithm.

This module implements:
- SelectionStrategy: the parent-selection boundary used by the engine
- Tournament selection: k draws with replacement per slot, fittest draw wins
- Input validation shared by selection strategies
"""

import math
from abc import ABC, abstractmethod
from logging import getLogger
from typing import List, Sequence

import numpy as np

from .errors import ContractViolation, NonComparableFitness
from .individual import Individual

logger = getLogger(__name__)


class SelectionStrategy(ABC):
    """Chooses a parent sequence from a population, driven by fitness."""

    @abstractmethod
    def select(
        self,
        population: Sequence[Individual],
        fitness_values: Sequence[float],
        rng: np.random.Generator
    ) -> List[Individual]:
        """
        Select parents for the next generation.

        Args:
            population: Current population
            fitness_values: fitness_values[i] is the fitness of population[i]
            rng: Random generator; the only source of randomness allowed

        Returns:
            Independent copies of the selected parents, len(population) of them
        """


def validate_selection_inputs(
    population: Sequence[Individual],
    fitness_values: Sequence[float]
) -> None:
    """
    Check the population/fitness pairing before a selection call.

    Raises:
        ContractViolation: If the population is empty or the lengths differ
    """
    if len(population) == 0:
        raise ContractViolation("Cannot select parents from an empty population")

    if len(fitness_values) != len(population):
        raise ContractViolation(
            f"Fitness/population length mismatch: "
            f"{len(fitness_values)} fitness values for {len(population)} individuals"
        )


def _check_comparable(index: int, value: float) -> None:
    if math.isnan(value):
        raise NonComparableFitness(f"Fitness of individual {index} is NaN and cannot be ordered")


def run_tournament(draws: Sequence[int], fitness_values: Sequence[float]) -> int:
    """
    Pick the winner among the drawn indices.

    Ties go to the last maximal index in draw order, not the lowest index:
    for draws [3, 1] with equal fitness the winner is 1.

    Args:
        draws: Population indices drawn for this tournament (non-empty)
        fitness_values: Fitness of every individual in the population

    Returns:
        Index of the winning individual

    Raises:
        NonComparableFitness: If a drawn fitness is NaN
    """
    if len(draws) == 0:
        raise ContractViolation("A tournament needs at least one participant")

    winner = int(draws[0])
    _check_comparable(winner, fitness_values[winner])

    for index in draws[1:]:
        index = int(index)
        _check_comparable(index, fitness_values[index])
        if fitness_values[index] >= fitness_values[winner]:
            winner = index

    return winner


class TournamentSelection(SelectionStrategy):
    """
    Tournament selection.

    For each of the N output slots, ``tournament_size`` indices are drawn
    uniformly with replacement from [0, N) and the fittest draw is kept
    (see ``run_tournament`` for the tie-break).
    """

    def __init__(self, tournament_size: int = 3):
        if tournament_size < 1:
            raise ValueError(f"tournament_size must be at least 1, got {tournament_size}")
        self.tournament_size = tournament_size

    def __repr__(self) -> str:
        return f"TournamentSelection(tournament_size={self.tournament_size})"

    def select(
        self,
        population: Sequence[Individual],
        fitness_values: Sequence[float],
        rng: np.random.Generator
    ) -> List[Individual]:
        validate_selection_inputs(population, fitness_values)

        size = len(population)
        parents = []
        for _ in range(size):
            draws = rng.integers(0, size, size=self.tournament_size)
            winner = run_tournament(draws, fitness_values)
            parents.append(population[winner].copy())

        logger.debug(
            f"Tournament selection: {size} slots, {self.tournament_size} competitors each"
        )
        return parents
