"""Crossover operators: combine two parents into offspring."""

from abc import ABC, abstractmethod
from logging import getLogger
from typing import List

from .individual import Individual

logger = getLogger(__name__)


class CrossoverOperator(ABC):
    """
    Recombination boundary used by the engine.

    An operator may return any non-empty number of children; the engine
    flattens them into the offspring list.
    """

    @abstractmethod
    def crossover(self, parent1: Individual, parent2: Individual) -> List[Individual]:
        """Combine two parents without modifying either of them."""


class SinglePointCrossover(CrossoverOperator):
    """Delegates to the individuals' own crossover and returns both children unmodified."""

    def __repr__(self) -> str:
        return "SinglePointCrossover()"

    def crossover(self, parent1: Individual, parent2: Individual) -> List[Individual]:
        child1, child2 = parent1.crossover(parent2)
        return [child1, child2]
