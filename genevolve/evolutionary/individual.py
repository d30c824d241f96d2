"""
Candidate solutions for the GenEvolve engine.

The engine is parametric over any type satisfying the ``Individual``
protocol (fitness, crossover, mutate, copy); no base class is required.
``RealVectorIndividual`` is the reference representation: a fixed-length
vector of real-valued genes whose fitness is the sum of its genes.
"""

import copy
import logging
from typing import Any, Callable, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from .errors import ContractViolation

logger = logging.getLogger(__name__)

DEFAULT_MUTATION_STRENGTH = 0.1


@runtime_checkable
class Individual(Protocol):
    """
    Capability set every candidate solution must provide.

    - ``fitness``: pure and deterministic given the current state; higher is better.
    - ``crossover``: returns exactly two new children and leaves both parents untouched.
    - ``mutate``: perturbs the candidate in place using only the passed generator.
    - ``copy``: returns a fully independent duplicate.
    """

    def fitness(self) -> float:
        ...

    def crossover(self, other: Any) -> Tuple[Any, Any]:
        ...

    def mutate(self, rng: np.random.Generator, strength: float = DEFAULT_MUTATION_STRENGTH) -> None:
        ...

    def copy(self) -> Any:
        ...


IndividualFactory = Callable[[np.random.Generator], Individual]


class RealVectorIndividual:
    """
    Real-valued gene vector.

    Attributes:
        genes: float64 array owned by this individual (copied on construction)
    """

    def __init__(self, genes: Sequence[float]):
        self.genes = np.array(genes, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.genes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RealVectorIndividual):
            return NotImplemented
        return np.array_equal(self.genes, other.genes)

    __hash__ = None

    def __repr__(self) -> str:
        return f"RealVectorIndividual(genes={self.genes.tolist()}, fitness={self.fitness():.6f})"

    def fitness(self) -> float:
        """Sum of all genes."""
        return float(np.sum(self.genes))

    def crossover(self, other: 'RealVectorIndividual') -> Tuple['RealVectorIndividual', 'RealVectorIndividual']:
        """
        Single-point crossover at the middle of the gene vector.

        The first child takes genes ``[0, mid)`` from ``self`` and ``[mid, L)``
        from ``other``; the second child takes the complementary split.

        Raises:
            ContractViolation: If the parents have different gene lengths
        """
        if len(self.genes) != len(other.genes):
            raise ContractViolation(
                f"Cannot cross individuals of different gene lengths: "
                f"{len(self.genes)} vs {len(other.genes)}"
            )

        mid = len(self.genes) // 2
        child1 = RealVectorIndividual(np.concatenate([self.genes[:mid], other.genes[mid:]]))
        child2 = RealVectorIndividual(np.concatenate([other.genes[:mid], self.genes[mid:]]))
        return child1, child2

    def mutate(self, rng: np.random.Generator, strength: float = DEFAULT_MUTATION_STRENGTH) -> None:
        """
        Perturb one uniformly chosen gene by a value drawn from ``[-strength, strength)``.

        An empty gene vector is left unchanged.
        """
        if len(self.genes) == 0:
            return

        position = int(rng.integers(0, len(self.genes)))
        delta = rng.uniform(-strength, strength)
        self.genes[position] += delta
        logger.debug(f"Mutated gene {position} by {delta:+.6f}")

    def copy(self) -> 'RealVectorIndividual':
        return copy.deepcopy(self)


def random_real_vector_factory(
    gene_length: int,
    low: float = 0.0,
    high: float = 1.0
) -> IndividualFactory:
    """
    Build a factory drawing genes uniformly from ``[low, high)``.

    Args:
        gene_length: Number of genes per individual
        low: Lower bound of the gene range
        high: Upper bound of the gene range

    Returns:
        Callable taking a numpy Generator and returning a RealVectorIndividual
    """
    if gene_length < 0:
        raise ValueError(f"gene_length must be non-negative, got {gene_length}")
    if high < low:
        raise ValueError(f"Invalid gene range: [{low}, {high})")

    def factory(rng: np.random.Generator) -> RealVectorIndividual:
        return RealVectorIndividual(rng.uniform(low, high, size=gene_length))

    return factory


def constant_real_vector_factory(gene_length: int, value: float = 1.0) -> IndividualFactory:
    """Build a factory producing identical vectors filled with ``value``."""
    if gene_length < 0:
        raise ValueError(f"gene_length must be non-negative, got {gene_length}")

    def factory(rng: np.random.Generator) -> RealVectorIndividual:
        return RealVectorIndividual(np.full(gene_length, value, dtype=np.float64))

    return factory
