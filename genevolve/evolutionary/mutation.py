"""
Mutation operators: perturb a single individual in place.

``GaussianMutation`` gates the individual's own ``mutate`` on a Bernoulli
trial with probability ``mutation_rate`` and forwards ``mutation_strength``
as the perturbation magnitude.
"""

from abc import ABC, abstractmethod
from logging import getLogger

import numpy as np

from .individual import DEFAULT_MUTATION_STRENGTH, Individual

logger = getLogger(__name__)


class MutationOperator(ABC):
    """Perturbation boundary used by the engine."""

    @abstractmethod
    def mutate(self, individual: Individual, rng: np.random.Generator) -> bool:
        """
        Mutate ``individual`` in place.

        Args:
            individual: Offspring to perturb
            rng: Random generator; the only source of randomness allowed

        Returns:
            True if the individual was changed
        """


class GaussianMutation(MutationOperator):
    """
    Probabilistic mutation.

    Attributes:
        mutation_rate: Probability that a call mutates the individual, in [0, 1]
        mutation_strength: Magnitude forwarded to ``Individual.mutate``. For
            ``RealVectorIndividual`` one gene moves by at most this amount.
    """

    def __init__(
        self,
        mutation_rate: float = 0.1,
        mutation_strength: float = DEFAULT_MUTATION_STRENGTH
    ):
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {mutation_rate}")
        if mutation_strength < 0:
            raise ValueError(f"mutation_strength must be non-negative, got {mutation_strength}")

        self.mutation_rate = mutation_rate
        self.mutation_strength = mutation_strength

    def __repr__(self) -> str:
        return (
            f"GaussianMutation(mutation_rate={self.mutation_rate}, "
            f"mutation_strength={self.mutation_strength})"
        )

    def mutate(self, individual: Individual, rng: np.random.Generator) -> bool:
        if rng.random() < self.mutation_rate:
            individual.mutate(rng, self.mutation_strength)
            return True
        return False
