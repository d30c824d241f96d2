"""
Test suite for individuals, crossover and mutation operators.

Validates:
- RealVectorIndividual fitness, copy independence and protocol conformance
- Single-point crossover arity and gene split
- Mutation magnitude bounded by mutation_strength
- GaussianMutation frequency converging to mutation_rate
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from genevolve.evolutionary.crossover import CrossoverOperator, SinglePointCrossover
from genevolve.evolutionary.errors import ContractViolation
from genevolve.evolutionary.individual import (
    Individual,
    RealVectorIndividual,
    constant_real_vector_factory,
    random_real_vector_factory,
)
from genevolve.evolutionary.mutation import GaussianMutation, MutationOperator


class CountingIndividual:
    """Minimal Individual recording how it was mutated."""

    def __init__(self):
        self.mutations = 0
        self.strengths = []

    def fitness(self):
        return float(self.mutations)

    def crossover(self, other):
        return CountingIndividual(), CountingIndividual()

    def mutate(self, rng, strength=0.1):
        self.mutations += 1
        self.strengths.append(strength)

    def copy(self):
        clone = CountingIndividual()
        clone.mutations = self.mutations
        clone.strengths = list(self.strengths)
        return clone


class TestRealVectorIndividual:
    """Test the reference candidate representation."""

    def test_fitness_is_gene_sum(self):
        assert RealVectorIndividual([1.0, 2.5, -0.5]).fitness() == pytest.approx(3.0)

    def test_empty_vector_fitness(self):
        assert RealVectorIndividual([]).fitness() == 0.0

    def test_genes_are_copied_on_construction(self):
        genes = np.array([1.0, 2.0])
        individual = RealVectorIndividual(genes)
        genes[0] = 99.0
        assert individual.genes[0] == 1.0

    def test_copy_is_independent(self):
        original = RealVectorIndividual([1.0, 2.0, 3.0])
        clone = original.copy()
        clone.genes[0] = -5.0
        assert original.genes[0] == 1.0
        assert clone is not original

    def test_equality_compares_genes(self):
        assert RealVectorIndividual([1.0, 2.0]) == RealVectorIndividual([1.0, 2.0])
        assert RealVectorIndividual([1.0, 2.0]) != RealVectorIndividual([2.0, 1.0])

    def test_satisfies_individual_protocol(self):
        assert isinstance(RealVectorIndividual([1.0]), Individual)
        assert isinstance(CountingIndividual(), Individual)

    def test_mutate_changes_exactly_one_gene_within_strength(self):
        """One gene moves by less than the strength; the others stay put."""
        rng = np.random.default_rng(7)
        for strength in [0.1, 0.5, 2.0]:
            individual = RealVectorIndividual(np.ones(8))
            individual.mutate(rng, strength)
            delta = individual.genes - 1.0
            changed = np.flatnonzero(delta)
            assert len(changed) <= 1
            assert np.all(np.abs(delta) <= strength)

    def test_mutate_default_strength(self):
        """Without an explicit strength the perturbation stays within 0.1."""
        rng = np.random.default_rng(3)
        individual = RealVectorIndividual(np.zeros(4))
        for _ in range(50):
            individual.mutate(rng)
        assert np.all(np.abs(individual.genes) <= 0.1 * 50)

    def test_mutate_zero_strength_is_noop(self):
        rng = np.random.default_rng(0)
        individual = RealVectorIndividual([1.0, 2.0])
        individual.mutate(rng, 0.0)
        np.testing.assert_array_equal(individual.genes, [1.0, 2.0])

    def test_mutate_empty_vector_is_noop(self):
        rng = np.random.default_rng(0)
        individual = RealVectorIndividual([])
        individual.mutate(rng, 1.0)
        assert len(individual) == 0

    def test_mutate_is_reproducible(self):
        first = RealVectorIndividual(np.ones(5))
        second = RealVectorIndividual(np.ones(5))
        first.mutate(np.random.default_rng(11), 0.3)
        second.mutate(np.random.default_rng(11), 0.3)
        assert first == second


class TestFactories:
    """Test individual factories."""

    def test_random_factory_range_and_length(self):
        factory = random_real_vector_factory(6, low=-2.0, high=2.0)
        individual = factory(np.random.default_rng(0))
        assert len(individual) == 6
        assert np.all(individual.genes >= -2.0)
        assert np.all(individual.genes < 2.0)

    def test_random_factory_reproducible(self):
        factory = random_real_vector_factory(4)
        assert factory(np.random.default_rng(5)) == factory(np.random.default_rng(5))

    def test_constant_factory(self):
        individual = constant_real_vector_factory(3, value=1.0)(np.random.default_rng(0))
        np.testing.assert_array_equal(individual.genes, [1.0, 1.0, 1.0])

    def test_invalid_factory_arguments(self):
        with pytest.raises(ValueError):
            random_real_vector_factory(-1)
        with pytest.raises(ValueError):
            random_real_vector_factory(3, low=1.0, high=0.0)
        with pytest.raises(ValueError):
            constant_real_vector_factory(-2)


class TestSinglePointCrossover:
    """Test single-point crossover arity and gene split."""

    @pytest.mark.parametrize("length", [2, 5, 10])
    def test_two_children_with_complementary_split(self, length):
        parent1 = RealVectorIndividual(np.arange(length, dtype=float))
        parent2 = RealVectorIndividual(-np.arange(length, dtype=float) - 100.0)
        mid = length // 2

        children = SinglePointCrossover().crossover(parent1, parent2)

        assert len(children) == 2
        child1, child2 = children
        assert len(child1) == length
        assert len(child2) == length
        np.testing.assert_array_equal(child1.genes[:mid], parent1.genes[:mid])
        np.testing.assert_array_equal(child1.genes[mid:], parent2.genes[mid:])
        np.testing.assert_array_equal(child2.genes[:mid], parent2.genes[:mid])
        np.testing.assert_array_equal(child2.genes[mid:], parent1.genes[mid:])

    def test_parents_are_not_modified(self):
        parent1 = RealVectorIndividual([1.0, 2.0, 3.0, 4.0])
        parent2 = RealVectorIndividual([5.0, 6.0, 7.0, 8.0])

        children = SinglePointCrossover().crossover(parent1, parent2)
        children[0].genes[:] = 0.0
        children[1].genes[:] = 0.0

        np.testing.assert_array_equal(parent1.genes, [1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(parent2.genes, [5.0, 6.0, 7.0, 8.0])

    def test_length_mismatch_raises(self):
        with pytest.raises(ContractViolation):
            SinglePointCrossover().crossover(
                RealVectorIndividual([1.0, 2.0]),
                RealVectorIndividual([1.0]),
            )

    def test_delegates_to_individual_crossover_once(self):
        calls = []

        class Recording(CountingIndividual):
            def crossover(self, other):
                calls.append((self, other))
                return "a", "b"

        parent1, parent2 = Recording(), Recording()
        assert SinglePointCrossover().crossover(parent1, parent2) == ["a", "b"]
        assert calls == [(parent1, parent2)]

    def test_is_crossover_operator(self):
        assert isinstance(SinglePointCrossover(), CrossoverOperator)


class TestGaussianMutation:
    """Test the probabilistic mutation operator."""

    def test_is_mutation_operator(self):
        assert isinstance(GaussianMutation(), MutationOperator)

    @pytest.mark.parametrize("rate, strength", [(-0.1, 0.1), (1.5, 0.1), (0.5, -1.0)])
    def test_invalid_parameters(self, rate, strength):
        with pytest.raises(ValueError):
            GaussianMutation(mutation_rate=rate, mutation_strength=strength)

    def test_rate_zero_never_mutates(self):
        operator = GaussianMutation(mutation_rate=0.0)
        rng = np.random.default_rng(0)
        individual = CountingIndividual()
        results = [operator.mutate(individual, rng) for _ in range(500)]
        assert not any(results)
        assert individual.mutations == 0

    def test_rate_one_always_mutates(self):
        operator = GaussianMutation(mutation_rate=1.0)
        rng = np.random.default_rng(0)
        individual = CountingIndividual()
        results = [operator.mutate(individual, rng) for _ in range(500)]
        assert all(results)
        assert individual.mutations == 500

    @pytest.mark.parametrize("rate", [0.1, 0.3, 0.75])
    def test_mutation_frequency_converges_to_rate(self, rate):
        """Over 10 000 trials the mutated fraction is within 0.02 of the rate."""
        operator = GaussianMutation(mutation_rate=rate)
        rng = np.random.default_rng(2024)
        trials = 10_000

        mutated = sum(operator.mutate(CountingIndividual(), rng) for _ in range(trials))

        assert abs(mutated / trials - rate) < 0.02

    def test_strength_is_forwarded(self):
        """mutation_strength reaches the individual's mutate call."""
        operator = GaussianMutation(mutation_rate=1.0, mutation_strength=0.37)
        individual = CountingIndividual()
        operator.mutate(individual, np.random.default_rng(0))
        assert individual.strengths == [0.37]

    def test_strength_bounds_real_vector_perturbation(self):
        operator = GaussianMutation(mutation_rate=1.0, mutation_strength=0.5)
        rng = np.random.default_rng(9)
        for _ in range(100):
            individual = RealVectorIndividual(np.zeros(3))
            operator.mutate(individual, rng)
            assert np.max(np.abs(individual.genes)) <= 0.5

    def test_reproducible_with_same_seed(self):
        operator = GaussianMutation(mutation_rate=0.5, mutation_strength=0.2)
        first = [RealVectorIndividual(np.ones(4)) for _ in range(20)]
        second = [RealVectorIndividual(np.ones(4)) for _ in range(20)]

        rng1 = np.random.default_rng(77)
        rng2 = np.random.default_rng(77)
        for a, b in zip(first, second):
            operator.mutate(a, rng1)
            operator.mutate(b, rng2)

        assert first == second
