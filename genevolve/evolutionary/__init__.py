"""
Evolutionary Algorithm Module for GenEvolve.

This module implements the core generational genetic algorithm, the three
operator boundaries it is parametric over (selection, crossover, mutation),
one reference operator of each kind and a reference real-vector candidate.
"""

from .errors import EvolutionError, ContractViolation, NonComparableFitness, MissingGenerator
from .individual import (
    Individual,
    IndividualFactory,
    RealVectorIndividual,
    random_real_vector_factory,
    constant_real_vector_factory,
)
from .selection import SelectionStrategy, TournamentSelection, run_tournament, validate_selection_inputs
from .crossover import CrossoverOperator, SinglePointCrossover
from .mutation import MutationOperator, GaussianMutation
from .algorithm import (
    GeneticAlgorithm,
    GenerationStats,
    EvolutionConfig,
    EvolutionResult,
    as_generator,
    best_individual,
    create_genetic_algorithm_from_config,
    run_evolution,
)

__all__ = [
    # Errors
    'EvolutionError',
    'ContractViolation',
    'NonComparableFitness',
    'MissingGenerator',

    # Individuals
    'Individual',
    'IndividualFactory',
    'RealVectorIndividual',
    'random_real_vector_factory',
    'constant_real_vector_factory',

    # Operators
    'SelectionStrategy',
    'TournamentSelection',
    'run_tournament',
    'validate_selection_inputs',
    'CrossoverOperator',
    'SinglePointCrossover',
    'MutationOperator',
    'GaussianMutation',

    # Algorithm
    'GeneticAlgorithm',
    'GenerationStats',
    'EvolutionConfig',
    'EvolutionResult',
    'as_generator',
    'best_individual',
    'create_genetic_algorithm_from_config',
    'run_evolution',
]
