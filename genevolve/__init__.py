"""
GenEvolve: a generic generational genetic-algorithm engine.

Given a candidate type offering fitness, crossover and mutation, GenEvolve
repeatedly evaluates, selects, recombines and mutates a population for a
fixed number of generations.

Main Components:
- evolutionary: engine, operator interfaces and reference operators
- utils: configuration, logging, visualization

Usage:
    from genevolve.evolutionary import GeneticAlgorithm, TournamentSelection
    from genevolve.main import main
"""

__version__ = "1.0.0"

__all__ = [
    "evolutionary",
    "utils",
]
