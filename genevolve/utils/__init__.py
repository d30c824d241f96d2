"""
Utilities module for GenEvolve.

This module provides configuration loading, logging and visualization
helpers that support the evolutionary engine.
"""

from .config import load_config, deep_merge
from .logging import setup_logging, EvolutionLogger, GenerationLog, get_logger
from .visualization import plot_fitness_history

__all__ = [
    # Configuration
    'load_config',
    'deep_merge',

    # Logging
    'setup_logging',
    'EvolutionLogger',
    'GenerationLog',
    'get_logger',

    # Visualization
    'plot_fitness_history',
]
