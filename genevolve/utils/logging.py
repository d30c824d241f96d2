"""
Logging utilities for the GenEvolve framework.

This module provides:
- Standard logging setup with file and console handlers for the package logger
- EvolutionLogger for structured, per-generation fitness records
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

PACKAGE_LOGGER = 'genevolve'


@dataclass
class GenerationLog:
    """Data class for logging generation-level fitness information."""
    generation: int
    population_size: int
    best_fitness: float
    mean_fitness: float
    std_fitness: float
    worst_fitness: float
    mutated_count: int = 0
    elapsed_seconds: float = 0.0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def from_stats(cls, stats: Union[Dict[str, Any], Any]) -> 'GenerationLog':
        """Build from a GenerationStats (or its dictionary form)."""
        data = stats if isinstance(stats, dict) else stats.to_dict()
        return cls(
            generation=int(data['generation']),
            population_size=int(data['population_size']),
            best_fitness=float(data['best_fitness']),
            mean_fitness=float(data['mean_fitness']),
            std_fitness=float(data['std_fitness']),
            worst_fitness=float(data['worst_fitness']),
            mutated_count=int(data.get('mutated_count', 0)),
            elapsed_seconds=float(data.get('elapsed_seconds', 0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class EvolutionLogger:
    """
    Structured logger for tracking evolutionary progress.

    ``log_generation`` matches the engine's ``on_generation`` callback, so an
    instance can be plugged straight into ``GeneticAlgorithm``. Records are
    appended to ``generations.jsonl`` and kept in memory for reporting.
    """

    def __init__(self, log_dir: Union[str, Path], log_level: int = logging.INFO):
        """
        Initialize the evolution logger.

        Args:
            log_dir: Directory to store log files
            log_level: Logging level for generation summaries (default: INFO)
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_level = log_level
        self.logger = logging.getLogger(f'{PACKAGE_LOGGER}.evolution')

        self.generation_log_file = self.log_dir / 'generations.jsonl'
        self.summary_file = self.log_dir / 'run_summary.json'

        self.generation_metrics: List[Dict[str, Any]] = []
        self.best_fitness_per_generation: List[float] = []

        self.logger.debug(f"EvolutionLogger initialized at {self.log_dir}")

    def log_generation(self, stats: Union[Dict[str, Any], Any]) -> GenerationLog:
        """
        Record one generation.

        Args:
            stats: GenerationStats from the engine, or an equivalent dictionary

        Returns:
            The GenerationLog written to disk
        """
        record = GenerationLog.from_stats(stats)

        with open(self.generation_log_file, 'a') as f:
            f.write(json.dumps(record.to_dict()) + '\n')

        self.generation_metrics.append(record.to_dict())
        self.best_fitness_per_generation.append(record.best_fitness)

        self.logger.log(
            self.log_level,
            f"Gen {record.generation}: best={record.best_fitness:.4f} | "
            f"mean={record.mean_fitness:.4f} | worst={record.worst_fitness:.4f} | "
            f"{record.elapsed_seconds:.3f}s"
        )
        return record

    def log_run_summary(
        self,
        best_fitness: float,
        final_fitness_values: Sequence[float],
        config: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Write the final summary of a run to ``run_summary.json``.

        Args:
            best_fitness: Fitness of the best final individual
            final_fitness_values: Fitness of every final individual
            config: Configuration of the run
        """
        values = np.asarray(final_fitness_values, dtype=np.float64)
        summary = {
            'timestamp': datetime.now().isoformat(),
            'config': config or {},
            'final_best_fitness': float(best_fitness),
            'final_mean_fitness': float(values.mean()) if values.size else 0.0,
            **self.get_evolution_summary(),
        }

        with open(self.summary_file, 'w') as f:
            json.dump(summary, f, indent=2, default=str)

        self.logger.info(f"Run summary saved to {self.summary_file}")
        return summary

    def log_error(self, error: Exception, context: str = ""):
        """Log an error with context."""
        self.logger.error(f"Error in {context}: {str(error)}", exc_info=True)

    def get_evolution_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the generations recorded so far.

        Returns:
            Dictionary with overall statistics
        """
        best = self.best_fitness_per_generation
        return {
            'total_generations': len(best),
            'best_fitness_overall': max(best) if best else 0.0,
            'last_generation_best': best[-1] if best else 0.0,
            'fitness_improvement': best[-1] - best[0] if len(best) > 1 else 0.0,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Recorded generations as a DataFrame, one row per generation."""
        if not self.generation_metrics:
            return pd.DataFrame(columns=[f.name for f in fields(GenerationLog)])
        return pd.DataFrame(self.generation_metrics)


def setup_logging(
    log_dir: Union[str, Path] = "results/logs",
    log_level: Union[str, int] = "INFO",
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Set up standard logging configuration for the GenEvolve package.

    Args:
        log_dir: Directory to store log files
        log_level: Logging level as string ('DEBUG', 'INFO', ...) or int
        log_to_file: Whether to log to file
        log_to_console: Whether to log to console

    Returns:
        Configured package logger
    """
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    if isinstance(log_level, int):
        log_level_int = log_level
    else:
        log_level_int = level_map.get(str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level_int)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level_int)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / 'genevolve.log', mode='a')
        file_handler.setLevel(log_level_int)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Errors only
        error_handler = logging.FileHandler(log_path / 'errors.log', mode='a')
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)

    logger.info(f"Logging initialized at level {logging.getLevelName(log_level_int)}")

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Get a logger instance by name."""
    return logging.getLogger(name)
