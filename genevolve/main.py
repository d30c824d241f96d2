#!/usr/bin/env python3
"""
GenEvolve: command-line driver.

Runs the reference genetic algorithm (real-valued gene vectors, tournament
selection, single-point crossover, gaussian mutation) and prints the best
individual of the final population.

Usage:
    python -m genevolve.main --config default
    python -m genevolve.main --config quick --generations 20 --seed 7
    python -m genevolve.main --config-path my_run.yaml --sequential --plot
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .evolutionary.algorithm import EvolutionConfig, EvolutionResult, run_evolution
from .evolutionary.errors import EvolutionError
from .utils.config import load_config
from .utils.logging import EvolutionLogger, setup_logging
from .utils.visualization import plot_fitness_history

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="GenEvolve: generational genetic algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default run (genevolve/config/default_config.yaml)
  python -m genevolve.main --config default

  # Short reproducible run
  python -m genevolve.main --config quick --generations 20 --seed 7
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default="default",
        help="Configuration name under genevolve/config/ (without .yaml extension) (default: default)"
    )

    parser.add_argument(
        "--config-path",
        type=str,
        default=None,
        help="Full path to configuration file (overrides --config)"
    )

    parser.add_argument(
        "--generations", "-g",
        type=int,
        default=None,
        help="Number of generations to run (overrides config file setting)"
    )

    parser.add_argument(
        "--population-size", "-p",
        type=int,
        default=None,
        help="Population size (overrides config file setting)"
    )

    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed (overrides config file setting)"
    )

    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Evaluate and mutate sequentially instead of on a worker pool"
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=None,
        help="Output directory for logs and plots (default: results; logs follow logging.directory)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: logging.level from the config, else INFO)"
    )

    parser.add_argument(
        "--plot",
        action="store_true",
        help="Write a fitness-history plot to the output directory"
    )

    return parser.parse_args(argv)


def apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Apply command-line overrides to a loaded configuration."""
    config = dict(config)
    evolution_cfg = dict(config.get('evolution', {}) or {})
    parallel_cfg = dict(config.get('parallel', {}) or {})

    if args.generations is not None:
        evolution_cfg['generations'] = args.generations
        logger.info(f"Overriding generations: {args.generations}")
    if args.population_size is not None:
        evolution_cfg['population_size'] = args.population_size
        logger.info(f"Overriding population size: {args.population_size}")
    if args.seed is not None:
        evolution_cfg['seed'] = args.seed
        logger.info(f"Overriding seed: {args.seed}")
    if args.sequential:
        parallel_cfg['enabled'] = False

    config['evolution'] = evolution_cfg
    config['parallel'] = parallel_cfg
    return config


def resolve_logging(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """
    Combine the config's ``logging`` section with command-line options.

    ``--log-level`` wins over ``logging.level``. An explicit ``--output-dir``
    places logs under ``<output-dir>/logs``; otherwise ``logging.directory``
    is used.
    """
    logging_cfg = config.get('logging', {}) or {}

    if args.output_dir is not None:
        log_dir = Path(args.output_dir) / "logs"
    else:
        log_dir = Path(logging_cfg.get('directory', 'results/logs'))

    return {
        'log_dir': log_dir,
        'log_level': args.log_level or logging_cfg.get('level', 'INFO'),
        'log_to_file': bool(logging_cfg.get('log_to_file', True)),
    }


def run_genevolve(args: argparse.Namespace) -> Optional[EvolutionResult]:
    """
    Main execution function.

    Args:
        args: Parsed command-line arguments

    Returns:
        EvolutionResult, or None if the run failed
    """
    output_dir = Path(args.output_dir or "results")

    try:
        config = load_config(args.config_path or args.config)
    except (FileNotFoundError, OSError, yaml.YAMLError) as e:
        setup_logging(log_dir=output_dir / "logs", log_level=args.log_level or "INFO")
        logger.error(f"Failed to load configuration: {e}")
        return None

    logging_options = resolve_logging(config, args)
    setup_logging(**logging_options)

    evolution_logger = EvolutionLogger(log_dir=logging_options["log_dir"])

    try:
        evolution_config = EvolutionConfig.from_dict(apply_overrides(config, args))

        logger.info(
            f"Starting evolution: population={evolution_config.population_size}, "
            f"generations={evolution_config.generations}, seed={evolution_config.seed}"
        )
        result = run_evolution(evolution_config, evolution_logger=evolution_logger)
    except (EvolutionError, ValueError, TypeError) as e:
        evolution_logger.log_error(e, context="evolution")
        return None

    if args.plot:
        plot_path = plot_fitness_history(
            evolution_logger.generation_metrics,
            output_dir / "visualizations" / "fitness_history.png"
        )
        logger.info(f"Fitness plot saved to: {plot_path}")

    save_final_summary(result, output_dir)
    return result


def save_final_summary(result: EvolutionResult, output_dir: Path) -> Path:
    """
    Save the best individual and final fitness values as JSON.

    Args:
        result: Outcome of the run
        output_dir: Output directory
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    summary = {
        "timestamp": datetime.now().isoformat(),
        "config": result.config.to_dict(),
        "best_fitness": result.best_fitness,
        "best_genes": getattr(result.best, "genes", None),
        "final_fitness_values": result.fitness_values,
    }
    if summary["best_genes"] is not None:
        summary["best_genes"] = [float(g) for g in summary["best_genes"]]

    summary_path = output_dir / "evolution_summary.json"
    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2, default=str)

    logger.info(f"Final summary saved to: {summary_path}")
    return summary_path


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.
    """
    args = parse_arguments(argv)
    result = run_genevolve(args)

    if result is None:
        return 1

    print(f"Best individual: {result.best!r}")
    print(f"Fitness: {result.best_fitness}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
