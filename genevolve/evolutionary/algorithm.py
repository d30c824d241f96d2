"""
GenEvolve: Main Evolutionary Algorithm Implementation

This module implements the generational loop of the genetic algorithm:

    population -> fitness evaluation (parallel) -> selection -> pairwise
    crossover -> mutation (parallel) -> next population

The engine is parametric over the candidate type and over the three
operators (selection, crossover, mutation). Fitness evaluation and
mutation are fork-join steps that run on a ``concurrent.futures`` pool
or sequentially; both modes produce identical results for the same seed
because every mutation task receives its own spawned generator.
"""

import logging
import math
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from .crossover import CrossoverOperator, SinglePointCrossover
from .errors import ContractViolation, EvolutionError, MissingGenerator, NonComparableFitness
from .individual import (
    DEFAULT_MUTATION_STRENGTH,
    Individual,
    IndividualFactory,
    random_real_vector_factory,
)
from .mutation import GaussianMutation, MutationOperator
from .selection import SelectionStrategy, TournamentSelection

logger = logging.getLogger(__name__)

I = TypeVar('I', bound=Individual)

EXECUTORS = ('thread', 'process')

RandomSource = Union[np.random.Generator, int]


def as_generator(rng: RandomSource) -> np.random.Generator:
    """
    Normalize a random source to a numpy Generator.

    Args:
        rng: A Generator (returned as is) or an integer seed

    Raises:
        TypeError: If no usable random source was given
    """
    if isinstance(rng, np.random.Generator):
        return rng
    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        return np.random.default_rng(int(rng))
    raise TypeError(
        f"rng must be a numpy.random.Generator or an integer seed, got {type(rng).__name__}"
    )


def _evaluate_fitness(individual: Individual) -> float:
    return float(individual.fitness())


def _apply_mutation(
    operator: MutationOperator,
    individual: Individual,
    rng: np.random.Generator
) -> Tuple[Individual, bool]:
    mutated = operator.mutate(individual, rng)
    return individual, bool(mutated)


def best_individual(population: Sequence[I]) -> I:
    """
    Return the fittest individual; ties go to the last one in population order.

    Raises:
        ContractViolation: If the population is empty
        NonComparableFitness: If any fitness is NaN
    """
    if len(population) == 0:
        raise ContractViolation("Cannot pick the best individual of an empty population")

    best = None
    best_fitness = -math.inf
    for index, individual in enumerate(population):
        value = _evaluate_fitness(individual)
        if math.isnan(value):
            raise NonComparableFitness(f"Fitness of individual {index} is NaN and cannot be ordered")
        if best is None or value >= best_fitness:
            best = individual
            best_fitness = value
    return best


@dataclass
class GenerationStats:
    """Fitness summary of one generation, taken right after evaluation."""
    generation: int
    population_size: int
    best_fitness: float
    mean_fitness: float
    std_fitness: float
    worst_fitness: float
    mutated_count: int = 0
    elapsed_seconds: float = 0.0

    @classmethod
    def from_fitness(
        cls,
        generation: int,
        fitness_values: Sequence[float],
        mutated_count: int = 0,
        elapsed_seconds: float = 0.0
    ) -> 'GenerationStats':
        values = np.asarray(fitness_values, dtype=np.float64)
        return cls(
            generation=generation,
            population_size=len(values),
            best_fitness=float(np.max(values)),
            mean_fitness=float(np.mean(values)),
            std_fitness=float(np.std(values)),
            worst_fitness=float(np.min(values)),
            mutated_count=mutated_count,
            elapsed_seconds=elapsed_seconds,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


GenerationCallback = Callable[[GenerationStats], None]


class GeneticAlgorithm(Generic[I]):
    """
    Generational genetic algorithm.

    Attributes:
        population_size: Number of individuals per generation
        selection_strategy: Chooses parents from the evaluated population
        crossover_operator: Turns each consecutive pair of parents into offspring
        mutation_operator: Perturbs every offspring independently
        individual_factory: Builds one individual from a Generator; needed
            only when ``evolve`` gets no initial population
        parallel: Run fitness evaluation and mutation on an executor pool
        executor: 'thread' or 'process' (process requires picklable
            individuals and operators)
        max_workers: Pool size; None lets concurrent.futures decide
        on_generation: Called with a GenerationStats after every generation
    """

    def __init__(
        self,
        population_size: int,
        selection_strategy: SelectionStrategy,
        crossover_operator: CrossoverOperator,
        mutation_operator: MutationOperator,
        individual_factory: Optional[IndividualFactory] = None,
        parallel: bool = True,
        executor: str = 'thread',
        max_workers: Optional[int] = None,
        on_generation: Optional[GenerationCallback] = None,
    ):
        if population_size < 1:
            raise ValueError(f"population_size must be at least 1, got {population_size}")
        if executor not in EXECUTORS:
            raise ValueError(f"Unknown executor '{executor}', expected one of {EXECUTORS}")
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.population_size = population_size
        self.selection_strategy = selection_strategy
        self.crossover_operator = crossover_operator
        self.mutation_operator = mutation_operator
        self.individual_factory = individual_factory
        self.parallel = parallel
        self.executor = executor
        self.max_workers = max_workers
        self.on_generation = on_generation

    def __repr__(self) -> str:
        return (
            f"GeneticAlgorithm(population_size={self.population_size}, "
            f"selection={self.selection_strategy!r}, crossover={self.crossover_operator!r}, "
            f"mutation={self.mutation_operator!r}, parallel={self.parallel})"
        )

    def evolve(
        self,
        generations: int,
        rng: RandomSource,
        initial_population: Optional[Sequence[I]] = None,
        individual_factory: Optional[IndividualFactory] = None,
    ) -> List[I]:
        """
        Run exactly ``generations`` generations and return the final population.

        Args:
            generations: Number of generations (0 returns the initial population)
            rng: Generator or integer seed; all randomness flows through it
            initial_population: Starting individuals; generated with the
                individual factory when omitted
            individual_factory: Overrides the factory given at construction

        Returns:
            A new list holding the final population

        Raises:
            ContractViolation: On empty/mis-sized populations or operator misuse
            NonComparableFitness: If a fitness value is NaN
            MissingGenerator: If no population and no factory are available
        """
        if generations < 0:
            raise ValueError(f"generations must be non-negative, got {generations}")

        rng = as_generator(rng)
        population = self._initialize(rng, initial_population, individual_factory)

        mode = f"{self.executor} pool" if self.parallel else "sequential"
        logger.info(
            f"Starting evolution: {generations} generations, "
            f"population {len(population)}, {mode}"
        )

        start_time = time.time()
        executor = self._create_executor()
        generation = 0
        try:
            for generation in range(generations):
                population = self._run_generation(generation, population, rng, executor)
        except EvolutionError as e:
            logger.error(f"Evolution aborted at generation {generation}: {e}")
            raise
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        logger.info(
            f"Evolution complete: {generations} generations in "
            f"{time.time() - start_time:.2f}s"
        )
        return population

    def evaluate(self, population: Sequence[I]) -> List[float]:
        """
        Compute the fitness of every individual, in population order.

        Raises:
            NonComparableFitness: If any fitness is NaN
        """
        executor = self._create_executor()
        try:
            return self._evaluate(population, executor)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

    def _initialize(
        self,
        rng: np.random.Generator,
        initial_population: Optional[Sequence[I]],
        individual_factory: Optional[IndividualFactory],
    ) -> List[I]:
        if initial_population is not None:
            population = list(initial_population)
            if not population:
                raise ContractViolation("Initial population is empty")
            if len(population) != self.population_size:
                raise ContractViolation(
                    f"Initial population has {len(population)} individuals, "
                    f"expected population_size={self.population_size}"
                )
            logger.debug(f"Using supplied initial population of {len(population)}")
            return population

        factory = individual_factory or self.individual_factory
        if factory is None:
            logger.error("No initial population and no individual factory configured")
            raise MissingGenerator(
                "An individual factory is required when no initial population is given"
            )

        population = [factory(rng) for _ in range(self.population_size)]
        logger.debug(f"Generated initial population of {len(population)}")
        return population

    def _run_generation(
        self,
        generation: int,
        population: List[I],
        rng: np.random.Generator,
        executor: Optional[Executor],
    ) -> List[I]:
        gen_start = time.time()

        fitness_values = self._evaluate(population, executor)

        parents = self.selection_strategy.select(population, fitness_values, rng)
        if len(parents) != len(population):
            raise ContractViolation(
                f"Selection returned {len(parents)} parents for a population of {len(population)}"
            )

        offspring = self._detach(self._recombine(parents), population, parents)

        child_rngs = rng.spawn(len(offspring))
        results = self._map(
            _apply_mutation,
            [(self.mutation_operator, child, child_rng) for child, child_rng in zip(offspring, child_rngs)],
            executor,
        )
        next_population = [individual for individual, _ in results]
        mutated_count = sum(1 for _, mutated in results if mutated)

        if len(next_population) != self.population_size:
            logger.warning(
                f"Generation {generation}: crossover produced {len(next_population)} "
                f"offspring for population_size={self.population_size}"
            )

        stats = GenerationStats.from_fitness(
            generation,
            fitness_values,
            mutated_count=mutated_count,
            elapsed_seconds=time.time() - gen_start,
        )
        logger.info(
            f"Generation {generation}: best={stats.best_fitness:.4f} "
            f"mean={stats.mean_fitness:.4f} std={stats.std_fitness:.4f} "
            f"| mutated {mutated_count}/{len(next_population)}"
        )
        if self.on_generation is not None:
            self.on_generation(stats)

        return next_population

    def _evaluate(self, population: Sequence[I], executor: Optional[Executor]) -> List[float]:
        fitness_values = self._map(_evaluate_fitness, [(individual,) for individual in population], executor)
        for index, value in enumerate(fitness_values):
            if math.isnan(value):
                raise NonComparableFitness(f"Fitness of individual {index} is NaN and cannot be ordered")
        return fitness_values

    def _recombine(self, parents: Sequence[I]) -> List[I]:
        """
        Cross consecutive pairs of parents.

        An odd trailing parent is copied through unchanged, without crossover.
        """
        offspring = []
        for start in range(0, len(parents) - 1, 2):
            children = self.crossover_operator.crossover(parents[start], parents[start + 1])
            if not children:
                raise ContractViolation(
                    f"Crossover of parents {start} and {start + 1} produced no children"
                )
            offspring.extend(children)

        if len(parents) % 2 == 1:
            offspring.append(parents[-1].copy())
            logger.debug("Odd parent count: last parent passed through unchanged")

        return offspring

    @staticmethod
    def _detach(offspring: List[I], *owned: Sequence[I]) -> List[I]:
        """
        Copy every child that is also held elsewhere.

        A child aliasing an individual of ``owned`` (the current population or
        the selected parents) or an earlier child is replaced by its copy, so
        mutation never reaches the caller's individuals or touches one object
        from two tasks.
        """
        seen = {id(individual) for group in owned for individual in group}
        detached = []
        for child in offspring:
            if id(child) in seen:
                child = child.copy()
            seen.add(id(child))
            detached.append(child)
        return detached

    def _create_executor(self) -> Optional[Executor]:
        if not self.parallel:
            return None
        if self.executor == 'process':
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    @staticmethod
    def _map(fn: Callable, args: List[tuple], executor: Optional[Executor]) -> List[Any]:
        """Apply ``fn`` to every argument tuple, keeping results in input order."""
        if executor is None or len(args) <= 1:
            return [fn(*arg) for arg in args]

        results: List[Any] = [None] * len(args)
        futures = {executor.submit(fn, *arg): index for index, arg in enumerate(args)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()
        return results


@dataclass
class EvolutionConfig:
    """Configuration of a reference run (real vectors, tournament, single-point, gaussian)."""
    population_size: int = 100
    generations: int = 50
    seed: Optional[int] = None
    gene_length: int = 10
    gene_low: float = 0.0
    gene_high: float = 1.0
    tournament_size: int = 3
    mutation_rate: float = 0.1
    mutation_strength: float = DEFAULT_MUTATION_STRENGTH
    parallel: bool = True
    executor: str = 'thread'
    max_workers: Optional[int] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'EvolutionConfig':
        """
        Build from the YAML layout::

            evolution: {population_size, generations, seed}
            individual: {gene_length, low, high}
            selection: {tournament_size}
            mutation: {mutation_rate, mutation_strength}
            parallel: {enabled, executor, max_workers}
        """
        config = config or {}
        evolution_cfg = config.get('evolution', {}) or {}
        individual_cfg = config.get('individual', {}) or {}
        selection_cfg = config.get('selection', {}) or {}
        mutation_cfg = config.get('mutation', {}) or {}
        parallel_cfg = config.get('parallel', {}) or {}

        defaults = cls()
        return cls(
            population_size=int(evolution_cfg.get('population_size', defaults.population_size)),
            generations=int(evolution_cfg.get('generations', defaults.generations)),
            seed=evolution_cfg.get('seed', defaults.seed),
            gene_length=int(individual_cfg.get('gene_length', defaults.gene_length)),
            gene_low=float(individual_cfg.get('low', defaults.gene_low)),
            gene_high=float(individual_cfg.get('high', defaults.gene_high)),
            tournament_size=int(selection_cfg.get('tournament_size', defaults.tournament_size)),
            mutation_rate=float(mutation_cfg.get('mutation_rate', defaults.mutation_rate)),
            mutation_strength=float(mutation_cfg.get('mutation_strength', defaults.mutation_strength)),
            parallel=bool(parallel_cfg.get('enabled', defaults.parallel)),
            executor=str(parallel_cfg.get('executor', defaults.executor)),
            max_workers=parallel_cfg.get('max_workers', defaults.max_workers),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EvolutionResult:
    """Outcome of ``run_evolution``."""
    population: List[Any]
    fitness_values: List[float]
    best: Any
    best_fitness: float
    config: EvolutionConfig = field(default_factory=EvolutionConfig)


def create_genetic_algorithm_from_config(
    config: Union[Dict[str, Any], EvolutionConfig],
    on_generation: Optional[GenerationCallback] = None
) -> GeneticAlgorithm:
    """
    Factory function building a reference GeneticAlgorithm.

    Args:
        config: Configuration dictionary (YAML layout) or EvolutionConfig
        on_generation: Optional per-generation callback

    Returns:
        GeneticAlgorithm over RealVectorIndividual
    """
    if not isinstance(config, EvolutionConfig):
        config = EvolutionConfig.from_dict(config)

    return GeneticAlgorithm(
        population_size=config.population_size,
        selection_strategy=TournamentSelection(tournament_size=config.tournament_size),
        crossover_operator=SinglePointCrossover(),
        mutation_operator=GaussianMutation(
            mutation_rate=config.mutation_rate,
            mutation_strength=config.mutation_strength,
        ),
        individual_factory=random_real_vector_factory(
            config.gene_length,
            low=config.gene_low,
            high=config.gene_high,
        ),
        parallel=config.parallel,
        executor=config.executor,
        max_workers=config.max_workers,
        on_generation=on_generation,
    )


def run_evolution(
    config: Union[str, Dict[str, Any], EvolutionConfig],
    evolution_logger: Optional[Any] = None,
    initial_population: Optional[Sequence[Individual]] = None,
) -> EvolutionResult:
    """
    Convenience function to run a complete reference evolution.

    Args:
        config: Path to a YAML configuration, configuration dictionary or EvolutionConfig
        evolution_logger: Optional EvolutionLogger receiving per-generation records
        initial_population: Optional starting population

    Returns:
        EvolutionResult with the final population and its best individual
    """
    if isinstance(config, str):
        from ..utils.config import load_config
        config = load_config(config)
    if not isinstance(config, EvolutionConfig):
        config = EvolutionConfig.from_dict(config)

    on_generation = evolution_logger.log_generation if evolution_logger is not None else None
    algorithm = create_genetic_algorithm_from_config(config, on_generation=on_generation)

    if config.seed is None:
        logger.warning("No seed configured; this run is not reproducible")
    rng = np.random.default_rng(config.seed)

    population = algorithm.evolve(config.generations, rng, initial_population=initial_population)
    fitness_values = algorithm.evaluate(population)
    best = best_individual(population)
    best_fitness = _evaluate_fitness(best)

    if evolution_logger is not None:
        evolution_logger.log_run_summary(best_fitness, fitness_values, config.to_dict())

    logger.info(f"Best fitness after {config.generations} generations: {best_fitness:.4f}")
    return EvolutionResult(
        population=population,
        fitness_values=fitness_values,
        best=best,
        best_fitness=best_fitness,
        config=config,
    )
