"""
Genetic Algorithm Engine for Exprolution.

This module implements the engine that drives the generational loop:
initialization, fitness evaluation, termination, and breeding of the next
generation through selection, crossover and mutation.
"""

import time
import random
import logging
import numbers
from enum import Enum
from dataclasses import dataclass, asdict
from typing import List, Optional, Dict, Any, Sequence

import logfire

from src.exprolution.core.config import (
    ConfigurationError,
    SearchConfig,
    create_default_config
)
from src.exprolution.core.population import Population, Individual
from src.exprolution.core.chromosome import ExpressionChromosome
from src.exprolution.core.operators import single_point_crossover, mutate
from src.exprolution.fitness import (
    CachedFitnessFunction,
    FitnessFunction,
    TargetDistanceFitness
)


class EngineState(Enum):
    """Lifecycle of a search run."""
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a search run.

    ``found`` distinguishes the two terminal outcomes. On success
    ``generations`` is the index of the generation that contained the
    solution; on exhaustion it equals the generation cap.
    """

    found: bool
    generations: int
    expression_text: Optional[str] = None
    value: Optional[float] = None
    best_expression: Optional[str] = None
    best_fitness: Optional[float] = None
    evaluations: int = 0

    @property
    def generations_exhausted(self) -> Optional[int]:
        """Generations spent without finding a solution, or None on success."""
        return None if self.found else self.generations

    @classmethod
    def success(cls, individual: Individual, generation: int, evaluations: int = 0) -> "SearchResult":
        return cls(
            found=True,
            generations=generation,
            expression_text=individual.expression,
            value=individual.value,
            best_expression=individual.expression,
            best_fitness=individual.fitness,
            evaluations=evaluations
        )

    @classmethod
    def exhausted(
        cls,
        generations: int,
        best: Optional[Individual] = None,
        evaluations: int = 0
    ) -> "SearchResult":
        return cls(
            found=False,
            generations=generations,
            best_expression=best.expression if best else None,
            best_fitness=best.fitness if best else None,
            evaluations=evaluations
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GeneticAlgorithmEngine:
    """
    Main engine for running the expression search.

    Orchestrates the evolution process including initialization,
    fitness evaluation, selection, crossover, mutation, and termination.
    An engine performs a single run; create a new engine to retry.
    """

    def __init__(
        self,
        config: SearchConfig,
        target: int,
        fitness_function: Optional[FitnessFunction] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the genetic algorithm engine.

        Args:
            config: Search configuration
            target: Integer the expression has to evaluate to
            fitness_function: Optional fitness function (defaults to a cached
                target-distance fitness)
            rng: Optional random source (defaults to one seeded from
                ``config.random_seed``)
            logger: Optional logger instance

        Raises:
            ConfigurationError: If the configuration cannot drive a search, or
                the target lies outside the floating point range
            TypeError: If the target is not an integer
        """
        if isinstance(target, bool) or not isinstance(target, numbers.Integral):
            raise TypeError(f"Target must be an integer, got {target!r}")
        try:
            float(target)
        except OverflowError as e:
            raise ConfigurationError(
                f"Target ({int(target).bit_length()} bits) is too large to compare with "
                f"floating point expression values"
            ) from e

        config.validate_consistency()

        self.config = config
        self.target = int(target)
        self.logger = logger or self._setup_logger()
        self.rng = rng or random.Random(config.random_seed)
        self.fitness_function = fitness_function or self._default_fitness_function()

        # State tracking
        self.state = EngineState.RUNNING
        self.current_population: Optional[Population] = None
        self.generation = 0
        self.total_evaluations = 0
        self.result: Optional[SearchResult] = None
        self.start_time: Optional[float] = None

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("exprolution.engine")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def _default_fitness_function(self) -> FitnessFunction:
        fitness = TargetDistanceFitness(
            self.target,
            invalid_fitness=self.config.fitness.invalid_fitness
        )
        if self.config.fitness.cache_size > 0:
            return CachedFitnessFunction(fitness, cache_size=self.config.fitness.cache_size)
        return fitness

    def evolve(self, seed_chromosomes: Optional[Sequence[ExpressionChromosome]] = None) -> SearchResult:
        """
        Run the generational loop until a solution is found or the cap is hit.

        The cap is checked before a generation is built or evaluated, so at
        most ``generations`` generations (0 .. cap-1) are evaluated and a cap
        of 0 returns an exhausted result without touching any population.

        Args:
            seed_chromosomes: Optional chromosomes to place in generation 0

        Returns:
            The search result
        """
        if self.result is not None:
            raise RuntimeError("This engine has already terminated; create a new engine to retry")

        cap = self.config.evolution.generations

        with logfire.span("Expression Search",
                          target=self.target,
                          population_size=self.config.evolution.population_size,
                          chromosome_length=self.config.evolution.chromosome_length,
                          generations=cap):

            self.start_time = time.perf_counter()
            if self.config.logging.enable_logging:
                self.logger.info(
                    f"Searching for an expression equal to {self.target} "
                    f"(population {self.config.evolution.population_size}, cap {cap})"
                )

            while self.generation < cap:
                with logfire.span("Generation", generation=self.generation):
                    if self.current_population is None:
                        self.current_population = self._initialize_population(seed_chromosomes)

                    self._evaluate_population()

                    population = self.current_population
                    population.update_best_individual()
                    population.calculate_statistics()
                    population.record_history()

                    solution = population.find_solution(
                        self.target,
                        self.config.fitness.solution_tolerance
                    )

                    if solution is not None or self.generation % self.config.logging.log_interval == 0:
                        self._log_progress(self.generation)

                    if solution is not None:
                        return self._terminate(
                            SearchResult.success(solution, self.generation, self.total_evaluations)
                        )

                    # The last allowed generation is evaluated but never bred
                    if self.generation + 1 < cap:
                        self._create_next_generation()

                self.generation += 1

            best = self.current_population.best_individual if self.current_population else None
            return self._terminate(
                SearchResult.exhausted(cap, best, self.total_evaluations)
            )

    def _terminate(self, result: SearchResult) -> SearchResult:
        self.state = EngineState.TERMINATED
        self.result = result

        elapsed = time.perf_counter() - self.start_time
        if result.found:
            message = (
                f"Found a solution in {result.generations} generations: "
                f"{result.expression_text}"
            )
        else:
            message = f"Could not find a solution in {result.generations} generations"

        if self.config.logging.enable_logging:
            self.logger.info(f"{message} ({elapsed:.2f}s)")
        if self.current_population is not None:
            self.logger.debug(f"Final population: {self.current_population.to_dict()}")
        logfire.info("Search finished",
                     found=result.found,
                     generations=result.generations,
                     expression=result.expression_text,
                     evaluations=result.evaluations,
                     elapsed=elapsed)
        return result

    def _initialize_population(self, seed_chromosomes: Optional[Sequence[ExpressionChromosome]]) -> Population:
        """Initialize the population."""
        with logfire.span("Initialize Population"):
            population = Population(self.config, generation=0)

            if seed_chromosomes:
                population.initialize_from_seed(list(seed_chromosomes), self.rng)
            else:
                population.initialize_random(self.rng)

            self.logger.debug(f"Initialized population with {len(population)} individuals")
            return population

    def _evaluate_population(self) -> None:
        """Evaluate fitness for all individuals in the population."""
        individuals = self.current_population.individuals
        with logfire.span("Evaluate Population", size=len(individuals)):
            for individual in individuals:
                fitness, value = self.fitness_function.assess(individual.chromosome)
                individual.update_fitness(fitness, value)

            self.total_evaluations += len(individuals)

    def _create_next_generation(self) -> None:
        """Create the next generation of individuals."""
        with logfire.span("Create Next Generation"):
            population = self.current_population
            size = self.config.evolution.population_size
            total_fitness = population.total_fitness
            new_individuals: List[Individual] = []

            while len(new_individuals) < size:
                parents = [
                    population.select_parent(self.rng, total_fitness),
                    population.select_parent(self.rng, total_fitness)
                ]
                new_individuals.extend(self._breed(parents))

            # An odd population size drops the spare child of the last pair
            population.replace_population(new_individuals[:size])

    def _breed(self, parents: List[Individual]) -> List[Individual]:
        """Cross two parents and mutate both children."""
        evolution = self.config.evolution

        child1, child2 = single_point_crossover(
            parents[0].chromosome,
            parents[1].chromosome,
            evolution.crossover_rate,
            self.rng,
            generation=self.generation + 1
        )

        parent_ids = [p.id for p in parents]
        return [
            Individual(
                chromosome=mutate(child, evolution.mutation_rate, self.rng),
                parent_ids=parent_ids
            )
            for child in (child1, child2)
        ]

    def _log_progress(self, generation: int) -> None:
        """Log evolution progress."""
        population = self.current_population
        stats = population.statistics
        diversity = population.calculate_diversity()
        best = population.best_individual

        if self.config.logging.enable_logging:
            self.logger.info(
                f"Generation {generation + 1} of {self.config.evolution.generations}: "
                f"Best: {stats.get('best_fitness', 0):.4f} ({best.expression if best else '-'}), "
                f"Avg: {stats.get('avg_fitness', 0):.4f}, "
                f"Diversity: {diversity.get('uniqueness_ratio', 0):.2f}"
            )

        if self.config.logging.metrics_export:
            metrics = {
                "evolution_generation": generation,
                **{k: v for k, v in stats.items() if k != "generation"},
                **diversity
            }
            logfire.info("Evolution Progress", **metrics)

    def evaluate_single(self, chromosome: ExpressionChromosome) -> Dict[str, Any]:
        """Evaluate a single chromosome (useful for testing)."""
        fitness, value = self.fitness_function.assess(chromosome)
        return {
            "expression": chromosome.to_expression(),
            "fitness": fitness,
            "value": value,
            "is_solution": (
                value is not None
                and abs(self.target - value) <= self.config.fitness.solution_tolerance
            )
        }


def run_search(
    target: int,
    config: Optional[SearchConfig] = None,
    rng: Optional[random.Random] = None
) -> SearchResult:
    """
    Search for an expression over digits and ``+ - * /`` equal to ``target``.

    Args:
        target: The integer to reach
        config: Search configuration (defaults to ``create_default_config()``)
        rng: Optional random source; overrides ``config.random_seed``

    Returns:
        A found result with the expression text and generation index, or an
        exhausted result. The engine never retries by itself.
    """
    engine = GeneticAlgorithmEngine(config or create_default_config(), target, rng=rng)
    return engine.evolve()
