"""
Population Management for the Expression Genetic Algorithm.

Populations hold one generation of expression individuals, from which
parents are drawn by roulette wheel.
"""

from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
import random

import numpy as np

from src.exprolution.core.chromosome import ExpressionChromosome
from src.exprolution.core.config import SearchConfig
from src.exprolution.core.operators import roulette_select


@dataclass
class Individual:
    """
    A chromosome together with its assessment.

    An individual wraps an immutable chromosome and tracks the fitness and
    expression value computed for the current generation.
    """

    chromosome: ExpressionChromosome
    fitness: Optional[float] = None
    value: Optional[float] = None
    parent_ids: List[str] = field(default_factory=list)
    evaluated: bool = False

    @property
    def id(self) -> str:
        """Get the individual's chromosome identifier."""
        return self.chromosome.chromosome_id

    @property
    def expression(self) -> str:
        return self.chromosome.to_expression()

    def update_fitness(self, fitness: float, value: Optional[float]) -> None:
        """Record the fitness and evaluated value of the chromosome."""
        self.fitness = fitness
        self.value = value
        self.evaluated = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert individual to dictionary representation."""
        return {
            "chromosome": self.chromosome.to_dict(),
            "fitness": self.fitness,
            "value": self.value,
            "parent_ids": self.parent_ids,
            "evaluated": self.evaluated
        }

    def __lt__(self, other: "Individual") -> bool:
        """Compare individuals by fitness (for sorting)."""
        if self.fitness is None:
            return True
        if other.fitness is None:
            return False
        return self.fitness < other.fitness


class Population:
    """
    One generation of individuals with a fixed size.

    Tracks the best individual seen, fitness statistics, diversity and a
    bounded history of past generations.
    """

    def __init__(self, config: SearchConfig, generation: int = 0):
        """Create an empty population for the given configuration."""
        self.config = config
        self.individuals: List[Individual] = []
        self.generation = generation
        self.best_individual: Optional[Individual] = None
        self.diversity_metrics: Dict[str, float] = {}
        self.statistics: Dict[str, Any] = {}
        self.history: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self.individuals)

    def initialize_random(self, rng: random.Random) -> None:
        """Fill the population with uniformly random chromosomes."""
        length = self.config.evolution.chromosome_length
        self.individuals = [
            Individual(chromosome=ExpressionChromosome.create_random(length, rng, self.generation))
            for _ in range(self.config.evolution.population_size)
        ]

    def initialize_from_seed(self, seed_chromosomes: List[ExpressionChromosome], rng: random.Random) -> None:
        """
        Initialize population from seed chromosomes.

        Seeds are used as given (up to the population size); remaining
        slots are filled with random chromosomes.
        """
        length = self.config.evolution.chromosome_length
        for chromosome in seed_chromosomes:
            if len(chromosome) != length:
                raise ValueError(
                    f"Seed chromosome {chromosome} has length {len(chromosome)}, expected {length}"
                )

        size = self.config.evolution.population_size
        self.individuals = [Individual(chromosome=c) for c in seed_chromosomes[:size]]
        while len(self.individuals) < size:
            chromosome = ExpressionChromosome.create_random(length, rng, self.generation)
            self.individuals.append(Individual(chromosome=chromosome))

    @property
    def total_fitness(self) -> float:
        return float(sum(ind.fitness or 0.0 for ind in self.individuals))

    def select_parent(self, rng: random.Random, total_fitness: Optional[float] = None) -> Individual:
        """Select one parent by roulette wheel (with replacement)."""
        return roulette_select(
            self.individuals,
            lambda ind: ind.fitness or 0.0,
            rng,
            total_fitness
        )

    def select_parents(self, num_parents: int, rng: random.Random) -> List[Individual]:
        """Select independent parents for reproduction."""
        total = self.total_fitness
        return [self.select_parent(rng, total) for _ in range(num_parents)]

    def find_solution(self, target: int, tolerance: float = 0.0) -> Optional[Individual]:
        """Return the first evaluated individual whose value hits the target."""
        for ind in self.individuals:
            if not ind.evaluated or ind.value is None:
                continue
            if tolerance == 0.0:
                if ind.value == target:
                    return ind
            elif abs(target - ind.value) <= tolerance:
                return ind
        return None

    def replace_population(self, new_individuals: List[Individual]) -> None:
        """Install the next generation; its size must match the configuration."""
        if len(new_individuals) != self.config.evolution.population_size:
            raise ValueError(
                f"Next generation has {len(new_individuals)} individuals, "
                f"expected {self.config.evolution.population_size}"
            )
        self.individuals = new_individuals
        self.generation += 1

    def calculate_diversity(self) -> Dict[str, float]:
        """Calculate population diversity metrics."""
        if not self.individuals:
            return {}

        unique_expressions = len(set(ind.chromosome.symbols for ind in self.individuals))
        uniqueness_ratio = unique_expressions / len(self.individuals)

        # Positional distance over an evenly strided sample
        if len(self.individuals) > 1:
            sample_size = min(30, len(self.individuals))
            sample = self.individuals[:: max(1, len(self.individuals) // sample_size)][:sample_size]
            distances = [
                sample[i].chromosome.hamming_distance(sample[j].chromosome)
                for i in range(len(sample))
                for j in range(i + 1, len(sample))
            ]
            avg_distance = float(np.mean(distances)) / self.config.evolution.chromosome_length
        else:
            avg_distance = 0.0

        self.diversity_metrics = {
            "uniqueness_ratio": uniqueness_ratio,
            "avg_chromosome_distance": avg_distance,
            "unique_chromosomes": unique_expressions
        }

        return self.diversity_metrics

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate population statistics."""
        fitnesses = np.array(
            [ind.fitness for ind in self.individuals if ind.fitness is not None],
            dtype=float
        )

        if fitnesses.size == 0:
            return {}

        invalid = sum(1 for ind in self.individuals if ind.evaluated and ind.value is None)
        stats = {
            "generation": self.generation,
            "population_size": len(self.individuals),
            "evaluated_count": int(fitnesses.size),
            "best_fitness": float(fitnesses.max()),
            "worst_fitness": float(fitnesses.min()),
            "avg_fitness": float(fitnesses.mean()),
            "median_fitness": float(np.median(fitnesses)),
            "fitness_std": float(fitnesses.std()),
            "invalid_count": invalid
        }

        self.statistics = stats
        return stats

    def update_best_individual(self) -> None:
        """Update the best individual seen so far."""
        evaluated = [ind for ind in self.individuals if ind.evaluated]
        if not evaluated:
            return

        best = max(evaluated, key=lambda x: x.fitness or float('-inf'))

        if self.best_individual is None or (best.fitness or 0) > (self.best_individual.fitness or 0):
            self.best_individual = best

    def record_history(self, max_history: int = 100) -> None:
        """Append the latest statistics and diversity to the history."""
        self.history.append({**self.statistics, **self.diversity_metrics})

        if len(self.history) > max_history:
            self.history = self.history[-max_history:]

    def to_dict(self) -> Dict[str, Any]:
        """Summarize the population (used for logging the final state)."""
        return {
            "generation": self.generation,
            "size": len(self.individuals),
            "best_individual": self.best_individual.to_dict() if self.best_individual else None,
            "statistics": self.statistics,
            "diversity_metrics": self.diversity_metrics
        }
