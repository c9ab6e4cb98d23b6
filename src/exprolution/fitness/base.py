"""
Base classes for fitness evaluation in the Exprolution genetic algorithm.

This module provides the abstract fitness function interface and a caching
wrapper, so that duplicate chromosomes in a population are only evaluated
once.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Tuple
from collections import OrderedDict
from dataclasses import dataclass

from src.exprolution.core.chromosome import ExpressionChromosome


Assessment = Tuple[float, Optional[float]]


@dataclass
class FitnessMetrics:
    """Base class for fitness metrics."""
    score: float  # Overall fitness score (0, 1]
    details: Dict[str, Any]  # Detailed breakdown of the score


class FitnessFunction(ABC):
    """
    Abstract base class for fitness functions.

    All fitness functions should inherit from this class and implement
    the evaluate method to score expression chromosomes.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize fitness function with optional configuration.

        Args:
            config: Configuration parameters for the fitness function
        """
        self.config = config or {}

    @abstractmethod
    def evaluate(self, chromosome: ExpressionChromosome) -> float:
        """
        Evaluate a chromosome and return a fitness score.

        Args:
            chromosome: The expression chromosome to evaluate

        Returns:
            Fitness score in (0, 1], where 1 is an exact solution
        """
        pass

    @abstractmethod
    def calculate_metrics(self, chromosome: ExpressionChromosome) -> FitnessMetrics:
        """
        Calculate detailed metrics for a chromosome.

        Args:
            chromosome: The expression chromosome to analyze

        Returns:
            Detailed fitness metrics including score and breakdown
        """
        pass

    def assess(self, chromosome: ExpressionChromosome) -> Assessment:
        """
        Evaluate a chromosome, returning both fitness and expression value.

        Subclasses that evaluate the expression anyway should override this
        to avoid evaluating it twice.
        """
        return self.evaluate(chromosome), chromosome.value()

    def normalize_score(self, value: float, min_val: float = 0, max_val: float = 1) -> float:
        """
        Normalize a value to [0, 1] range.

        Args:
            value: Value to normalize
            min_val: Minimum expected value
            max_val: Maximum expected value

        Returns:
            Normalized value between 0 and 1
        """
        if max_val == min_val:
            return 0.5

        normalized = (value - min_val) / (max_val - min_val)
        return max(0, min(1, normalized))


class CachedFitnessFunction(FitnessFunction):
    """
    Decorator class that adds LRU caching to fitness functions.
    """

    def __init__(self, fitness_function: FitnessFunction, cache_size: int = 1000):
        """
        Initialize cached fitness function.

        Args:
            fitness_function: The fitness function to wrap
            cache_size: Maximum number of assessments to cache
        """
        super().__init__(fitness_function.config)
        self.fitness_function = fitness_function
        self.cache_size = cache_size
        self.cache: "OrderedDict[str, Assessment]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def _get_cache_key(self, chromosome: ExpressionChromosome) -> str:
        """Generate cache key for chromosome."""
        return chromosome.to_expression()

    def assess(self, chromosome: ExpressionChromosome) -> Assessment:
        cache_key = self._get_cache_key(chromosome)

        if cache_key in self.cache:
            self.cache.move_to_end(cache_key)
            self.hits += 1
            return self.cache[cache_key]

        self.misses += 1
        assessment = self.fitness_function.assess(chromosome)
        self.cache[cache_key] = assessment

        if len(self.cache) > self.cache_size:
            self.cache.popitem(last=False)

        return assessment

    def evaluate(self, chromosome: ExpressionChromosome) -> float:
        """Evaluate with caching."""
        return self.assess(chromosome)[0]

    def calculate_metrics(self, chromosome: ExpressionChromosome) -> FitnessMetrics:
        """Pass through to wrapped function."""
        return self.fitness_function.calculate_metrics(chromosome)

    def clear_cache(self):
        """Clear the evaluation cache."""
        self.cache.clear()
        self.hits = 0
        self.misses = 0
