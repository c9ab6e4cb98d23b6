"""
Target distance fitness.

Scores a chromosome by how close its expression value lies to the target:
``1 / (1 + |target - value|)``. The score is exactly 1 for an exact solution
and strictly decreases as the absolute error grows. Expressions that divide
by zero or overflow receive a small fixed fitness instead, which keeps the
roulette wheel well defined.
"""

from typing import Optional, Dict, Any
import math

from src.exprolution.core.chromosome import ExpressionChromosome
from src.exprolution.fitness.base import Assessment, FitnessFunction, FitnessMetrics


DEFAULT_INVALID_FITNESS = 1e-6


class TargetDistanceFitness(FitnessFunction):
    """Fitness of an expression relative to a fixed target number."""

    def __init__(
        self,
        target: int,
        invalid_fitness: float = DEFAULT_INVALID_FITNESS,
        config: Optional[Dict[str, Any]] = None
    ):
        super().__init__(config)
        if not 0.0 < invalid_fitness < 1.0:
            raise ValueError(f"invalid_fitness must lie in (0, 1), got {invalid_fitness}")
        try:
            float(target)
        except OverflowError as e:
            raise ValueError(
                f"Target ({int(target).bit_length()} bits) is outside the floating point range"
            ) from e
        self.target = target
        self.invalid_fitness = invalid_fitness

    def score(self, value: Optional[float]) -> float:
        """Map an evaluated value (or None for invalid) to a fitness."""
        if value is None:
            return self.invalid_fitness

        error = abs(self.target - value)
        if not math.isfinite(error):
            return self.invalid_fitness
        return 1.0 / (1.0 + error)

    def assess(self, chromosome: ExpressionChromosome) -> Assessment:
        value = chromosome.value()
        return self.score(value), value

    def evaluate(self, chromosome: ExpressionChromosome) -> float:
        return self.score(chromosome.value())

    def calculate_metrics(self, chromosome: ExpressionChromosome) -> FitnessMetrics:
        fitness, value = self.assess(chromosome)
        return FitnessMetrics(
            score=fitness,
            details={
                "expression": chromosome.to_expression(),
                "target": self.target,
                "value": value,
                "valid": value is not None,
                "error": abs(self.target - value) if value is not None else None
            }
        )

