"""
Exprolution fitness functions.

This module provides the fitness interface used by the engine and the
target-distance fitness that scores expressions by their absolute error.
"""

from src.exprolution.fitness.base import (
    Assessment,
    CachedFitnessFunction,
    FitnessFunction,
    FitnessMetrics
)

from src.exprolution.fitness.target import (
    DEFAULT_INVALID_FITNESS,
    TargetDistanceFitness
)

__all__ = [
    # Base classes
    "Assessment",
    "CachedFitnessFunction",
    "FitnessFunction",
    "FitnessMetrics",

    # Target distance
    "DEFAULT_INVALID_FITNESS",
    "TargetDistanceFitness",
]
