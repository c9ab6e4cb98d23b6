"""
Exprolution - evolving arithmetic expressions with a genetic algorithm.

Given a target integer, the search evolves fixed-length strings of digits
and the operators ``+ - * /`` until one of them evaluates to the target.
"""

from src.exprolution.core.config import (
    ConfigurationError,
    SearchConfig,
    EvolutionParameters,
    FitnessConfig,
    LoggingConfig,
    create_default_config,
    create_test_config,
    create_exhaustive_config
)
from src.exprolution.core.chromosome import ExpressionChromosome, SYMBOLS
from src.exprolution.core.population import Population, Individual
from src.exprolution.core.engine import (
    EngineState,
    GeneticAlgorithmEngine,
    SearchResult,
    run_search
)
from src.exprolution.expression import (
    ExpressionSyntaxError,
    Operator,
    describe,
    evaluate,
    render
)
from src.exprolution.fitness import TargetDistanceFitness

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "ConfigurationError",
    "SearchConfig",
    "EvolutionParameters",
    "FitnessConfig",
    "LoggingConfig",
    "create_default_config",
    "create_test_config",
    "create_exhaustive_config",
    # Chromosome
    "ExpressionChromosome",
    "SYMBOLS",
    # Population
    "Population",
    "Individual",
    # Engine
    "EngineState",
    "GeneticAlgorithmEngine",
    "SearchResult",
    "run_search",
    # Expressions
    "ExpressionSyntaxError",
    "Operator",
    "describe",
    "evaluate",
    "render",
    # Fitness
    "TargetDistanceFitness"
]
