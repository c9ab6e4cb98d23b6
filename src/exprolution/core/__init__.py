"""
Exprolution Core Module - Genetic Algorithm Components.

This module contains the core components of the expression search,
including configuration, chromosome representation, genetic operators,
population management, and the main evolution engine.
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

from src.exprolution.core.chromosome import (
    SYMBOLS,
    ExpressionChromosome,
    random_symbol
)

from src.exprolution.core.operators import (
    roulette_select,
    single_point_crossover,
    mutate
)

from src.exprolution.core.population import (
    Population,
    Individual
)

from src.exprolution.core.engine import (
    EngineState,
    GeneticAlgorithmEngine,
    SearchResult,
    run_search
)

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

    # Chromosome representation
    "SYMBOLS",
    "ExpressionChromosome",
    "random_symbol",

    # Genetic operators
    "roulette_select",
    "single_point_crossover",
    "mutate",

    # Population management
    "Population",
    "Individual",

    # Engine
    "EngineState",
    "GeneticAlgorithmEngine",
    "SearchResult",
    "run_search"
]
