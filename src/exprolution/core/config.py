"""
Exprolution Configuration Module.

This module defines configuration classes for the expression search,
including evolution parameters, fitness settings and logging options.
"""

from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict
import os


class ConfigurationError(ValueError):
    """Raised when a configuration would make the search meaningless."""


class EvolutionParameters(BaseModel):
    """Parameters controlling the genetic algorithm evolution process."""

    model_config = ConfigDict(validate_assignment=True)

    # Population parameters
    population_size: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Number of chromosomes in every generation"
    )
    chromosome_length: int = Field(
        default=9,
        ge=2,
        le=1000,
        description="Number of symbols in every chromosome"
    )
    generations: int = Field(
        default=1000,
        ge=0,
        description="Maximum number of generations to evaluate"
    )

    # Genetic operators
    crossover_rate: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Probability of splicing two parents"
    )
    mutation_rate: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Probability of replacing each symbol of a child"
    )


class FitnessConfig(BaseModel):
    """Configuration for fitness evaluation and solution acceptance."""

    model_config = ConfigDict(validate_assignment=True)

    invalid_fitness: float = Field(
        default=1e-6,
        gt=0.0,
        lt=1.0,
        description="Fitness given to expressions that divide by zero or overflow"
    )
    solution_tolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Largest |target - value| accepted as a solution (0 means exact)"
    )
    cache_size: int = Field(
        default=10000,
        ge=0,
        description="Assessments remembered per run (0 disables the cache)"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging and monitoring."""

    model_config = ConfigDict(validate_assignment=True)

    enable_logging: bool = Field(
        default=True,
        description="Enable progress logging"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=10,
        ge=1,
        description="Generations between progress logs"
    )
    metrics_export: bool = Field(
        default=True,
        description="Send progress metrics to logfire"
    )


class SearchConfig(BaseModel):
    """Main configuration class for an expression search run."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )

    evolution: EvolutionParameters = Field(
        default_factory=EvolutionParameters,
        description="Evolution parameters"
    )
    fitness: FitnessConfig = Field(
        default_factory=FitnessConfig,
        description="Fitness evaluation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging and monitoring configuration"
    )

    random_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """Create configuration from environment variables."""
        config_dict: Dict[str, Any] = {}

        if pop_size := os.getenv("EXPR_POPULATION_SIZE"):
            config_dict.setdefault("evolution", {})["population_size"] = int(pop_size)
        if length := os.getenv("EXPR_CHROMOSOME_LENGTH"):
            config_dict.setdefault("evolution", {})["chromosome_length"] = int(length)
        if generations := os.getenv("EXPR_GENERATIONS"):
            config_dict.setdefault("evolution", {})["generations"] = int(generations)
        if crossover_rate := os.getenv("EXPR_CROSSOVER_RATE"):
            config_dict.setdefault("evolution", {})["crossover_rate"] = float(crossover_rate)
        if mutation_rate := os.getenv("EXPR_MUTATION_RATE"):
            config_dict.setdefault("evolution", {})["mutation_rate"] = float(mutation_rate)

        if random_seed := os.getenv("EXPR_RANDOM_SEED"):
            config_dict["random_seed"] = int(random_seed)

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    def validate_consistency(self) -> None:
        """
        Validate the configuration before a run.

        Field bounds are normally enforced by pydantic, but models built with
        ``model_construct`` skip validation, so the engine re-checks the
        values a search cannot run without.
        """
        evolution = self.evolution

        if evolution.chromosome_length < 2:
            raise ConfigurationError(
                f"Chromosome length ({evolution.chromosome_length}) must be at least 2"
            )
        if evolution.population_size < 1:
            raise ConfigurationError(
                f"Population size ({evolution.population_size}) must be at least 1"
            )
        if evolution.generations < 0:
            raise ConfigurationError(
                f"Generation cap ({evolution.generations}) cannot be negative"
            )
        for name in ("crossover_rate", "mutation_rate"):
            rate = getattr(evolution, name)
            if not 0.0 <= rate <= 1.0:
                raise ConfigurationError(f"{name} ({rate}) must lie in [0, 1]")

        if not 0.0 < self.fitness.invalid_fitness < 1.0:
            raise ConfigurationError(
                f"Invalid-expression fitness ({self.fitness.invalid_fitness}) must lie in (0, 1)"
            )
        if self.fitness.solution_tolerance < 0:
            raise ConfigurationError(
                f"Solution tolerance ({self.fitness.solution_tolerance}) cannot be negative"
            )


# Convenience functions
def create_default_config() -> SearchConfig:
    """Create a default configuration suitable for most targets."""
    return SearchConfig()


def create_test_config() -> SearchConfig:
    """Create a configuration suitable for testing (seeded, quiet)."""
    return SearchConfig(
        evolution=EvolutionParameters(
            population_size=100,
            chromosome_length=7,
            generations=300,
            crossover_rate=0.7,
            mutation_rate=0.05
        ),
        logging=LoggingConfig(
            enable_logging=False,
            log_interval=50,
            metrics_export=False
        ),
        random_seed=42
    )


def create_exhaustive_config() -> SearchConfig:
    """Create a configuration for large targets (longer chromosomes, more generations)."""
    return SearchConfig(
        evolution=EvolutionParameters(
            population_size=500,
            chromosome_length=16,
            generations=5000,
            crossover_rate=0.7,
            mutation_rate=0.02
        ),
        logging=LoggingConfig(
            log_interval=100,
            metrics_export=True
        )
    )
