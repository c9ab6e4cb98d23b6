"""
PyTest configuration and fixtures for Exprolution.

This module provides shared test fixtures: a local-only Logfire setup,
seeded random sources, search configurations and sample chromosomes.
"""

import os
import sys
import random
import pytest
import logfire

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.exprolution import (
    ExpressionChromosome,
    SearchConfig,
    TargetDistanceFitness,
    create_test_config
)


# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for deterministic operator tests."""
    return random.Random(1234)


@pytest.fixture
def search_config() -> SearchConfig:
    """Quiet, seeded search configuration."""
    return create_test_config()


@pytest.fixture
def small_config() -> SearchConfig:
    """A tiny configuration for loop mechanics (not for convergence)."""
    config = create_test_config()
    config.evolution.population_size = 11
    config.evolution.chromosome_length = 5
    config.evolution.generations = 4
    return config


@pytest.fixture
def fitness() -> TargetDistanceFitness:
    """Fitness function for the target 17."""
    return TargetDistanceFitness(17)


@pytest.fixture
def sample_chromosomes():
    """Chromosomes of length 5 with known values."""
    return {
        "exact": ExpressionChromosome.from_expression("9+008"),      # 17
        "near": ExpressionChromosome.from_expression("00016"),       # 16
        "far": ExpressionChromosome.from_expression("99999"),        # 99999
        "invalid": ExpressionChromosome.from_expression("17/00"),    # division by zero
        "malformed": ExpressionChromosome.from_expression("*-17+"),  # 0-17
    }


# Test markers
pytest.mark.slow = pytest.mark.slow
pytest.mark.integration = pytest.mark.integration
pytest.mark.unit = pytest.mark.unit
