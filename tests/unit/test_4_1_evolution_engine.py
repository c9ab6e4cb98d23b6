"""
Unit tests for the evolution engine (Subtask 4.1).

Tests cover:
- Generation cap semantics, including a cap of zero
- Termination on a solution in the current generation
- Determinism for a fixed seed or injected random source
- Population size invariance, odd sizes included
- Target and configuration validation
- Progress logging
"""

import logging
import random
import pytest

from src.exprolution.core.chromosome import ExpressionChromosome
from src.exprolution.core.config import (
    ConfigurationError,
    EvolutionParameters,
    FitnessConfig,
    LoggingConfig,
    SearchConfig
)
from src.exprolution.core.engine import (
    EngineState,
    GeneticAlgorithmEngine,
    SearchResult
)
from src.exprolution.fitness import CachedFitnessFunction, TargetDistanceFitness

UNREACHABLE = 10 ** 30


class TestGenerationCap:
    """Test suite for the generation cap."""

    def test_zero_cap(self, small_config):
        """Test that a cap of zero evaluates nothing."""
        small_config.evolution.generations = 0
        engine = GeneticAlgorithmEngine(small_config, 17)

        result = engine.evolve()

        assert result.found is False
        assert result.generations_exhausted == 0
        assert result.evaluations == 0
        assert engine.current_population is None
        assert engine.state == EngineState.TERMINATED

    def test_exhausted_search(self, small_config):
        """Test that an unreachable target spends exactly the cap."""
        engine = GeneticAlgorithmEngine(small_config, UNREACHABLE)

        result = engine.evolve()

        assert result.found is False
        assert result.generations == 4
        assert result.generations_exhausted == 4
        assert result.expression_text is None
        assert result.evaluations == 44
        # The last allowed generation is evaluated but not bred
        assert engine.current_population.generation == 3
        assert len(engine.current_population.history) == 4

    def test_exhausted_result_reports_best(self, small_config):
        """Test that an exhausted result still carries the best expression seen."""
        result = GeneticAlgorithmEngine(small_config, UNREACHABLE).evolve()

        assert result.best_expression is not None
        assert 0.0 < result.best_fitness < 1.0


class TestSolutionDetection:
    """Test suite for termination on a solution."""

    def test_solution_in_first_generation(self, small_config, sample_chromosomes):
        """Test that a seeded solution is reported at generation 0."""
        engine = GeneticAlgorithmEngine(small_config, 17)

        result = engine.evolve([sample_chromosomes["exact"]])

        assert result.found is True
        assert result.generations == 0
        assert result.generations_exhausted is None
        assert result.expression_text == "9+008"
        assert result.value == 17
        assert result.best_fitness == 1.0
        assert result.evaluations == 11

    def test_negative_target(self, small_config, sample_chromosomes):
        """Test that negative targets are reachable through repair."""
        result = GeneticAlgorithmEngine(small_config, -17).evolve([sample_chromosomes["malformed"]])

        assert result.found is True
        assert result.expression_text == "*-17+"

    def test_exact_match_by_default(self):
        """Test that a near value is not accepted without a tolerance."""
        config = SearchConfig(
            evolution=EvolutionParameters(population_size=1, chromosome_length=5, generations=1),
            logging=LoggingConfig(enable_logging=False, metrics_export=False),
            random_seed=3
        )
        seed = [ExpressionChromosome.from_expression("1/999")]

        assert GeneticAlgorithmEngine(config, 0).evolve(seed).found is False

    def test_solution_tolerance(self):
        """Test that a configured tolerance accepts near values."""
        config = SearchConfig(
            evolution=EvolutionParameters(population_size=1, chromosome_length=5, generations=1),
            fitness=FitnessConfig(solution_tolerance=0.01),
            logging=LoggingConfig(enable_logging=False, metrics_export=False),
            random_seed=3
        )
        seed = [ExpressionChromosome.from_expression("1/999")]

        result = GeneticAlgorithmEngine(config, 0).evolve(seed)

        assert result.found is True
        assert result.value == pytest.approx(1 / 999)

    def test_evaluate_single(self, small_config, sample_chromosomes):
        """Test evaluating one chromosome outside the loop."""
        engine = GeneticAlgorithmEngine(small_config, 17)

        report = engine.evaluate_single(sample_chromosomes["exact"])
        assert report["is_solution"] is True
        assert report["fitness"] == 1.0

        report = engine.evaluate_single(sample_chromosomes["invalid"])
        assert report["is_solution"] is False
        assert report["value"] is None


class TestDeterminism:
    """Test suite for reproducible runs."""

    def _final_expressions(self, engine):
        return [ind.expression for ind in engine.current_population.individuals]

    def test_same_seed_same_run(self, small_config):
        """Test that two runs with the same seed are identical."""
        first = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        second = GeneticAlgorithmEngine(small_config, UNREACHABLE)

        assert first.evolve() == second.evolve()
        assert self._final_expressions(first) == self._final_expressions(second)

    def test_injected_random_source(self, small_config):
        """Test that an injected random source replaces the configured seed."""
        seeded = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        injected = GeneticAlgorithmEngine(small_config, UNREACHABLE, rng=random.Random(42))

        seeded.evolve()
        injected.evolve()

        assert self._final_expressions(seeded) == self._final_expressions(injected)

    def test_different_seeds_differ(self, small_config):
        """Test that the seed actually drives the run."""
        first = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        first.evolve()

        small_config.random_seed = 43
        second = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        second.evolve()

        assert self._final_expressions(first) != self._final_expressions(second)

    def test_logging_does_not_change_run(self, small_config):
        """Test that enabling progress output leaves the run unchanged."""
        quiet = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        quiet.evolve()

        small_config.logging.enable_logging = True
        small_config.logging.log_interval = 1
        verbose = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        verbose.evolve()

        assert self._final_expressions(quiet) == self._final_expressions(verbose)


class TestEngineContract:
    """Test suite for engine construction and lifecycle."""

    def test_odd_population_size(self, small_config):
        """Test that an odd population size is kept across generations."""
        engine = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        engine.evolve()

        assert len(engine.current_population) == 11

    def test_chromosome_length_invariant(self, small_config):
        """Test that every chromosome keeps the configured length."""
        engine = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        engine.evolve()

        assert all(len(ind.chromosome) == 5 for ind in engine.current_population.individuals)

    def test_single_run_per_engine(self, small_config):
        """Test that an engine cannot be run twice."""
        engine = GeneticAlgorithmEngine(small_config, UNREACHABLE)
        engine.evolve()

        with pytest.raises(RuntimeError):
            engine.evolve()

    @pytest.mark.parametrize("target", [17.5, True, "17"])
    def test_target_must_be_integer(self, small_config, target):
        """Test that non-integer targets are rejected."""
        with pytest.raises(TypeError):
            GeneticAlgorithmEngine(small_config, target)

    @pytest.mark.parametrize("target", [10 ** 400, -(10 ** 400)])
    def test_target_beyond_float_range_rejected(self, small_config, target):
        """Test that a target no expression value can be compared with is a configuration error."""
        with pytest.raises(ConfigurationError):
            GeneticAlgorithmEngine(small_config, target)

    def test_large_float_representable_target(self, small_config):
        """Test that a large target within the float range runs to exhaustion."""
        result = GeneticAlgorithmEngine(small_config, 10 ** 300).evolve()

        assert result.found is False
        assert result.generations == 4

    def test_inconsistent_config_rejected(self):
        """Test that an unvalidated, meaningless configuration is rejected."""
        params = EvolutionParameters().model_dump()
        params["chromosome_length"] = 1
        config = SearchConfig.model_construct(
            evolution=EvolutionParameters.model_construct(**params),
            fitness=FitnessConfig(),
            logging=LoggingConfig(),
            random_seed=None
        )

        with pytest.raises(ConfigurationError):
            GeneticAlgorithmEngine(config, 17)

    def test_default_fitness_is_cached(self, small_config):
        """Test the default fitness function and the cache switch."""
        engine = GeneticAlgorithmEngine(small_config, 17)
        assert isinstance(engine.fitness_function, CachedFitnessFunction)

        small_config.fitness.cache_size = 0
        engine = GeneticAlgorithmEngine(small_config, 17)
        assert isinstance(engine.fitness_function, TargetDistanceFitness)

    def test_custom_fitness_function(self, small_config, sample_chromosomes):
        """Test injecting a fitness function."""
        fitness = TargetDistanceFitness(17, invalid_fitness=0.5)
        engine = GeneticAlgorithmEngine(small_config, 17, fitness_function=fitness)

        assert engine.fitness_function is fitness
        assert engine.evaluate_single(sample_chromosomes["invalid"])["fitness"] == 0.5

    def test_result_to_dict(self):
        """Test result serialization."""
        data = SearchResult(found=False, generations=7).to_dict()

        assert data["found"] is False
        assert data["generations"] == 7


class TestProgressLogging:
    """Test suite for engine logging."""

    def test_solution_logged(self, small_config, sample_chromosomes, caplog):
        """Test that a found solution is logged."""
        small_config.logging.enable_logging = True
        caplog.set_level(logging.INFO, logger="exprolution.engine")

        GeneticAlgorithmEngine(small_config, 17).evolve([sample_chromosomes["exact"]])

        assert "Found a solution in 0 generations: 9+008" in caplog.text
        assert "Generation 1 of 4" in caplog.text

    def test_exhaustion_logged(self, small_config, caplog):
        """Test that an exhausted search is logged."""
        small_config.logging.enable_logging = True
        caplog.set_level(logging.INFO, logger="exprolution.engine")

        GeneticAlgorithmEngine(small_config, UNREACHABLE).evolve()

        assert "Could not find a solution in 4 generations" in caplog.text

    def test_quiet_engine(self, small_config, caplog):
        """Test that disabled logging emits no progress records."""
        caplog.set_level(logging.INFO, logger="exprolution.engine")

        GeneticAlgorithmEngine(small_config, UNREACHABLE).evolve()

        assert "Generation" not in caplog.text

    def test_final_population_logged_at_debug(self, small_config, sample_chromosomes, caplog):
        """Test that the final population summary is logged at debug level."""
        small_config.logging.log_level = "DEBUG"
        caplog.set_level(logging.DEBUG, logger="exprolution.engine")

        GeneticAlgorithmEngine(small_config, 17).evolve([sample_chromosomes["exact"]])

        records = [r for r in caplog.records if r.getMessage().startswith("Final population")]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        assert "'size': 11" in records[0].getMessage()

    def test_no_final_population_without_generations(self, small_config, caplog):
        """Test that nothing is summarized when no population was built."""
        small_config.logging.log_level = "DEBUG"
        small_config.evolution.generations = 0
        caplog.set_level(logging.DEBUG, logger="exprolution.engine")

        GeneticAlgorithmEngine(small_config, 17).evolve()

        assert "Final population" not in caplog.text
