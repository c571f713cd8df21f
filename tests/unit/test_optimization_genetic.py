"""
tests/unit/test_optimization_genetic.py - Tests for the genetic algorithm.
"""

import random

import pytest

from nameforge.bootstrap.config import OptimizerConfig
from nameforge.errors import EvaluationFailedError
from nameforge.optimization import (
    MutationSchedule,
    OptimizationSettings,
    ValidationSettings,
    encode,
    optimize,
)
from nameforge.optimization.schema import EvaluationResult, ScoreBreakdown
from nameforge.optimization.strategies.genetic import mutation_rate, tournament_select

TINY = ValidationSettings(sample_size=4, max_pairwise_sample=4)


def run_genetic(domain, generator, scorer, workers=1, **settings):
    settings.setdefault("population_size", 10)
    return optimize(
        domain,
        TINY,
        settings=OptimizationSettings(algorithm="ga", **settings),
        seed="genetic",
        config=OptimizerConfig(workers=workers),
        generator=generator,
        scorer=scorer,
    )


def make_individual(domain, fitness):
    return EvaluationResult(
        config=domain,
        theta=encode(domain),
        fitness=fitness,
        scores=ScoreBreakdown(),
        iteration=0,
    )


class TestMutationSchedule:
    """Tests for mutation_rate."""

    def test_linear_endpoints(self):
        settings = OptimizationSettings(iterations=11, initial_mutation_rate=0.3, final_mutation_rate=0.05)

        assert mutation_rate(1, settings) == pytest.approx(0.3)
        assert mutation_rate(11, settings) == pytest.approx(0.05)
        assert mutation_rate(6, settings) == pytest.approx(0.175)

    def test_exponential_endpoints(self):
        settings = OptimizationSettings(
            iterations=11,
            initial_mutation_rate=0.4,
            final_mutation_rate=0.1,
            mutation_schedule=MutationSchedule.EXPONENTIAL,
        )

        assert mutation_rate(1, settings) == pytest.approx(0.4)
        assert mutation_rate(11, settings) == pytest.approx(0.1)
        assert mutation_rate(6, settings) == pytest.approx(0.2)

    def test_single_generation_uses_initial_rate(self):
        settings = OptimizationSettings(iterations=1)
        assert mutation_rate(1, settings) == pytest.approx(settings.initial_mutation_rate)


class TestTournament:
    """Tests for tournament_select."""

    def test_full_size_tournament_usually_finds_best(self, domain):
        population = [make_individual(domain, f) for f in (0.1, 0.9, 0.4, 0.2)]
        rng = random.Random(3)
        winners = [tournament_select(population, 60, rng).fitness for _ in range(20)]

        assert max(winners) == 0.9
        assert all(w == 0.9 for w in winners)

    def test_size_one_is_uniform_pick(self, domain):
        population = [make_individual(domain, f) for f in (0.1, 0.9)]
        rng = random.Random(5)
        winners = {tournament_select(population, 1, rng).fitness for _ in range(50)}

        assert winners == {0.1, 0.9}


class TestGeneticStrategy:
    """Tests for GeneticStrategy runs."""

    def test_evaluation_count(self, domain, stub_generator, stub_scorer):
        result = run_genetic(domain, stub_generator, stub_scorer, iterations=50, convergence_window=100)

        assert result.iterations == 50
        assert result.n_evaluations == 1 + 9 + 50 * 9

    def test_elitism_keeps_best_non_decreasing(self, domain, stub_generator, stub_scorer):
        result = run_genetic(domain, stub_generator, stub_scorer, iterations=50, convergence_window=100)
        best_per_generation = [g["best"] for g in result.diagnostics["generations"]]

        assert len(best_per_generation) == 51
        assert all(b >= a for a, b in zip(best_per_generation, best_per_generation[1:]))
        assert result.final_fitness >= result.initial_fitness

    def test_generation_stats(self, domain, stub_generator, stub_scorer):
        result = run_genetic(domain, stub_generator, stub_scorer, iterations=5, convergence_window=100)
        generations = result.diagnostics["generations"]

        for stats in generations:
            assert stats["worst"] <= stats["mean"] <= stats["best"]
            assert stats["diversity"] >= 0.0
        assert "mutation_rate" in generations[1]

    def test_all_failed_batch_raises(self, domain, stub_generator, stub_scorer):
        calls = []

        def scorer(names, siblings, settings):
            calls.append(1)
            if len(calls) > 1:
                raise RuntimeError("scorer down")
            return stub_scorer(names, siblings, settings)

        with pytest.raises(EvaluationFailedError):
            run_genetic(domain, stub_generator, scorer, iterations=3)

    def test_parallel_matches_sequential(self, domain, stub_generator, stub_scorer):
        sequential = run_genetic(domain, stub_generator, stub_scorer, workers=1, iterations=8)
        parallel = run_genetic(domain, stub_generator, stub_scorer, workers=4, iterations=8)

        assert parallel.convergence_history == sequential.convergence_history
        assert [e.fitness for e in parallel.evaluations] == [e.fitness for e in sequential.evaluations]
        assert parallel.optimized_config == sequential.optimized_config

    @pytest.mark.parametrize("mode", ["uniform", "blend"])
    def test_crossover_modes(self, domain, stub_generator, stub_scorer, mode):
        result = run_genetic(domain, stub_generator, stub_scorer, iterations=4, crossover_mode=mode)
        assert result.final_fitness >= result.initial_fitness
