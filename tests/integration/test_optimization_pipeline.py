"""
tests/integration/test_optimization_pipeline.py - End-to-end optimization runs.

Uses the real name generator and validation metrics.
"""

import pytest

from nameforge.core.parameter_bounds import DEFAULT_BOUNDS
from nameforge.optimization import (
    FitnessWeights,
    OptimizationSettings,
    OptimizerStatus,
    ValidationSettings,
    optimize,
    optimize_batch,
)

VALIDATION = ValidationSettings(sample_size=40, max_pairwise_sample=40)

NO_SEPARATION = FitnessWeights(
    capacity=1, diffuseness=1, separation=0, pronounceability=1, length=1, style=1
)


def assert_in_bounds(domain):
    lo, hi = DEFAULT_BOUNDS.weight
    phonology = domain.phonology
    for w in phonology.consonant_weights + phonology.vowel_weights + phonology.template_weights:
        assert lo <= w <= hi
    for w in domain.morphology.structure_weights:
        assert lo <= w <= hi

    style = domain.style
    assert DEFAULT_BOUNDS.apostrophe_rate[0] <= style.apostrophe_rate <= DEFAULT_BOUNDS.apostrophe_rate[1]
    assert DEFAULT_BOUNDS.hyphen_rate[0] <= style.hyphen_rate <= DEFAULT_BOUNDS.hyphen_rate[1]
    assert style.length_min <= style.length_max


class TestHillClimbPipeline:
    """Hill-climbing against the real metrics."""

    @pytest.fixture
    def result(self, domain, config):
        return optimize(
            domain,
            VALIDATION,
            NO_SEPARATION,
            OptimizationSettings(
                algorithm="hillclimb",
                iterations=50,
                convergence_threshold=0.001,
                convergence_window=10,
            ),
            seed="test-seed",
            config=config,
        )

    def test_completes_within_budget(self, result):
        assert result.iterations <= 50
        assert result.status in (OptimizerStatus.CONVERGED, OptimizerStatus.MAX_ITERATIONS)
        assert result.n_evaluations == result.iterations + 1

    def test_never_worse(self, result):
        assert result.final_fitness >= result.initial_fitness
        assert 0.0 <= result.final_fitness <= 1.0

    def test_optimized_domain_in_bounds(self, result):
        assert_in_bounds(result.optimized_config)

    def test_separation_omitted(self, result):
        assert all(not e.separation_included for e in result.evaluations)
        assert all(e.scores.separation == 0.0 for e in result.evaluations)

    def test_reproducible(self, result, domain, config):
        again = optimize(
            domain,
            VALIDATION,
            NO_SEPARATION,
            OptimizationSettings(
                algorithm="hillclimb",
                iterations=50,
                convergence_threshold=0.001,
                convergence_window=10,
            ),
            seed="test-seed",
            config=config,
        )
        assert again.convergence_history == result.convergence_history
        assert again.optimized_config == result.optimized_config


class TestOtherStrategies:
    """Short runs of the remaining strategies with sibling domains."""

    @pytest.mark.parametrize("settings", [
        {"algorithm": "sim_anneal", "iterations": 15},
        {"algorithm": "ga", "iterations": 4, "population_size": 6},
        {"algorithm": "bayes", "iterations": 10, "warmup_evaluations": 4},
        {"algorithm": "cluster", "iterations": 5},
    ])
    def test_run_with_siblings(self, domain, sibling_domains, small_validation, config, settings):
        result = optimize(
            domain,
            small_validation,
            settings=settings,
            sibling_domains=sibling_domains,
            seed="siblings",
            config=config,
        )

        assert result.final_fitness >= result.initial_fitness
        assert all(e.separation_included for e in result.evaluations)
        assert_in_bounds(result.optimized_config)

    def test_cluster_discovery_reports_suggestions(self, domain, sibling_domains, small_validation, config):
        result = optimize(
            domain,
            small_validation,
            settings={"algorithm": "cluster", "fine_tune": False},
            sibling_domains=sibling_domains,
            seed="clusters",
            config=config,
        )

        assert result.iterations == 1
        assert result.diagnostics["corpus_size"] > 0
        assert isinstance(result.diagnostics["suggestions"], list)


class TestBatchPipeline:
    """optimize_batch over a small family of domains."""

    def test_batch(self, domain, sibling_domains, small_validation, config):
        batch = optimize_batch(
            [domain] + sibling_domains,
            small_validation,
            settings={"algorithm": "hillclimb", "iterations": 5},
            seed="family",
            config=config,
        )
        summary = batch.summary()

        assert summary["domains"] == 3
        for domain_id, entry in summary["per_domain"].items():
            assert entry["final_fitness"] >= entry["initial_fitness"]
