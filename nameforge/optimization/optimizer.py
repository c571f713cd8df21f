"""
optimization/optimizer.py - Optimizer dispatcher.

Resolves an algorithm name to a registered strategy, checks the run inputs,
wires the evaluator and evaluation pool and runs the strategy. Inputs are
validated before any evaluation, so configuration mistakes never cost a
sample.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Type, Union
import logging
import math

from nameforge.bootstrap.config import OptimizerConfig
from nameforge.core.domain import NamingDomain
from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds
from nameforge.core.rng import derive_seed
from nameforge.errors import ConfigurationError, UnknownAlgorithmError

from .encoder import STEP_SIZE_CLASSES, encode, field_classes
from .enums import Algorithm
from .fitness import FitnessEvaluator, GeneratorFn, ScorerFn
from .pool import EvaluationPool
from .schema import (
    BatchOptimizationResult,
    FitnessWeights,
    OptimizationResult,
    OptimizationSettings,
    ValidationSettings,
    coerce_settings,
)
from .strategies import (
    BayesianStrategy,
    ClusterDiscoveryStrategy,
    GeneticStrategy,
    HillClimbStrategy,
    RunContext,
    SimulatedAnnealingStrategy,
    Strategy,
)

logger = logging.getLogger(__name__)


STRATEGY_REGISTRY: Dict[str, Type[Strategy]] = {
    Algorithm.HILLCLIMB.value: HillClimbStrategy,
    Algorithm.SIM_ANNEAL.value: SimulatedAnnealingStrategy,
    Algorithm.GENETIC.value: GeneticStrategy,
    Algorithm.BAYESIAN.value: BayesianStrategy,
    Algorithm.CLUSTER.value: ClusterDiscoveryStrategy,
}

ALGORITHM_ALIASES: Dict[str, str] = {
    "hill_climb": Algorithm.HILLCLIMB.value,
    "simulated_annealing": Algorithm.SIM_ANNEAL.value,
    "annealing": Algorithm.SIM_ANNEAL.value,
    "genetic": Algorithm.GENETIC.value,
    "bayesian": Algorithm.BAYESIAN.value,
    "tpe": Algorithm.BAYESIAN.value,
    "cluster_discovery": Algorithm.CLUSTER.value,
}


def available_algorithms() -> list:
    return sorted(set(STRATEGY_REGISTRY) | set(ALGORITHM_ALIASES))


def resolve_strategy(name: str) -> Strategy:
    """
    Look up a strategy by canonical name or alias.

    Raises:
        UnknownAlgorithmError: If the name is not registered
    """
    key = (name or "").strip().lower()
    key = ALGORITHM_ALIASES.get(key, key)
    strategy_cls = STRATEGY_REGISTRY.get(key)
    if strategy_cls is None:
        raise UnknownAlgorithmError(name, available=available_algorithms())
    return strategy_cls()


def default_seed(domain: NamingDomain) -> str:
    return f"optimize-{domain.id}"


def validate_run_inputs(
    initial_domain: NamingDomain,
    validation_settings: ValidationSettings,
    weights: FitnessWeights,
    settings: OptimizationSettings,
    bounds: ParameterBounds,
    sibling_domains: Sequence[NamingDomain] = (),
) -> None:
    """
    Configuration checks performed before any evaluation.

    Raises:
        ConfigurationError: On empty/inverted bounds, missing or invalid step
            sizes, all-zero fitness weights or a zero sample size. Without
            sibling domains the separation weight does not count, so weights
            that are zero apart from separation are rejected too.
    """
    bounds.validate()

    if weights.total(include_separation=bool(sibling_domains)) <= 0:
        raise ConfigurationError(
            "All fitness weights that apply are zero; fitness would be constant",
            field="weights",
            recovery_hint="Give at least one sub-score a positive weight.",
        )

    if validation_settings.sample_size <= 0:
        raise ConfigurationError(
            "sample_size must be positive",
            field="validation_settings.sample_size",
        )

    unknown = set(settings.step_sizes) - set(STEP_SIZE_CLASSES)
    if unknown:
        raise ConfigurationError(
            f"Unknown step-size classes: {sorted(unknown)}",
            field="settings.step_sizes",
            details={"known": sorted(STEP_SIZE_CLASSES)},
        )

    missing = field_classes(encode(initial_domain)) - set(settings.step_sizes)
    if missing:
        raise ConfigurationError(
            f"Missing step sizes for {sorted(missing)}",
            field="settings.step_sizes",
        )

    for step_class, size in settings.step_sizes.items():
        if not math.isfinite(size) or size < 0:
            raise ConfigurationError(
                f"Step size for {step_class} must be a non-negative number, got {size}",
                field="settings.step_sizes",
            )


def optimize(
    initial_domain: NamingDomain,
    validation_settings: Union[ValidationSettings, Dict[str, Any], None] = None,
    weights: Union[FitnessWeights, Dict[str, Any], None] = None,
    settings: Union[OptimizationSettings, Dict[str, Any], None] = None,
    bounds: Optional[ParameterBounds] = None,
    seed: Optional[str] = None,
    sibling_domains: Sequence[NamingDomain] = (),
    *,
    config: Optional[OptimizerConfig] = None,
    corpus: Optional[Sequence[str]] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
    on_progress: Optional[Callable[[str], None]] = None,
    generator: Optional[GeneratorFn] = None,
    scorer: Optional[ScorerFn] = None,
) -> OptimizationResult:
    """
    Optimize one domain.

    Args:
        initial_domain: Starting configuration
        validation_settings: Sample size and metric targets
        weights: Sub-score weights
        settings: Algorithm choice and knobs
        bounds: Parameter bounds (clamped on decode)
        seed: Run seed; derived from the domain id when omitted
        sibling_domains: Peer domains for the separation score
        config: Process defaults (read from the environment when omitted)
        corpus: Names for cluster discovery
        cancel_check: Polled at each iteration boundary; True stops the run
        on_progress: Called with each progress line the strategy logs
        generator: Name generation collaborator
        scorer: Validation collaborator

    Returns:
        OptimizationResult whose optimized_config is the best candidate seen

    Raises:
        UnknownAlgorithmError: Unknown algorithm name
        ConfigurationError: Invalid inputs
        EvaluationFailedError: No fitness signal (initial evaluation or a whole batch failed)
    """
    config = config or OptimizerConfig.from_env()

    if settings is None:
        settings = OptimizationSettings(algorithm=config.default_algorithm)
    settings = coerce_settings(settings, OptimizationSettings, "settings")
    if validation_settings is None:
        validation_settings = ValidationSettings(sample_size=config.sample_size)
    validation_settings = coerce_settings(validation_settings, ValidationSettings, "validation_settings")
    weights = coerce_settings(weights, FitnessWeights, "weights")
    bounds = bounds or DEFAULT_BOUNDS

    strategy = resolve_strategy(settings.algorithm)
    validate_run_inputs(initial_domain, validation_settings, weights, settings, bounds, sibling_domains)

    run_seed = seed if seed is not None else default_seed(initial_domain)
    evaluator = FitnessEvaluator(
        weights,
        validation_settings,
        sibling_domains=sibling_domains,
        seed=run_seed,
        generator=generator,
        scorer=scorer,
        verbose=settings.verbose,
    )
    if not evaluator.uses_separation and weights.separation > 0:
        logger.info(
            f"{initial_domain.id}: no sibling domains, separation term omitted from fitness"
        )

    pool = EvaluationPool(
        evaluator,
        initial_domain,
        bounds,
        max_workers=settings.workers or config.workers,
    )
    context = RunContext(
        initial_domain=initial_domain,
        evaluator=evaluator,
        settings=settings,
        seed=run_seed,
        bounds=bounds,
        pool=pool,
        corpus=corpus,
        cancel_check=cancel_check,
        on_progress=on_progress,
    )

    logger.info(
        f"Optimizing {initial_domain.id} with {strategy.name} "
        f"(iterations={settings.iterations}, seed={run_seed})"
    )
    return strategy.run(context)


def optimize_batch(
    domains: Iterable[NamingDomain],
    validation_settings: Union[ValidationSettings, Dict[str, Any], None] = None,
    weights: Union[FitnessWeights, Dict[str, Any], None] = None,
    settings: Union[OptimizationSettings, Dict[str, Any], None] = None,
    bounds: Optional[ParameterBounds] = None,
    seed: Optional[str] = None,
    sibling_domains: Optional[Sequence[NamingDomain]] = None,
    **kwargs: Any,
) -> BatchOptimizationResult:
    """
    Optimize several domains in order.

    Unless sibling_domains is given, each domain uses the other domains of
    the batch as its siblings. With a seed, each domain runs on a child seed
    derived from it and the domain id.
    """
    domains = list(domains)
    ids = [d.id for d in domains]
    if len(set(ids)) != len(ids):
        raise ConfigurationError("Domain ids in a batch must be unique", field="domains")

    config = kwargs.pop("config", None) or OptimizerConfig.from_env()
    if settings is None:
        settings = OptimizationSettings(algorithm=config.default_algorithm)
    settings = coerce_settings(settings, OptimizationSettings, "settings")
    resolve_strategy(settings.algorithm)

    batch = BatchOptimizationResult()
    for domain in domains:
        siblings = (
            list(sibling_domains) if sibling_domains is not None
            else [d for d in domains if d.id != domain.id]
        )
        run_seed = derive_seed(seed, domain.id) if seed is not None else None
        batch.results[domain.id] = optimize(
            domain,
            validation_settings,
            weights,
            settings,
            bounds,
            run_seed,
            siblings,
            config=config,
            **kwargs,
        )

    logger.info(f"Batch complete: {batch.summary()['domains']} domains")
    return batch
