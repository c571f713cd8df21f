"""
optimization/ - Domain Optimization Module.

Tunes the numeric parameters of a naming domain so that the names it
generates score well on capacity, diffuseness, separation,
pronounceability, length and style.

Strategies: hill-climbing, simulated annealing, genetic algorithm,
Bayesian optimization (TPE) and cluster-discovery seeding.
"""

from .enums import (
    Algorithm,
    OptimizerStatus,
    CrossoverMode,
    MutationSchedule,
    ClusterSource,
    Confidence,
)

from .schema import (
    FitnessWeights,
    ValidationSettings,
    OptimizationSettings,
    ScoreBreakdown,
    EvaluationResult,
    OptimizationResult,
    BatchOptimizationResult,
)

from .encoder import (
    ParameterVector,
    encode,
    decode,
    perturb,
    crossover,
    mutate,
    distance,
)

from .fitness import FitnessEvaluator, combine_scores
from .pool import EvaluationPool, EvaluationTask, TaskOutcome
from .convergence import ConvergenceTracker
from .surrogate import ParzenSurrogate

from .optimizer import (
    STRATEGY_REGISTRY,
    optimize,
    optimize_batch,
    resolve_strategy,
    validate_run_inputs,
)

__all__ = [
    # Enums
    "Algorithm",
    "OptimizerStatus",
    "CrossoverMode",
    "MutationSchedule",
    "ClusterSource",
    "Confidence",
    # Schema
    "FitnessWeights",
    "ValidationSettings",
    "OptimizationSettings",
    "ScoreBreakdown",
    "EvaluationResult",
    "OptimizationResult",
    "BatchOptimizationResult",
    # Codec
    "ParameterVector",
    "encode",
    "decode",
    "perturb",
    "crossover",
    "mutate",
    "distance",
    # Evaluation
    "FitnessEvaluator",
    "combine_scores",
    "EvaluationPool",
    "EvaluationTask",
    "TaskOutcome",
    "ConvergenceTracker",
    "ParzenSurrogate",
    # Dispatcher
    "STRATEGY_REGISTRY",
    "optimize",
    "optimize_batch",
    "resolve_strategy",
    "validate_run_inputs",
]
