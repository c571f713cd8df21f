"""
optimization/schema.py - Optimization data structures.

Two kinds of structures live here:

- Settings supplied by the caller (FitnessWeights, ValidationSettings,
  OptimizationSettings) are validated pydantic models. Defaults are applied
  once at construction, never re-derived inside the search loop.
- Records produced by a run (ScoreBreakdown, EvaluationResult,
  OptimizationResult, BatchOptimizationResult) are dataclasses.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from nameforge.core.domain import NamingDomain
from nameforge.errors import ConfigurationError

from .encoder import ParameterVector
from .enums import CrossoverMode, MutationSchedule, OptimizerStatus

SCORE_KEYS = ("capacity", "diffuseness", "separation", "pronounceability", "length", "style")

DEFAULT_STEP_SIZES: Dict[str, float] = {
    "weights": 0.1,
    "apostrophe_rate": 0.05,
    "hyphen_rate": 0.05,
    "length_range": 1.0,
}


# =============================================================================
# SETTINGS (caller-supplied)
# =============================================================================

class FitnessWeights(BaseModel):
    """Non-negative weights of the six sub-scores. Need not sum to 1."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    capacity: float = Field(default=0.2, ge=0.0)
    diffuseness: float = Field(default=0.2, ge=0.0)
    separation: float = Field(default=0.2, ge=0.0)
    pronounceability: float = Field(default=0.3, ge=0.0)
    length: float = Field(default=0.1, ge=0.0)
    style: float = Field(default=0.1, ge=0.0)

    def as_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in SCORE_KEYS}

    def total(self, include_separation: bool = True) -> float:
        return sum(
            w for key, w in self.as_dict().items()
            if include_separation or key != "separation"
        )


class ValidationSettings(BaseModel):
    """Sample size and metric thresholds for one run. Read-only."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sample_size: int = Field(default=200, ge=0, description="Names drawn per evaluation")
    min_nn_p5: float = Field(default=0.3, ge=0.0, description="Target p5 nearest-neighbour edit distance")
    min_shape_nn_p5: float = Field(default=0.2, ge=0.0, description="Target p5 nearest-neighbour shape distance")
    min_centroid_distance: float = Field(default=0.2, ge=0.0, description="Target distance to siblings")
    target_length_min: int = Field(default=4, ge=0)
    target_length_max: int = Field(default=12, ge=0)
    max_pairwise_sample: int = Field(default=200, ge=2, description="Cap for O(n^2) distance metrics")

    @model_validator(mode="after")
    def _check_length_window(self) -> "ValidationSettings":
        if self.target_length_min > self.target_length_max:
            raise ValueError("target_length_min must not exceed target_length_max")
        return self


class OptimizationSettings(BaseModel):
    """Per-strategy knobs. Unused knobs are ignored by other strategies."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    algorithm: str = "hillclimb"
    iterations: int = Field(default=100, ge=0)
    convergence_threshold: float = Field(default=0.001, ge=0.0)
    convergence_window: int = Field(default=10, ge=1)
    step_sizes: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_STEP_SIZES))
    verbose: bool = False
    workers: Optional[int] = Field(default=None, ge=1)

    # Hill-climb
    restarts: int = Field(default=0, ge=0)

    # Simulated annealing
    initial_temperature: float = Field(default=1.0, gt=0.0)
    cooling_rate: float = Field(default=0.95, gt=0.0, lt=1.0)

    # Genetic algorithm
    population_size: int = Field(default=20, ge=2)
    tournament_size: int = Field(default=5, ge=1)
    elitism_count: int = Field(default=1, ge=1)
    initial_mutation_rate: float = Field(default=0.3, ge=0.0, le=1.0)
    final_mutation_rate: float = Field(default=0.05, ge=0.0, le=1.0)
    mutation_schedule: MutationSchedule = MutationSchedule.LINEAR
    crossover_mode: CrossoverMode = CrossoverMode.UNIFORM

    # Bayesian optimization
    warmup_evaluations: int = Field(default=10, ge=1)
    batch_size: int = Field(default=1, ge=1)
    gamma: float = Field(default=0.25, gt=0.0, lt=1.0)
    candidate_samples: int = Field(default=24, ge=1)
    min_candidate_distance: float = Field(default=1e-3, ge=0.0)

    # Cluster discovery
    fine_tune: bool = True
    max_cluster_suggestions: int = Field(default=5, ge=0)
    corpus_sample_size: int = Field(default=300, ge=1)

    @model_validator(mode="after")
    def _check_genetic(self) -> "OptimizationSettings":
        if self.elitism_count >= self.population_size:
            raise ValueError("elitism_count must be smaller than population_size")
        if self.mutation_schedule == MutationSchedule.EXPONENTIAL and (
            self.initial_mutation_rate <= 0 or self.final_mutation_rate <= 0
        ):
            raise ValueError("exponential mutation schedule needs positive rates")
        return self


ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_settings(
    value: Union[ModelT, Dict[str, Any], None],
    model_cls: Type[ModelT],
    name: str,
) -> ModelT:
    """
    Accept a model instance, a plain dict or None (defaults).

    Raises:
        ConfigurationError: If the dict does not validate
    """
    if value is None:
        return model_cls()
    if isinstance(value, model_cls):
        return value
    try:
        return model_cls.model_validate(value)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {name}: {e}", field=name) from e


# =============================================================================
# RECORDS (run output)
# =============================================================================

@dataclass(frozen=True)
class ScoreBreakdown:
    """Normalized [0, 1] sub-scores of one evaluation."""
    capacity: float = 0.0
    diffuseness: float = 0.0
    separation: float = 0.0
    pronounceability: float = 0.0
    length: float = 0.0
    style: float = 0.0

    @classmethod
    def from_mapping(cls, scores: Dict[str, float]) -> "ScoreBreakdown":
        return cls(**{key: float(scores.get(key, 0.0)) for key in SCORE_KEYS})

    def as_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in SCORE_KEYS}


@dataclass(frozen=True)
class EvaluationResult:
    """One scored candidate. Never mutated after creation."""
    config: NamingDomain
    theta: ParameterVector
    fitness: float
    scores: ScoreBreakdown
    iteration: int
    task_index: int = 0
    separation_included: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iteration": self.iteration,
            "task_index": self.task_index,
            "fitness": round(self.fitness, 6),
            "scores": {k: round(v, 6) for k, v in self.scores.as_dict().items()},
            "separation_included": self.separation_included,
            "theta": self.theta.to_dict(),
        }


@dataclass
class OptimizationResult:
    """
    Result of one optimization run.

    optimized_config is the best candidate ever evaluated, which is not
    necessarily the last state the strategy visited.
    """
    initial_config: NamingDomain
    optimized_config: NamingDomain
    initial_fitness: float
    final_fitness: float
    improvement: float
    iterations: int
    evaluations: List[EvaluationResult] = field(default_factory=list)
    convergence_history: List[float] = field(default_factory=list)
    settings: Optional[OptimizationSettings] = None

    algorithm: str = ""
    seed: str = ""
    status: OptimizerStatus = OptimizerStatus.PENDING
    elapsed_time_s: float = 0.0
    failed_evaluations: int = 0
    diagnostics: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_evaluations(self) -> int:
        return len(self.evaluations)

    @property
    def best_evaluation(self) -> Optional[EvaluationResult]:
        if not self.evaluations:
            return None
        return max(self.evaluations, key=lambda e: e.fitness)

    @property
    def is_successful(self) -> bool:
        return self.status in (
            OptimizerStatus.CONVERGED,
            OptimizerStatus.MAX_ITERATIONS,
            OptimizerStatus.CANCELLED,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "seed": self.seed,
            "status": self.status.value,
            "initial_config": self.initial_config.to_dict(),
            "optimized_config": self.optimized_config.to_dict(),
            "initial_fitness": round(self.initial_fitness, 6),
            "final_fitness": round(self.final_fitness, 6),
            "improvement": round(self.improvement, 6),
            "statistics": {
                "iterations": self.iterations,
                "evaluations": self.n_evaluations,
                "failed_evaluations": self.failed_evaluations,
                "elapsed_time_s": round(self.elapsed_time_s, 2),
            },
            "convergence_history": [round(f, 6) for f in self.convergence_history],
            "evaluations": [e.to_dict() for e in self.evaluations],
            "settings": self.settings.model_dump(mode="json") if self.settings else None,
            "diagnostics": self.diagnostics,
        }


@dataclass
class BatchOptimizationResult:
    """Results of optimizing several domains in sequence, keyed by domain id."""
    results: Dict[str, OptimizationResult] = field(default_factory=dict)

    def summary(self) -> Dict[str, Any]:
        improvements = [r.improvement for r in self.results.values()]
        return {
            "domains": len(self.results),
            "mean_improvement": (
                round(sum(improvements) / len(improvements), 6) if improvements else 0.0
            ),
            "per_domain": {
                domain_id: {
                    "initial_fitness": round(r.initial_fitness, 6),
                    "final_fitness": round(r.final_fitness, 6),
                    "improvement": round(r.improvement, 6),
                    "iterations": r.iterations,
                    "status": r.status.value,
                }
                for domain_id, r in self.results.items()
            },
        }
