"""
optimization/fitness.py - Multi-objective fitness evaluation.

Draws a deterministic sample of names from a candidate domain, scores the
sample with the validation collaborator and folds the six sub-scores into a
single weighted sum.

The separation term is only meaningful against sibling domains. Without
siblings (or with a zero separation weight) the evaluator takes the light
path: sibling samples are never generated, the separation sub-score is
reported as 0.0 and the term is left out of the sum entirely. Every
EvaluationResult records which path produced it in `separation_included`.
"""

from __future__ import annotations
from typing import Callable, List, Mapping, Optional, Sequence
import logging
import math

from nameforge.core.domain import NamingDomain
from nameforge.core.rng import RandomFn, create_rng, derive_seed
from nameforge.naming.generator import generate_name
from nameforge.naming.metrics import score_sample

from .encoder import ParameterVector
from .schema import (
    SCORE_KEYS,
    EvaluationResult,
    FitnessWeights,
    ScoreBreakdown,
    ValidationSettings,
)

logger = logging.getLogger(__name__)

GeneratorFn = Callable[[NamingDomain, RandomFn], str]
ScorerFn = Callable[
    [Sequence[str], Sequence[Sequence[str]], ValidationSettings],
    Mapping[str, float],
]


def combine_scores(
    scores: ScoreBreakdown,
    weights: FitnessWeights,
    include_separation: bool,
) -> float:
    """Weighted sum of sub-scores; separation is skipped unless included."""
    total = 0.0
    for key, weight in weights.as_dict().items():
        if key == "separation" and not include_separation:
            continue
        total += weight * getattr(scores, key)
    return total


class FitnessEvaluator:
    """
    Scores candidate domains.

    Read-only after construction, so one instance can be shared by every
    worker of an EvaluationPool.
    """

    def __init__(
        self,
        weights: FitnessWeights,
        validation_settings: ValidationSettings,
        sibling_domains: Sequence[NamingDomain] = (),
        seed: str = "fitness",
        generator: Optional[GeneratorFn] = None,
        scorer: Optional[ScorerFn] = None,
        verbose: bool = False,
    ):
        """
        Initialize evaluator.

        Args:
            weights: Sub-score weights
            validation_settings: Sample size and metric thresholds
            sibling_domains: Peer domains for the separation metric
            seed: Run seed; every sample stream is derived from it
            generator: generate(domain, rng) -> name
            scorer: score(names, sibling_samples, settings) -> sub-scores
            verbose: Log every evaluation at INFO
        """
        self.weights = weights
        self.validation_settings = validation_settings
        self.sibling_domains = list(sibling_domains)
        self.seed = seed
        self.generator = generator or generate_name
        self.scorer = scorer or score_sample
        self.verbose = verbose

        self.uses_separation = bool(self.sibling_domains) and weights.separation > 0
        self._sibling_samples: List[List[str]] = (
            self._sample_siblings() if self.uses_separation else []
        )

    @property
    def sibling_samples(self) -> List[List[str]]:
        return [list(s) for s in self._sibling_samples]

    def _sample_siblings(self) -> List[List[str]]:
        per_domain = max(
            1, self.validation_settings.sample_size // (len(self.sibling_domains) + 1)
        )
        samples = []
        for sibling in self.sibling_domains:
            rng = create_rng(derive_seed(self.seed, "sibling", sibling.id))
            samples.append([self.generator(sibling, rng.random) for _ in range(per_domain)])
        return samples

    def draw_sample(self, domain: NamingDomain, iteration: int, task_index: int = 0) -> List[str]:
        """Names for one evaluation; the stream depends only on task identity."""
        rng = create_rng(derive_seed(self.seed, "sample", iteration, task_index))
        return [
            self.generator(domain, rng.random)
            for _ in range(self.validation_settings.sample_size)
        ]

    def evaluate(
        self,
        domain: NamingDomain,
        theta: ParameterVector,
        iteration: int,
        task_index: int = 0,
    ) -> EvaluationResult:
        """Score a candidate, choosing the full or light path."""
        if self.uses_separation:
            return self.evaluate_full(domain, theta, iteration, task_index)
        return self.evaluate_light(domain, theta, iteration, task_index)

    def evaluate_full(
        self,
        domain: NamingDomain,
        theta: ParameterVector,
        iteration: int,
        task_index: int = 0,
    ) -> EvaluationResult:
        """Score including separation against sibling samples."""
        names = self.draw_sample(domain, iteration, task_index)
        raw = self.scorer(names, self.sibling_samples, self.validation_settings)
        return self._build_result(domain, theta, raw, iteration, task_index, include_separation=True)

    def evaluate_light(
        self,
        domain: NamingDomain,
        theta: ParameterVector,
        iteration: int,
        task_index: int = 0,
    ) -> EvaluationResult:
        """Score without generating sibling samples; separation is omitted."""
        names = self.draw_sample(domain, iteration, task_index)
        raw = self.scorer(names, [], self.validation_settings)
        return self._build_result(domain, theta, raw, iteration, task_index, include_separation=False)

    def _build_result(
        self,
        domain: NamingDomain,
        theta: ParameterVector,
        raw: Mapping[str, float],
        iteration: int,
        task_index: int,
        include_separation: bool,
    ) -> EvaluationResult:
        values = {}
        for key in SCORE_KEYS:
            value = float(raw.get(key, 0.0))
            if not math.isfinite(value):
                logger.warning(f"Non-finite {key} score for {domain.id} at iteration {iteration}")
                value = 0.0
            values[key] = value
        if not include_separation:
            values["separation"] = 0.0

        scores = ScoreBreakdown.from_mapping(values)
        fitness = combine_scores(scores, self.weights, include_separation)

        result = EvaluationResult(
            config=domain,
            theta=theta,
            fitness=fitness,
            scores=scores,
            iteration=iteration,
            task_index=task_index,
            separation_included=include_separation,
        )

        log = logger.info if self.verbose else logger.debug
        log(
            f"[{iteration}.{task_index}] fitness={fitness:.4f} "
            f"capacity={scores.capacity:.3f} diffuseness={scores.diffuseness:.3f} "
            f"separation={scores.separation:.3f}"
        )
        return result
