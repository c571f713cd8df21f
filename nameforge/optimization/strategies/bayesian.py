"""
optimization/strategies/bayesian.py - Bayesian optimization (TPE).

Until `warmup_evaluations` points have been scored, candidates are drawn
uniformly within bounds. Afterwards a ParzenSurrogate is refitted on the full
history every iteration; `candidate_samples` points are drawn from its good
density and the `batch_size` highest-scoring ones that are not near-duplicates
of already evaluated points are scored. Batches larger than one go through
the evaluation pool.
"""

from __future__ import annotations
from typing import List
import random
import time

import numpy as np

from ..encoder import ParameterVector, distance, encode, from_unit_array, random_vector, to_unit_array
from ..pool import EvaluationTask, require_any_success
from ..schema import EvaluationResult, OptimizationResult
from ..surrogate import ParzenSurrogate
from .base import RunContext, RunState, Strategy


class BayesianStrategy(Strategy):
    """Sequential model-based search with a tree-structured Parzen estimator."""

    name = "bayes"

    def run(self, context: RunContext) -> OptimizationResult:
        started = time.time()
        rng = context.rng(self.name)
        settings = context.settings

        base = encode(context.initial_domain)
        initial = self.evaluate_initial(context, base)
        state = self.start_run(context, initial)
        surrogate = ParzenSurrogate(gamma=settings.gamma)

        warmup_iterations = 0
        model_iterations = 0

        for iteration in range(1, settings.iterations + 1):
            if self.check_cancelled(context, state):
                break

            if len(state.evaluations) < max(2, settings.warmup_evaluations):
                thetas = [random_vector(base, context.bounds, rng) for _ in range(settings.batch_size)]
                warmup_iterations += 1
            else:
                thetas = self.propose(context, state, surrogate, base, rng)
                model_iterations += 1

            results = self._score(context, state, thetas, iteration)
            if results:
                state.current = max(results, key=lambda r: r.fitness)

            if self.finish_iteration(context, state):
                break

        state.diagnostics.update({
            "warmup_iterations": warmup_iterations,
            "model_iterations": model_iterations,
            "batch_size": settings.batch_size,
        })
        return self.build_result(context, state, started)

    def propose(
        self,
        context: RunContext,
        state: RunState,
        surrogate: ParzenSurrogate,
        base: ParameterVector,
        rng: random.Random,
    ) -> List[ParameterVector]:
        """Best surrogate-ranked candidates, skipping near-duplicates."""
        settings = context.settings
        X = np.array([to_unit_array(e.theta, context.bounds) for e in state.evaluations])
        y = np.array([e.fitness for e in state.evaluations])
        surrogate.fit(X, y)

        samples = surrogate.sample(settings.candidate_samples, rng)
        ranking = np.argsort(-surrogate.score(samples), kind="stable")
        candidates = [from_unit_array(samples[i], base, context.bounds) for i in ranking]

        seen = [e.theta for e in state.evaluations]
        chosen: List[ParameterVector] = []
        for candidate in candidates:
            if len(chosen) >= settings.batch_size:
                break
            if any(distance(candidate, other, context.bounds) < settings.min_candidate_distance
                   for other in seen + chosen):
                continue
            chosen.append(candidate)

        # Everything was a near-duplicate: fall back to the top-ranked samples
        if not chosen:
            chosen = candidates[:settings.batch_size]
        return chosen

    def _score(
        self,
        context: RunContext,
        state: RunState,
        thetas: List[ParameterVector],
        iteration: int,
    ) -> List[EvaluationResult]:
        if len(thetas) == 1:
            result = self.try_evaluate(context, state, thetas[0], iteration)
            return [result] if result is not None else []

        tasks = [EvaluationTask(index=i, iteration=iteration, theta=t) for i, t in enumerate(thetas)]
        results = require_any_success(context.get_pool().evaluate_batch(tasks))
        for result in results:
            if state.record(result):
                self.log(context, f"iteration {iteration}: new best {result.fitness:.4f}")
        return results
