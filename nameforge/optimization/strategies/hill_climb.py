"""
optimization/strategies/hill_climb.py - Hill-climbing with random restarts.

Each step perturbs the current state once and moves only when the proposal
is at least as fit. With `restarts > 0` the climb is repeated from uniform
random starts; the global best across all climbs is reported.
"""

from __future__ import annotations
import random
import time

from ..encoder import clamp_vector, perturb, random_vector
from ..schema import EvaluationResult, OptimizationResult
from .base import RunContext, RunState, Strategy


class HillClimbStrategy(Strategy):
    """Strict local search: accept proposal iff fitness >= current."""

    name = "hillclimb"

    def run(self, context: RunContext) -> OptimizationResult:
        started = time.time()
        rng = context.rng(self.name)
        settings = context.settings

        initial = self.evaluate_initial(context)
        state = self.start_run(context, initial)

        self.climb(context, state, initial, rng)

        for restart in range(settings.restarts):
            if state.cancelled:
                break
            start_theta = random_vector(initial.theta, context.bounds, rng)
            start = self.try_evaluate(
                context, state, start_theta, state.iterations, task_index=restart + 1
            )
            if start is None:
                continue
            self.log(context, f"restart {restart + 1}: start fitness {start.fitness:.4f}")
            self.climb(context, state, start, rng)

        state.diagnostics["restarts"] = settings.restarts
        return self.build_result(context, state, started)

    def climb(
        self,
        context: RunContext,
        state: RunState,
        start: EvaluationResult,
        rng: random.Random,
    ) -> EvaluationResult:
        """One climb of up to settings.iterations steps from `start`."""
        settings = context.settings
        current = start
        state.current = current
        state.tracker.reset(state.best.fitness)

        for _ in range(settings.iterations):
            if self.check_cancelled(context, state):
                break

            iteration = state.iterations + 1
            theta = clamp_vector(perturb(current.theta, context.step_sizes, rng), context.bounds)
            proposed = self.try_evaluate(context, state, theta, iteration)

            if proposed is not None and proposed.fitness >= current.fitness:
                current = proposed
                state.current = current

            if self.finish_iteration(context, state):
                break

        return current


def hill_climb_from(context: RunContext, state: RunState, start: EvaluationResult) -> EvaluationResult:
    """Fine-tune from an already evaluated start, sharing the caller's run state."""
    strategy = HillClimbStrategy()
    return strategy.climb(context, state, start, context.rng(strategy.name))

