"""
optimization/strategies/annealing.py - Simulated annealing.

Improving moves are always taken. A worsening move (delta < 0) is taken
with probability exp(delta / T). T starts at initial_temperature and is
multiplied by cooling_rate after every iteration. The best state is tracked
independently of acceptance, so the run reports its peak even when it ends
in a worse state.
"""

from __future__ import annotations
import math
import time

from nameforge.core.rng import RandomFn

from ..diagnostics import acceptance_stats
from ..encoder import clamp_vector, perturb
from ..schema import OptimizationResult
from .base import RunContext, Strategy


def acceptance_probability(delta: float, temperature: float) -> float:
    """Metropolis criterion."""
    if delta > 0:
        return 1.0
    if temperature <= 0:
        return 0.0
    return math.exp(delta / temperature)


def accept_move(delta: float, temperature: float, rng: RandomFn) -> bool:
    """Decide a move with one draw from `rng` (none for improving moves)."""
    if delta > 0:
        return True
    return rng() < acceptance_probability(delta, temperature)


class SimulatedAnnealingStrategy(Strategy):
    """Annealed local search with geometric cooling."""

    name = "sim_anneal"

    def run(self, context: RunContext) -> OptimizationResult:
        started = time.time()
        rng = context.rng(self.name)
        settings = context.settings

        initial = self.evaluate_initial(context)
        state = self.start_run(context, initial)
        current = initial
        temperature = settings.initial_temperature

        accepted = rejected = worse_accepted = 0

        for iteration in range(1, settings.iterations + 1):
            if self.check_cancelled(context, state):
                break

            theta = clamp_vector(perturb(current.theta, context.step_sizes, rng), context.bounds)
            proposed = self.try_evaluate(context, state, theta, iteration)

            if proposed is None:
                rejected += 1
            else:
                delta = proposed.fitness - current.fitness
                if accept_move(delta, temperature, rng.random):
                    if delta < 0:
                        worse_accepted += 1
                        self.log(
                            context,
                            f"iteration {iteration}: accepted worse move "
                            f"(delta={delta:.4f}, T={temperature:.4f})",
                        )
                    current = proposed
                    state.current = current
                    accepted += 1
                else:
                    rejected += 1

            temperature *= settings.cooling_rate

            if self.finish_iteration(context, state):
                break

        state.diagnostics.update(acceptance_stats(accepted, rejected, worse_accepted))
        state.diagnostics["final_temperature"] = temperature
        state.diagnostics["final_state_fitness"] = current.fitness
        return self.build_result(context, state, started)
