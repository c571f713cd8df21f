"""
optimization/strategies/genetic.py - Genetic algorithm.

Generation 0 is the initial domain plus mutated copies of it. Each
generation keeps the `elitism_count` best individuals unchanged (with their
existing evaluations), fills the rest with offspring from tournament
selection, crossover and mutation, and scores the offspring as one batch on
the evaluation pool. The mutation rate moves from initial_mutation_rate to
final_mutation_rate over the iteration budget.
"""

from __future__ import annotations
from typing import List
import random
import time

from ..diagnostics import population_stats
from ..encoder import crossover, encode, mutate
from ..enums import MutationSchedule
from ..pool import EvaluationTask, require_any_success
from ..schema import EvaluationResult, OptimizationResult, OptimizationSettings
from .base import RunContext, RunState, Strategy

INITIAL_DIVERSITY_RATE = 0.3


def mutation_rate(generation: int, settings: OptimizationSettings) -> float:
    """Scheduled mutation rate for a 1-based generation number."""
    start = settings.initial_mutation_rate
    end = settings.final_mutation_rate
    span = max(1, settings.iterations - 1)
    progress = min(1.0, max(0.0, (generation - 1) / span))

    if settings.mutation_schedule == MutationSchedule.EXPONENTIAL:
        return start * (end / start) ** progress
    return start + (end - start) * progress


def tournament_select(
    population: List[EvaluationResult],
    size: int,
    rng: random.Random,
) -> EvaluationResult:
    """Fittest of `size` individuals drawn with replacement."""
    winner = population[rng.randrange(len(population))]
    for _ in range(size - 1):
        challenger = population[rng.randrange(len(population))]
        if challenger.fitness > winner.fitness:
            winner = challenger
    return winner


class GeneticStrategy(Strategy):
    """Generational GA with elitism and a decaying mutation rate."""

    name = "ga"

    def run(self, context: RunContext) -> OptimizationResult:
        started = time.time()
        rng = context.rng(self.name)
        settings = context.settings
        pool = context.get_pool()

        base = encode(context.initial_domain)
        initial = self.evaluate_initial(context, base)
        state = self.start_run(context, initial)

        # Generation 0
        tasks = [
            EvaluationTask(index=i, iteration=0, theta=mutate(base, INITIAL_DIVERSITY_RATE, rng, context.bounds))
            for i in range(1, settings.population_size)
        ]
        population = [initial] + self._score(context, state, pool, tasks)

        generations = [population_stats(population, context.bounds)]
        self.log(context, f"generation 0: {generations[0]}")

        for generation in range(1, settings.iterations + 1):
            if self.check_cancelled(context, state):
                break

            rate = mutation_rate(generation, settings)
            ranked = sorted(population, key=lambda r: r.fitness, reverse=True)
            elites = ranked[:settings.elitism_count]

            tasks = []
            for index in range(settings.population_size - len(elites)):
                parent1 = tournament_select(ranked, settings.tournament_size, rng)
                parent2 = tournament_select(ranked, settings.tournament_size, rng)
                child = crossover(parent1.theta, parent2.theta, rng, settings.crossover_mode.value)
                child = mutate(child, rate, rng, context.bounds)
                tasks.append(EvaluationTask(index=index, iteration=generation, theta=child))

            population = elites + self._score(context, state, pool, tasks)
            state.current = max(population, key=lambda r: r.fitness)

            stats = population_stats(population, context.bounds)
            stats["mutation_rate"] = round(rate, 6)
            generations.append(stats)
            self.log(context, f"generation {generation}: {stats}")

            if self.finish_iteration(context, state):
                break

        state.diagnostics["generations"] = generations
        return self.build_result(context, state, started)

    def _score(self, context, state: RunState, pool, tasks: List[EvaluationTask]) -> List[EvaluationResult]:
        results = require_any_success(pool.evaluate_batch(tasks))
        for result in results:
            if state.record(result):
                self.log(context, f"generation {result.iteration}: new best {result.fitness:.4f}")
        return results
