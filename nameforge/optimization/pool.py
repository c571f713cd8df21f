"""
optimization/pool.py - Parallel evaluation pool.

Evaluates batches of independent candidates on a bounded thread pool.

Tasks are plain records (index, iteration, theta). The only objects shared
between workers are read-only: the template domain, the bounds and the
evaluator. Each worker decodes its own domain and the evaluator derives the
sample stream from (iteration, index), so outcomes do not depend on which
worker ran which task or on the worker count.

A failing task is reported as a TaskOutcome with `error` set; it never
aborts the batch. Results come back in submission order.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from nameforge.core.domain import NamingDomain
from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds
from nameforge.errors import EvaluationFailedError

from .encoder import ParameterVector, decode
from .fitness import FitnessEvaluator
from .schema import EvaluationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationTask:
    """One candidate to score."""
    index: int
    iteration: int
    theta: ParameterVector


@dataclass(frozen=True)
class TaskOutcome:
    """Result or failure of one task, tagged with the task identity."""
    index: int
    iteration: int
    result: Optional[EvaluationResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def successful(outcomes: Sequence[TaskOutcome]) -> List[EvaluationResult]:
    return [o.result for o in outcomes if o.ok]


def require_any_success(outcomes: Sequence[TaskOutcome]) -> List[EvaluationResult]:
    """
    Successful results of a batch.

    Raises:
        EvaluationFailedError: If every task failed
    """
    results = successful(outcomes)
    if outcomes and not results:
        raise EvaluationFailedError(
            f"All {len(outcomes)} evaluations in batch failed",
            failures=[o.error or "" for o in outcomes],
        )
    return results


class EvaluationPool:
    """Bounded worker pool for fitness evaluations."""

    DEFAULT_MAX_WORKERS = 4

    def __init__(
        self,
        evaluator: FitnessEvaluator,
        template: NamingDomain,
        bounds: ParameterBounds = DEFAULT_BOUNDS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.evaluator = evaluator
        self.template = template
        self.bounds = bounds
        self.max_workers = max(1, max_workers)

        self._completed = 0
        self._failed = 0

    @property
    def failed_count(self) -> int:
        return self._failed

    @property
    def completed_count(self) -> int:
        return self._completed

    def evaluate_batch(self, tasks: Sequence[EvaluationTask]) -> List[TaskOutcome]:
        """
        Evaluate all tasks and wait for the whole batch.

        Returns:
            One outcome per task, in submission order
        """
        if not tasks:
            return []

        if self.max_workers == 1 or len(tasks) == 1:
            outcomes = [self._run_task(task) for task in tasks]
        else:
            outcomes = self._execute_parallel(tasks)

        for outcome in outcomes:
            if outcome.ok:
                self._completed += 1
            else:
                self._failed += 1
        return outcomes

    def _execute_parallel(self, tasks: Sequence[EvaluationTask]) -> List[TaskOutcome]:
        outcomes: List[Optional[TaskOutcome]] = [None] * len(tasks)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._run_task, task): position
                for position, task in enumerate(tasks)
            }
            for future in as_completed(futures):
                position = futures[future]
                outcomes[position] = future.result()

        return outcomes

    def _run_task(self, task: EvaluationTask) -> TaskOutcome:
        """Decode and score one task; exceptions become failed outcomes."""
        try:
            domain = decode(task.theta, self.template, self.bounds)
            result = self.evaluator.evaluate(domain, task.theta, task.iteration, task.index)
            return TaskOutcome(index=task.index, iteration=task.iteration, result=result)
        except Exception as e:
            logger.warning(f"Evaluation task {task.iteration}.{task.index} failed: {e}")
            return TaskOutcome(
                index=task.index,
                iteration=task.iteration,
                error=f"{type(e).__name__}: {e}",
            )
