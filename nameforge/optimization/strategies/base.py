"""
optimization/strategies/base.py - Shared strategy machinery.

Every strategy runs the same outer loop: keep a current state and the best
state seen so far, propose candidates through the encoder, score them,
append to the evaluation history, record the best fitness after each
iteration and stop on convergence, budget or cooperative cancellation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging
import random
import time

from nameforge.core.domain import NamingDomain
from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds
from nameforge.core.rng import create_rng, derive_seed
from nameforge.errors import EvaluationFailedError

from ..convergence import ConvergenceTracker
from ..encoder import ParameterVector, decode, encode
from ..enums import OptimizerStatus
from ..fitness import FitnessEvaluator
from ..pool import EvaluationPool
from ..schema import EvaluationResult, OptimizationResult, OptimizationSettings

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Read-only inputs of one optimization run."""
    initial_domain: NamingDomain
    evaluator: FitnessEvaluator
    settings: OptimizationSettings
    seed: str
    bounds: ParameterBounds = DEFAULT_BOUNDS
    pool: Optional[EvaluationPool] = None
    corpus: Optional[Sequence[str]] = None
    cancel_check: Optional[Callable[[], bool]] = None
    on_progress: Optional[Callable[[str], None]] = None

    @property
    def step_sizes(self) -> Dict[str, float]:
        return self.settings.step_sizes

    def rng(self, purpose: str) -> random.Random:
        """Strategy-level stream, independent of the evaluation streams."""
        return create_rng(derive_seed(self.seed, "strategy", purpose))

    def cancelled(self) -> bool:
        return bool(self.cancel_check and self.cancel_check())

    def report(self, message: str) -> None:
        if self.on_progress is not None:
            self.on_progress(message)

    def get_pool(self) -> EvaluationPool:
        if self.pool is None:
            self.pool = EvaluationPool(
                self.evaluator, self.initial_domain, self.bounds, max_workers=1
            )
        return self.pool


class RunState:
    """Mutable bookkeeping for one run."""

    def __init__(self, initial: EvaluationResult, settings: OptimizationSettings):
        self.initial = initial
        self.current = initial
        self.best = initial
        self.evaluations: List[EvaluationResult] = [initial]
        self.history: List[float] = [initial.fitness]
        self.tracker = ConvergenceTracker(
            settings.convergence_threshold,
            settings.convergence_window,
            initial.fitness,
        )
        self.iterations = 0
        self.failed = 0
        self.cancelled = False
        self.diagnostics: Dict[str, Any] = {}

    def record(self, result: EvaluationResult) -> bool:
        """Append an evaluation; returns True when it is a new best."""
        self.evaluations.append(result)
        if result.fitness > self.best.fitness:
            self.best = result
            return True
        return False

    def end_iteration(self) -> bool:
        """Close the iteration; returns True when the run has converged."""
        self.iterations += 1
        self.history.append(self.best.fitness)
        return self.tracker.update(self.best.fitness)

    @property
    def status(self) -> OptimizerStatus:
        if self.cancelled:
            return OptimizerStatus.CANCELLED
        if self.tracker.converged:
            return OptimizerStatus.CONVERGED
        return OptimizerStatus.MAX_ITERATIONS


class Strategy:
    """
    Base class for search strategies.

    Subclasses implement run(context) and return an OptimizationResult whose
    optimized_config is the best candidate ever evaluated.
    """

    name: str = ""

    def run(self, context: RunContext) -> OptimizationResult:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def log(self, context: RunContext, message: str) -> None:
        """Log a progress message and forward it to context.on_progress."""
        if context.settings.verbose:
            logger.info(f"[{self.name}] {message}")
        else:
            logger.debug(f"[{self.name}] {message}")
        context.report(f"[{self.name}] {message}")

    def start_run(self, context: RunContext, initial: EvaluationResult) -> RunState:
        self.log(context, f"initial fitness {initial.fitness:.4f}")
        return RunState(initial, context.settings)

    def finish_iteration(self, context: RunContext, state: RunState) -> bool:
        """Close an iteration on `state`; returns True when the run has converged."""
        converged = state.end_iteration()
        self.log(context, f"iteration {state.iterations}: best {state.best.fitness:.4f}")
        if converged:
            self.log(context, f"converged at iteration {state.iterations}")
        return converged

    def evaluate_initial(
        self,
        context: RunContext,
        theta: Optional[ParameterVector] = None,
    ) -> EvaluationResult:
        """
        Score the starting point.

        Raises:
            EvaluationFailedError: Without an initial fitness there is nothing to improve on
        """
        theta = theta if theta is not None else encode(context.initial_domain)
        try:
            domain = decode(theta, context.initial_domain, context.bounds)
            return context.evaluator.evaluate(domain, theta, iteration=0, task_index=0)
        except EvaluationFailedError:
            raise
        except Exception as e:
            raise EvaluationFailedError(
                f"Initial evaluation of {context.initial_domain.id} failed: {e}",
                failures=[f"{type(e).__name__}: {e}"],
            ) from e

    def try_evaluate(
        self,
        context: RunContext,
        state: RunState,
        theta: ParameterVector,
        iteration: int,
        task_index: int = 0,
    ) -> Optional[EvaluationResult]:
        """Score one candidate directly; a failure is counted and yields None."""
        try:
            domain = decode(theta, context.initial_domain, context.bounds)
            result = context.evaluator.evaluate(domain, theta, iteration, task_index)
        except Exception as e:
            state.failed += 1
            logger.warning(f"[{self.name}] evaluation {iteration}.{task_index} failed: {e}")
            return None

        if state.record(result):
            self.log(context, f"iteration {iteration}: new best {result.fitness:.4f}")
        return result

    def check_cancelled(self, context: RunContext, state: RunState) -> bool:
        if context.cancelled():
            state.cancelled = True
            self.log(context, f"cancelled after {state.iterations} iterations")
            return True
        return False

    def build_result(
        self,
        context: RunContext,
        state: RunState,
        started: float,
        initial: Optional[EvaluationResult] = None,
    ) -> OptimizationResult:
        initial = initial or state.initial
        if context.pool is not None:
            state.failed += context.pool.failed_count

        result = OptimizationResult(
            initial_config=initial.config,
            optimized_config=state.best.config,
            initial_fitness=initial.fitness,
            final_fitness=state.best.fitness,
            improvement=state.best.fitness - initial.fitness,
            iterations=state.iterations,
            evaluations=list(state.evaluations),
            convergence_history=list(state.history),
            settings=context.settings,
            algorithm=self.name,
            seed=context.seed,
            status=state.status,
            elapsed_time_s=time.time() - started,
            failed_evaluations=state.failed,
            diagnostics=dict(state.diagnostics, convergence=state.tracker.to_dict()),
        )

        self.log(
            context,
            f"{initial.config.id}: {result.initial_fitness:.4f} -> {result.final_fitness:.4f} "
            f"in {result.iterations} iterations ({result.status.value})",
        )
        return result
