"""
optimization/convergence.py - Stall detection for early stopping.

A run stops once the best fitness has failed to rise by at least
`threshold` over the last recorded best for `window` consecutive
iterations. Any qualifying improvement resets the count and becomes the new
reference point.
"""

from __future__ import annotations
from typing import Any, Dict


class ConvergenceTracker:
    """Counts consecutive iterations without significant improvement."""

    def __init__(self, threshold: float, window: int, initial_best: float):
        self.threshold = threshold
        self.window = window
        self.last_recorded_best = initial_best
        self.stall_count = 0
        self.converged = False

    def update(self, best_fitness: float) -> bool:
        """
        Record the best fitness after an iteration.

        Returns:
            True once the stall window has been reached
        """
        improvement = best_fitness - self.last_recorded_best
        if improvement < self.threshold:
            self.stall_count += 1
            if self.stall_count >= self.window:
                self.converged = True
        else:
            self.stall_count = 0
            self.last_recorded_best = best_fitness
        return self.converged

    def reset(self, initial_best: float) -> None:
        self.last_recorded_best = initial_best
        self.stall_count = 0
        self.converged = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "threshold": self.threshold,
            "window": self.window,
            "last_recorded_best": round(self.last_recorded_best, 6),
            "stall_count": self.stall_count,
            "converged": self.converged,
        }
