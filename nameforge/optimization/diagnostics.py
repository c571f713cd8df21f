"""
optimization/diagnostics.py - Run diagnostics.

Population statistics and diversity measures logged by the strategies and
attached to OptimizationResult.diagnostics.
"""

from __future__ import annotations
from typing import Any, Dict, Sequence

from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds

from .encoder import ParameterVector, distance
from .schema import EvaluationResult


def population_diversity(
    thetas: Sequence[ParameterVector],
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> float:
    """Average pairwise normalized distance."""
    if len(thetas) < 2:
        return 0.0

    total = 0.0
    comparisons = 0
    for i in range(len(thetas) - 1):
        for j in range(i + 1, len(thetas)):
            total += distance(thetas[i], thetas[j], bounds)
            comparisons += 1
    return total / comparisons


def population_stats(
    population: Sequence[EvaluationResult],
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> Dict[str, float]:
    """Best / mean / worst fitness and genetic diversity."""
    if not population:
        return {"best": 0.0, "mean": 0.0, "worst": 0.0, "diversity": 0.0}

    fitnesses = [r.fitness for r in population]
    return {
        "best": round(max(fitnesses), 6),
        "mean": round(sum(fitnesses) / len(fitnesses), 6),
        "worst": round(min(fitnesses), 6),
        "diversity": round(population_diversity([r.theta for r in population], bounds), 6),
    }


def acceptance_stats(accepted: int, rejected: int, worse_accepted: int) -> Dict[str, Any]:
    """Move acceptance summary for local-search strategies."""
    total = accepted + rejected
    return {
        "accepted_moves": accepted,
        "rejected_moves": rejected,
        "worse_moves_accepted": worse_accepted,
        "acceptance_rate": round(accepted / total, 4) if total else 0.0,
    }
