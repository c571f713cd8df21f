"""
optimization/strategies - Search strategies.

Each strategy implements Strategy.run(context) -> OptimizationResult and is
selected by name through optimization.optimizer.STRATEGY_REGISTRY.
"""

from .base import RunContext, RunState, Strategy
from .hill_climb import HillClimbStrategy, hill_climb_from
from .annealing import SimulatedAnnealingStrategy, acceptance_probability, accept_move
from .genetic import GeneticStrategy, mutation_rate, tournament_select
from .bayesian import BayesianStrategy
from .cluster_discovery import (
    ClusterDiscoveryStrategy,
    ClusterStats,
    ClusterSuggestion,
    SeedingPlan,
    analyze_cluster_usage,
    apply_cluster_suggestions,
    borrow_clusters_from_siblings,
    extract_clusters,
    plan_seeding,
    seed_domain,
    select_suggestions,
    suggest_clusters,
    synthesize_clusters,
)

__all__ = [
    "RunContext",
    "RunState",
    "Strategy",
    "HillClimbStrategy",
    "hill_climb_from",
    "SimulatedAnnealingStrategy",
    "acceptance_probability",
    "accept_move",
    "GeneticStrategy",
    "mutation_rate",
    "tournament_select",
    "BayesianStrategy",
    "ClusterDiscoveryStrategy",
    "ClusterStats",
    "ClusterSuggestion",
    "SeedingPlan",
    "analyze_cluster_usage",
    "apply_cluster_suggestions",
    "borrow_clusters_from_siblings",
    "extract_clusters",
    "plan_seeding",
    "seed_domain",
    "select_suggestions",
    "suggest_clusters",
    "synthesize_clusters",
]
