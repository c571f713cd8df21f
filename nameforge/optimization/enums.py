"""
optimization/enums.py - Optimization enumerations.
"""

from enum import Enum


class Algorithm(str, Enum):
    """Canonical search strategy names."""
    HILLCLIMB = "hillclimb"
    SIM_ANNEAL = "sim_anneal"
    GENETIC = "ga"
    BAYESIAN = "bayes"
    CLUSTER = "cluster"


class OptimizerStatus(Enum):
    """Optimizer execution status."""
    PENDING = "pending"
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    FAILED = "failed"
    CANCELLED = "cancelled"


class CrossoverMode(str, Enum):
    """How a child picks each field from its parents."""
    UNIFORM = "uniform"  # Copy from one parent, 50/50
    BLEND = "blend"      # Random convex combination of both parents


class MutationSchedule(str, Enum):
    """Decay of the GA mutation rate across generations."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class ClusterSource(Enum):
    """Where a consonant cluster suggestion came from."""
    DISCOVERED = "discovered"    # Frequent in the corpus
    BORROWED = "borrowed"        # Frequent in a sibling domain
    SYNTHESIZED = "synthesized"  # Built from common phonotactic patterns


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
