"""
errors/ - Optimizer Error Taxonomy

Structured exception types shared by the optimization engine.
"""

from .taxonomy import (
    ErrorCategory,
    ErrorSeverity,
    OptimizationError,
    UnknownAlgorithmError,
    ConfigurationError,
    ShapeMismatchError,
    EvaluationFailedError,
)

__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "OptimizationError",
    "UnknownAlgorithmError",
    "ConfigurationError",
    "ShapeMismatchError",
    "EvaluationFailedError",
]
