"""
errors/taxonomy.py - Optimizer error taxonomy.

Structured exception types raised by the optimization engine. Every error
carries a stable code, a category and a recovery hint so callers (reporting
layers, batch drivers) can tell configuration mistakes apart from runtime
evaluation failures.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorCategory(Enum):
    """Categories of optimizer errors."""
    ALGORITHM = "algorithm"          # Strategy could not be resolved
    CONFIGURATION = "configuration"  # Invalid settings, bounds or weights
    SHAPE = "shape"                  # Parameter vectors disagree on shape
    EVALUATION = "evaluation"        # Fitness evaluation produced no signal


class ErrorSeverity(Enum):
    """Severity levels for optimizer errors."""
    FATAL = "fatal"      # Run cannot start or continue
    ERROR = "error"      # Operation failed
    WARNING = "warning"  # Operation succeeded with issues


# =============================================================================
# BASE ERROR CLASS
# =============================================================================

class OptimizationError(Exception):
    """
    Base class for optimizer errors.

    Provides:
    - Error code for programmatic handling
    - Human-readable message
    - Recovery hint
    - Detail mapping for debugging
    """

    code: str = "OPT_000"
    category: ErrorCategory = ErrorCategory.EVALUATION
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str = "",
        *,
        domain_id: str = "",
        recovery_hint: str = "",
        details: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        self.message = message or self.__class__.__doc__ or "Optimization error"
        self.domain_id = domain_id
        self.recovery_hint = recovery_hint
        self.details = details or {}
        self.details.update(kwargs)

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for reports."""
        return {
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "domain_id": self.domain_id,
            "recovery_hint": self.recovery_hint,
            "details": self.details,
        }

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.domain_id:
            parts.append(f"(domain: {self.domain_id})")
        if self.recovery_hint:
            parts.append(f"Hint: {self.recovery_hint}")
        return " ".join(parts)


# =============================================================================
# SPECIFIC ERROR TYPES
# =============================================================================

class UnknownAlgorithmError(OptimizationError):
    """Requested optimization algorithm is unknown or not implemented."""

    code = "OPT_001"
    category = ErrorCategory.ALGORITHM
    severity = ErrorSeverity.FATAL

    def __init__(
        self,
        algorithm: str,
        available: Sequence[str] = (),
        **kwargs,
    ):
        self.algorithm = algorithm
        self.available: List[str] = sorted(available)

        super().__init__(
            message=f"Unknown optimization algorithm '{algorithm}'",
            recovery_hint=(
                f"Use one of: {', '.join(self.available)}" if self.available else ""
            ),
            algorithm=algorithm,
            available=self.available,
            **kwargs,
        )


class ConfigurationError(OptimizationError):
    """Optimizer configuration is invalid."""

    code = "OPT_002"
    category = ErrorCategory.CONFIGURATION
    severity = ErrorSeverity.FATAL

    def __init__(self, message: str, *, field: str = "", **kwargs):
        self.field = field
        super().__init__(message=message, field=field, **kwargs)


class ShapeMismatchError(OptimizationError, ValueError):
    """Parameter vectors have incompatible shapes."""

    code = "OPT_003"
    category = ErrorCategory.SHAPE
    severity = ErrorSeverity.ERROR

    def __init__(self, field: str, expected: int, actual: int, **kwargs):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            message=f"Shape mismatch in '{field}': expected {expected}, got {actual}",
            recovery_hint="Encode both vectors from domains with the same inventory sizes.",
            field=field,
            expected=expected,
            actual=actual,
            **kwargs,
        )


class EvaluationFailedError(OptimizationError):
    """No fitness signal is available to continue the run."""

    code = "OPT_004"
    category = ErrorCategory.EVALUATION
    severity = ErrorSeverity.FATAL

    def __init__(
        self,
        message: str = "All evaluations in batch failed",
        *,
        failures: Optional[List[str]] = None,
        **kwargs,
    ):
        self.failures = failures or []
        super().__init__(
            message=message,
            recovery_hint="Check the generation and scoring collaborators for exceptions.",
            failures=self.failures,
            **kwargs,
        )
