"""
bootstrap/config.py - Optimizer configuration

Provides process-level defaults from environment variables. Per-run knobs
live in nameforge.optimization.schema; this module only supplies what a run
falls back to when the caller does not say otherwise.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict
import os
import logging

from nameforge.errors import ConfigurationError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TRUE_VALUES = ("1", "true", "yes", "on")


def resolve_log_level(level: str) -> int:
    """
    Numeric level for a level name, case-insensitive.

    Raises:
        ConfigurationError: If `level` is not one of LOG_LEVELS
    """
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level '{level}'",
            field="log_level",
            details={"known": list(LOG_LEVELS)},
        )
    return getattr(logging, name)


class BoundsPolicy(str, Enum):
    """How out-of-bounds parameter values are handled on decode."""
    CLAMP = "clamp"


@dataclass
class OptimizerConfig:
    """Engine-wide defaults."""

    workers: int = 4
    default_algorithm: str = "hillclimb"
    sample_size: int = 200
    log_level: str = "INFO"
    log_json: bool = False
    bounds_policy: BoundsPolicy = BoundsPolicy.CLAMP

    def __post_init__(self):
        if self.workers < 1:
            raise ConfigurationError(
                f"workers must be at least 1, got {self.workers}",
                field="workers",
            )
        if self.sample_size < 1:
            raise ConfigurationError(
                f"sample_size must be at least 1, got {self.sample_size}",
                field="sample_size",
            )
        resolve_log_level(self.log_level)
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "OptimizerConfig":
        policy = os.getenv("NAMEFORGE_BOUNDS_POLICY", "clamp").lower()
        try:
            bounds_policy = BoundsPolicy(policy)
        except ValueError:
            raise ConfigurationError(
                f"Unsupported bounds policy '{policy}'",
                field="bounds_policy",
                recovery_hint="Only 'clamp' is supported.",
            ) from None

        try:
            workers = int(os.getenv("NAMEFORGE_WORKERS", "4"))
            sample_size = int(os.getenv("NAMEFORGE_SAMPLE_SIZE", "200"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric environment value: {e}") from e

        config = cls(
            workers=workers,
            default_algorithm=os.getenv("NAMEFORGE_DEFAULT_ALGORITHM", "hillclimb"),
            sample_size=sample_size,
            log_level=os.getenv("NAMEFORGE_LOG_LEVEL", "INFO"),
            log_json=os.getenv("NAMEFORGE_LOG_JSON", "").lower() in TRUE_VALUES,
            bounds_policy=bounds_policy,
        )
        logger.debug(f"Loaded optimizer config: {config.to_dict()}")
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workers": self.workers,
            "default_algorithm": self.default_algorithm,
            "sample_size": self.sample_size,
            "log_level": self.log_level,
            "log_json": self.log_json,
            "bounds_policy": self.bounds_policy.value,
        }
