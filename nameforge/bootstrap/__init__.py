"""
bootstrap/ - Configuration, logging setup and the process entry helper.
"""

from .config import OptimizerConfig, BoundsPolicy, resolve_log_level
from .logging_setup import setup_logging, configure_logging, JSONFormatter
from .entrypoints import initialize

__all__ = [
    "OptimizerConfig",
    "BoundsPolicy",
    "resolve_log_level",
    "setup_logging",
    "configure_logging",
    "JSONFormatter",
    "initialize",
]
