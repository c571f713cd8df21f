"""
bootstrap/entrypoints.py - Process entry helper

Hosts that drive the optimizer call initialize() once at start-up: it loads
the environment configuration and applies its logging settings.
"""

from __future__ import annotations
from typing import Optional
import logging

from .config import OptimizerConfig
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def initialize(
    config: Optional[OptimizerConfig] = None,
    log_file: Optional[str] = None,
) -> OptimizerConfig:
    """
    Load configuration and configure logging.

    Args:
        config: Explicit configuration; read from NAMEFORGE_* variables when omitted
        log_file: Optional log file path

    Returns:
        The configuration in effect, to be passed on as optimize(config=...)

    Raises:
        ConfigurationError: On invalid environment values
    """
    config = config or OptimizerConfig.from_env()
    configure_logging(config, log_file=log_file)
    logger.info(
        f"nameforge initialized: workers={config.workers}, "
        f"algorithm={config.default_algorithm}, log_level={config.log_level}"
    )
    return config
