"""
bootstrap/logging_setup.py - Logging configuration

Attaches handlers to the "nameforge" package logger, so host applications
keep control of the root logger. Handlers installed here are tagged and
replaced on the next call; configuring twice never duplicates output.
"""

from __future__ import annotations
from typing import List, Optional
import json
import logging
import sys

from .config import OptimizerConfig, resolve_log_level

PACKAGE_LOGGER = "nameforge"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Marks handlers owned by setup_logging
_HANDLER_TAG = "_nameforge_handler"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data)


def installed_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path, written alongside stdout
        json_format: Use JSONFormatter instead of the plain text format

    Returns:
        The configured "nameforge" logger

    Raises:
        ConfigurationError: If `level` is not a known level name
    """
    log_level = resolve_log_level(level)
    formatter = JSONFormatter() if json_format else logging.Formatter(DEFAULT_FORMAT)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in installed_handlers(package_logger):
        package_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        package_logger.addHandler(handler)

    package_logger.setLevel(log_level)
    return package_logger


def configure_logging(config: OptimizerConfig, log_file: Optional[str] = None) -> logging.Logger:
    """Apply the log level and format carried by `config`."""
    return setup_logging(config.log_level, log_file=log_file, json_format=config.log_json)
