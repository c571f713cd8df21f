"""
tests/unit/test_config.py - Tests for optimizer configuration and logging setup.
"""

import json
import logging

import pytest

from nameforge.bootstrap import (
    BoundsPolicy,
    JSONFormatter,
    OptimizerConfig,
    configure_logging,
    initialize,
    setup_logging,
)
from nameforge.bootstrap.logging_setup import installed_handlers
from nameforge.errors import ConfigurationError


class TestOptimizerConfig:
    """Tests for OptimizerConfig."""

    def test_defaults(self):
        config = OptimizerConfig()

        assert config.workers == 4
        assert config.default_algorithm == "hillclimb"
        assert config.sample_size == 200
        assert config.bounds_policy == BoundsPolicy.CLAMP

    def test_invalid_workers(self):
        with pytest.raises(ConfigurationError):
            OptimizerConfig(workers=0)

    def test_invalid_sample_size(self):
        with pytest.raises(ConfigurationError):
            OptimizerConfig(sample_size=0)

    def test_to_dict(self):
        data = OptimizerConfig().to_dict()
        assert data["bounds_policy"] == "clamp"
        assert data["workers"] == 4
        assert data["log_json"] is False

    def test_log_level_normalized(self):
        assert OptimizerConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError) as exc_info:
            OptimizerConfig(log_level="LOUD")
        assert exc_info.value.field == "log_level"


class TestOptimizerConfigFromEnv:
    """Tests for OptimizerConfig.from_env."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("NAMEFORGE_WORKERS", "2")
        monkeypatch.setenv("NAMEFORGE_DEFAULT_ALGORITHM", "ga")
        monkeypatch.setenv("NAMEFORGE_SAMPLE_SIZE", "50")
        monkeypatch.setenv("NAMEFORGE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("NAMEFORGE_LOG_JSON", "true")

        config = OptimizerConfig.from_env()

        assert config.workers == 2
        assert config.default_algorithm == "ga"
        assert config.sample_size == 50
        assert config.log_level == "DEBUG"
        assert config.log_json is True

    def test_defaults_without_environment(self, monkeypatch):
        for name in ("NAMEFORGE_WORKERS", "NAMEFORGE_DEFAULT_ALGORITHM",
                     "NAMEFORGE_SAMPLE_SIZE", "NAMEFORGE_BOUNDS_POLICY",
                     "NAMEFORGE_LOG_LEVEL", "NAMEFORGE_LOG_JSON"):
            monkeypatch.delenv(name, raising=False)

        config = OptimizerConfig.from_env()
        assert config.workers == 4
        assert config.log_level == "INFO"
        assert config.log_json is False
        assert config.bounds_policy == BoundsPolicy.CLAMP

    def test_reject_policy_not_supported(self, monkeypatch):
        monkeypatch.setenv("NAMEFORGE_BOUNDS_POLICY", "reject")
        with pytest.raises(ConfigurationError) as exc_info:
            OptimizerConfig.from_env()
        assert exc_info.value.field == "bounds_policy"

    def test_non_numeric_workers(self, monkeypatch):
        monkeypatch.setenv("NAMEFORGE_WORKERS", "many")
        with pytest.raises(ConfigurationError):
            OptimizerConfig.from_env()


@pytest.fixture
def package_logger():
    """The nameforge logger, restored after the test."""
    package = logging.getLogger("nameforge")
    handlers = list(package.handlers)
    level = package.level
    yield package
    for handler in package.handlers:
        if handler not in handlers:
            handler.close()
    package.handlers = handlers
    package.setLevel(level)


class TestLoggingSetup:
    """Tests for setup_logging and JSONFormatter."""

    def test_json_formatter(self):
        record = logging.LogRecord("nameforge.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "nameforge.test"
        assert "exception" not in data

    def test_setup_logging_sets_level(self, package_logger, tmp_path):
        root_handlers = list(logging.getLogger().handlers)

        setup_logging("DEBUG", log_file=str(tmp_path / "run.log"))

        assert package_logger.level == logging.DEBUG
        assert len(installed_handlers(package_logger)) == 2
        assert logging.getLogger().handlers == root_handlers

    def test_repeated_setup_replaces_handlers(self, package_logger):
        setup_logging("INFO")
        setup_logging("WARNING", json_format=True)

        handlers = installed_handlers(package_logger)
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)
        assert package_logger.level == logging.WARNING

    def test_invalid_level(self, package_logger):
        with pytest.raises(ConfigurationError):
            setup_logging("CHATTY")
        assert installed_handlers(package_logger) == []

    def test_log_file_receives_records(self, package_logger, tmp_path):
        path = tmp_path / "run.log"
        setup_logging("INFO", log_file=str(path))

        logging.getLogger("nameforge.optimization.test").info("run started")
        for handler in installed_handlers(package_logger):
            handler.flush()

        assert "run started" in path.read_text()

    def test_configure_logging_uses_config(self, package_logger):
        configure_logging(OptimizerConfig(log_level="ERROR", log_json=True))

        assert package_logger.level == logging.ERROR
        assert isinstance(installed_handlers(package_logger)[0].formatter, JSONFormatter)


class TestInitialize:
    """Tests for the initialize entry helper."""

    def test_applies_environment_log_level(self, package_logger, monkeypatch):
        monkeypatch.setenv("NAMEFORGE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("NAMEFORGE_WORKERS", "2")

        config = initialize()

        assert config.workers == 2
        assert package_logger.level == logging.DEBUG
        assert package_logger.isEnabledFor(logging.DEBUG)

    def test_explicit_config(self, package_logger):
        config = OptimizerConfig(workers=1, log_level="WARNING")

        assert initialize(config) is config
        assert package_logger.level == logging.WARNING

    def test_invalid_environment_level(self, package_logger, monkeypatch):
        monkeypatch.setenv("NAMEFORGE_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            initialize()
        assert exc_info.value.field == "log_level"
