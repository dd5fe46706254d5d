"""
Unit tests for the logging configuration module.
"""

import logging
from unittest.mock import patch

import pytest

from vira.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _console_handler() -> logging.Handler:
    return next(h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "log_level,expected_level",
        [("DEBUG", logging.DEBUG), ("info", logging.INFO), ("WARNING", logging.WARNING), ("ERROR", logging.ERROR)],
    )
    def test_console_level(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)
        assert _console_handler().level == expected_level
        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("json", JSON_FORMAT), ("unknown", DETAILED_FORMAT)],
    )
    def test_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)
        assert _console_handler().formatter._fmt == expected_format

    def test_replaces_existing_handlers(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler(self, tmp_path):
        with patch("vira.core.logging_config.LOG_FILE_DIR", str(tmp_path)), patch(
            "vira.core.logging_config.ENABLE_FILE_LOGGING", True
        ):
            setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG
        assert file_handlers[0].baseFilename == str(tmp_path / "vira.log")
        file_handlers[0].close()

    def test_file_logging_needs_the_global_switch(self, tmp_path):
        with patch("vira.core.logging_config.LOG_FILE_DIR", str(tmp_path)), patch(
            "vira.core.logging_config.ENABLE_FILE_LOGGING", False
        ):
            setup_logging(enable_file=True)
        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    @pytest.mark.parametrize(
        "module_name,expected_level",
        [
            ("vira.server.services", "DEBUG"),
            ("vira.server.services.csv_import", "INFO"),
            ("sqlalchemy.engine", "WARNING"),
            ("httpx", "WARNING"),
        ],
    )
    def test_module_levels(self, module_name, expected_level):
        setup_logging(enable_file=False)
        assert MODULE_LOG_LEVELS[module_name] == expected_level
        assert logging.getLogger(module_name).level == getattr(logging, expected_level)


def test_get_logger_returns_named_logger():
    logger = get_logger("vira.server.services.matching")
    assert logger is logging.getLogger("vira.server.services.matching")
    assert logger.getEffectiveLevel() == logging.DEBUG
