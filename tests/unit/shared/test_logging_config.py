"""Tests for JSON logging setup."""

import json
import logging
import sys

import pytest

from shared.logging.config import CustomJsonFormatter, setup_logging
from shared.logging.correlation import set_correlation_id


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def format_record(message: str, exc_info=None) -> dict:
    formatter = CustomJsonFormatter(fmt="%(timestamp)s %(level)s %(logger)s %(message)s")
    record = logging.LogRecord("infrastructure.monitoring", logging.WARNING, __file__, 1, message, None, exc_info)
    return json.loads(formatter.format(record))


class TestCustomJsonFormatter:
    """Tests for the JSON field layout."""

    def test_standard_fields(self):
        data = format_record("Found disk chart: disk_space._")
        assert data["level"] == "WARNING"
        assert data["logger"] == "infrastructure.monitoring"
        assert data["message"] == "Found disk chart: disk_space._"
        assert "timestamp" in data
        assert "levelname" not in data

    def test_correlation_id_included(self):
        set_correlation_id("api-1234abcd")
        try:
            assert format_record("hello")["correlation_id"] == "api-1234abcd"
        finally:
            set_correlation_id(None)

    def test_correlation_id_absent_outside_request(self):
        set_correlation_id(None)
        assert "correlation_id" not in format_record("hello")

    def test_exception_rendered(self):
        try:
            raise ValueError("bad row")
        except ValueError:
            data = format_record("failed", exc_info=sys.exc_info())
        assert "ValueError: bad row" in json.dumps(data)


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_stdout_only(self, restore_root_logger):
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger("paramiko").level == logging.WARNING

    def test_rotating_file(self, restore_root_logger, tmp_path):
        setup_logging("INFO", log_dir=str(tmp_path / "logs"))
        logging.getLogger("tests").info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert (tmp_path / "logs" / "stats.log").exists()
