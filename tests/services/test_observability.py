"""Structured Logging — JSON formatter output shape and settings wiring."""

import json
import logging

import pytest

from algoledger.config import Settings
from algoledger.infrastructure.observability import (
    JSONFormatter, configure_logging, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "algoledger.test", logging.WARNING, __file__, 1, "certify rejected", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "algoledger.test"
    assert payload["message"] == "certify rejected"
    assert "timestamp" in payload


def test_json_formatter_surfaces_extra_fields():
    payload = json.loads(JSONFormatter().format(_record(
        registry="algorithms", record_id=3, caller="bob", error_code="UNAUTHORIZED",
    )))
    assert payload["registry"] == "algorithms"
    assert payload["record_id"] == 3
    assert payload["caller"] == "bob"
    assert payload["error_code"] == "UNAUTHORIZED"


def test_json_formatter_omits_missing_extras():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "error_code" not in payload


@pytest.fixture
def root_logger():
    """Restore root handlers and level after a logging reconfiguration."""
    handlers, level = list(logging.root.handlers), logging.root.level
    yield logging.root
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def test_setup_logging_installs_handler(root_logger):
    handler = setup_logging("debug", "text")
    assert handler in root_logger.handlers
    assert root_logger.level == logging.DEBUG
    assert not isinstance(handler.formatter, JSONFormatter)


def test_setup_logging_replaces_previous_handler(root_logger):
    first = setup_logging("INFO", "json")
    second = setup_logging("INFO", "json")
    assert first not in root_logger.handlers
    assert second in root_logger.handlers


def test_configure_logging_applies_settings(root_logger):
    handler = configure_logging(Settings(_env_file=None, log_level="DEBUG", log_format="text"))
    assert root_logger.level == logging.DEBUG
    assert not isinstance(handler.formatter, JSONFormatter)

    handler = configure_logging(Settings(_env_file=None, log_level="WARNING", log_format="json"))
    assert root_logger.level == logging.WARNING
    assert isinstance(handler.formatter, JSONFormatter)
    assert [h for h in root_logger.handlers if isinstance(h.formatter, JSONFormatter)] == [handler]


def test_configure_logging_reads_environment(root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("LOG_FORMAT", "text")
    handler = configure_logging(Settings(_env_file=None))
    assert root_logger.level == logging.ERROR
    assert not isinstance(handler.formatter, JSONFormatter)
