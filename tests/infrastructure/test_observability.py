"""Structured logging - JSON formatter fields and idempotent setup."""

import json
import logging
import sys

import pytest

from ministry.infrastructure.observability import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "ministry.test", logging.WARNING, __file__, 1, "user %s missing", (7,), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_core_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "ministry.test"
    assert payload["message"] == "user 7 missing"
    assert "timestamp" in payload


def test_json_formatter_surfaces_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(user_id=7, error_code="USER_NOT_FOUND", secret="x"),
    ))
    assert payload["user_id"] == 7
    assert payload["error_code"] == "USER_NOT_FOUND"
    assert "secret" not in payload


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: bad" in payload["exception"]


def test_setup_logging_is_idempotent(restore_root_logger):
    setup_logging("DEBUG", "json")
    handler = setup_logging("WARNING", "text")
    ours = [h for h in logging.root.handlers if h.get_name() == "ministry"]
    assert ours == [handler]
    assert not isinstance(handler.formatter, JSONFormatter)
    assert logging.root.level == logging.WARNING


def test_setup_logging_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("chatty", "json")
    assert logging.root.level == logging.INFO
