"""Tests for logging configuration."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from feedlist.logging import JsonFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_outputs_json():
    record = logging.LogRecord(
        "feedlist.repository", logging.WARNING, __file__, 1, "Feed %s gone", ("a",), None
    )

    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["msg"] == "Feed a gone"
    assert data["logger"] == "feedlist.repository"
    assert "ts" in data
    assert "feed_ids" not in data


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys

        exc_info = sys.exc_info()

    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, exc_info)
    data = json.loads(JsonFormatter().format(record))

    assert "ValueError: boom" in data["exc_info"]


@pytest.mark.parametrize("env,formatter_type", [("prod", JsonFormatter), ("dev", logging.Formatter)])
def test_setup_logging_picks_formatter(restore_root_logger, env, formatter_type):
    settings = MagicMock()
    settings.env = env
    settings.log_level = "INFO"

    with patch("feedlist.logging.get_settings", return_value=settings):
        setup_logging()

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert type(root.handlers[0].formatter) is formatter_type
    assert root.level == logging.INFO


def test_json_formatter_includes_feed_context():
    record = logging.LogRecord(
        "feedlist.feeds.coordinator", logging.WARNING, __file__, 1, "delete failed", None, None
    )
    record.feed_ids = ["B"]
    record.error_kind = "persistence_failure"

    data = json.loads(JsonFormatter().format(record))

    assert data["feed_ids"] == ["B"]
    assert data["error_kind"] == "persistence_failure"


def test_setup_logging_uses_configured_level(restore_root_logger):
    settings = MagicMock()
    settings.env = "dev"
    settings.log_level = "DEBUG"

    with patch("feedlist.logging.get_settings", return_value=settings):
        setup_logging()

    assert restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
