"""Tests for logging configuration."""

import json
import logging
import logging.handlers
from unittest.mock import patch

import pytest

from yearbook import __version__
from yearbook.document import EditorDocument
from yearbook.services import HighlightCaptureController, HighlightService
from yearbook.services.logs import (
    DEBUG_ENV,
    configure_logging,
    get_log_file_path,
    get_logger,
    owner_context,
)
from yearbook.types import OwnerKind, OwnerRef

from tests.conftest import USER_ID


@pytest.fixture
def temp_log_dir(tmp_path):
    """Fixture for a temporary log directory."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    with patch("yearbook.services.logs.get_app_data_path", return_value=tmp_path):
        yield log_dir


def read_entries():
    for handler in logging.getLogger().handlers:
        handler.flush()
    with open(get_log_file_path(), encoding="utf-8") as f:
        return [json.loads(line) for line in f.read().splitlines() if line.strip()]


def test_logging_configuration(temp_log_dir):
    """Test that logging is configured correctly."""
    configure_logging()

    logger = get_logger("test_logger")
    logger.info("test message", key="value")

    log_file = get_log_file_path()
    assert log_file.parent == temp_log_dir

    (log_entry,) = read_entries()
    assert log_entry["event"] == "test message"
    assert log_entry["level"] == "info"
    assert log_entry["key"] == "value"
    assert "timestamp" in log_entry


def test_log_rotation(temp_log_dir):
    """Test that TimedRotatingFileHandler is set up."""
    configure_logging()

    root_logger = logging.getLogger()
    handlers = [
        h
        for h in root_logger.handlers
        if isinstance(h, logging.handlers.TimedRotatingFileHandler)
    ]

    assert len(handlers) == 1
    handler = handlers[0]
    assert handler.when == "D"
    # TimedRotatingFileHandler converts interval to seconds internally
    assert handler.interval == 21 * 24 * 60 * 60
    assert handler.backupCount == 5


def test_console_logging_with_debug_env(temp_log_dir, monkeypatch):
    monkeypatch.setenv(DEBUG_ENV, "1")
    configure_logging(logging.DEBUG)

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert any(
        type(h) is logging.StreamHandler for h in root_logger.handlers
    )


def test_no_console_logging_by_default(temp_log_dir, monkeypatch):
    monkeypatch.delenv(DEBUG_ENV, raising=False)
    configure_logging()
    assert all(
        type(h) is not logging.StreamHandler for h in logging.getLogger().handlers
    )


def test_service_events_are_logged(temp_log_dir, db_session, daily_log):
    """Test that saving a highlight writes a structured event."""
    configure_logging()

    highlight = HighlightService.create_annotation(
        db_session, OwnerKind.DAILY_LOG, daily_log.id, "hello", 0, 5, "h1"
    )

    created = [e for e in read_entries() if e["event"] == "highlight.created"]
    assert len(created) == 1
    assert created[0]["highlight_id"] == highlight.id
    assert created[0]["tiptap_id"] == "h1"


def test_lines_carry_app_context(temp_log_dir, tmp_path):
    db_path = tmp_path / "journal.db"
    configure_logging(db_path=db_path)

    get_logger("test_logger").info("opened")

    (entry,) = read_entries()
    assert entry["app"] == "yearbook"
    assert entry["version"] == __version__
    assert entry["db_path"] == str(db_path)


def test_owner_context(temp_log_dir):
    configure_logging()
    logger = get_logger("test_logger")

    with owner_context(OwnerRef(OwnerKind.LESSON, 7)):
        logger.info("inside")
    with owner_context(None):
        logger.info("outside")

    inside, outside = read_entries()
    assert (inside["owner_kind"], inside["owner_id"]) == ("lesson", 7)
    assert "owner_kind" not in outside
    assert outside["app"] == "yearbook"


def test_capture_events_name_the_owner(temp_log_dir, db_session, daily_log, notifier):
    """Test that a committed highlight is logged against its daily log."""
    configure_logging()
    document = EditorDocument(daily_log.document, owner=daily_log.owner_ref)
    controller = HighlightCaptureController.for_session(
        db_session, document, daily_log.owner_ref, USER_ID, notifier=notifier
    )
    controller.select(0, 5)
    controller.add_tag("morning")

    highlight = controller.commit()

    (committed,) = [e for e in read_entries() if e["event"] == "capture.committed"]
    assert committed["owner_kind"] == "dailyLog"
    assert committed["owner_id"] == daily_log.id
    assert committed["highlight_id"] == highlight.id
