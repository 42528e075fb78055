"""Tests for the yearbook command line interface."""

import datetime as dt
import json

import pytest
from typer.testing import CliRunner

from yearbook.cli import app
from yearbook.db import apply_migrations, create_engine_with_path, make_session_factory
from yearbook.models import Lesson, Year
from yearbook.services import HighlightService, TagService
from yearbook.types import OwnerKind

from tests.conftest import USER_ID

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path):
    """A migrated database with two tagged highlights on a 2024 lesson."""
    path = tmp_path / "journal.db"
    engine = create_engine_with_path(path)
    apply_migrations(engine)
    session = make_session_factory(engine)()
    try:
        year = Year.create(session, USER_ID, 2024)
        lesson = Lesson(year_id=year.id, title="Patience")
        lesson.save(session)
        morning, evening, _ = TagService.get_or_create_tags(
            session, USER_ID, ["morning", "evening", "unused"]
        )
        first = HighlightService.create_annotation(
            session, OwnerKind.LESSON, lesson.id, "Wake early", 0, 10, "h1",
            [morning.id],
        )
        first.created_at = dt.datetime(2024, 2, 1, 7, 0)
        second = HighlightService.create_annotation(
            session, OwnerKind.LESSON, lesson.id, "Read at night", 11, 24, "h2",
            [morning.id, evening.id],
        )
        second.created_at = dt.datetime(2024, 3, 1, 22, 0)
        session.commit()
    finally:
        session.close()
        engine.dispose()
    return path


def invoke(db_path, *args):
    return runner.invoke(app, ["--db", str(db_path), *args])


def test_migrate(tmp_path):
    path = tmp_path / "new.db"
    result = invoke(path, "migrate")
    assert result.exit_code == 0, result.output
    assert f"Database ready: {path}" in result.output
    assert path.exists()


def test_tags(db_path):
    result = invoke(db_path, "tags", USER_ID)
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["evening (1)", "morning (2)", "unused (0)"]


def test_tags_json(db_path):
    result = invoke(db_path, "tags", USER_ID, "--json")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [(t["name"], t["highlight_count"]) for t in data] == [
        ("evening", 1),
        ("morning", 2),
        ("unused", 0),
    ]


def test_tags_for_other_year(db_path):
    result = invoke(db_path, "tags", USER_ID, "--year", "2023")
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["evening (0)", "morning (0)", "unused (0)"]


def test_tags_for_unknown_user(db_path):
    result = invoke(db_path, "tags", "nobody")
    assert result.exit_code == 0, result.output
    assert "No tags." in result.output


def test_show_tag(db_path):
    result = invoke(db_path, "show-tag", USER_ID, "morning")
    assert result.exit_code == 0, result.output
    assert "morning: 2 highlight(s)" in result.output
    assert result.output.index("Read at night") < result.output.index("Wake early")
    assert "2024 / lessons-learned / Patience" in result.output


def test_show_tag_json(db_path):
    result = invoke(db_path, "show-tag", USER_ID, "evening", "--json")
    assert result.exit_code == 0, result.output
    (item,) = json.loads(result.output)
    assert item["text"] == "Read at night"
    assert item["tiptap_id"] == "h2"
    assert item["tags"] == ["evening", "morning"]
    assert item["source"] == {
        "year": 2024,
        "section": "lessons-learned",
        "item_id": item["source"]["item_id"],
        "item_title": "Patience",
    }


def test_show_missing_tag(db_path):
    result = invoke(db_path, "show-tag", USER_ID, "nope")
    assert result.exit_code == 1
    assert "Tag 'nope' not found." in result.output


def test_search(db_path):
    result = invoke(db_path, "search", USER_ID, "NIGHT")
    assert result.exit_code == 0, result.output
    assert "Found 1 highlight(s)" in result.output
    assert "tags: evening, morning" in result.output
