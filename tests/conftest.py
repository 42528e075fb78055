"""Shared pytest fixtures and test helpers for Yearbook tests."""

import datetime as dt
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

# Set a temporary database path for tests before any other imports
# This prevents yearbook.db from creating a directory in the user's home
if "YEARBOOK_DB_PATH" not in os.environ:
    _temp_db = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    _temp_db.close()
    os.environ["YEARBOOK_DB_PATH"] = _temp_db.name

import pytest
from sqlalchemy.orm import sessionmaker

from yearbook.db import Base, create_engine_with_path
from yearbook.document import DocumentNode
from yearbook.models import (
    Book,
    Chapter,
    CreativeNote,
    DailyLog,
    Genre,
    Goal,
    Lesson,
    QuarterlyReflection,
    SubTask,
    Task,
    Year,
)
from yearbook.services.notifications import Notifier
from yearbook.types import OwnerKind

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(autouse=True)
def temp_app_data(tmp_path):
    """Keep log files out of the real application data directory."""
    with patch("yearbook.services.logs.get_app_data_path", return_value=tmp_path):
        yield tmp_path


@pytest.fixture
def db_session():
    """Create a temporary database and session for testing."""
    temp_db = tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".db")
    temp_db.close()
    db_path = Path(temp_db.name)

    engine = create_engine_with_path(db_path)
    Base.metadata.create_all(engine)
    SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionFactory()
    session.info["db_path"] = db_path

    yield session

    session.close()
    engine.dispose()
    db_path.unlink(missing_ok=True)


def make_doc(*paragraphs: str) -> DocumentNode:
    """Build a document with one paragraph per string."""
    return DocumentNode.doc(*(DocumentNode.paragraph(text) for text in paragraphs))


@pytest.fixture
def year(db_session):
    """A 2024 journal for USER_ID."""
    return Year.create(db_session, USER_ID, 2024)


@pytest.fixture
def owners(db_session, year):
    """One content item of every kind, all in ``year``."""
    daily_log = DailyLog(
        year_id=year.id,
        date=dt.date(2024, 1, 15),
        content=make_doc("hello world").to_dict(),
        has_content=True,
    )
    reflection = QuarterlyReflection(year_id=year.id, quarter=2)
    goal = Goal(year_id=year.id, title="Get fit")
    db_session.add_all([daily_log, reflection, goal])
    db_session.flush()

    task = Task(goal_id=goal.id, title="Run")
    db_session.add(task)
    db_session.flush()
    subtask = SubTask(task_id=task.id, title="5k")

    genre = Genre(year_id=year.id, name="Fiction")
    db_session.add_all([subtask, genre])
    db_session.flush()
    book = Book(genre_id=genre.id, title="Dune")
    db_session.add(book)
    db_session.flush()
    chapter = Chapter(book_id=book.id, title="Chapter 1")

    lesson = Lesson(year_id=year.id, title="Patience")
    note = CreativeNote(year_id=year.id, created_at=dt.datetime(2024, 3, 5, 12, 0))
    db_session.add_all([chapter, lesson, note])
    db_session.commit()

    return {
        OwnerKind.DAILY_LOG: daily_log,
        OwnerKind.QUARTERLY_REFLECTION: reflection,
        OwnerKind.GOAL: goal,
        OwnerKind.TASK: task,
        OwnerKind.SUBTASK: subtask,
        OwnerKind.CHAPTER: chapter,
        OwnerKind.LESSON: lesson,
        OwnerKind.CREATIVE_NOTE: note,
    }


@pytest.fixture
def daily_log(owners):
    """The daily log from :func:`owners`, holding ``hello world``."""
    return owners[OwnerKind.DAILY_LOG]


class RecordingNotifier(Notifier):
    """Notifier that remembers messages instead of printing them."""

    def __init__(self):
        self.messages: list[str] = []
        self.errors: list[str] = []

    def show_message(self, message: str) -> None:
        self.messages.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def notifier():
    return RecordingNotifier()
