"""Data models for Yearbook."""

from sqlalchemy import event

from yearbook.models.book import Book, Chapter, Genre
from yearbook.models.creative_note import CreativeNote
from yearbook.models.daily_log import DailyLog
from yearbook.models.goal import Goal, SubTask, Task
from yearbook.models.highlight import Highlight, delete_owned_highlights, highlight_tags
from yearbook.models.lesson import Lesson
from yearbook.models.quarterly_reflection import QuarterlyReflection
from yearbook.models.tag import Tag
from yearbook.models.year import Year
from yearbook.types import OwnerKind

#: The model behind each owner kind.
OWNER_MODELS = {
    OwnerKind.DAILY_LOG: DailyLog,
    OwnerKind.QUARTERLY_REFLECTION: QuarterlyReflection,
    OwnerKind.GOAL: Goal,
    OwnerKind.TASK: Task,
    OwnerKind.SUBTASK: SubTask,
    OwnerKind.CHAPTER: Chapter,
    OwnerKind.LESSON: Lesson,
    OwnerKind.CREATIVE_NOTE: CreativeNote,
}

for _model in OWNER_MODELS.values():
    event.listen(_model, "after_delete", delete_owned_highlights)

__all__ = [
    "OWNER_MODELS",
    "Book",
    "Chapter",
    "CreativeNote",
    "DailyLog",
    "Genre",
    "Goal",
    "Highlight",
    "Lesson",
    "QuarterlyReflection",
    "SubTask",
    "Tag",
    "Task",
    "Year",
    "highlight_tags",
]
