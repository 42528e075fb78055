"""Shared value types for Yearbook."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class OwnerKind(StrEnum):
    """The kinds of content item a highlight can belong to."""

    DAILY_LOG = "dailyLog"
    QUARTERLY_REFLECTION = "quarterlyReflection"
    GOAL = "goal"
    TASK = "task"
    SUBTASK = "subtask"
    CHAPTER = "chapter"
    LESSON = "lesson"
    CREATIVE_NOTE = "creativeNote"


class Section(StrEnum):
    """The six fixed sections of a year."""

    DAILY_LOGS = "daily-logs"
    QUARTERLY_REFLECTIONS = "quarterly-reflections"
    YEARLY_GOALS = "yearly-goals"
    BOOK_NOTES = "book-notes"
    LESSONS_LEARNED = "lessons-learned"
    CREATIVE_DUMP = "creative-dump"


@dataclass(frozen=True)
class OwnerRef:
    """Reference to the single content item that owns a highlight."""

    #: The owner kind.
    kind: OwnerKind
    #: The owner's ID.
    id: int

    @classmethod
    def of(cls, kind: OwnerKind | str, owner_id: int) -> OwnerRef:
        """
        Build an owner reference, coercing ``kind`` to :class:`OwnerKind`.

        Raises:
            ValueError: If ``kind`` is not a known owner kind

        """
        return cls(OwnerKind(kind), owner_id)


@dataclass(frozen=True)
class ContentSource:
    """Where a highlight lives: year, section and item."""

    #: The calendar year.
    year: int
    #: The section the item belongs to.
    section: Section
    #: The owning item's ID.
    item_id: int
    #: Human readable title of the owning item.
    item_title: str


@dataclass(frozen=True)
class TagRef:
    """A tag's identity and name."""

    id: int
    name: str


@dataclass(frozen=True)
class TagSummary:
    """A tag with the number of highlights it has in some scope."""

    id: int
    name: str
    highlight_count: int


@dataclass(frozen=True)
class TaggedContent:
    """A highlight resolved to its source."""

    #: The highlight ID.
    id: int
    #: The marker identity of the highlight in its document.
    tiptap_id: str
    #: The highlighted text.
    text: str
    #: Where the highlight lives.
    source: ContentSource
    #: When the highlight was created.
    created_at: datetime
    #: The tags attached to the highlight.
    tags: list[TagRef] = field(default_factory=list)


@dataclass(frozen=True)
class TagGroup:
    """All resolved content for one tag."""

    tag: TagSummary
    content: list[TaggedContent] = field(default_factory=list)
