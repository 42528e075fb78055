"""Resolve highlights to the year, section and item they come from."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import selectinload

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
)
from yearbook.services.logs import get_logger
from yearbook.types import OwnerKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from yearbook.models import Highlight
    from yearbook.models.mixins import DocumentOwnerMixin
    from yearbook.types import ContentSource

logger = get_logger(__name__)

#: How to load each owner kind together with its chain up to the year.
OWNER_LOADERS = {
    OwnerKind.DAILY_LOG: (DailyLog, (selectinload(DailyLog.year),)),
    OwnerKind.QUARTERLY_REFLECTION: (
        QuarterlyReflection,
        (selectinload(QuarterlyReflection.year),),
    ),
    OwnerKind.GOAL: (Goal, (selectinload(Goal.year),)),
    OwnerKind.TASK: (Task, (selectinload(Task.goal).selectinload(Goal.year),)),
    OwnerKind.SUBTASK: (
        SubTask,
        (
            selectinload(SubTask.task)
            .selectinload(Task.goal)
            .selectinload(Goal.year),
        ),
    ),
    OwnerKind.CHAPTER: (
        Chapter,
        (
            selectinload(Chapter.book)
            .selectinload(Book.genre)
            .selectinload(Genre.year),
        ),
    ),
    OwnerKind.LESSON: (Lesson, (selectinload(Lesson.year),)),
    OwnerKind.CREATIVE_NOTE: (CreativeNote, (selectinload(CreativeNote.year),)),
}


class SourceResolver:
    """
    Resolve highlights to :class:`~yearbook.types.ContentSource` objects.

    Owners are loaded in one query per owner kind.  A highlight whose owner is
    gone, whose owner is no longer attached to a year, or whose year belongs to
    another user has no source.

    Args:
        session: SQLAlchemy session

    Keyword Args:
        user_id: Only resolve content in this user's years

    """

    def __init__(self, session: Session, user_id: str | None = None) -> None:
        #: The SQLAlchemy session.
        self.session = session
        #: The user whose content we resolve.
        self.user_id = user_id

    def _load_owners(
        self, kind: OwnerKind, ids: set[int]
    ) -> dict[int, DocumentOwnerMixin]:
        model, options = OWNER_LOADERS[kind]
        owners = self.session.scalars(
            select(model).where(model.id.in_(ids)).options(*options)
        ).all()
        return {owner.id: owner for owner in owners}

    def resolve_owner(self, owner: DocumentOwnerMixin) -> ContentSource | None:
        """
        Resolve a single loaded owner.

        Returns:
            The source, or None if the owner is detached or belongs to another
            user

        """
        year = owner.owning_year
        if year is None:
            return None
        if self.user_id is not None and year.user_id != self.user_id:
            return None
        return owner.content_source()

    def resolve(self, highlights: Iterable[Highlight]) -> dict[int, ContentSource]:
        """
        Resolve every highlight that can be resolved.

        Args:
            highlights: The highlights

        Returns:
            A mapping of highlight ID to source.  Unresolvable highlights are
            left out.

        """
        highlights = list(highlights)
        by_kind: dict[OwnerKind, set[int]] = defaultdict(set)
        for highlight in highlights:
            by_kind[highlight.owner.kind].add(highlight.owner_id)

        owners = {kind: self._load_owners(kind, ids) for kind, ids in by_kind.items()}

        sources: dict[int, ContentSource] = {}
        for highlight in highlights:
            owner = owners[highlight.owner.kind].get(highlight.owner_id)
            if owner is None:
                logger.debug(
                    "highlight.source_missing",
                    highlight_id=highlight.id,
                    owner_kind=highlight.owner_kind,
                    owner_id=highlight.owner_id,
                )
                continue
            source = self.resolve_owner(owner)
            if source is not None:
                sources[highlight.id] = source
        return sources
