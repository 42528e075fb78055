"""Lesson model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, Section
from yearbook.utils import utcnow

if TYPE_CHECKING:
    from yearbook.models.year import Year


class Lesson(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents a lesson learned during the year.
    """

    __tablename__ = "lessons"
    __table_args__ = {"sqlite_autoincrement": True}

    OWNER_KIND = OwnerKind.LESSON
    SECTION = Section.LESSONS_LEARNED

    #: The lesson ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The year ID.
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False
    )
    #: The lesson title.
    title: Mapped[str] = mapped_column(String, nullable=False)
    #: The lesson document in Tiptap JSON.
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    #: Plain-text preview of the document.
    preview: Mapped[str] = mapped_column(String, nullable=False, default="")
    #: The date and time the lesson was created.
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    # Relationships
    year: Mapped[Year] = relationship("Year", back_populates="lessons")

    @classmethod
    def get(cls, session: Session, lesson_id: int) -> Lesson | None:
        """
        Get a lesson by ID.
        """
        return session.get(cls, lesson_id)

    @property
    def owning_year(self) -> Year | None:
        return self.year

    @property
    def item_title(self) -> str:
        return self.title
