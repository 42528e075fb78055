"""Creative note model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, Section
from yearbook.utils import format_short_date, utcnow

if TYPE_CHECKING:
    from yearbook.models.year import Year


class CreativeNote(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents a free-form note in the creative dump.
    """

    __tablename__ = "creative_notes"
    __table_args__ = {"sqlite_autoincrement": True}

    OWNER_KIND = OwnerKind.CREATIVE_NOTE
    SECTION = Section.CREATIVE_DUMP

    #: The note ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The year ID.
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False
    )
    #: The note document in Tiptap JSON.
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    #: Plain-text preview of the document.
    preview: Mapped[str] = mapped_column(String, nullable=False, default="")
    #: The date and time the note was created.
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    # Relationships
    year: Mapped[Year] = relationship("Year", back_populates="creative_notes")

    @classmethod
    def get(cls, session: Session, note_id: int) -> CreativeNote | None:
        """
        Get a creative note by ID.
        """
        return session.get(cls, note_id)

    @property
    def owning_year(self) -> Year | None:
        return self.year

    @property
    def item_title(self) -> str:
        return f"Note from {format_short_date(self.created_at)}"
