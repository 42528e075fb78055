"""Daily log model."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, Section
from yearbook.utils import format_short_date

if TYPE_CHECKING:
    from yearbook.models.year import Year


class DailyLog(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents the journal entry for one day.
    """

    __tablename__ = "daily_logs"
    __table_args__ = (
        UniqueConstraint("year_id", "date", name="uq_daily_logs_year_date"),
        {"sqlite_autoincrement": True},
    )

    OWNER_KIND = OwnerKind.DAILY_LOG
    SECTION = Section.DAILY_LOGS

    #: The daily log ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The year ID.
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False
    )
    #: The day the entry is for.
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    #: The entry document in Tiptap JSON.
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    #: Whether the entry has any text.
    has_content: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    year: Mapped[Year] = relationship("Year", back_populates="daily_logs")

    @classmethod
    def get(cls, session: Session, daily_log_id: int) -> DailyLog | None:
        """
        Get a daily log by ID.
        """
        return session.get(cls, daily_log_id)

    @property
    def owning_year(self) -> Year | None:
        return self.year

    @property
    def item_title(self) -> str:
        return format_short_date(self.date)
