"""Quarterly reflection model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, Section

if TYPE_CHECKING:
    from yearbook.models.year import Year


class QuarterlyReflection(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents the reflection written at the end of a quarter.
    """

    __tablename__ = "quarterly_reflections"
    __table_args__ = (
        UniqueConstraint(
            "year_id", "quarter", name="uq_quarterly_reflections_year_quarter"
        ),
        CheckConstraint(
            "quarter >= 1 AND quarter <= 4", name="ck_quarterly_reflections_quarter"
        ),
        {"sqlite_autoincrement": True},
    )

    OWNER_KIND = OwnerKind.QUARTERLY_REFLECTION
    SECTION = Section.QUARTERLY_REFLECTIONS

    #: The reflection ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The year ID.
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False
    )
    #: The quarter (1-4).
    quarter: Mapped[int] = mapped_column(Integer, nullable=False)
    #: The reflection document in Tiptap JSON.
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    year: Mapped[Year] = relationship("Year", back_populates="quarterly_reflections")

    @classmethod
    def get(cls, session: Session, reflection_id: int) -> QuarterlyReflection | None:
        """
        Get a quarterly reflection by ID.
        """
        return session.get(cls, reflection_id)

    @property
    def owning_year(self) -> Year | None:
        return self.year

    @property
    def item_title(self) -> str:
        return f"Q{self.quarter} Reflection"
