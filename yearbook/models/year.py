"""Year model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.exc import AlreadyExists, ValidationError
from yearbook.models.mixins import SaveDeleteMixin

if TYPE_CHECKING:
    from yearbook.models.book import Genre
    from yearbook.models.creative_note import CreativeNote
    from yearbook.models.daily_log import DailyLog
    from yearbook.models.goal import Goal
    from yearbook.models.lesson import Lesson
    from yearbook.models.quarterly_reflection import QuarterlyReflection

#: Earliest year a journal can be created for.
MIN_YEAR: Final[int] = 1900
#: Latest year a journal can be created for.
MAX_YEAR: Final[int] = 2100


class Year(SaveDeleteMixin, Base):
    """
    Represents one year of a user's journal.  Every content item hangs off a
    year, directly or through its parents.
    """

    __tablename__ = "years"
    __table_args__ = (
        UniqueConstraint("user_id", "year", name="uq_years_user_year"),
        CheckConstraint(
            f"year >= {MIN_YEAR} AND year <= {MAX_YEAR}", name="ck_years_year"
        ),
    )

    #: The year ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The user the year belongs to.
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    #: The calendar year.
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Relationships
    daily_logs: Mapped[list[DailyLog]] = relationship(
        "DailyLog",
        back_populates="year",
        cascade="all, delete-orphan",
        order_by="DailyLog.date",
    )
    quarterly_reflections: Mapped[list[QuarterlyReflection]] = relationship(
        "QuarterlyReflection",
        back_populates="year",
        cascade="all, delete-orphan",
        order_by="QuarterlyReflection.quarter",
    )
    goals: Mapped[list[Goal]] = relationship(
        "Goal", back_populates="year", cascade="all, delete-orphan"
    )
    genres: Mapped[list[Genre]] = relationship(
        "Genre", back_populates="year", cascade="all, delete-orphan"
    )
    lessons: Mapped[list[Lesson]] = relationship(
        "Lesson", back_populates="year", cascade="all, delete-orphan"
    )
    creative_notes: Mapped[list[CreativeNote]] = relationship(
        "CreativeNote", back_populates="year", cascade="all, delete-orphan"
    )

    @classmethod
    def get(cls, session: Session, year_id: int) -> Year | None:
        """
        Get a year by ID.
        """
        return session.get(cls, year_id)

    @classmethod
    def get_by_number(cls, session: Session, user_id: str, year: int) -> Year | None:
        """
        Get a user's year by its calendar number.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            year: The calendar year

        Returns:
            The year or None if the user has no journal for it

        """
        return session.scalar(
            select(cls).where(cls.user_id == user_id, cls.year == year)
        )

    @classmethod
    def list_for_user(cls, session: Session, user_id: str) -> list[Year]:
        """
        Get all of a user's years, newest first.
        """
        return list(
            session.scalars(
                select(cls).where(cls.user_id == user_id).order_by(cls.year.desc())
            ).all()
        )

    @classmethod
    def create(
        cls,
        session: Session,
        user_id: str,
        year: int,
        commit: bool = True,  # noqa: FBT001, FBT002
    ) -> Year:
        """
        Create a new year for a user.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            year: The calendar year

        Keyword Args:
            commit: Whether to commit the changes

        Raises:
            ValidationError: If the user ID is empty or the year out of range
            AlreadyExists: If the user already has this year

        Returns:
            The new year

        """
        if not user_id:
            raise ValidationError("user_id", "User ID is required")
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise ValidationError(
                "year", f"Year must be between {MIN_YEAR} and {MAX_YEAR}"
            )
        if cls.get_by_number(session, user_id, year) is not None:
            raise AlreadyExists("Year", year)
        instance = cls(user_id=user_id, year=year)
        instance.save(session, commit=commit)
        return instance
