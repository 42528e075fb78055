"""Tag model."""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.exc import AlreadyExists, ValidationError
from yearbook.models.mixins import SaveDeleteMixin
from yearbook.utils import utcnow

if TYPE_CHECKING:
    from yearbook.models.highlight import Highlight

#: Longest allowed tag name.
MAX_TAG_NAME_LENGTH: Final[int] = 50
#: Characters allowed in tag names.
TAG_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z0-9\-_\s]+$")


class Tag(SaveDeleteMixin, Base):
    """
    Represents a user's tag.  Tags are attached to highlights; deleting a tag
    detaches it from its highlights but leaves the highlights in place.
    """

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_tags_user_name"),)

    #: The tag ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The user the tag belongs to.
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    #: The tag name.
    name: Mapped[str] = mapped_column(String, nullable=False)
    #: The date and time the tag was created.
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    # Relationships
    highlights: Mapped[list[Highlight]] = relationship(
        "Highlight",
        secondary="highlight_tags",
        back_populates="tags",
        passive_deletes=True,
    )

    @staticmethod
    def validate_name(name: str | None) -> str:
        """
        Validate a tag name.

        Args:
            name: The name as typed

        Raises:
            ValidationError: If the name is empty, too long or uses characters
                other than letters, numbers, spaces, hyphens and underscores

        Returns:
            The trimmed name

        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError("name", "Tag name is required")
        if len(trimmed) > MAX_TAG_NAME_LENGTH:
            raise ValidationError(
                "name",
                f"Tag name must be {MAX_TAG_NAME_LENGTH} characters or less",
            )
        if not TAG_NAME_PATTERN.match(trimmed):
            raise ValidationError(
                "name",
                "Tag name can only contain letters, numbers, spaces, hyphens, "
                "and underscores",
            )
        return trimmed

    @classmethod
    def get(cls, session: Session, tag_id: int) -> Tag | None:
        """
        Get a tag by ID.
        """
        return session.get(cls, tag_id)

    @classmethod
    def get_for_user(cls, session: Session, user_id: str, tag_id: int) -> Tag | None:
        """
        Get a tag by ID, but only if it belongs to ``user_id``.
        """
        return session.scalar(
            select(cls).where(cls.id == tag_id, cls.user_id == user_id)
        )

    @classmethod
    def get_by_name(cls, session: Session, user_id: str, name: str) -> Tag | None:
        """
        Get a user's tag by its exact name.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            name: The tag name

        Returns:
            The tag or None if the user has no tag with this name

        """
        return session.scalar(
            select(cls).where(cls.user_id == user_id, cls.name == name)
        )

    @classmethod
    def list_for_user(cls, session: Session, user_id: str) -> list[Tag]:
        """
        Get all of a user's tags, ordered by name.
        """
        return list(
            session.scalars(
                select(cls).where(cls.user_id == user_id).order_by(cls.name)
            ).all()
        )

    @classmethod
    def search(
        cls, session: Session, user_id: str, prefix: str, limit: int = 10
    ) -> list[Tag]:
        """
        Get a user's tags whose names start with ``prefix`` (case-insensitive).
        """
        pattern = prefix.strip().replace("%", r"\%").replace("_", r"\_") + "%"
        return list(
            session.scalars(
                select(cls)
                .where(cls.user_id == user_id, cls.name.ilike(pattern, escape="\\"))
                .order_by(cls.name)
                .limit(limit)
            ).all()
        )

    @classmethod
    def create(
        cls,
        session: Session,
        user_id: str,
        name: str,
        commit: bool = True,  # noqa: FBT001, FBT002
    ) -> Tag:
        """
        Create a new tag.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            name: The tag name

        Keyword Args:
            commit: Whether to commit the changes

        Raises:
            ValidationError: If the user ID or name is invalid
            AlreadyExists: If the user already has a tag with this name

        Returns:
            The new tag

        """
        if not user_id:
            raise ValidationError("user_id", "User ID is required")
        name = cls.validate_name(name)
        if cls.get_by_name(session, user_id, name) is not None:
            raise AlreadyExists("Tag", name)
        tag = cls(user_id=user_id, name=name)
        tag.save(session, commit=commit)
        return tag

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
        }
