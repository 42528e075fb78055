"""Service for handling tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from yearbook.exc import DoesNotExist, ValidationError
from yearbook.models.highlight import highlight_tags
from yearbook.models.tag import Tag
from yearbook.services.logs import get_logger
from yearbook.types import TagSummary

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

logger = get_logger(__name__)


class TagService:
    """Service for managing a user's tags."""

    @staticmethod
    def validate_tag_name(name: str | None) -> str:
        """
        Validate a tag name before it is submitted.

        Args:
            name: The name as typed

        Raises:
            ValidationError: If the name is not a valid tag name

        Returns:
            The trimmed name

        """
        return Tag.validate_name(name)

    @staticmethod
    def get_or_create_tags(
        session: Session, user_id: str, names: Iterable[str]
    ) -> list[Tag]:
        """
        Resolve tag names to tags, creating the ones the user doesn't have yet.

        Names are trimmed and duplicates collapsed; the result follows the order
        in which names first appear.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            names: Tag names

        Raises:
            ValidationError: If the user ID is empty, no names are given, or a
                name is invalid

        Returns:
            The tags

        """
        if not user_id:
            raise ValidationError("user_id", "User ID is required")
        cleaned: list[str] = []
        for name in names:
            trimmed = Tag.validate_name(name)
            if trimmed not in cleaned:
                cleaned.append(trimmed)
        if not cleaned:
            raise ValidationError("names", "At least one tag name is required")

        tags: list[Tag] = []
        created: list[Tag] = []
        for name in cleaned:
            tag = Tag.get_by_name(session, user_id, name)
            if tag is None:
                tag = Tag.create(session, user_id, name, commit=False)
                created.append(tag)
            tags.append(tag)
        session.commit()
        for tag in created:
            logger.info("tag.created", user_id=user_id, tag_id=tag.id, name=tag.name)
        return tags

    @staticmethod
    def create_tag(session: Session, user_id: str, name: str) -> Tag:
        """
        Create a tag explicitly.

        Raises:
            ValidationError: If the name is invalid
            AlreadyExists: If the user already has a tag with this name

        """
        tag = Tag.create(session, user_id, name)
        logger.info("tag.created", user_id=user_id, tag_id=tag.id, name=tag.name)
        return tag

    @staticmethod
    def list_tags(session: Session, user_id: str) -> list[TagSummary]:
        """
        Get a user's tags with how many highlights carry each, ordered by name.
        """
        rows = session.execute(
            select(Tag.id, Tag.name, func.count(highlight_tags.c.highlight_id))
            .outerjoin(highlight_tags, highlight_tags.c.tag_id == Tag.id)
            .where(Tag.user_id == user_id)
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.name)
        ).all()
        return [
            TagSummary(id=tag_id, name=name, highlight_count=count)
            for tag_id, name, count in rows
        ]

    @staticmethod
    def suggest_tags(
        session: Session, user_id: str, prefix: str, limit: int = 10
    ) -> list[str]:
        """
        Get the names of a user's tags that start with ``prefix``.
        """
        if not prefix.strip():
            return []
        return [tag.name for tag in Tag.search(session, user_id, prefix, limit=limit)]

    @staticmethod
    def delete_tag(session: Session, user_id: str, tag_id: int) -> None:
        """
        Delete a tag.  Its highlights stay; only the association goes.

        Raises:
            DoesNotExist: If the user has no tag with this ID

        """
        tag = Tag.get_for_user(session, user_id, tag_id)
        if tag is None:
            raise DoesNotExist("Tag", tag_id)
        tag.delete(session)
        logger.info("tag.deleted", user_id=user_id, tag_id=tag_id)
