"""Service for creating and listing highlights."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from yearbook.exc import DoesNotExist, InvalidRange, OwnerNotFound, ValidationError
from yearbook.models import OWNER_MODELS
from yearbook.models.highlight import MAX_HIGHLIGHT_TEXT_LENGTH, Highlight
from yearbook.models.tag import Tag
from yearbook.services.logs import get_logger
from yearbook.services.tagged_content import TaggedContentService
from yearbook.types import OwnerKind, OwnerRef

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from yearbook.models.mixins import DocumentOwnerMixin
    from yearbook.types import TagGroup, TaggedContent

logger = get_logger(__name__)


class HighlightService:
    """Service for the annotation store."""

    @staticmethod
    def parse_owner(owner_kind: str | OwnerKind, owner_id: int) -> OwnerRef:
        """
        Build an :class:`~yearbook.types.OwnerRef`, validating the kind.

        Raises:
            ValidationError: If ``owner_kind`` is not a known owner kind

        """
        try:
            kind = OwnerKind(owner_kind)
        except ValueError as e:
            raise ValidationError(
                "owner_kind", f"Unknown owner kind: {owner_kind}"
            ) from e
        return OwnerRef(kind, owner_id)

    @staticmethod
    def get_owner(session: Session, owner: OwnerRef) -> DocumentOwnerMixin:
        """
        Load the content item behind ``owner``.

        Raises:
            OwnerNotFound: If there is no such item

        """
        instance = session.get(OWNER_MODELS[owner.kind], owner.id)
        if instance is None:
            raise OwnerNotFound(owner.kind.value, owner.id)
        return instance

    @staticmethod
    def create_annotation(  # noqa: PLR0913
        session: Session,
        owner_kind: str | OwnerKind,
        owner_id: int,
        text: str,
        start_offset: int,
        end_offset: int,
        tiptap_id: str,
        tag_ids: Iterable[int] = (),
    ) -> Highlight:
        """
        Create a highlight on a content item.

        Args:
            session: SQLAlchemy session
            owner_kind: The kind of content item
            owner_id: The content item ID
            text: The highlighted text
            start_offset: Start of the highlighted range
            end_offset: End of the highlighted range (exclusive)
            tiptap_id: The marker identity of the highlight in its document

        Keyword Args:
            tag_ids: IDs of the tags to attach; may be empty

        Raises:
            ValidationError: If the owner kind, text or tiptap ID is invalid
            InvalidRange: If the offsets don't describe a non-empty range
            OwnerNotFound: If the content item doesn't exist
            DoesNotExist: If a tag ID doesn't exist or belongs to another user

        Returns:
            The new highlight

        """
        owner = HighlightService.parse_owner(owner_kind, owner_id)
        if not text:
            raise ValidationError("text", "Highlight text is required")
        if len(text) > MAX_HIGHLIGHT_TEXT_LENGTH:
            raise ValidationError(
                "text",
                f"Highlight text must be {MAX_HIGHLIGHT_TEXT_LENGTH} characters "
                "or less",
            )
        if not tiptap_id:
            raise ValidationError("tiptap_id", "Highlight ID is required")
        if start_offset < 0:
            raise InvalidRange(start_offset, end_offset, "Start offset is negative")
        if end_offset <= start_offset:
            raise InvalidRange(
                start_offset, end_offset, "End offset must be after start offset"
            )
        item = HighlightService.get_owner(session, owner)
        year = item.owning_year
        user_id = year.user_id if year is not None else None

        tags: list[Tag] = []
        for tag_id in dict.fromkeys(tag_ids):
            tag = Tag.get(session, tag_id)
            if tag is None or tag.user_id != user_id:
                raise DoesNotExist("Tag", tag_id)
            tags.append(tag)

        highlight = Highlight(
            owner_kind=owner.kind.value,
            owner_id=owner.id,
            tiptap_id=tiptap_id,
            text=text,
            start_offset=start_offset,
            end_offset=end_offset,
            tags=tags,
        )
        highlight.save(session)
        logger.info(
            "highlight.created",
            highlight_id=highlight.id,
            owner_kind=owner.kind.value,
            owner_id=owner.id,
            tiptap_id=tiptap_id,
            tag_ids=[tag.id for tag in tags],
        )
        return highlight

    @staticmethod
    def list_annotations_for_owner(
        session: Session, owner_kind: str | OwnerKind, owner_id: int
    ) -> list[Highlight]:
        """
        Get the highlights of one content item with their tags, oldest first.

        Raises:
            ValidationError: If ``owner_kind`` is not a known owner kind

        """
        owner = HighlightService.parse_owner(owner_kind, owner_id)
        return list(
            session.scalars(
                select(Highlight)
                .where(
                    Highlight.owner_kind == owner.kind.value,
                    Highlight.owner_id == owner.id,
                )
                .options(selectinload(Highlight.tags))
                .order_by(Highlight.created_at, Highlight.id)
            ).all()
        )

    @staticmethod
    def list_annotations_for_tag(
        session: Session, user_id: str, tag_id: int
    ) -> list[TaggedContent]:
        """
        Get a user's highlights carrying one tag, newest first, with sources.

        Raises:
            DoesNotExist: If the user has no tag with this ID

        """
        return TaggedContentService.get_tagged_content_by_tag(
            session, user_id, tag_id
        )

    @staticmethod
    def list_all_annotations_grouped_by_tag(
        session: Session, user_id: str
    ) -> list[TagGroup]:
        """
        Get all of a user's highlights grouped by tag.
        """
        return TaggedContentService.get_all_tagged_content(session, user_id)

    @staticmethod
    def search_highlights(
        session: Session, user_id: str, query: str, year: int | None = None
    ) -> list[TaggedContent]:
        """
        Search a user's highlights by text.  See
        :meth:`~yearbook.services.tagged_content.TaggedContentService.search_highlights`.
        """
        return TaggedContentService.search_highlights(
            session, user_id, query, year=year
        )

    @staticmethod
    def delete_annotation(session: Session, highlight_id: int) -> None:
        """
        Delete a highlight.

        Raises:
            DoesNotExist: If there is no such highlight

        """
        highlight = Highlight.get(session, highlight_id)
        if highlight is None:
            raise DoesNotExist("Highlight", highlight_id)
        highlight.delete(session)
        logger.info("highlight.deleted", highlight_id=highlight_id)
