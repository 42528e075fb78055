"""Service for the tag-indexed view of highlights across years and sections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from yearbook.exc import DoesNotExist
from yearbook.models.highlight import Highlight, highlight_tags
from yearbook.models.tag import Tag
from yearbook.services.sources import SourceResolver
from yearbook.types import TagGroup, TaggedContent, TagRef, TagSummary

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session


def _newest_first(content: list[TaggedContent]) -> list[TaggedContent]:
    return sorted(content, key=lambda c: (c.created_at, c.id), reverse=True)


class TaggedContentService:
    """Service for reading highlights grouped and filtered by tag."""

    @staticmethod
    def resolve_content(
        session: Session,
        user_id: str,
        highlights: Iterable[Highlight],
        year: int | None = None,
    ) -> list[TaggedContent]:
        """
        Turn highlights into :class:`~yearbook.types.TaggedContent`.

        Highlights that don't resolve to one of the user's years, or that fall
        outside ``year`` when it is given, are dropped.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            highlights: The highlights

        Keyword Args:
            year: Only keep content from this calendar year

        Returns:
            The content, newest first

        """
        highlights = list(highlights)
        sources = SourceResolver(session, user_id=user_id).resolve(highlights)
        content = [
            TaggedContent(
                id=highlight.id,
                tiptap_id=highlight.tiptap_id,
                text=highlight.text,
                source=sources[highlight.id],
                created_at=highlight.created_at,
                tags=[TagRef(tag.id, tag.name) for tag in highlight.tags],
            )
            for highlight in highlights
            if highlight.id in sources
            and (year is None or sources[highlight.id].year == year)
        ]
        return _newest_first(content)

    @staticmethod
    def get_tagged_content_by_tag(
        session: Session, user_id: str, tag_id: int, year: int | None = None
    ) -> list[TaggedContent]:
        """
        Get all of a user's content carrying one tag.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            tag_id: The tag ID

        Keyword Args:
            year: Only return content from this calendar year

        Raises:
            DoesNotExist: If the user has no tag with this ID

        Returns:
            The content, newest first

        """
        if Tag.get_for_user(session, user_id, tag_id) is None:
            raise DoesNotExist("Tag", tag_id)
        highlights = session.scalars(
            select(Highlight)
            .join(highlight_tags, highlight_tags.c.highlight_id == Highlight.id)
            .where(highlight_tags.c.tag_id == tag_id)
            .options(selectinload(Highlight.tags))
        ).all()
        return TaggedContentService.resolve_content(
            session, user_id, highlights, year=year
        )

    @staticmethod
    def get_all_tagged_content(
        session: Session, user_id: str, year: int | None = None
    ) -> list[TagGroup]:
        """
        Get all of a user's content grouped by tag.

        Every tag the user owns is included, even one with no content.  Tags
        are ordered by name, and each tag's ``highlight_count`` is the number of
        content items in its group.

        Args:
            session: SQLAlchemy session
            user_id: The user ID

        Keyword Args:
            year: Only count and return content from this calendar year

        Returns:
            One group per tag

        """
        tags = Tag.list_for_user(session, user_id)
        tag_ids = [tag.id for tag in tags]
        highlights = session.scalars(
            select(Highlight)
            .join(highlight_tags, highlight_tags.c.highlight_id == Highlight.id)
            .where(highlight_tags.c.tag_id.in_(tag_ids))
            .options(selectinload(Highlight.tags))
            .distinct()
        ).all()
        content = TaggedContentService.resolve_content(
            session, user_id, highlights, year=year
        )

        groups: list[TagGroup] = []
        for tag in tags:
            tagged = [c for c in content if any(t.id == tag.id for t in c.tags)]
            groups.append(
                TagGroup(
                    tag=TagSummary(id=tag.id, name=tag.name, highlight_count=len(tagged)),
                    content=tagged,
                )
            )
        return groups

    @staticmethod
    def get_tags_for_year(
        session: Session, user_id: str, year: int
    ) -> list[TagSummary]:
        """
        Get a user's tags with their highlight counts within one year.
        """
        return [
            group.tag
            for group in TaggedContentService.get_all_tagged_content(
                session, user_id, year=year
            )
        ]

    @staticmethod
    def search_highlights(
        session: Session, user_id: str, query: str, year: int | None = None
    ) -> list[TaggedContent]:
        """
        Find a user's highlights whose text contains ``query``, ignoring case.

        Args:
            session: SQLAlchemy session
            user_id: The user ID
            query: The text to look for

        Keyword Args:
            year: Only search this calendar year

        Returns:
            The matching content, newest first

        """
        query = query.strip()
        if not query:
            return []
        pattern = "%" + query.replace("%", r"\%").replace("_", r"\_") + "%"
        highlights = session.scalars(
            select(Highlight)
            .where(Highlight.text.ilike(pattern, escape="\\"))
            .options(selectinload(Highlight.tags))
        ).all()
        return TaggedContentService.resolve_content(
            session, user_id, highlights, year=year
        )
