"""Load and save the documents of content items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from yearbook.document.editor import EditorDocument
from yearbook.document.text import has_substantial_content, preview_text
from yearbook.services.highlights import HighlightService
from yearbook.services.logs import get_logger

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from yearbook.document.nodes import DocumentNode
    from yearbook.models.highlight import Highlight
    from yearbook.types import OwnerKind

logger = get_logger(__name__)


@dataclass
class LoadedDocument:
    """A content item's document together with its stored highlights."""

    #: The live document.
    document: EditorDocument
    #: The stored highlights, oldest first.
    highlights: list[Highlight] = field(default_factory=list)


class DocumentService:
    """Service for reading and writing content item documents."""

    @staticmethod
    def load(
        session: Session, owner_kind: str | OwnerKind, owner_id: int
    ) -> LoadedDocument:
        """
        Load a content item's document and highlights.

        An item with no stored document loads as an empty document.

        Args:
            session: SQLAlchemy session
            owner_kind: The kind of content item
            owner_id: The content item ID

        Raises:
            ValidationError: If ``owner_kind`` is not a known owner kind
            OwnerNotFound: If the content item doesn't exist

        Returns:
            The document and its highlights

        """
        owner = HighlightService.parse_owner(owner_kind, owner_id)
        instance = HighlightService.get_owner(session, owner)
        highlights = HighlightService.list_annotations_for_owner(
            session, owner.kind, owner.id
        )
        return LoadedDocument(
            document=EditorDocument(instance.document, owner=owner),
            highlights=highlights,
        )

    @staticmethod
    def save(
        session: Session,
        owner_kind: str | OwnerKind,
        owner_id: int,
        document: DocumentNode | EditorDocument,
    ) -> None:
        """
        Store a content item's document.

        Items that keep a preview or a has-content flag get them refreshed from
        the document.  The last write wins.

        Args:
            session: SQLAlchemy session
            owner_kind: The kind of content item
            owner_id: The content item ID
            document: The document to store

        Raises:
            ValidationError: If ``owner_kind`` is not a known owner kind
            OwnerNotFound: If the content item doesn't exist

        """
        owner = HighlightService.parse_owner(owner_kind, owner_id)
        instance = HighlightService.get_owner(session, owner)
        root = document.root if isinstance(document, EditorDocument) else document
        instance.document = root
        if hasattr(instance, "preview"):
            instance.preview = preview_text(root)
        if hasattr(instance, "has_content"):
            instance.has_content = has_substantial_content(root)
        instance.save(session)
        logger.info(
            "document.saved", owner_kind=owner.kind.value, owner_id=owner.id
        )
