from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from yearbook.document.nodes import DocumentNode
from yearbook.types import ContentSource, OwnerKind, OwnerRef, Section

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from yearbook.models.year import Year


class SaveDeleteMixin:
    """Mixin for models that need to save and delete."""

    def save(self, session: Session, commit: bool = True) -> None:  # noqa: FBT001, FBT002
        """
        Save the model.

        Args:
            session: SQLAlchemy session

        Keyword Args:
            commit: Whether to commit the changes

        """
        session.add(self)
        session.flush()
        if commit:
            session.commit()

    def delete(self, session: Session, commit: bool = True) -> None:  # noqa: FBT001, FBT002
        """
        Delete the model.

        Args:
            session: SQLAlchemy session

        Keyword Args:
            commit: Whether to commit the changes

        """
        session.delete(self)
        session.flush()
        if commit:
            session.commit()


class DocumentOwnerMixin:
    """
    Mixin for content items that hold a rich-text document and can own
    highlights.

    Subclasses set :attr:`OWNER_KIND` and :attr:`SECTION`, name the JSON
    column holding the document in :attr:`DOCUMENT_FIELD`, and implement
    :attr:`owning_year` and :attr:`item_title`.
    """

    #: The owner kind highlights use to point at this model.
    OWNER_KIND: ClassVar[OwnerKind]
    #: The section items of this model appear in.
    SECTION: ClassVar[Section]
    #: Name of the JSON column holding the document.
    DOCUMENT_FIELD: ClassVar[str] = "content"

    @property
    def document(self) -> DocumentNode:
        """
        The stored document as a node tree.  Empty if nothing is stored.
        """
        return DocumentNode.from_dict(getattr(self, self.DOCUMENT_FIELD))

    @document.setter
    def document(self, node: DocumentNode) -> None:
        setattr(self, self.DOCUMENT_FIELD, node.to_dict())

    @property
    def owner_ref(self) -> OwnerRef:
        return OwnerRef(self.OWNER_KIND, self.id)

    @property
    def owning_year(self) -> Year | None:
        """
        The year this item belongs to, or None if the chain is broken.
        """
        raise NotImplementedError

    @property
    def item_title(self) -> str:
        """
        Human readable title shown next to highlights from this item.
        """
        raise NotImplementedError

    def content_source(self) -> ContentSource | None:
        """
        Resolve where this item lives.

        Returns:
            The source, or None if the item is no longer attached to a year

        """
        year = self.owning_year
        if year is None:
            return None
        return ContentSource(
            year=year.year,
            section=self.SECTION,
            item_id=self.id,
            item_title=self.item_title,
        )
