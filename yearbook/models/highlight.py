"""Highlight model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    delete,
    select,
)
from sqlalchemy.engine import Connection
from sqlalchemy.orm import (
    Mapped,
    Mapper,
    Session,
    mapped_column,
    relationship,
    validates,
)

from yearbook.db import Base
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, OwnerRef
from yearbook.utils import to_utc_iso, utcnow

if TYPE_CHECKING:
    from yearbook.models.tag import Tag

#: Longest highlight text we store.
MAX_HIGHLIGHT_TEXT_LENGTH: Final[int] = 5000

_OWNER_KINDS = ",".join(f"'{kind.value}'" for kind in OwnerKind)

#: Association between highlights and tags.
highlight_tags = Table(
    "highlight_tags",
    Base.metadata,
    Column(
        "highlight_id",
        Integer,
        ForeignKey("highlights.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Highlight(SaveDeleteMixin, Base):
    """
    Represents a span of text a user highlighted and tagged.

    A highlight belongs to exactly one content item, given by
    :attr:`owner`.  The offsets and text are a snapshot taken when the
    highlight was captured; the owner's document may have been edited since,
    which is why restoring a highlight checks the text before marking it.
    """

    __tablename__ = "highlights"
    __table_args__ = (
        CheckConstraint(
            f"owner_kind IN ({_OWNER_KINDS})", name="ck_highlights_owner_kind"
        ),
        CheckConstraint("start_offset >= 0", name="ck_highlights_start_offset"),
        CheckConstraint("end_offset > start_offset", name="ck_highlights_range"),
        Index("ix_highlights_owner", "owner_kind", "owner_id"),
        {"sqlite_autoincrement": True},
    )

    #: The highlight ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The kind of content item owning the highlight.
    owner_kind: Mapped[str] = mapped_column(String, nullable=False)
    #: The ID of the content item owning the highlight.
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    #: The marker identity of the highlight in its document.
    tiptap_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    #: The highlighted text as captured.
    text: Mapped[str] = mapped_column(String, nullable=False)
    #: Start offset of the highlight in the captured document.
    start_offset: Mapped[int] = mapped_column(Integer, nullable=False)
    #: End offset of the highlight in the captured document.
    end_offset: Mapped[int] = mapped_column(Integer, nullable=False)
    #: The date and time the highlight was created.
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )

    # Relationships
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        secondary=highlight_tags,
        back_populates="highlights",
        order_by="Tag.name",
    )

    @validates("owner_kind", "owner_id")
    def _validate_owner(self, key: str, value):
        """
        The owner is set once when the highlight is created and never changes.
        """
        current = getattr(self, key)
        if current is not None and current != value:
            msg = f"Highlight {key} cannot be changed once set"
            raise ValueError(msg)
        if key == "owner_kind":
            return OwnerKind(value).value
        return value

    @property
    def owner(self) -> OwnerRef:
        """
        The content item owning the highlight.
        """
        return OwnerRef(OwnerKind(self.owner_kind), self.owner_id)

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    @classmethod
    def get(cls, session: Session, highlight_id: int) -> Highlight | None:
        """
        Get a highlight by ID.
        """
        return session.get(cls, highlight_id)

    @classmethod
    def list_for_owner(cls, session: Session, owner: OwnerRef) -> list[Highlight]:
        """
        Get the highlights of one content item, oldest first.

        Args:
            session: SQLAlchemy session
            owner: The owning content item

        Returns:
            The highlights

        """
        return list(
            session.scalars(
                select(cls)
                .where(cls.owner_kind == owner.kind.value, cls.owner_id == owner.id)
                .order_by(cls.created_at, cls.id)
            ).all()
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "owner_kind": self.owner_kind,
            "owner_id": self.owner_id,
            "tiptap_id": self.tiptap_id,
            "text": self.text,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "created_at": to_utc_iso(self.created_at),
            "tags": [{"id": tag.id, "name": tag.name} for tag in self.tags],
        }


def delete_owned_highlights(
    mapper: Mapper, connection: Connection, target: DocumentOwnerMixin
) -> None:
    """
    Delete the highlights of a content item that has just been deleted.

    Registered as an ``after_delete`` mapper event on every owner model, so it
    also runs when the owner goes away through a cascade from its year, goal
    or book.  Tag associations follow through the ``highlight_tags`` foreign
    keys.

    Args:
        mapper: The mapper of the deleted owner
        connection: The connection the flush is using
        target: The deleted content item

    """
    connection.execute(
        delete(Highlight).where(
            Highlight.owner_kind == target.OWNER_KIND.value,
            Highlight.owner_id == target.id,
        )
    )
