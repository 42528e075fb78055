"""Book note models: genres, books and chapter notes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.models.goal import BREADCRUMB_SEPARATOR
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, Section

if TYPE_CHECKING:
    from yearbook.models.year import Year


class Genre(SaveDeleteMixin, Base):
    """
    Represents a genre grouping books read in a year.
    """

    __tablename__ = "genres"

    #: The genre ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The year ID.
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False
    )
    #: The genre name.
    name: Mapped[str] = mapped_column(String, nullable=False)

    # Relationships
    year: Mapped[Year] = relationship("Year", back_populates="genres")
    books: Mapped[list[Book]] = relationship(
        "Book", back_populates="genre", cascade="all, delete-orphan"
    )


class Book(SaveDeleteMixin, Base):
    """
    Represents a book.
    """

    __tablename__ = "books"

    #: The book ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The genre ID.
    genre_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("genres.id", ondelete="CASCADE"), nullable=False
    )
    #: The book title.
    title: Mapped[str] = mapped_column(String, nullable=False)

    # Relationships
    genre: Mapped[Genre] = relationship("Genre", back_populates="books")
    chapters: Mapped[list[Chapter]] = relationship(
        "Chapter", back_populates="book", cascade="all, delete-orphan"
    )


class Chapter(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents the notes taken on one chapter of a book.
    """

    __tablename__ = "chapters"
    __table_args__ = {"sqlite_autoincrement": True}

    OWNER_KIND = OwnerKind.CHAPTER
    SECTION = Section.BOOK_NOTES

    #: The chapter ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The book ID.
    book_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False
    )
    #: The chapter title.
    title: Mapped[str] = mapped_column(String, nullable=False)
    #: The chapter notes in Tiptap JSON.
    content: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    book: Mapped[Book] = relationship("Book", back_populates="chapters")

    @classmethod
    def get(cls, session: Session, chapter_id: int) -> Chapter | None:
        """
        Get a chapter by ID.
        """
        return session.get(cls, chapter_id)

    @property
    def owning_year(self) -> Year | None:
        if self.book is None or self.book.genre is None:
            return None
        return self.book.genre.year

    @property
    def item_title(self) -> str:
        return BREADCRUMB_SEPARATOR.join(
            [self.book.genre.name, self.book.title, self.title]
        )
