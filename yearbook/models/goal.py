"""Yearly goal models: goals, their tasks and the tasks' subtasks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from yearbook.db import Base
from yearbook.models.mixins import DocumentOwnerMixin, SaveDeleteMixin
from yearbook.types import OwnerKind, Section

if TYPE_CHECKING:
    from yearbook.models.year import Year

#: Separator used to join breadcrumb titles.
BREADCRUMB_SEPARATOR = " > "


class Goal(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents a goal for the year.
    """

    __tablename__ = "goals"
    __table_args__ = {"sqlite_autoincrement": True}

    OWNER_KIND = OwnerKind.GOAL
    SECTION = Section.YEARLY_GOALS
    DOCUMENT_FIELD = "description"

    #: The goal ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The year ID.
    year_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("years.id", ondelete="CASCADE"), nullable=False
    )
    #: The goal title.
    title: Mapped[str] = mapped_column(String, nullable=False)
    #: The goal description in Tiptap JSON.
    description: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    year: Mapped[Year] = relationship("Year", back_populates="goals")
    tasks: Mapped[list[Task]] = relationship(
        "Task", back_populates="goal", cascade="all, delete-orphan"
    )

    @classmethod
    def get(cls, session: Session, goal_id: int) -> Goal | None:
        """
        Get a goal by ID.
        """
        return session.get(cls, goal_id)

    @property
    def owning_year(self) -> Year | None:
        return self.year

    @property
    def item_title(self) -> str:
        return self.title


class Task(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents a task towards a goal.
    """

    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}

    OWNER_KIND = OwnerKind.TASK
    SECTION = Section.YEARLY_GOALS
    DOCUMENT_FIELD = "description"

    #: The task ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The goal ID.
    goal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False
    )
    #: The task title.
    title: Mapped[str] = mapped_column(String, nullable=False)
    #: The task description in Tiptap JSON.
    description: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    goal: Mapped[Goal] = relationship("Goal", back_populates="tasks")
    subtasks: Mapped[list[SubTask]] = relationship(
        "SubTask", back_populates="task", cascade="all, delete-orphan"
    )

    @classmethod
    def get(cls, session: Session, task_id: int) -> Task | None:
        """
        Get a task by ID.
        """
        return session.get(cls, task_id)

    @property
    def owning_year(self) -> Year | None:
        return self.goal.year if self.goal is not None else None

    @property
    def item_title(self) -> str:
        return BREADCRUMB_SEPARATOR.join([self.goal.title, self.title])


class SubTask(DocumentOwnerMixin, SaveDeleteMixin, Base):
    """
    Represents a checklist item of a task.
    """

    __tablename__ = "subtasks"
    __table_args__ = {"sqlite_autoincrement": True}

    OWNER_KIND = OwnerKind.SUBTASK
    SECTION = Section.YEARLY_GOALS
    DOCUMENT_FIELD = "description"

    #: The subtask ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The task ID.
    task_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False
    )
    #: The subtask title.
    title: Mapped[str] = mapped_column(String, nullable=False)
    #: Whether the subtask is done.
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    #: Notes on the subtask in Tiptap JSON.
    description: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Relationships
    task: Mapped[Task] = relationship("Task", back_populates="subtasks")

    @classmethod
    def get(cls, session: Session, subtask_id: int) -> SubTask | None:
        """
        Get a subtask by ID.
        """
        return session.get(cls, subtask_id)

    @property
    def owning_year(self) -> Year | None:
        if self.task is None or self.task.goal is None:
            return None
        return self.task.goal.year

    @property
    def item_title(self) -> str:
        return BREADCRUMB_SEPARATOR.join(
            [self.task.goal.title, self.task.title, self.title]
        )
