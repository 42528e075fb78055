"""
The live document held by an editing surface.

Mark changes are staged on a :class:`Transaction` and applied with
:meth:`EditorDocument.dispatch`, which swaps in the new tree in one step so
that observers never see a half-applied change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from yearbook.document.nodes import DocumentNode, HighlightMark, Mark
from yearbook.document.text import (
    content_size,
    extract_text,
    iter_text_runs,
    text_between,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from yearbook.types import OwnerRef


def _split_run(node: DocumentNode, cuts: list[int]) -> list[DocumentNode]:
    """
    Split a text node at the given local offsets.
    """
    text = node.text or ""
    bounds = [0, *sorted({c for c in cuts if 0 < c < len(text)}), len(text)]
    return [
        DocumentNode(
            type=node.type,
            text=text[a:b],
            marks=list(node.marks),
            attrs=dict(node.attrs),
        )
        for a, b in zip(bounds, bounds[1:], strict=False)
    ]


def _normalize(parent: DocumentNode) -> None:
    """
    Merge adjacent text siblings that carry identical marks.
    """
    merged: list[DocumentNode] = []
    for child in parent.content:
        previous = merged[-1] if merged else None
        if (
            previous is not None
            and previous.is_text
            and child.is_text
            and previous.type == child.type
            and previous.marks == child.marks
            and previous.attrs == child.attrs
            and not previous.content
            and not child.content
        ):
            previous.text = (previous.text or "") + (child.text or "")
            continue
        merged.append(child)
    parent.content = merged


class Step(ABC):
    """A single staged change to a document tree."""

    @abstractmethod
    def apply(self, root: DocumentNode) -> None:
        """
        Apply the step to ``root`` in place.
        """

    @staticmethod
    def _check_range(root: DocumentNode, start: int, end: int) -> None:
        size = content_size(root)
        if start < 0 or end <= start or end > size:
            msg = f"Invalid mark range [{start}, {end}) for document of size {size}"
            raise ValueError(msg)


@dataclass
class MarkStep(Step):
    """Base for steps that change the marks over a range."""

    #: Start offset.
    start: int
    #: End offset.
    end: int
    #: The mark to add or remove.
    mark: Mark | HighlightMark

    @abstractmethod
    def change_marks(
        self, marks: list[Mark | HighlightMark]
    ) -> list[Mark | HighlightMark]:
        """
        Return the new mark list for a run inside the range.
        """

    def apply(self, root: DocumentNode) -> None:
        self._check_range(root, self.start, self.end)
        touched: dict[int, list] = defaultdict(list)
        parents: dict[int, DocumentNode] = {}
        for run in iter_text_runs(root):
            if run.end <= self.start or run.start >= self.end:
                continue
            touched[id(run.parent)].append(run)
            parents[id(run.parent)] = run.parent
        for key, runs in touched.items():
            parent = parents[key]
            # Replace from the back so earlier indexes stay valid
            for run in sorted(runs, key=lambda r: r.index, reverse=True):
                pieces = _split_run(
                    run.node, [self.start - run.start, self.end - run.start]
                )
                position = run.start
                for piece in pieces:
                    piece_end = position + len(piece.text or "")
                    if position >= self.start and piece_end <= self.end:
                        piece.marks = self.change_marks(piece.marks)
                    position = piece_end
                parent.content[run.index : run.index + 1] = pieces
            _normalize(parent)


@dataclass
class AddMarkStep(MarkStep):
    """Add a mark over ``[start, end)``."""

    def change_marks(
        self, marks: list[Mark | HighlightMark]
    ) -> list[Mark | HighlightMark]:
        if any(self.mark.same_identity(existing) for existing in marks):
            return marks
        return [*marks, self.mark]


@dataclass
class RemoveMarkStep(MarkStep):
    """Remove a mark from ``[start, end)``."""

    def change_marks(
        self, marks: list[Mark | HighlightMark]
    ) -> list[Mark | HighlightMark]:
        return [existing for existing in marks if not self.mark.same_identity(existing)]


@dataclass
class Transaction:
    """A batch of steps applied to a document all at once."""

    #: The staged steps.
    steps: list[Step] = field(default_factory=list)

    def add_mark(self, start: int, end: int, mark: Mark | HighlightMark) -> Transaction:
        self.steps.append(AddMarkStep(start, end, mark))
        return self

    def remove_mark(
        self, start: int, end: int, mark: Mark | HighlightMark
    ) -> Transaction:
        self.steps.append(RemoveMarkStep(start, end, mark))
        return self

    @property
    def is_empty(self) -> bool:
        return not self.steps


class EditorDocument:
    """
    The document currently loaded into one editing surface.

    Args:
        root: The document tree; an empty document if not given

    Keyword Args:
        owner: The content item the document belongs to

    """

    def __init__(
        self, root: DocumentNode | None = None, owner: OwnerRef | None = None
    ) -> None:
        #: The content item the document belongs to.
        self.owner = owner
        #: Incremented every time the tree is replaced.
        self.version = 0
        #: The current tree.
        self._root = root if root is not None else DocumentNode.empty()
        #: Callbacks run after each change.
        self._listeners: list[Callable[[EditorDocument], None]] = []

    @property
    def root(self) -> DocumentNode:
        return self._root

    @property
    def content_size(self) -> int:
        return content_size(self._root)

    @property
    def text(self) -> str:
        return extract_text(self._root)

    def text_between(self, start: int, end: int) -> str:
        return text_between(self._root, start, end)

    def marks_between(self, start: int, end: int) -> list[Mark | HighlightMark]:
        """
        Get the marks of every text run overlapping ``[start, end)``.

        Args:
            start: Start offset
            end: End offset

        Returns:
            The marks, in document order, possibly with repeats

        """
        marks: list[Mark | HighlightMark] = []
        for run in iter_text_runs(self._root):
            if run.end <= start or run.start >= end:
                continue
            marks.extend(run.node.marks)
        return marks

    def has_highlight(
        self, tiptap_id: str, start: int | None = None, end: int | None = None
    ) -> bool:
        """
        Whether a highlight mark with ``tiptap_id`` exists, optionally within a
        range.
        """
        if start is None or end is None:
            start, end = 0, self.content_size
        return any(
            isinstance(mark, HighlightMark) and mark.id == tiptap_id
            for mark in self.marks_between(start, end)
        )

    def mark_spans(self) -> list[tuple[int, int, tuple]]:
        """
        Describe the marks at each text run as ``(start, end, marks)``.

        Adjacent runs are reported separately, so compare the output of two
        documents with :meth:`marks_by_offset` when run structure may differ.
        """
        return [
            (run.start, run.end, tuple(run.node.marks))
            for run in iter_text_runs(self._root)
        ]

    def marks_by_offset(self) -> dict[int, tuple]:
        """
        Map every text character offset to the marks on that character.
        """
        result: dict[int, tuple] = {}
        for start, end, marks in self.mark_spans():
            for offset in range(start, end):
                result[offset] = marks
        return result

    def transaction(self) -> Transaction:
        return Transaction()

    def add_listener(self, listener: Callable[[EditorDocument], None]) -> None:
        self._listeners.append(listener)

    def dispatch(self, transaction: Transaction) -> bool:
        """
        Apply every step of ``transaction`` as one change.

        The steps run against a copy of the tree, so a failing step leaves the
        document untouched.  An empty transaction changes nothing and notifies
        nobody.

        Args:
            transaction: The staged steps

        Raises:
            ValueError: If a step has an invalid range

        Returns:
            True if the document changed, False for an empty transaction

        """
        if transaction.is_empty:
            return False
        new_root = self._root.clone()
        for step in transaction.steps:
            step.apply(new_root)
        self._swap(new_root)
        return True

    def replace(self, root: DocumentNode) -> None:
        """
        Replace the whole tree, as an edit by the user does.
        """
        self._swap(root)

    def to_dict(self) -> dict:
        return self._root.to_dict()

    def _swap(self, root: DocumentNode) -> None:
        self._root = root
        self.version += 1
        for listener in self._listeners:
            listener(self)
