"""Node and mark types for structured (Tiptap JSON) documents."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar, Final

#: The mark type name used for tagged highlights.
HIGHLIGHT_MARK: Final[str] = "highlightWithTags"


class NodeType(StrEnum):
    """Node types the core knows about.  Other types pass through untouched."""

    DOC = "doc"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    TEXT = "text"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "codeBlock"
    LIST_ITEM = "listItem"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    HORIZONTAL_RULE = "horizontalRule"
    HARD_BREAK = "hardBreak"


#: Node types followed by a separator when flattening text.
BLOCK_TYPES: Final[frozenset[str]] = frozenset(
    {
        NodeType.PARAGRAPH,
        NodeType.HEADING,
        NodeType.BLOCKQUOTE,
        NodeType.CODE_BLOCK,
        NodeType.LIST_ITEM,
        NodeType.BULLET_LIST,
        NodeType.ORDERED_LIST,
        NodeType.HORIZONTAL_RULE,
        NodeType.HARD_BREAK,
    }
)


@dataclass(frozen=True)
class Mark:
    """A style mark on a text run (bold, italic, link ...)."""

    #: The mark type name.
    type: str
    #: Opaque mark attributes.
    attrs: dict[str, Any] = field(default_factory=dict)

    def same_identity(self, other: Mark | HighlightMark) -> bool:
        """Whether ``other`` should be treated as this very mark."""
        return self == other

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.attrs:
            data["attrs"] = copy.deepcopy(self.attrs)
        return data


@dataclass(frozen=True)
class HighlightMark:
    """
    A tagged highlight over a text run.

    ``id`` is the marker identity minted when the highlight was captured, not
    the database ID of the stored highlight.  ``tags`` is a display copy of the
    tag names.
    """

    type: ClassVar[str] = HIGHLIGHT_MARK

    #: The marker identity.
    id: str | None
    #: The tag names shown for the highlight.
    tags: tuple[str, ...] = ()

    def same_identity(self, other: Mark | HighlightMark) -> bool:
        """Highlights are the same mark when their marker identities match."""
        return isinstance(other, HighlightMark) and other.id == self.id

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "attrs": {"id": self.id, "tags": list(self.tags)},
        }


def mark_from_dict(data: dict[str, Any]) -> Mark | HighlightMark:
    """
    Build a mark from its JSON form.

    Args:
        data: The mark dictionary

    Returns:
        A :class:`HighlightMark` for highlight marks, else a :class:`Mark`

    """
    attrs = data.get("attrs") or {}
    if data["type"] == HIGHLIGHT_MARK:
        return HighlightMark(id=attrs.get("id"), tags=tuple(attrs.get("tags") or ()))
    return Mark(type=data["type"], attrs=dict(attrs))


@dataclass
class DocumentNode:
    """
    A node of a structured document tree.

    A node carries either ``text`` (text nodes) or ``content`` (child nodes,
    in document order), or neither for leaf structural nodes such as a
    horizontal rule.
    """

    #: The node type.
    type: str
    #: The text of a text node.
    text: str | None = None
    #: Child nodes in document order.
    content: list[DocumentNode] = field(default_factory=list)
    #: Marks on a text run.
    marks: list[Mark | HighlightMark] = field(default_factory=list)
    #: Opaque node attributes (heading level etc).
    attrs: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> DocumentNode:
        """An empty document."""
        return cls(type=NodeType.DOC)

    @classmethod
    def paragraph(cls, *runs: str | DocumentNode) -> DocumentNode:
        """
        Build a paragraph from strings or ready-made text nodes.
        """
        content = [
            cls(type=NodeType.TEXT, text=run) if isinstance(run, str) else run
            for run in runs
        ]
        return cls(type=NodeType.PARAGRAPH, content=content)

    @classmethod
    def doc(cls, *blocks: DocumentNode) -> DocumentNode:
        """Build a document from block nodes."""
        return cls(type=NodeType.DOC, content=list(blocks))

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DocumentNode:
        """
        Build a node tree from its Tiptap JSON form.

        Args:
            data: The JSON dictionary, or None for an empty document

        Returns:
            The root node

        """
        if not data:
            return cls.empty()
        return cls(
            type=data["type"],
            text=data.get("text"),
            content=[cls.from_dict(child) for child in data.get("content") or []],
            marks=[mark_from_dict(mark) for mark in data.get("marks") or []],
            attrs=dict(data.get("attrs") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the node tree to Tiptap JSON.
        """
        data: dict[str, Any] = {"type": self.type}
        if self.attrs:
            data["attrs"] = copy.deepcopy(self.attrs)
        if self.text is not None:
            data["text"] = self.text
        if self.marks:
            data["marks"] = [mark.to_dict() for mark in self.marks]
        if self.content:
            data["content"] = [child.to_dict() for child in self.content]
        return data

    def clone(self) -> DocumentNode:
        """Deep copy of the subtree."""
        return copy.deepcopy(self)

    @property
    def is_text(self) -> bool:
        return self.text is not None

    @property
    def is_block(self) -> bool:
        return self.type in BLOCK_TYPES
