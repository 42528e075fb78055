"""
Text extraction over structured documents.

Offsets used throughout Yearbook are character offsets into the flattened
text produced by :func:`extract_text`: every character of a text node takes
one position, and so does the separator emitted after each block node.
Highlights are captured and restored with this same addressing scheme.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from yearbook.document.nodes import BLOCK_TYPES, DocumentNode

if TYPE_CHECKING:
    from collections.abc import Iterator

#: Separator emitted after every block node.
BLOCK_SEPARATOR: Final[str] = " "
#: Marker appended to truncated previews.
ELLIPSIS: Final[str] = "..."
#: Default preview length.
DEFAULT_PREVIEW_LENGTH: Final[int] = 200
#: Share of the preview window in which we look for a word boundary.
WORD_BOUNDARY_WINDOW: Final[float] = 0.8


@dataclass
class TextRun:
    """A text node together with its position in the flattened text."""

    #: Offset of the first character.
    start: int
    #: Offset just past the last character.
    end: int
    #: The text node.
    node: DocumentNode
    #: The node's parent.
    parent: DocumentNode
    #: The node's index in ``parent.content``.
    index: int


@dataclass(frozen=True)
class ContentStats:
    """Summary of what a document contains."""

    has_content: bool
    preview: str
    text_length: int


def _collect(node: DocumentNode, parts: list[str]) -> None:
    if node.text:
        parts.append(node.text)
    for child in node.content:
        _collect(child, parts)
        if child.type in BLOCK_TYPES:
            parts.append(BLOCK_SEPARATOR)


def extract_text(node: DocumentNode | None) -> str:
    """
    Flatten a document to plain text.

    Text is concatenated in document order, and a single space is appended
    after every block-level child so words in adjacent blocks don't run
    together.

    Args:
        node: Root of the tree, or None

    Returns:
        The flattened text (``""`` for None)

    """
    if node is None:
        return ""
    parts: list[str] = []
    _collect(node, parts)
    return "".join(parts)


def has_substantial_content(node: DocumentNode | None) -> bool:
    """
    Whether the document has any non-whitespace text.
    """
    if node is None:
        return False
    return len(extract_text(node).strip()) > 0


def preview_text(
    node: DocumentNode | None, max_length: int = DEFAULT_PREVIEW_LENGTH
) -> str:
    """
    Build a short plain-text preview of a document.

    If the trimmed text is longer than ``max_length`` it is cut at
    ``max_length``.  When the last space of the cut text falls in the final 20%
    of the window we cut there instead, so words are not split.  Truncated
    previews end in ``...``.

    Args:
        node: Root of the tree, or None

    Keyword Args:
        max_length: Maximum number of characters before the ellipsis

    Returns:
        The preview

    """
    if node is None:
        return ""
    text = extract_text(node).strip()
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * WORD_BOUNDARY_WINDOW:
        return truncated[:last_space] + ELLIPSIS
    return truncated + ELLIPSIS


def validate_content_processing(node: DocumentNode | None) -> ContentStats:
    """
    Run every text utility over ``node`` and report the results.
    """
    return ContentStats(
        has_content=has_substantial_content(node),
        preview=preview_text(node),
        text_length=len(extract_text(node).strip()),
    )


def content_size(node: DocumentNode | None) -> int:
    """
    The number of addressable positions in the document.
    """
    return len(extract_text(node))


def text_between(node: DocumentNode, start: int, end: int) -> str:
    """
    Get the flattened text in ``[start, end)``.

    Args:
        node: Root of the tree
        start: Start offset
        end: End offset

    Raises:
        ValueError: If the range is negative, inverted or past the end of
            the document

    Returns:
        The text in the range, block separators included

    """
    text = extract_text(node)
    if start < 0 or end < start:
        msg = f"Invalid range [{start}, {end})"
        raise ValueError(msg)
    if end > len(text):
        msg = f"Range [{start}, {end}) is past the end of the document ({len(text)})"
        raise ValueError(msg)
    return text[start:end]


def iter_text_runs(root: DocumentNode) -> Iterator[TextRun]:
    """
    Walk the text nodes of ``root`` with their flattened offsets.

    The positions agree with :func:`extract_text`.

    Args:
        root: Root of the tree

    Yields:
        A :class:`TextRun` for each non-empty text node, in document order

    """
    position = 0

    def walk(node: DocumentNode) -> Iterator[TextRun]:
        nonlocal position
        for index, child in enumerate(node.content):
            if child.text:
                start = position
                position += len(child.text)
                yield TextRun(start, position, child, node, index)
            yield from walk(child)
            if child.type in BLOCK_TYPES:
                position += len(BLOCK_SEPARATOR)

    # The root's own text, if any, comes first
    if root.text:
        position = len(root.text)
    yield from walk(root)
