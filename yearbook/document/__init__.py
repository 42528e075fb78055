"""Structured document model."""

from yearbook.document.editor import EditorDocument, Transaction
from yearbook.document.nodes import (
    BLOCK_TYPES,
    HIGHLIGHT_MARK,
    DocumentNode,
    HighlightMark,
    Mark,
    NodeType,
)
from yearbook.document.text import (
    ContentStats,
    content_size,
    extract_text,
    has_substantial_content,
    preview_text,
    text_between,
    validate_content_processing,
)

__all__ = [
    "BLOCK_TYPES",
    "HIGHLIGHT_MARK",
    "ContentStats",
    "DocumentNode",
    "EditorDocument",
    "HighlightMark",
    "Mark",
    "NodeType",
    "Transaction",
    "content_size",
    "extract_text",
    "has_substantial_content",
    "preview_text",
    "text_between",
    "validate_content_processing",
]
