"""Services package initialization."""

from yearbook.services.capture import (
    CaptureState,
    HighlightCaptureController,
    PendingSelection,
)
from yearbook.services.documents import DocumentService, LoadedDocument
from yearbook.services.highlights import HighlightService
from yearbook.services.notifications import Notifier
from yearbook.services.restoration import HighlightRestorer, RestorationResult
from yearbook.services.sources import SourceResolver
from yearbook.services.tagged_content import TaggedContentService
from yearbook.services.tags import TagService

__all__ = [
    "CaptureState",
    "DocumentService",
    "HighlightCaptureController",
    "HighlightRestorer",
    "HighlightService",
    "LoadedDocument",
    "Notifier",
    "PendingSelection",
    "RestorationResult",
    "SourceResolver",
    "TagService",
    "TaggedContentService",
]
