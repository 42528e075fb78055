"""Restore stored highlights onto a freshly loaded document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from yearbook.document.nodes import HighlightMark
from yearbook.exc import MalformedAnnotation
from yearbook.services.logs import get_logger, owner_context

if TYPE_CHECKING:
    from collections.abc import Sequence

    from yearbook.document.editor import EditorDocument
    from yearbook.models.highlight import Highlight

logger = get_logger(__name__)


@dataclass
class RestorationResult:
    """What happened to each highlight in a restoration pass."""

    #: Marker identities of the highlights marked in this pass.
    applied: list[str] = field(default_factory=list)
    #: Highlight IDs whose stored text no longer matches the document.
    skipped_stale: list[int] = field(default_factory=list)
    #: Highlight IDs that end past the end of the document.
    skipped_out_of_range: list[int] = field(default_factory=list)
    #: Highlight IDs whose mark is already present.
    skipped_existing: list[int] = field(default_factory=list)
    #: Highlight IDs that could not be processed at all.
    failed: list[int] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return len(self.applied)


class HighlightRestorer:
    """
    Put the marks of stored highlights back onto a document.

    Stored offsets are a snapshot from capture time, so a highlight is only
    marked if the document still has the same text at those offsets.  No
    attempt is made to find moved text.

    One restorer belongs to one editing surface.  :meth:`sync` is what the
    surface calls every time it renders; it only restores when the document
    or the list of highlights has changed since the last pass.
    """

    def __init__(self) -> None:
        #: The document of the last pass.
        self._last_document: EditorDocument | None = None
        #: The document version left by the last pass.
        self._last_version: int | None = None
        #: Identity of the highlight list of the last pass.
        self._last_key: tuple | None = None

    @staticmethod
    def _highlights_key(highlights: Sequence[Highlight]) -> tuple:
        return tuple((h.id, h.tiptap_id) for h in highlights)

    @staticmethod
    def _offsets(highlight: Highlight) -> tuple[int, int]:
        """
        Raises:
            ValueError: If the stored offsets are not a non-empty range

        """
        start, end = highlight.start_offset, highlight.end_offset
        if not isinstance(start, int) or not isinstance(end, int):
            msg = f"Offsets must be integers, got {start!r} and {end!r}"
            raise ValueError(msg)
        if start < 0 or end <= start:
            msg = f"Invalid offsets [{start}, {end})"
            raise ValueError(msg)
        return start, end

    def reset(self) -> None:
        """
        Forget the last pass, so the next :meth:`sync` restores again.
        """
        self._last_document = None
        self._last_version = None
        self._last_key = None

    def sync(
        self, document: EditorDocument, highlights: Sequence[Highlight]
    ) -> RestorationResult | None:
        """
        Restore ``highlights`` onto ``document`` unless this exact pair was
        already restored and the document hasn't changed since.

        A document whose tree was replaced, for example by a reload into the
        same editor, has a new version and is restored again.

        Args:
            document: The live document
            highlights: The owner's stored highlights

        Returns:
            The result of the pass, or None if nothing needed to run

        """
        if not highlights:
            return None
        key = self._highlights_key(highlights)
        if (
            document is self._last_document
            and document.version == self._last_version
            and key == self._last_key
        ):
            return None
        with owner_context(document.owner):
            result = self.restore(document, highlights)
        self._last_document = document
        self._last_version = document.version
        self._last_key = key
        return result

    def restore(
        self, document: EditorDocument, highlights: Sequence[Highlight]
    ) -> RestorationResult:
        """
        Mark every highlight whose text is still where it was captured.

        Highlights that end past the document, whose text changed, or whose
        mark is already present are skipped.  A highlight that can't be
        processed is logged and skipped.  All marks are applied in a single
        transaction, and no transaction is dispatched when there is nothing to
        mark.

        Args:
            document: The live document
            highlights: The stored highlights

        Returns:
            What happened to each highlight

        """
        result = RestorationResult()
        transaction = document.transaction()
        staged: set[str] = set()
        size = document.content_size

        for highlight in highlights:
            try:
                start, end = self._offsets(highlight)
                if end > size:
                    result.skipped_out_of_range.append(highlight.id)
                    continue
                if document.text_between(start, end) != highlight.text:
                    result.skipped_stale.append(highlight.id)
                    continue
                if highlight.tiptap_id in staged or document.has_highlight(
                    highlight.tiptap_id, start, end
                ):
                    result.skipped_existing.append(highlight.id)
                    continue
                mark = HighlightMark(
                    id=highlight.tiptap_id, tags=tuple(highlight.tag_names)
                )
                transaction.add_mark(start, end, mark)
                staged.add(highlight.tiptap_id)
                result.applied.append(highlight.tiptap_id)
            except Exception as e:  # noqa: BLE001
                error = MalformedAnnotation(getattr(highlight, "id", None), e)
                logger.warning(
                    "highlight.restore_failed",
                    highlight_id=error.highlight_id,
                    error=str(e),
                )
                result.failed.append(error.highlight_id)

        if document.dispatch(transaction):
            logger.info(
                "highlight.restored",
                owner=str(document.owner) if document.owner else None,
                applied=len(result.applied),
                skipped_stale=len(result.skipped_stale),
                skipped_out_of_range=len(result.skipped_out_of_range),
                skipped_existing=len(result.skipped_existing),
                failed=len(result.failed),
            )
        return result
