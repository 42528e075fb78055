"""Highlight related commands."""

from dataclasses import dataclass, field

from yearbook.document.editor import EditorDocument
from yearbook.document.nodes import DocumentNode, HighlightMark

from .abstract import Command


@dataclass
class ApplyHighlightCommand(Command):
    """Command for marking a range of a document as a highlight."""

    #: The document to mark.
    document: EditorDocument
    #: Start offset of the range.
    start: int
    #: End offset of the range.
    end: int
    #: The highlight mark to apply.
    mark: HighlightMark
    #: The tree before the mark was applied.
    _previous_root: DocumentNode | None = field(default=None, init=False, repr=False)
    #: The document version the apply produced.
    _applied_version: int | None = field(default=None, init=False, repr=False)

    def execute(self) -> bool:
        """
        Apply the highlight mark over the range.

        Raises:
            ValueError: If the range is not inside the document

        Returns:
            True if the document changed

        """
        if self.document.has_highlight(self.mark.id, self.start, self.end):
            return False
        previous_root = self.document.root
        transaction = self.document.transaction().add_mark(
            self.start, self.end, self.mark
        )
        if not self.document.dispatch(transaction):
            return False
        self._previous_root = previous_root
        self._applied_version = self.document.version
        return True

    def undo(self) -> bool:
        """
        Remove the highlight mark from the range.

        While the document is still the one the apply produced, the tree from
        before the apply is put back as is.  After later changes the mark is
        removed instead, which keeps the marks at every offset but may merge
        runs that were split when the document was loaded.

        Returns:
            True if the document changed

        """
        previous_root, self._previous_root = self._previous_root, None
        if (
            previous_root is not None
            and self.document.version == self._applied_version
        ):
            self.document.replace(previous_root)
            return True
        if not self.document.has_highlight(self.mark.id, self.start, self.end):
            return False
        transaction = self.document.transaction().remove_mark(
            self.start, self.end, self.mark
        )
        return self.document.dispatch(transaction)

    def get_description(self) -> str:
        tags = ", ".join(self.mark.tags)
        return f"Highlight [{self.start}, {self.end}) tagged {tags}"
