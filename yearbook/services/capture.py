"""Turn a text selection in a document into a stored, tagged highlight."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum
from functools import partial
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from yearbook.commands import ApplyHighlightCommand, CommandManager
from yearbook.document.nodes import HighlightMark
from yearbook.exc import (
    InvalidRange,
    PersistenceFailed,
    TagResolutionFailed,
    ValidationError,
)
from yearbook.services.highlights import HighlightService
from yearbook.services.logs import get_logger, owner_context
from yearbook.services.notifications import Notifier
from yearbook.services.tags import TagService

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session

    from yearbook.document.editor import EditorDocument
    from yearbook.models.highlight import Highlight
    from yearbook.models.tag import Tag
    from yearbook.types import OwnerRef

    #: ``(user_id, names) -> tags``
    TagResolver = Callable[[str, list[str]], list[Tag]]
    #: Same keyword arguments as ``HighlightService.create_annotation``.
    AnnotationStore = Callable[..., Highlight]
    #: ``(user_id, prefix) -> tag names``
    TagSuggester = Callable[[str, str], list[str]]

logger = get_logger(__name__)


class CaptureState(StrEnum):
    """Where the capture flow is."""

    IDLE = "idle"
    SELECTION_PENDING = "selection_pending"
    MENU_OPEN = "menu_open"
    COMMITTING = "committing"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class PendingSelection:
    """A non-empty selection waiting to be tagged."""

    #: Start offset.
    start: int
    #: End offset (exclusive).
    end: int
    #: The selected text.
    text: str
    #: Screen position to show the tag menu at.
    anchor: tuple[float, float] | None = None


class HighlightCaptureController:
    """
    Drives the select, tag and save flow of one editing surface.

    The highlight mark is applied to the document before anything is saved.
    If resolving the tags or saving the highlight fails, the mark is removed
    again and the user is told.

    Args:
        document: The live document
        owner: The content item the document belongs to
        user_id: The user doing the highlighting
        tag_resolver: Resolves tag names to tags, creating missing ones
        annotation_store: Saves the highlight

    Keyword Args:
        notifier: Shows success and error messages
        tag_suggester: Suggests existing tag names for a prefix

    """

    def __init__(  # noqa: PLR0913
        self,
        document: EditorDocument,
        owner: OwnerRef,
        user_id: str,
        tag_resolver: TagResolver,
        annotation_store: AnnotationStore,
        notifier: Notifier | None = None,
        tag_suggester: TagSuggester | None = None,
    ) -> None:
        #: The live document.
        self.document = document
        #: The content item the document belongs to.
        self.owner = owner
        #: The user doing the highlighting.
        self.user_id = user_id
        #: Resolves tag names to tags.
        self.tag_resolver = tag_resolver
        #: Saves highlights.
        self.annotation_store = annotation_store
        #: Shows messages to the user.
        self.notifier = notifier if notifier is not None else Notifier()
        #: Suggests existing tag names.
        self.tag_suggester = tag_suggester
        #: Undo history of applied highlights.
        self.commands = CommandManager()
        #: Current state.
        self.state = CaptureState.IDLE
        #: The selection being tagged.
        self.selection: PendingSelection | None = None
        #: Tag names chosen so far.
        self.pending_tags: list[str] = []
        #: Text typed into the tag input.
        self.tag_input = ""
        #: Bumped on every :meth:`bind`, so late results for an old document
        #: can be recognized.
        self._generation = 0

    @classmethod
    def for_session(
        cls,
        session: Session,
        document: EditorDocument,
        owner: OwnerRef,
        user_id: str,
        notifier: Notifier | None = None,
    ) -> HighlightCaptureController:
        """
        Build a controller that resolves tags and saves highlights through
        ``session``.
        """

        def store(**kwargs: Any) -> Highlight:
            try:
                return HighlightService.create_annotation(session, **kwargs)
            except SQLAlchemyError:
                session.rollback()
                raise

        def resolve(user_id: str, names: list[str]) -> list[Tag]:
            try:
                return TagService.get_or_create_tags(session, user_id, names)
            except SQLAlchemyError:
                session.rollback()
                raise

        return cls(
            document,
            owner,
            user_id,
            tag_resolver=resolve,
            annotation_store=store,
            notifier=notifier,
            tag_suggester=partial(TagService.suggest_tags, session),
        )

    def _set_state(self, state: CaptureState) -> None:
        logger.debug("capture.state", old=self.state.value, new=state.value)
        self.state = state

    def _reset(self) -> None:
        self.selection = None
        self.pending_tags = []
        self.tag_input = ""
        self._set_state(CaptureState.IDLE)

    def bind(self, document: EditorDocument, owner: OwnerRef) -> None:
        """
        Switch to another document, as when the user navigates to another item.

        Pending state is dropped.  A commit still in flight for the previous
        document will not touch the new one.

        Args:
            document: The new live document
            owner: The content item it belongs to

        """
        self._generation += 1
        self.document = document
        self.owner = owner
        self.commands.clear()
        self._reset()

    def select(
        self, start: int, end: int, anchor: tuple[float, float] | None = None
    ) -> PendingSelection | None:
        """
        Record the user's selection.

        An empty selection clears any pending selection.  A backwards selection
        is normalized.

        Args:
            start: Selection anchor offset
            end: Selection head offset

        Keyword Args:
            anchor: Screen position to show the tag menu at

        Raises:
            InvalidRange: If the selection lies outside the document

        Returns:
            The pending selection, or None for an empty selection

        """
        if self.state is CaptureState.COMMITTING:
            return None
        start, end = min(start, end), max(start, end)
        if start == end:
            self._reset()
            return None
        try:
            text = self.document.text_between(start, end)
        except ValueError as e:
            raise InvalidRange(start, end, str(e)) from e
        self.selection = PendingSelection(start, end, text, anchor)
        self.pending_tags = []
        self.tag_input = ""
        self._set_state(CaptureState.SELECTION_PENDING)
        return self.selection

    def open_menu(self) -> bool:
        """
        Open the tag menu for the pending selection.

        Returns:
            True if the menu is open

        """
        if self.state is CaptureState.SELECTION_PENDING:
            self._set_state(CaptureState.MENU_OPEN)
        return self.state is CaptureState.MENU_OPEN

    def set_tag_input(self, text: str) -> None:
        self.tag_input = text

    def add_tag(self, name: str) -> bool:
        """
        Add a tag name to the pending selection.

        Names are trimmed.  Blank names and names already added (compared
        case-sensitively) are ignored.  Invalid names are reported through the
        notifier and leave the pending tags and input as they were.

        Returns:
            True if the name was added

        """
        if not self.open_menu():
            return False
        if not name.strip():
            return False
        try:
            name = TagService.validate_tag_name(name)
        except ValidationError as e:
            logger.info("capture.tag_rejected", name=name, reason=e.message)
            self.notifier.show_error(e.message)
            return False
        if name in self.pending_tags:
            return False
        self.pending_tags.append(name)
        self.tag_input = ""
        return True

    def remove_tag(self, name: str) -> bool:
        if name not in self.pending_tags:
            return False
        self.pending_tags.remove(name)
        return True

    def suggest_tags(self, prefix: str) -> list[str]:
        """
        Get existing tag names starting with ``prefix`` that haven't been added
        yet.
        """
        if self.tag_suggester is None:
            return []
        return [
            name
            for name in self.tag_suggester(self.user_id, prefix)
            if name not in self.pending_tags
        ]

    def press_enter(self, dropdown_match: str | None = None) -> Highlight | None:
        """
        Handle Enter in the tag input.

        With a highlighted dropdown entry, that tag is added.  Otherwise typed
        text is added as a tag, and with nothing typed the highlight is
        committed.

        Keyword Args:
            dropdown_match: The dropdown entry under the cursor, if any

        Returns:
            The saved highlight if Enter committed one

        """
        if dropdown_match:
            self.add_tag(dropdown_match)
            return None
        if self.tag_input.strip():
            self.add_tag(self.tag_input)
            return None
        if self.pending_tags:
            return self.commit()
        return None

    def cancel(self) -> None:
        """
        Drop the pending selection and tags.  The document is not touched.
        """
        if self.state is CaptureState.COMMITTING:
            return
        self._reset()

    def press_escape(self) -> None:
        self.cancel()

    def commit(self) -> Highlight | None:
        """
        Mark the pending selection and save it as a highlight.

        With no tags this is the same as :meth:`cancel`.

        Raises:
            InvalidRange: If the document no longer covers the selection

        Returns:
            The saved highlight, or None if nothing was saved

        """
        if self.selection is None or self.state not in (
            CaptureState.SELECTION_PENDING,
            CaptureState.MENU_OPEN,
        ):
            return None
        if not self.pending_tags:
            self.cancel()
            return None

        with owner_context(self.owner):
            return self._submit(self.selection, list(self.pending_tags))

    def _submit(
        self, selection: PendingSelection, names: list[str]
    ) -> Highlight | None:
        owner = self.owner
        generation = self._generation
        tiptap_id = str(uuid.uuid4())
        command = ApplyHighlightCommand(
            self.document,
            selection.start,
            selection.end,
            HighlightMark(id=tiptap_id, tags=tuple(names)),
        )

        self._set_state(CaptureState.COMMITTING)
        try:
            applied = self.commands.execute(command)
        except ValueError as e:
            self._reset()
            raise InvalidRange(selection.start, selection.end, str(e)) from e
        try:
            try:
                tags = self.tag_resolver(self.user_id, names)
            except Exception as e:  # noqa: BLE001
                raise TagResolutionFailed(names, e) from e
            try:
                highlight = self.annotation_store(
                    owner_kind=owner.kind,
                    owner_id=owner.id,
                    text=selection.text,
                    start_offset=selection.start,
                    end_offset=selection.end,
                    tiptap_id=tiptap_id,
                    tag_ids=[tag.id for tag in tags],
                )
            except Exception as e:  # noqa: BLE001
                raise PersistenceFailed(e) from e
        except (TagResolutionFailed, PersistenceFailed) as e:
            self._rollback(command, applied=applied, generation=generation, error=e)
            return None

        if generation != self._generation:
            logger.info(
                "capture.stale_result", tiptap_id=tiptap_id, highlight_id=highlight.id
            )
            return highlight
        self._set_state(CaptureState.COMMITTED)
        logger.info(
            "capture.committed", tiptap_id=tiptap_id, highlight_id=highlight.id
        )
        self.notifier.show_message("Highlight saved")
        self._reset()
        return highlight

    def _rollback(
        self,
        command: ApplyHighlightCommand,
        *,
        applied: bool,
        generation: int,
        error: Exception,
    ) -> None:
        logger.warning(
            "capture.rolled_back",
            tiptap_id=command.mark.id,
            stale=generation != self._generation,
            error=str(error),
        )
        self.notifier.show_error(f"Could not save highlight: {error}")
        if generation != self._generation:
            # The document this command marked is gone
            return
        if applied:
            self.commands.revert(command)
        self._set_state(CaptureState.ROLLED_BACK)
        self._reset()
