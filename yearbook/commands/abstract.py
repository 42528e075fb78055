"""Command pattern for undoable document changes."""

from abc import ABC, abstractmethod


class Command(ABC):
    """Base class for undoable commands."""

    @abstractmethod
    def execute(self) -> bool:
        """
        Execute the command.

        Returns:
            True if successful, False otherwise

        """

    @abstractmethod
    def undo(self) -> bool:
        """
        Undo the command, restoring exactly the state before :meth:`execute`.

        Returns:
            True if successful, False otherwise

        """

    @abstractmethod
    def get_description(self) -> str:
        """
        Get human-readable description of the command.

        Returns:
            Description string

        """


class CommandManager:
    """
    Undo/redo stacks for one editing surface.

    Keyword Args:
        max_commands: Maximum number of commands to keep on each stack

    """

    def __init__(self, max_commands: int = 50) -> None:
        #: The maximum number of commands to keep on each stack.
        self.max_commands = max_commands
        #: The undo stack.
        self.undo_stack: list[Command] = []
        #: The redo stack.
        self.redo_stack: list[Command] = []
        #: Whether a command is currently running.
        self._executing = False

    def _push(self, stack: list[Command], command: Command) -> None:
        stack.append(command)
        if len(stack) > self.max_commands:
            stack.pop(0)

    def execute(self, command: Command) -> bool:
        """
        Execute a command and add it to the undo stack.

        Args:
            command: Command to execute

        Returns:
            True if successful, False otherwise

        """
        if self._executing:
            return False

        self._executing = True
        try:
            if not command.execute():
                return False
            self._push(self.undo_stack, command)
            # A new change invalidates anything that was undone before it
            self.redo_stack.clear()
            return True
        finally:
            self._executing = False

    def undo(self) -> bool:
        """
        Undo the last command.

        Returns:
            True if successful, False otherwise

        """
        if not self.undo_stack or self._executing:
            return False

        self._executing = True
        try:
            command = self.undo_stack.pop()
            if command.undo():
                self._push(self.redo_stack, command)
                return True
            self.undo_stack.append(command)
            return False
        finally:
            self._executing = False

    def redo(self) -> bool:
        """
        Redo the last undone command.

        Returns:
            True if successful, False otherwise

        """
        if not self.redo_stack or self._executing:
            return False

        self._executing = True
        try:
            command = self.redo_stack.pop()
            if command.execute():
                self._push(self.undo_stack, command)
                return True
            self.redo_stack.append(command)
            return False
        finally:
            self._executing = False

    def revert(self, command: Command) -> bool:
        """
        Undo ``command`` and forget it, so it can be neither undone nor redone
        again.  Used when a change turns out not to have been saved.

        Args:
            command: A command previously run through :meth:`execute`

        Returns:
            True if the command was undone

        """
        if not command.undo():
            return False
        if command in self.undo_stack:
            self.undo_stack.remove(command)
        return True

    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def clear(self) -> None:
        """Clear all command stacks."""
        self.undo_stack.clear()
        self.redo_stack.clear()
