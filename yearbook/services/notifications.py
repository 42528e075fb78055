"""User-facing notifications."""

import typer

from yearbook.services.logs import get_logger

logger = get_logger(__name__)


class Notifier:
    """
    Shows short messages to the user.

    The default implementation writes to stderr.  Editing surfaces pass their
    own subclass to show messages in their UI.
    """

    def show_message(self, message: str) -> None:
        """
        Show an informational message.

        Args:
            message: The message

        """
        logger.info("notification.message", message=message)
        typer.secho(message, err=True, fg=typer.colors.GREEN)

    def show_error(self, message: str) -> None:
        """
        Show an error message.

        Args:
            message: The message

        """
        logger.error("notification.error", message=message)
        typer.secho(message, err=True, fg=typer.colors.RED)
