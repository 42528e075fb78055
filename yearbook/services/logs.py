"""
Logging configuration for Yearbook.

Every line is JSON and carries the application context bound by
:func:`configure_logging` (app name, version and the journal database in use).
Code working on one content item wraps itself in :func:`owner_context` so its
lines also name the owner, which is what ties a highlight event back to the
daily log, lesson or chapter it happened in.
"""

import logging
import logging.handlers
import os
import sys
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Final

import structlog

from yearbook import __version__
from yearbook.db import get_db_path
from yearbook.utils import get_app_data_path

if TYPE_CHECKING:
    from pathlib import Path

    from yearbook.types import OwnerRef

#: Environment variable that turns on console logging.
DEBUG_ENV: Final[str] = "YEARBOOK_DEBUG"
#: Value of the ``app`` key on every log line.
APP_NAME: Final[str] = "yearbook"


def get_log_dir() -> "Path":
    """
    Get the path to the log directory.

    Returns:
        The path to the log directory.

    """
    log_dir = get_app_data_path() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file_path() -> "Path":
    return get_log_dir() / "yearbook.log.json"


def bind_app_context(db_path: "Path | None" = None) -> None:
    """
    Tag all following log lines with the application and its database.

    Anything bound before is dropped, so a second call starts clean.

    Keyword Args:
        db_path: The journal database; the default database if not given

    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        app=APP_NAME,
        version=__version__,
        db_path=str(db_path if db_path is not None else get_db_path()),
    )


def owner_context(owner: "OwnerRef | None") -> AbstractContextManager:
    """
    Tag log lines written inside the block with the content item being worked
    on.  With no owner the block runs untagged.
    """
    if owner is None:
        return nullcontext()
    return structlog.contextvars.bound_contextvars(
        owner_kind=owner.kind.value, owner_id=owner.id
    )


def configure_logging(
    level: int = logging.INFO, db_path: "Path | None" = None
) -> None:
    """
    Configure structlog and standard logging.

    - JSON logs to file with 3-week rotation.
    - Console logs when ``YEARBOOK_DEBUG`` is set.
    - Application context on every line, see :func:`bind_app_context`.

    Keyword Args:
        level: The root log level
        db_path: The journal database the process works on

    """
    log_file = get_log_file_path()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_file,
        when="D",
        interval=21,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
        )
    )
    handlers = [file_handler]

    if DEBUG_ENV in os.environ:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(),
            )
        )
        handlers.append(console_handler)  # type: ignore[arg-type]

    logging.basicConfig(
        handlers=handlers,
        level=level,
        force=True,
    )

    structlog.configure(
        processors=[
            *processors,  # type: ignore[list-item]
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    bind_app_context(db_path)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name

    Returns:
        A structlog logger

    """
    return structlog.get_logger(name)
