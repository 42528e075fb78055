"""Utility functions for Yearbook."""

import sys
from datetime import UTC, date, datetime
from pathlib import Path


def get_app_data_path() -> Path:
    """
    Get the platform specific application data directory.

    - On Windows: ``AppData/Local/yearbook``
    - On macOS: ``~/Library/Application Support/yearbook``
    - On Linux: ``~/.config/yearbook``

    Returns:
        Path to the application data directory

    Raises:
        ValueError: If the platform is not supported

    """
    if sys.platform == "win32":
        path = Path.home() / "AppData" / "Local" / "yearbook"
    elif sys.platform == "darwin":
        path = Path.home() / "Library" / "Application Support" / "yearbook"
    elif sys.platform == "linux":
        path = Path.home() / ".config" / "yearbook"
    else:
        msg = f"Unsupported platform: {sys.platform}"
        raise ValueError(msg)
    path.mkdir(parents=True, exist_ok=True)
    return path


def utcnow() -> datetime:
    """
    Get the current time as a naive UTC datetime.

    SQLite doesn't handle timezone-aware datetimes well, so we store naive UTC.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def to_utc_iso(dt: datetime | None) -> str | None:
    """
    Convert datetime to UTC ISO format string.

    Args:
        dt: Datetime object to convert, or None

    Returns:
        ISO format string with UTC timezone, or None

    """
    if dt is None:
        return None
    # Naive datetimes are already UTC (database stores UTC)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat()


def format_short_date(value: date | datetime) -> str:
    """
    Format a date the way item titles show it, e.g. ``1/15/2024``.

    Args:
        value: Date or datetime to format

    Returns:
        The formatted date

    """
    return f"{value.month}/{value.day}/{value.year}"
