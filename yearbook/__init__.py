"""Yearbook: tagged highlights for a year-by-year personal journal."""

__version__ = "0.1.0"
