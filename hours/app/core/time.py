"""Time utilities for timezone-aware UTC datetimes and the local calendar date."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def local_today() -> date:
    """Return the wall-clock date that relative expressions like 'today' resolve against."""
    return date.today()
