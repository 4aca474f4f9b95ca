from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.constants import DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (extended or basic format, ``Z`` for UTC)."""
    return datetime.fromisoformat(value.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware timestamp to naive server-local time.

    Naive values are assumed to already be server-local and are returned as-is.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def to_date_only(value: datetime) -> date:
    """Calendar date of a timestamp in server-local time."""
    return to_local_naive(value).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def to_iso_utc(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2026-02-07T09:00:00.000Z``."""
    aware = value if value.tzinfo is not None else value.astimezone()
    return aware.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
