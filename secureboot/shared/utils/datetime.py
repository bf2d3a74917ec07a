"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC. Reports
arrive from Windows and Linux clients with a mix of naive and offset
timestamps; normalise them here before comparing.
"""

from datetime import UTC, datetime

_SECONDS_PER_DAY = 86_400


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    SQLite drops tzinfo on round-trip, so repositories call this on every
    datetime they read back.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_utc(value: object) -> datetime | None:
    """
    Parse an ISO-8601 string (or pass through a datetime) as aware UTC.

    Accepts the trailing "Z" emitted by .NET serializers. Returns None for
    empty or unparseable input instead of raising.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        return None
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def whole_days_between(start: datetime, end: datetime) -> int:
    """
    Return the number of whole days from start to end (floor).

    Negative when end precedes start. Both values are normalised to UTC.
    """
    start_utc = ensure_utc(start)
    end_utc = ensure_utc(end)
    delta = end_utc - start_utc
    return int(delta.total_seconds() // _SECONDS_PER_DAY)
