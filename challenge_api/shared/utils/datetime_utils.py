"""Datetime helpers for timezone-aware scheduling arithmetic.

All phase dates are handled as aware UTC instants; naive values coming
from storage or callers are normalised with :func:`ensure_utc`.
"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime object is timezone-aware and in UTC.

    Naive datetimes are assumed to already be UTC; aware datetimes in
    another zone are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def add_seconds(dt: datetime | None, seconds: int) -> datetime | None:
    """Shift ``dt`` forward by ``seconds``; ``None`` stays ``None``."""
    if dt is None:
        return None
    return ensure_utc(dt) + timedelta(seconds=seconds)


__all__ = [
    "add_seconds",
    "ensure_utc",
    "utcnow",
]
