"""Shared datetime helpers for provider payloads.

CoinCap reports every timestamp as Unix epoch milliseconds; these helpers
convert between that and timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone


def parse_millis_timestamp(value) -> datetime | None:
    """Parse a Unix epoch timestamp in milliseconds to a UTC-aware datetime.

    Args:
        value: An int, float, string-encoded number, or None.

    Returns:
        A timezone-aware UTC datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (ValueError, TypeError, OSError, OverflowError):
        return None


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware (UTC).

    If the datetime is naive, attach UTC; otherwise return as-is.

    Args:
        dt: A datetime object.

    Returns:
        The same datetime, guaranteed to be timezone-aware.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_millis(dt: datetime) -> int:
    """Convert a datetime to Unix epoch milliseconds (naive means UTC)."""
    return int(ensure_utc(dt).timestamp() * 1000)
