"""
Datetime helpers.

Timestamps are stored as naive UTC so that SQLite and PostgreSQL round-trip
the same values.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as naive UTC"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already"""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """Serialize a stored naive UTC datetime as ISO-8601 with a Z suffix"""
    if dt is None:
        return None
    return to_naive_utc(dt).isoformat() + "Z"
