# session_attendance/utils/time_utils.py
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Return a timezone-aware UTC datetime.

    Some drivers (SQLite) hand back naive datetimes for timezone-aware
    columns; those values were written as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def has_started(date_time: datetime, now: datetime) -> bool:
    """True when the session start is not strictly after ``now``."""
    return as_utc(date_time) <= as_utc(now)
