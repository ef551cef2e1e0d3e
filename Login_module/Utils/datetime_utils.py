"""
DateTime utility functions - All operations use UTC.
Database storage keeps naive UTC datetimes, API responses carry an explicit "Z"
suffix, and session dates are compared as UTC calendar days everywhere
(server-side filters, filter metadata and client-side search).
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union

DateLike = Union[str, date, datetime]


def now_utc() -> datetime:
    """
    Get current UTC datetime (naive, microsecond resolution).
    Used for created_at / updated_at so ordering by creation time is stable.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to naive UTC.
    Naive datetimes are assumed to already be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_session_date(value: DateLike) -> datetime:
    """
    Parse a session date into a naive UTC datetime.

    Accepts:
        - date / datetime objects
        - "YYYY-MM-DD" strings (midnight UTC)
        - ISO-8601 datetime strings, with "Z" or an explicit offset

    Raises:
        ValueError: if the value is empty, cannot be parsed, or falls outside
        the datetime range once converted to UTC
    """
    try:
        return _parse_session_date(value)
    except OverflowError:
        raise ValueError("Session date is out of range")


def _parse_session_date(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if value is None:
        raise ValueError("Session date is required")

    text = str(value).strip()
    if not text:
        raise ValueError("Session date is required")

    if len(text) == 10:
        return datetime.combine(date.fromisoformat(text), time.min)

    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def day_bounds(value: DateLike) -> Tuple[datetime, Optional[datetime]]:
    """
    Return the [start, end) range covering the UTC calendar day of value.
    Time-of-day in the input is ignored. end is None for the last representable
    day, whose range is open ended.
    """
    day = parse_session_date(value).date()
    start = datetime.combine(day, time.min)
    if day == date.max:
        return start, None
    return start, start + timedelta(days=1)


def to_iso_day(dt: Optional[DateLike]) -> Optional[str]:
    """Return the UTC calendar day of dt as "YYYY-MM-DD"."""
    if dt is None or dt == "":
        return None
    return parse_session_date(dt).date().isoformat()


def to_utc_isoformat(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime to UTC and return as ISO format string.
    Used for API responses (e.g., "2024-01-15T00:00:00Z").
    """
    utc_dt = to_utc(dt)
    if utc_dt is None:
        return None
    return utc_dt.isoformat() + "Z"
