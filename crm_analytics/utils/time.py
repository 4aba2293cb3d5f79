"""
Calendar utilities for analytics windows and time buckets.

All datetimes handled by the pipeline are timezone-aware UTC. Naive values
coming from storage are interpreted as UTC.
"""

import calendar
from datetime import UTC, date, datetime, timedelta
from typing import Any, Optional


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(ts: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """
    Convert a stored timestamp into an aware UTC datetime.

    Accepts datetimes, dates, ISO-8601 strings (including a trailing "Z")
    and epoch milliseconds. Anything else, including unparseable strings,
    yields None.

    Args:
        value: Raw timestamp value

    Returns:
        UTC datetime or None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=UTC)
        except (ValueError, OverflowError, OSError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None

    return None


def subtract_months(ts: datetime, months: int) -> datetime:
    """
    Step back a number of calendar months.

    The day is clamped to the length of the target month, so March 31
    minus one month is the last day of February.
    """
    month_index = ts.year * 12 + (ts.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(ts.day, calendar.monthrange(year, month)[1])
    return ts.replace(year=year, month=month, day=day)


def start_of_year(ts: datetime) -> datetime:
    """Midnight on January 1st of the year of ``ts``, same timezone."""
    return ts.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)


def month_key(ts: datetime) -> str:
    """Calendar month bucket key, ``YYYY-MM``."""
    return f"{ts.year:04d}-{ts.month:02d}"


def quarter_key(ts: datetime) -> str:
    """Calendar quarter bucket key, ``Tn YYYY``."""
    return f"T{(ts.month - 1) // 3 + 1} {ts.year}"


def quarter_sort_key(key: str) -> tuple[int, int]:
    """Chronological sort key for a ``Tn YYYY`` quarter label."""
    quarter, year = key.split(" ")
    return int(year), int(quarter[1:])


def days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from ``start`` to ``end``, floored."""
    return (end - start) // timedelta(days=1)


def format_timestamp(ts: Optional[datetime]) -> str:
    """ISO-8601 text for reports, empty string when absent."""
    return ts.isoformat() if ts is not None else ""
