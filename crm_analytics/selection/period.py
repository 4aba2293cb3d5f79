"""Period codes and the time-window filter."""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional, TypeVar

from ..config.defaults import PERIOD_CODES, UNDATED_AS_NOW
from ..utils.time import start_of_year, subtract_months

T = TypeVar("T")

# Period code -> calendar months to step back
PERIOD_MONTHS = {
    "1m": 1,
    "3m": 3,
    "6m": 6,
    "1y": 12,
}


def is_known_period(period: Optional[str]) -> bool:
    """True for the period codes that restrict the window."""
    return period in PERIOD_CODES


def resolve_cutoff(period: Optional[str], now: datetime) -> Optional[datetime]:
    """
    Map a period code to the earliest date kept by the window.

    Args:
        period: One of 1m, 3m, 6m, 1y, ytd
        now: Reference time of the run

    Returns:
        Cutoff datetime, or None when the code does not restrict the
        window (``"all"``, None and unknown codes)
    """
    if period == "ytd":
        return start_of_year(now)

    months = PERIOD_MONTHS.get(period) if isinstance(period, str) else None
    if months is None:
        return None

    return subtract_months(now, months)


def effective_date(ts: Optional[datetime], now: datetime,
                   undated_policy: str = UNDATED_AS_NOW) -> Optional[datetime]:
    """
    Date used to place a record in time.

    Undated records are dated ``now`` under the "now" policy and stay
    undated (None) under the "exclude" policy.
    """
    if ts is not None:
        return ts
    return now if undated_policy == UNDATED_AS_NOW else None


def in_window(ts: Optional[datetime], cutoff: Optional[datetime], now: datetime,
              undated_policy: str = UNDATED_AS_NOW) -> bool:
    """A record passes iff its effective date is on or after the cutoff."""
    if cutoff is None:
        return True

    effective = effective_date(ts, now, undated_policy)
    return effective is not None and effective >= cutoff


def filter_by_period(records: Iterable[T], cutoff: Optional[datetime], now: datetime,
                     date_field: str = "created_at",
                     undated_policy: str = UNDATED_AS_NOW) -> tuple[T, ...]:
    """Keep the records whose ``date_field`` falls inside the window."""
    return tuple(
        record for record in records
        if in_window(getattr(record, date_field), cutoff, now, undated_policy)
    )
