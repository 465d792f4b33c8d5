"""Named reporting periods such as `30d` or `month`."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from .exceptions import InvalidTimeRangeError

FIXED_RANGES = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "week": timedelta(weeks=1),
}

CALENDAR_RANGES = {
    "month": relativedelta(months=1),
    "year": relativedelta(years=1),
}

DEFAULT_TIME_RANGE = "30d"


def parse_time_range(
    time_range: Optional[str],
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    Resolve a named range to a `(start, end)` pair ending at `now`.

    Raises:
        InvalidTimeRangeError: If the name is not recognised
    """
    end = now or datetime.now(timezone.utc)
    name = (time_range or DEFAULT_TIME_RANGE).lower()
    if name in FIXED_RANGES:
        return end - FIXED_RANGES[name], end
    if name in CALENDAR_RANGES:
        return end - CALENDAR_RANGES[name], end
    raise InvalidTimeRangeError(name, sorted(FIXED_RANGES) + sorted(CALENDAR_RANGES))


def window_days_for(start: datetime, end: datetime) -> int:
    """Number of daily trend buckets that cover a range, both end days included."""
    return (end.date() - start.date()).days + 1
