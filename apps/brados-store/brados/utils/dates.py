"""Local-date to UTC boundary conversion for date-range queries."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta


def local_date_to_utc_boundary(local_date: str, end_of_day: bool, offset_minutes: int | float = 0) -> str:
    """Convert a local ``YYYY-MM-DD`` into the ISO UTC instant bounding that day.

    ``offset_minutes`` follows the browser ``getTimezoneOffset`` convention:
    minutes to add to local time to reach UTC (positive west of Greenwich).
    The start boundary is 00:00:00.000 and the end boundary 23:59:59.999.
    """
    day = date.fromisoformat(local_date)
    clock = time(23, 59, 59, 999000) if end_of_day else time(0, 0, 0)
    utc = datetime.combine(day, clock) + timedelta(minutes=offset_minutes)
    return utc.isoformat(timespec="milliseconds") + "Z"
