from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

# Bounds used when a report or listing is requested without from/to
EARLIEST_DAY = date(1970, 1, 1)
LATEST_DAY = date(2099, 12, 31)


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_day(value: Optional[str], default: date) -> date:
    """
    Parse a YYYY-MM-DD query value.

    - None / "" -> default
    - anything else must be an ISO calendar date, otherwise ValueError
    """
    if value is None:
        return default
    s = value.strip()
    if not s:
        return default
    return date.fromisoformat(s)


def day_window(start: date, end: date, utc_offset: timedelta = timedelta(0)) -> tuple[datetime, datetime]:
    """
    Turn an inclusive day range into a half-open naive-UTC window.

    [start 00:00:00, end + 1 day 00:00:00) covers every instant of both
    boundary days, including sub-second timestamps after 23:59:59.
    The days are local to `utc_offset`; the bounds are shifted back to UTC.
    """
    return (
        datetime.combine(start, time.min) - utc_offset,
        datetime.combine(end + timedelta(days=1), time.min) - utc_offset,
    )


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")
