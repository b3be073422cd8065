"""Date parsing, business-day clock and interval helpers."""
from datetime import datetime, date, timezone

import pytz

from .constants import DATE_FMT

DEFAULT_TZ = "UTC"


def as_date(x) -> date:
    """
    Coerce any date-like to a naive calendar date. Time-of-day is dropped.
    Supports:
      - date / datetime objects
      - 'YYYY-MM-DD'
      - ISO strings with a time part ('YYYY-MM-DDTHH:MM:SS', with 'Z' or offset)
    Raises ValueError on anything else.
    """
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str):
        base = x.strip().split("T", 1)[0].split(" ", 1)[0]
        return datetime.strptime(base, DATE_FMT).date()
    raise ValueError(f"Unsupported date: {x!r}")


def today_in(tz_name: str | None = None) -> date:
    """
    Current calendar date in the given timezone (server's business day).
    Unknown zone names fall back to UTC.
    """
    try:
        tz = pytz.timezone(tz_name or DEFAULT_TZ)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc
    return datetime.now(timezone.utc).astimezone(tz).date()


def overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check overlap between [a_start, a_end) and [b_start, b_end).
    End date is exclusive: booking 2025-10-22 -> 2025-10-23 occupies the day of 22 only.
    Overlap rule: a_start < b_end and b_start < a_end
    """
    return a_start < b_end and b_start < a_end


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
