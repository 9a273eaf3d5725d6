from __future__ import annotations
from datetime import date, datetime, timedelta, timezone as dt_tz
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(dt_tz.utc)


def utc_day(value: datetime | date) -> date:
    """
    Bucket an instant into its UTC calendar day.

    Aware datetimes are converted to UTC first; naive datetimes are taken to
    already be UTC. Plain dates pass through unchanged.

    Examples:
        >>> from datetime import datetime, timezone, timedelta
        >>> utc_day(datetime(2025, 1, 10, 23, 30, tzinfo=timezone(timedelta(hours=-5))))
        datetime.date(2025, 1, 11)
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_tz.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"expected date or datetime, got {type(value).__name__}")


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from `earlier` to `later` (negative if reversed)."""
    return (later - earlier).days


def submission_window_open(now_utc: datetime, start_hour: int, end_hour: int, tz_name: str) -> bool:
    """
    True if the local wall-clock hour of `now_utc` in `tz_name` lies in
    [start_hour, end_hour). An end hour of 24 means "until midnight".
    Windows with end <= start wrap past midnight (e.g. 22 -> 2).

    Examples:
        >>> from datetime import datetime, timezone
        >>> submission_window_open(datetime(2025, 1, 10, 6, 59, tzinfo=timezone.utc), 7, 24, "UTC")
        False
        >>> submission_window_open(datetime(2025, 1, 10, 23, 59, tzinfo=timezone.utc), 7, 24, "UTC")
        True
    """
    hour = now_utc.astimezone(ZoneInfo(tz_name)).hour
    if end_hour - start_hour in (0, 24):
        return True
    if start_hour < end_hour:
        return start_hour <= hour < end_hour
    return hour >= start_hour or hour < end_hour


def day_range(end: date, span_days: int) -> list[date]:
    """Inclusive list of days from `end - span_days` through `end`."""
    start = end - timedelta(days=span_days)
    return [start + timedelta(days=i) for i in range(span_days + 1)]
