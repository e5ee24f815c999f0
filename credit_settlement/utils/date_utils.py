"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, tzinfo


def as_date(value: date | datetime, tz: tzinfo | None = None) -> date:
    """
    Truncate a timestamp to its calendar date.

    Aware timestamps are first converted to tz (server local time when tz is
    None), so a UTC instant and its local equivalent land on the same day.
    Naive timestamps are taken as already local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime, tz: tzinfo | None = None) -> int:
    """Whole calendar days from start to end, ignoring time of day"""
    return (as_date(end, tz) - as_date(start, tz)).days


def add_days(from_date: date | datetime, days: int, tz: tzinfo | None = None) -> date:
    return as_date(from_date, tz) + timedelta(days=days)
