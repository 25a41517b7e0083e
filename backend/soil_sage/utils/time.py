"""
Local calendar helpers
======================

Readings are stored with naive local timestamps; days and hourly buckets are
anchored to local midnight.
"""
from datetime import date, datetime, time, timedelta
from typing import Union

DayLike = Union[date, datetime]


def start_of_day(value: DayLike) -> datetime:
    """Truncate a date or datetime to local midnight."""
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min)


def start_of_hour(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def day_bounds(value: DayLike) -> tuple[datetime, datetime]:
    """Return the half-open interval [midnight, next midnight) for a day."""
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def to_local_naive(value: datetime) -> datetime:
    """Convert aware datetimes to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
