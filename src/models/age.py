"""
Age-in-months from birth and measurement dates.

Uses a fixed 30.44-day month rather than calendar-month arithmetic, and
rounds half up so that month boundaries bracket the same way everywhere.
"""
import math
from datetime import date, datetime

from config.settings import DAYS_PER_MONTH


def days_between(start, end) -> int:
    """Whole days from start to end; partial days from timestamps round up."""
    if isinstance(start, datetime) or isinstance(end, datetime):
        start = _as_datetime(start)
        end = _as_datetime(end)
        return math.ceil((end - start).total_seconds() / 86400)
    return (end - start).days


def age_in_months(birth_date: date, measurement_date: date) -> int:
    days = days_between(birth_date, measurement_date)
    return math.floor(days / DAYS_PER_MONTH + 0.5)


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)
