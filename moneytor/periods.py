import calendar
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Tuple

from moneytor.domain import PERIOD_TYPES


def as_date(value) -> date:
    """Accept a date or datetime and return the calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def generate_period_dates(period_type: str, as_of: date) -> Tuple[date, date]:
    """Return (start, end) of the weekly, monthly or yearly period containing `as_of`.

    Weeks run Monday to Sunday.
    """
    if period_type not in PERIOD_TYPES:
        raise ValueError(f"Unknown period type: {period_type}")
    return _period_dates(period_type, as_date(as_of))


@lru_cache(maxsize=256)
def _period_dates(period_type: str, as_of: date) -> Tuple[date, date]:
    if period_type == "weekly":
        start = as_of - timedelta(days=as_of.weekday())
        return start, start + timedelta(days=6)

    if period_type == "monthly":
        last_day = calendar.monthrange(as_of.year, as_of.month)[1]
        return as_of.replace(day=1), as_of.replace(day=last_day)

    return date(as_of.year, 1, 1), date(as_of.year, 12, 31)


def days_between(start: date, end: date) -> int:
    return (as_date(end) - as_date(start)).days
