"""
calendrical.adjusters
---------------------
Date adjusters: small functions `date -> date`, used by the resolution
strategies and available to callers, e.g. `next_or_same(4)(d)`.
"""

from __future__ import annotations
from datetime import date, timedelta
from typing import Callable

from .core import chrono

DateAdjuster = Callable[[date], date]


def _dow(day_of_week: int) -> int:
    dow = int(day_of_week)
    if not 1 <= dow <= 7:
        raise ValueError(f"Day of week must be 1 (Monday) to 7 (Sunday), got {day_of_week}")
    return dow


def first_day_of_month(d: date) -> date:
    return d.replace(day=1)


def last_day_of_month(d: date) -> date:
    return d.replace(day=chrono.length_of_month(d.year, d.month))


def first_day_of_year(d: date) -> date:
    return d.replace(month=1, day=1)


def last_day_of_year(d: date) -> date:
    return d.replace(month=12, day=31)


def next_or_same(day_of_week: int) -> DateAdjuster:
    dow = _dow(day_of_week)
    return lambda d: d + timedelta(days=(dow - d.isoweekday()) % 7)


def next(day_of_week: int) -> DateAdjuster:
    dow = _dow(day_of_week)
    return lambda d: d + timedelta(days=(dow - d.isoweekday() - 1) % 7 + 1)


def previous_or_same(day_of_week: int) -> DateAdjuster:
    dow = _dow(day_of_week)
    return lambda d: d - timedelta(days=(d.isoweekday() - dow) % 7)


def previous(day_of_week: int) -> DateAdjuster:
    dow = _dow(day_of_week)
    return lambda d: d - timedelta(days=(d.isoweekday() - dow - 1) % 7 + 1)


def first_in_month(day_of_week: int) -> DateAdjuster:
    return day_of_week_in_month(1, day_of_week)


def last_in_month(day_of_week: int) -> DateAdjuster:
    prev = previous_or_same(day_of_week)
    return lambda d: prev(last_day_of_month(d))


def day_of_week_in_month(ordinal: int, day_of_week: int) -> DateAdjuster:
    """The `ordinal`-th `day_of_week` of the month; ordinals past the month run on."""
    if ordinal < 1:
        raise ValueError(f"Ordinal must be at least 1, got {ordinal}")
    nxt = next_or_same(day_of_week)
    return lambda d: nxt(first_day_of_month(d)) + timedelta(weeks=ordinal - 1)
