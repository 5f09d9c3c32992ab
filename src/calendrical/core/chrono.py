"""
calendrical.core.chrono
-----------------------
ISO (proleptic Gregorian) calendar arithmetic on plain integers and
datetime.date values.
"""

from __future__ import annotations
from datetime import date, timedelta

# proleptic ordinal of 1970-01-01, the zero of epoch-day
_EPOCH_ORDINAL = date(1970, 1, 1).toordinal()


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def length_of_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def length_of_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return _MONTH_LENGTHS[month - 1]


def to_epoch_day(d: date) -> int:
    """Days since 1970-01-01, negative before it."""
    return d.toordinal() - _EPOCH_ORDINAL


def from_epoch_day(epoch_day: int) -> date:
    return date.fromordinal(epoch_day + _EPOCH_ORDINAL)


def zero_epoch_month(d: date) -> int:
    return d.year * 12 + d.month - 1


def week_based_year(d: date) -> int:
    return d.isocalendar()[0]


def week_of_week_based_year(d: date) -> int:
    return d.isocalendar()[1]


def weeks_in_week_based_year(wby: int) -> int:
    # Dec 28 always falls in the last ISO week of its year
    return date(wby, 12, 28).isocalendar()[1]


def from_week_date(wby: int, week: int, dow: int) -> date:
    """Lenient ISO week date: week and day overflow into the following weeks."""
    jan4 = date(wby, 1, 4)
    week1_monday = jan4 - timedelta(days=jan4.isoweekday() - 1)
    return week1_monday + timedelta(weeks=week - 1, days=dow - 1)


class ISOChronology:
    """The ISO-8601 calendar system."""

    name = "ISO"

    def is_leap_year(self, year: int) -> bool:
        return is_leap_year(year)

    def __repr__(self) -> str:
        return "ISOChronology"

    def __str__(self) -> str:
        return self.name


ISO = ISOChronology()
