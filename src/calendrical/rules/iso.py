"""
calendrical.rules.iso
---------------------
The ISO-8601 date-time rules. All constants register themselves by name on
import.
"""

from __future__ import annotations
from datetime import date, time, timezone
from typing import Callable, Optional

from ..core import chrono
from ..core.arith import INT64_MAX, INT64_MIN
from ..core.range import ValueRange
from ..core.units import (
    DAYS, FULL_DAYS, HALF_DAYS, HOURS, MILLIS, MINUTES, MONTHS, NANOS,
    QUARTERS, SECONDS, WEEK_BASED_YEARS, WEEKS, YEARS,
)
from .field import Field
from .registry import register_rule
from .rule import DateTimeRule, ExtractFunc

MIN_YEAR = date.min.year
MAX_YEAR = date.max.year

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_DAY = 86400 * NANOS_PER_SECOND


def nano_of_day(t: time) -> int:
    return ((t.hour * 60 + t.minute) * 60 + t.second) * NANOS_PER_SECOND + t.microsecond * 1000


def time_from_nano_of_day(nod: int) -> time:
    seconds, nanos = divmod(nod, NANOS_PER_SECOND)
    minutes, second = divmod(seconds, 60)
    hour, minute = divmod(minutes, 60)
    return time(hour, minute, second, nanos // 1000)


def _from_date(fn: Callable[[date], int]) -> ExtractFunc:
    return lambda d, t, o: fn(d) if d is not None else None


def _from_time(fn: Callable[[int], int]) -> ExtractFunc:
    return lambda d, t, o: fn(nano_of_day(t)) if t is not None else None


def _epoch_second(d: Optional[date], t: Optional[time], o: Optional[timezone]) -> Optional[int]:
    if d is None or t is None or o is None:
        return None
    offset_seconds = int(o.utcoffset(None).total_seconds())
    return chrono.to_epoch_day(d) * 86400 + nano_of_day(t) // NANOS_PER_SECOND - offset_seconds


def _one_based() -> dict:
    return {"to_period": lambda v: v - 1, "from_period": lambda p: p + 1}


def _clock(cycle: int) -> dict:
    # the clock shows `cycle` where the zero-based hour is 0
    return {
        "to_period": lambda v: 0 if v == cycle else v,
        "from_period": lambda p: cycle if p == 0 else p,
    }


def _rule(*args, **kwargs) -> DateTimeRule:
    return register_rule(DateTimeRule(*args, **kwargs))


# ------------------------------------------------------------
# Context ranges
# ------------------------------------------------------------

def _day_of_month_range(lookup) -> Optional[ValueRange]:
    moy = lookup(MONTH_OF_YEAR)
    if moy is None or not moy.is_valid_value():
        return None
    if moy.value == 2:
        year = lookup(YEAR)
        if year is not None:
            return ValueRange.of(1, 29 if chrono.is_leap_year(year.value) else 28)
        return ValueRange.of(1, 28, 29)
    return ValueRange.of(1, chrono.length_of_month(2000, moy.value))


def _day_of_year_range(lookup) -> Optional[ValueRange]:
    year = lookup(YEAR)
    if year is None:
        return None
    return ValueRange.of(1, chrono.length_of_year(year.value))


def _aligned_week_of_month_range(lookup) -> Optional[ValueRange]:
    moy = lookup(MONTH_OF_YEAR)
    if moy is None:
        return None
    if moy.value == 2:
        year = lookup(YEAR)
        if year is None:
            return None
        return ValueRange.of(1, 5 if chrono.is_leap_year(year.value) else 4)
    return ValueRange.of(1, 5)


def _week_of_week_based_year_range(lookup) -> Optional[ValueRange]:
    wby = lookup(WEEK_BASED_YEAR)
    if wby is None or not wby.is_valid_value():
        return None
    return ValueRange.of(1, chrono.weeks_in_week_based_year(wby.value))


# ------------------------------------------------------------
# Time rules
# ------------------------------------------------------------

NANO_OF_DAY = _rule("NanoOfDay", NANOS, FULL_DAYS, ValueRange.of(0, NANOS_PER_DAY - 1),
                    extract=_from_time(lambda n: n))
NANO_OF_MILLI = _rule("NanoOfMilli", NANOS, MILLIS, ValueRange.of(0, 999_999), NANO_OF_DAY,
                      extract=_from_time(lambda n: n % 1_000_000))
NANO_OF_SECOND = _rule("NanoOfSecond", NANOS, SECONDS, ValueRange.of(0, NANOS_PER_SECOND - 1), NANO_OF_DAY,
                       extract=_from_time(lambda n: n % NANOS_PER_SECOND))
NANO_OF_MINUTE = _rule("NanoOfMinute", NANOS, MINUTES, ValueRange.of(0, 60 * NANOS_PER_SECOND - 1), NANO_OF_DAY,
                       extract=_from_time(lambda n: n % (60 * NANOS_PER_SECOND)))
NANO_OF_HOUR = _rule("NanoOfHour", NANOS, HOURS, ValueRange.of(0, 3600 * NANOS_PER_SECOND - 1), NANO_OF_DAY,
                     extract=_from_time(lambda n: n % (3600 * NANOS_PER_SECOND)))
MILLI_OF_SECOND = _rule("MilliOfSecond", MILLIS, SECONDS, ValueRange.of(0, 999), NANO_OF_DAY,
                        extract=_from_time(lambda n: n // 1_000_000 % 1000))
MILLI_OF_MINUTE = _rule("MilliOfMinute", MILLIS, MINUTES, ValueRange.of(0, 59_999), NANO_OF_DAY,
                        extract=_from_time(lambda n: n // 1_000_000 % 60_000))
MILLI_OF_HOUR = _rule("MilliOfHour", MILLIS, HOURS, ValueRange.of(0, 3_599_999), NANO_OF_DAY,
                      extract=_from_time(lambda n: n // 1_000_000 % 3_600_000))
MILLI_OF_DAY = _rule("MilliOfDay", MILLIS, FULL_DAYS, ValueRange.of(0, 86_399_999), NANO_OF_DAY,
                     extract=_from_time(lambda n: n // 1_000_000))
SECOND_OF_MINUTE = _rule("SecondOfMinute", SECONDS, MINUTES, ValueRange.of(0, 59), NANO_OF_DAY,
                         extract=_from_time(lambda n: n // NANOS_PER_SECOND % 60))
SECOND_OF_HOUR = _rule("SecondOfHour", SECONDS, HOURS, ValueRange.of(0, 3599), NANO_OF_DAY,
                       extract=_from_time(lambda n: n // NANOS_PER_SECOND % 3600))
SECOND_OF_DAY = _rule("SecondOfDay", SECONDS, FULL_DAYS, ValueRange.of(0, 86399), NANO_OF_DAY,
                      extract=_from_time(lambda n: n // NANOS_PER_SECOND))
EPOCH_SECOND = _rule("EpochSecond", SECONDS, None, ValueRange.of(INT64_MIN, INT64_MAX),
                     extract=_epoch_second)
MINUTE_OF_HOUR = _rule("MinuteOfHour", MINUTES, HOURS, ValueRange.of(0, 59), NANO_OF_DAY,
                       extract=_from_time(lambda n: n // (60 * NANOS_PER_SECOND) % 60))
MINUTE_OF_DAY = _rule("MinuteOfDay", MINUTES, FULL_DAYS, ValueRange.of(0, 1439), NANO_OF_DAY,
                      extract=_from_time(lambda n: n // (60 * NANOS_PER_SECOND)))
HOUR_OF_AMPM = _rule("HourOfAmPm", HOURS, HALF_DAYS, ValueRange.of(0, 11), NANO_OF_DAY,
                     extract=_from_time(lambda n: n // (3600 * NANOS_PER_SECOND) % 12))
CLOCK_HOUR_OF_AMPM = _rule("ClockHourOfAmPm", HOURS, HALF_DAYS, ValueRange.of(1, 12), HOUR_OF_AMPM,
                           extract=_from_time(lambda n: (n // (3600 * NANOS_PER_SECOND) + 11) % 12 + 1),
                           **_clock(12))
HOUR_OF_DAY = _rule("HourOfDay", HOURS, FULL_DAYS, ValueRange.of(0, 23), NANO_OF_DAY,
                    extract=_from_time(lambda n: n // (3600 * NANOS_PER_SECOND)))
CLOCK_HOUR_OF_DAY = _rule("ClockHourOfDay", HOURS, FULL_DAYS, ValueRange.of(1, 24), HOUR_OF_DAY,
                          extract=_from_time(lambda n: (n // (3600 * NANOS_PER_SECOND) + 23) % 24 + 1),
                          **_clock(24))
AMPM_OF_DAY = _rule("AmPmOfDay", HALF_DAYS, FULL_DAYS, ValueRange.of(0, 1), NANO_OF_DAY,
                    extract=_from_time(lambda n: n // (12 * 3600 * NANOS_PER_SECOND)))

# ------------------------------------------------------------
# Date rules
# ------------------------------------------------------------

DAY_OF_WEEK = _rule("DayOfWeek", DAYS, WEEKS, ValueRange.of(1, 7),
                    extract=_from_date(lambda d: d.isoweekday()), **_one_based())
DAY_OF_MONTH = _rule("DayOfMonth", DAYS, MONTHS, ValueRange.of(1, 28, 31),
                     extract=_from_date(lambda d: d.day),
                     context_range=_day_of_month_range, **_one_based())
DAY_OF_YEAR = _rule("DayOfYear", DAYS, YEARS, ValueRange.of(1, 365, 366),
                    extract=_from_date(lambda d: d.timetuple().tm_yday),
                    context_range=_day_of_year_range, **_one_based())
EPOCH_DAY = _rule("EpochDay", DAYS, None,
                  ValueRange.of(chrono.to_epoch_day(date.min), chrono.to_epoch_day(date.max)),
                  extract=_from_date(chrono.to_epoch_day))
ALIGNED_WEEK_OF_MONTH = _rule("AlignedWeekOfMonth", WEEKS, MONTHS, ValueRange.of(1, 4, 5), DAY_OF_MONTH,
                              extract=_from_date(lambda d: (d.day - 1) // 7 + 1),
                              context_range=_aligned_week_of_month_range, **_one_based())
WEEK_OF_WEEK_BASED_YEAR = _rule("WeekOfWeekBasedYear", WEEKS, WEEK_BASED_YEARS, ValueRange.of(1, 52, 53),
                                extract=_from_date(chrono.week_of_week_based_year),
                                context_range=_week_of_week_based_year_range, **_one_based())
ALIGNED_WEEK_OF_YEAR = _rule("AlignedWeekOfYear", WEEKS, YEARS, ValueRange.of(1, 53), DAY_OF_YEAR,
                             extract=_from_date(lambda d: (d.timetuple().tm_yday - 1) // 7 + 1),
                             **_one_based())
ZERO_EPOCH_MONTH = _rule("ZeroEpochMonth", MONTHS, None, ValueRange.of(MIN_YEAR * 12, MAX_YEAR * 12 + 11),
                         extract=_from_date(chrono.zero_epoch_month))
MONTH_OF_QUARTER = _rule("MonthOfQuarter", MONTHS, QUARTERS, ValueRange.of(1, 3), ZERO_EPOCH_MONTH,
                         extract=_from_date(lambda d: (d.month - 1) % 3 + 1), **_one_based())
MONTH_OF_YEAR = _rule("MonthOfYear", MONTHS, YEARS, ValueRange.of(1, 12), ZERO_EPOCH_MONTH,
                      extract=_from_date(lambda d: d.month), **_one_based())
QUARTER_OF_YEAR = _rule("QuarterOfYear", QUARTERS, YEARS, ValueRange.of(1, 4), ZERO_EPOCH_MONTH,
                        extract=_from_date(lambda d: (d.month - 1) // 3 + 1), **_one_based())
WEEK_BASED_YEAR = _rule("WeekBasedYear", WEEK_BASED_YEARS, None, ValueRange.of(MIN_YEAR, MAX_YEAR),
                        extract=_from_date(chrono.week_based_year))
YEAR = _rule("Year", YEARS, None, ValueRange.of(MIN_YEAR, MAX_YEAR), ZERO_EPOCH_MONTH,
             extract=_from_date(lambda d: d.year))


def field_of(name: str, value: int) -> Field:
    """Shorthand used by the CLI: look up a rule by name and build a field."""
    from .registry import rule_for_name
    rule = rule_for_name(name)
    if not isinstance(rule, DateTimeRule):
        raise TypeError(f"Rule '{name}' is not a date-time field rule")
    return rule.field(value)
