"""
calendrical.values
------------------
Value types built on the engine, and the rules that derive whole objects
(LocalDate, ZonedDateTime, YearMonth, ...) from a resolved engine.

The standard library covers LocalDate (`date`), LocalTime (`time`),
LocalDateTime/OffsetDateTime/ZonedDateTime (`datetime`), ZoneOffset
(`timezone`) and ZoneId (`tzinfo`); the rest is defined here.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import IntEnum
from typing import Any, Optional

from .core import chrono
from .core.chrono import ISO, ISOChronology
from .core.errors import CalendricalConflictError
from .core.range import ValueRange
from .engines.engine import CalendricalEngine, Contribution
from .rules import iso
from .rules.registry import register_rule, register_type_rule
from .rules.rule import ObjectRule


class _Queryable:
    """Shared engine plumbing of the value types."""

    def get(self, rule: Any) -> Optional[Any]:
        return CalendricalEngine.merge(self).derive(rule)

    @classmethod
    def from_calendricals(cls, *calendricals: Any, spec=None):
        """Merge the calendricals and extract an instance, raising if none can be built."""
        return CalendricalEngine.merge(*calendricals, spec=spec).derive_checked(cls.rule())


# ------------------------------------------------------------
# Enums
# ------------------------------------------------------------

class MonthOfYear(_Queryable, IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @staticmethod
    def of(value: int) -> "MonthOfYear":
        return MonthOfYear(iso.MONTH_OF_YEAR.check_valid_int_value(value))

    @staticmethod
    def rule() -> ObjectRule:
        return MONTH_OF_YEAR_RULE

    def contribution(self) -> Contribution:
        return Contribution(fields=(iso.MONTH_OF_YEAR.field(self.value),))

    def plus(self, months: int) -> "MonthOfYear":
        return MonthOfYear((self.value - 1 + months) % 12 + 1)

    def minus(self, months: int) -> "MonthOfYear":
        return self.plus(-months)

    def quarter_of_year(self) -> "QuarterOfYear":
        return QuarterOfYear((self.value - 1) // 3 + 1)

    def month_of_quarter(self) -> int:
        return (self.value - 1) % 3 + 1

    def length_in_days(self, leap_year: bool) -> int:
        if self is MonthOfYear.FEBRUARY:
            return 29 if leap_year else 28
        return chrono.length_of_month(2001, self.value)

    def min_length_in_days(self) -> int:
        return self.length_in_days(False)

    def max_length_in_days(self) -> int:
        return self.length_in_days(True)

    def first_day_of_year(self, leap_year: bool) -> int:
        """Day-of-year of the first day of this month."""
        return sum(MonthOfYear(m).length_in_days(leap_year) for m in range(1, self.value)) + 1


class DayOfWeek(_Queryable, IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @staticmethod
    def of(value: int) -> "DayOfWeek":
        return DayOfWeek(iso.DAY_OF_WEEK.check_valid_int_value(value))

    @staticmethod
    def rule() -> ObjectRule:
        return DAY_OF_WEEK_RULE

    def contribution(self) -> Contribution:
        return Contribution(fields=(iso.DAY_OF_WEEK.field(self.value),))

    def plus(self, days: int) -> "DayOfWeek":
        return DayOfWeek((self.value - 1 + days) % 7 + 1)

    def minus(self, days: int) -> "DayOfWeek":
        return self.plus(-days)


class QuarterOfYear(_Queryable, IntEnum):
    Q1 = 1
    Q2 = 2
    Q3 = 3
    Q4 = 4

    @staticmethod
    def of(value: int) -> "QuarterOfYear":
        return QuarterOfYear(iso.QUARTER_OF_YEAR.check_valid_int_value(value))

    @staticmethod
    def rule() -> ObjectRule:
        return QUARTER_OF_YEAR_RULE

    def contribution(self) -> Contribution:
        return Contribution(fields=(iso.QUARTER_OF_YEAR.field(self.value),))

    def first_month(self) -> MonthOfYear:
        return MonthOfYear(self.value * 3 - 2)

    def plus(self, quarters: int) -> "QuarterOfYear":
        return QuarterOfYear((self.value - 1 + quarters) % 4 + 1)


class AmPmOfDay(_Queryable, IntEnum):
    AM = 0
    PM = 1

    @staticmethod
    def of(value: int) -> "AmPmOfDay":
        return AmPmOfDay(iso.AMPM_OF_DAY.check_valid_int_value(value))

    @staticmethod
    def rule() -> ObjectRule:
        return AMPM_OF_DAY_RULE

    def contribution(self) -> Contribution:
        return Contribution(fields=(iso.AMPM_OF_DAY.field(self.value),))


# ------------------------------------------------------------
# Value classes
# ------------------------------------------------------------

@dataclass(frozen=True)
class Year(_Queryable):
    value: int

    def __post_init__(self) -> None:
        iso.YEAR.check_valid_int_value(self.value)

    @staticmethod
    def of(year: int) -> "Year":
        return Year(year)

    @staticmethod
    def rule() -> ObjectRule:
        return YEAR_RULE

    def contribution(self) -> Contribution:
        return Contribution(chronology=ISO, fields=(iso.YEAR.field(self.value),))

    def is_leap(self) -> bool:
        return chrono.is_leap_year(self.value)

    def length_in_days(self) -> int:
        return chrono.length_of_year(self.value)

    def plus(self, years: int) -> "Year":
        return Year(self.value + years)

    def at_month(self, month: int) -> "YearMonth":
        return YearMonth(self.value, int(month))

    def at_month_day(self, month_day: "MonthDay") -> date:
        return month_day.at_year(self.value)

    def at_day(self, day_of_year: int) -> date:
        valid = ValueRange.of(1, self.length_in_days())
        valid.check_valid_value(day_of_year, iso.DAY_OF_YEAR)
        return date(self.value, 1, 1) + timedelta(days=day_of_year - 1)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class YearMonth(_Queryable):
    year: int
    month: int

    def __post_init__(self) -> None:
        iso.YEAR.check_valid_int_value(self.year)
        iso.MONTH_OF_YEAR.check_valid_int_value(self.month)

    @staticmethod
    def of(year: int, month: int) -> "YearMonth":
        return YearMonth(year, int(month))

    @staticmethod
    def rule() -> ObjectRule:
        return YEAR_MONTH_RULE

    def contribution(self) -> Contribution:
        return Contribution(
            chronology=ISO, fields=(iso.YEAR.field(self.year), iso.MONTH_OF_YEAR.field(self.month)),
        )

    @property
    def month_of_year(self) -> MonthOfYear:
        return MonthOfYear(self.month)

    def is_leap_year(self) -> bool:
        return chrono.is_leap_year(self.year)

    def length_of_month(self) -> int:
        return chrono.length_of_month(self.year, self.month)

    def length_of_year(self) -> int:
        return chrono.length_of_year(self.year)

    def is_valid_day(self, day_of_month: int) -> bool:
        return 1 <= day_of_month <= self.length_of_month()

    def at_day(self, day_of_month: int) -> date:
        valid = iso.DAY_OF_MONTH.get_value_range(self)
        valid.check_valid_value(day_of_month, iso.DAY_OF_MONTH)
        return date(self.year, self.month, day_of_month)

    def plus_months(self, months: int) -> "YearMonth":
        year, month0 = divmod(self.year * 12 + self.month - 1 + months, 12)
        return YearMonth(year, month0 + 1)

    def plus_years(self, years: int) -> "YearMonth":
        return YearMonth(self.year + years, self.month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class MonthDay(_Queryable):
    month: int
    day: int

    def __post_init__(self) -> None:
        iso.MONTH_OF_YEAR.check_valid_int_value(self.month)
        valid = ValueRange.of(1, MonthOfYear(self.month).max_length_in_days())
        valid.check_valid_value(self.day, iso.DAY_OF_MONTH)

    @staticmethod
    def of(month: int, day: int) -> "MonthDay":
        return MonthDay(int(month), day)

    @staticmethod
    def rule() -> ObjectRule:
        return MONTH_DAY_RULE

    def contribution(self) -> Contribution:
        return Contribution(
            chronology=ISO, fields=(iso.MONTH_OF_YEAR.field(self.month), iso.DAY_OF_MONTH.field(self.day)),
        )

    @property
    def month_of_year(self) -> MonthOfYear:
        return MonthOfYear(self.month)

    def is_valid_year(self, year: int) -> bool:
        return not (self.month == 2 and self.day == 29 and not chrono.is_leap_year(year))

    def at_year(self, year: int) -> date:
        """The date in `year`; February 29 becomes February 28 outside leap years."""
        iso.YEAR.check_valid_int_value(year)
        day = self.day if self.is_valid_year(year) else 28
        return date(year, self.month, day)

    def __str__(self) -> str:
        return f"--{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class OffsetDate(_Queryable):
    date: date
    offset: timezone

    @staticmethod
    def of(d: date, offset: timezone) -> "OffsetDate":
        return OffsetDate(d, offset)

    @staticmethod
    def rule() -> ObjectRule:
        return OFFSET_DATE_RULE

    def contribution(self) -> Contribution:
        return Contribution(date=self.date, offset=self.offset, chronology=ISO)

    def __str__(self) -> str:
        return self.date.isoformat() + time(tzinfo=self.offset).isoformat()[8:]


# ------------------------------------------------------------
# Object rules
# ------------------------------------------------------------

def _local_date_time(engine: CalendricalEngine) -> Optional[datetime]:
    if engine.date is None or engine.time is None:
        return None
    return datetime.combine(engine.date, engine.time)


def _offset_date(engine: CalendricalEngine) -> Optional[OffsetDate]:
    if engine.date is None or engine.offset is None:
        return None
    return OffsetDate(engine.date, engine.offset)


def _offset_time(engine: CalendricalEngine) -> Optional[time]:
    if engine.time is None or engine.offset is None:
        return None
    return engine.time.replace(tzinfo=engine.offset)


def _offset_date_time(engine: CalendricalEngine) -> Optional[datetime]:
    if engine.date is None or engine.time is None or engine.offset is None:
        return None
    return datetime.combine(engine.date, engine.time, tzinfo=engine.offset)


def _zoned_date_time(engine: CalendricalEngine) -> Optional[datetime]:
    if engine.date is None or engine.time is None:
        return None
    if engine.zone is None:
        return _offset_date_time(engine)
    dt = datetime.combine(engine.date, engine.time, tzinfo=engine.zone)
    if engine.offset is not None:
        wanted = engine.offset.utcoffset(None)
        if dt.utcoffset() != wanted:
            # an overlap resolves to the later offset with fold=1
            dt = dt.replace(fold=1)
        if dt.utcoffset() != wanted:
            raise CalendricalConflictError(
                engine.offset, dt.utcoffset(),
                message=f"Offset {engine.offset} is not valid for {engine.date} {engine.time} in {engine.zone}",
            )
    return dt


def _field_value(engine: CalendricalEngine, rule) -> Optional[int]:
    f = engine.derive(rule)
    return f.value if f is not None else None


def _year(engine: CalendricalEngine) -> Optional[Year]:
    v = _field_value(engine, iso.YEAR)
    return Year.of(v) if v is not None else None


def _year_month(engine: CalendricalEngine) -> Optional[YearMonth]:
    year, month = _field_value(engine, iso.YEAR), _field_value(engine, iso.MONTH_OF_YEAR)
    if year is None or month is None:
        return None
    return YearMonth.of(year, month)


def _month_day(engine: CalendricalEngine) -> Optional[MonthDay]:
    month, day = _field_value(engine, iso.MONTH_OF_YEAR), _field_value(engine, iso.DAY_OF_MONTH)
    if month is None or day is None:
        return None
    return MonthDay.of(month, day)


def _enum_rule(name: str, enum_type, field_rule) -> ObjectRule:
    def derive(engine: CalendricalEngine):
        v = _field_value(engine, field_rule)
        return enum_type.of(v) if v is not None else None
    return ObjectRule(name, enum_type, derive)


LOCAL_DATE = ObjectRule("LocalDate", date, lambda e: e.date)
LOCAL_TIME = ObjectRule("LocalTime", time, lambda e: e.time)
LOCAL_DATE_TIME = ObjectRule("LocalDateTime", datetime, _local_date_time)
OFFSET_DATE_RULE = ObjectRule("OffsetDate", OffsetDate, _offset_date)
OFFSET_TIME = ObjectRule("OffsetTime", time, _offset_time)
OFFSET_DATE_TIME = ObjectRule("OffsetDateTime", datetime, _offset_date_time)
ZONED_DATE_TIME = ObjectRule("ZonedDateTime", datetime, _zoned_date_time)
ZONE_OFFSET = ObjectRule("ZoneOffset", timezone, lambda e: e.offset)
ZONE_ID = ObjectRule("ZoneId", tzinfo, lambda e: e.zone)
CHRONOLOGY = ObjectRule("Chronology", ISOChronology, lambda e: e.chronology)
YEAR_MONTH_RULE = ObjectRule("YearMonth", YearMonth, _year_month)
MONTH_DAY_RULE = ObjectRule("MonthDay", MonthDay, _month_day)

# these share their names with field rules, so they are reachable by type only
YEAR_RULE = ObjectRule("Year", Year, _year)
MONTH_OF_YEAR_RULE = _enum_rule("MonthOfYear", MonthOfYear, iso.MONTH_OF_YEAR)
DAY_OF_WEEK_RULE = _enum_rule("DayOfWeek", DayOfWeek, iso.DAY_OF_WEEK)
QUARTER_OF_YEAR_RULE = _enum_rule("QuarterOfYear", QuarterOfYear, iso.QUARTER_OF_YEAR)
AMPM_OF_DAY_RULE = _enum_rule("AmPmOfDay", AmPmOfDay, iso.AMPM_OF_DAY)

for _rule in (
    LOCAL_DATE, LOCAL_TIME, LOCAL_DATE_TIME, OFFSET_DATE_RULE, OFFSET_TIME, OFFSET_DATE_TIME,
    ZONED_DATE_TIME, ZONE_OFFSET, ZONE_ID, CHRONOLOGY, YEAR_MONTH_RULE, MONTH_DAY_RULE,
):
    register_rule(_rule)

# `datetime` maps to the local form; aware results need the explicit rules
for _tp, _rule in (
    (date, LOCAL_DATE),
    (time, LOCAL_TIME),
    (datetime, LOCAL_DATE_TIME),
    (timezone, ZONE_OFFSET),
    (ISOChronology, CHRONOLOGY),
    (OffsetDate, OFFSET_DATE_RULE),
    (Year, YEAR_RULE),
    (YearMonth, YEAR_MONTH_RULE),
    (MonthDay, MONTH_DAY_RULE),
    (MonthOfYear, MONTH_OF_YEAR_RULE),
    (DayOfWeek, DAY_OF_WEEK_RULE),
    (QuarterOfYear, QUARTER_OF_YEAR_RULE),
    (AmPmOfDay, AMPM_OF_DAY_RULE),
):
    register_type_rule(_tp, _rule)
