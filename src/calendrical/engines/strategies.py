"""
calendrical.engines.strategies
------------------------------
Assembly of a date and a time from resolved fields, and the pure data
`ResolverSpec` that says which strategies run and in which order.

Every applicable strategy runs. The engine reconciles each result with what
is already assembled, so a second strategy can only confirm the first or
raise a conflict; the order decides which one supplies the value.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from .. import adjusters
from ..core import chrono
from ..core.errors import InvalidFieldValueError
from ..core.units import HOURS, NANOS, compare_units
from ..rules import iso
from ..rules.field import Field
from ..rules.rule import DateTimeRule

if TYPE_CHECKING:
    from .engine import CalendricalEngine

logger = logging.getLogger(__name__)

Strategy = Callable[["CalendricalEngine"], None]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _valid(*fields: Optional[Field]) -> bool:
    return all(f is not None and f.is_valid_value() for f in fields)


def _check_in_context(rule: DateTimeRule, f: Field, engine: "CalendricalEngine") -> None:
    valid = rule.get_value_range(engine)
    if not valid.is_valid_value(f.value):
        raise InvalidFieldValueError(rule, f.value, valid)


def _year_month(zem: Field) -> Tuple[int, int]:
    year, month0 = divmod(zem.value, 12)
    return year, month0 + 1


def _check_week_day(week: Field, dow: Field, d: date, inside: bool) -> None:
    # the last aligned week is partial, its missing weekdays belong to the next month or year
    if not inside:
        raise InvalidFieldValueError(
            week.rule, week.value,
            message=f"{dow} of {week} falls on {d}, outside the requested period",
        )


# ------------------------------------------------------------
# Date strategies
# ------------------------------------------------------------

def epoch_day(engine: "CalendricalEngine") -> None:
    epd = engine.get_field(iso.EPOCH_DAY)
    if _valid(epd):
        engine.assemble_date(chrono.from_epoch_day(epd.value), "epoch-day")


def year_month_day(engine: "CalendricalEngine") -> None:
    zem = engine.get_field(iso.ZERO_EPOCH_MONTH)
    dom = engine.get_field(iso.DAY_OF_MONTH)
    if not _valid(zem, dom):
        return
    _check_in_context(iso.DAY_OF_MONTH, dom, engine)
    year, month = _year_month(zem)
    engine.assemble_date(date(year, month, dom.value), "year-month-day")


def year_day(engine: "CalendricalEngine") -> None:
    doy = engine.get_field(iso.DAY_OF_YEAR)
    year = engine.derive(iso.YEAR)
    if not _valid(doy, year):
        return
    _check_in_context(iso.DAY_OF_YEAR, doy, engine)
    engine.assemble_date(date(year.value, 1, 1) + timedelta(days=doy.value - 1), "year-day")


def year_month_aligned_week(engine: "CalendricalEngine") -> None:
    zem = engine.get_field(iso.ZERO_EPOCH_MONTH)
    wom = engine.get_field(iso.ALIGNED_WEEK_OF_MONTH)
    dow = engine.get_field(iso.DAY_OF_WEEK)
    if not _valid(zem, wom, dow):
        return
    _check_in_context(iso.ALIGNED_WEEK_OF_MONTH, wom, engine)
    year, month = _year_month(zem)
    d = date(year, month, 1) + timedelta(weeks=wom.value - 1)
    d = adjusters.next_or_same(dow.value)(d)
    _check_week_day(wom, dow, d, (d.year, d.month) == (year, month))
    engine.assemble_date(d, "year-month-aligned-week")


def year_aligned_week(engine: "CalendricalEngine") -> None:
    woy = engine.get_field(iso.ALIGNED_WEEK_OF_YEAR)
    dow = engine.get_field(iso.DAY_OF_WEEK)
    year = engine.derive(iso.YEAR)
    if not _valid(woy, dow, year):
        return
    d = date(year.value, 1, 1) + timedelta(weeks=woy.value - 1)
    d = adjusters.next_or_same(dow.value)(d)
    _check_week_day(woy, dow, d, d.year == year.value)
    engine.assemble_date(d, "year-aligned-week")


def week_based_year(engine: "CalendricalEngine") -> None:
    wby = engine.get_field(iso.WEEK_BASED_YEAR)
    week = engine.get_field(iso.WEEK_OF_WEEK_BASED_YEAR)
    dow = engine.get_field(iso.DAY_OF_WEEK)
    if not _valid(wby, week, dow):
        return
    _check_in_context(iso.WEEK_OF_WEEK_BASED_YEAR, week, engine)
    engine.assemble_date(chrono.from_week_date(wby.value, week.value, dow.value), "week-based-year")


# ------------------------------------------------------------
# Time strategies
# ------------------------------------------------------------

def epoch_second(engine: "CalendricalEngine") -> None:
    eps = engine.get_field(iso.EPOCH_SECOND)
    nos = engine.get_field(iso.NANO_OF_SECOND)
    if not _valid(eps) or (nos is not None and not nos.is_valid_value()):
        return
    nanos = nos.value if nos is not None else 0
    if nanos % 1000:
        logger.debug("Epoch second nanos %d finer than microseconds, not assembled", nanos)
        return
    dt = _EPOCH + timedelta(seconds=eps.value, microseconds=nanos // 1000)
    # the instant is read in the known offset or zone, UTC only when neither is given
    if engine.offset is not None:
        dt = dt.astimezone(engine.offset)
    elif engine.zone is not None:
        dt = dt.astimezone(engine.zone)
        engine.assemble_offset(timezone(dt.utcoffset()), "epoch-second")
    else:
        engine.assemble_offset(timezone.utc, "epoch-second")
    engine.assemble_date(dt.date(), "epoch-second")
    engine.assemble_time(dt.time(), "epoch-second")


def time_of_day(engine: "CalendricalEngine") -> None:
    group = [f for f in engine.fields if f.rule.base_rule is iso.NANO_OF_DAY]
    if len(group) != 1:
        return
    f = group[0]
    rule = f.rule
    if rule.period_range is not iso.NANO_OF_DAY.period_range or compare_units(rule.period_unit, HOURS) > 0:
        return
    if not f.is_valid_value():
        return
    factor = rule.period_unit.to_equivalent(NANOS)
    if factor is None:
        return
    nod = rule.convert_to_period(f.value) * factor
    if nod % 1000:
        logger.debug("%s is finer than microseconds, not assembled", f)
        return
    engine.assemble_time(iso.time_from_nano_of_day(nod), "time-of-day")


DATE_STRATEGIES: Dict[str, Strategy] = {
    "epoch-day": epoch_day,
    "year-month-day": year_month_day,
    "year-day": year_day,
    "year-month-aligned-week": year_month_aligned_week,
    "year-aligned-week": year_aligned_week,
    "week-based-year": week_based_year,
}

TIME_STRATEGIES: Dict[str, Strategy] = {
    "epoch-second": epoch_second,
    "time-of-day": time_of_day,
}


# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------

@dataclass(frozen=True)
class ResolverSpec:
    """Which assembly strategies run, in priority order."""
    name: str
    date_strategies: Tuple[str, ...] = tuple(DATE_STRATEGIES)
    time_strategies: Tuple[str, ...] = tuple(TIME_STRATEGIES)
    cross_check: bool = True

    def __post_init__(self) -> None:
        for name in self.date_strategies:
            if name not in DATE_STRATEGIES:
                raise KeyError(f"Unknown date strategy '{name}'. Available: {sorted(DATE_STRATEGIES)}")
        for name in self.time_strategies:
            if name not in TIME_STRATEGIES:
                raise KeyError(f"Unknown time strategy '{name}'. Available: {sorted(TIME_STRATEGIES)}")

    @staticmethod
    def like(name: str) -> "ResolverSpec":
        if name not in RESOLVER_SPECS:
            raise KeyError(f"Unknown resolver spec '{name}'. Available: {sorted(RESOLVER_SPECS)}")
        return RESOLVER_SPECS[name]

    def tweak(self, **kwargs) -> "ResolverSpec":
        return replace(self, **kwargs)

    def strategies(self) -> Tuple[Tuple[str, Strategy], ...]:
        return tuple((n, DATE_STRATEGIES[n]) for n in self.date_strategies) + tuple(
            (n, TIME_STRATEGIES[n]) for n in self.time_strategies
        )


RESOLVER_SPECS: Dict[str, ResolverSpec] = {
    "iso": ResolverSpec("iso"),
    "calendar-date": ResolverSpec(
        "calendar-date",
        date_strategies=("year-month-day", "year-day"),
        time_strategies=("time-of-day",),
    ),
}
