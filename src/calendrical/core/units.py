"""
calendrical.core.units
----------------------
The period unit graph: each unit is a whole multiple of a root unit, which
is enough to order units and to convert between related ones.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True, eq=False)
class PeriodUnit:
    name: str
    base_equivalent: int = 1
    base_unit: Optional["PeriodUnit"] = None
    estimated_duration: Fraction = Fraction(0)  # seconds
    ordinal: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if self.base_equivalent <= 0:
            raise ValueError(f"Unit {self.name} needs a positive base equivalent")
        if self.base_unit is not None and self.base_unit.base_unit is not None:
            raise ValueError(f"Unit {self.name} must be based on a root unit")

    @property
    def root(self) -> "PeriodUnit":
        return self.base_unit if self.base_unit is not None else self

    def _amount_in_root(self) -> int:
        return self.base_equivalent if self.base_unit is not None else 1

    def to_equivalent(self, unit: "PeriodUnit") -> Optional[int]:
        """How many `unit` make one of this unit, or None when not a whole multiple."""
        if unit is self:
            return 1
        if unit.root is not self.root:
            return None
        mine, theirs = self._amount_in_root(), unit._amount_in_root()
        if mine % theirs != 0:
            return None
        return mine // theirs

    def sort_key(self) -> Tuple[Fraction, int, str]:
        return (self.estimated_duration, self.ordinal, self.name)

    def __lt__(self, other: "PeriodUnit") -> bool:
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"PeriodUnit({self.name})"


def compare_units(a: Optional[PeriodUnit], b: Optional[PeriodUnit]) -> int:
    """Three-way compare where None stands for an unbounded (largest) unit."""
    if a is b:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    ka, kb = a.sort_key(), b.sort_key()
    return (ka > kb) - (ka < kb)


# ------------------------------------------------------------
# ISO units
# ------------------------------------------------------------

_SECOND_NANOS = 1_000_000_000
_DAY_SECONDS = 86400
_YEAR_SECONDS = Fraction(31556952)  # mean Gregorian year

NANOS = PeriodUnit("Nanos", 1, None, Fraction(1, _SECOND_NANOS), 0)
MICROS = PeriodUnit("Micros", 1000, NANOS, Fraction(1, 1_000_000), 1)
MILLIS = PeriodUnit("Millis", 1_000_000, NANOS, Fraction(1, 1000), 2)
SECONDS = PeriodUnit("Seconds", _SECOND_NANOS, NANOS, Fraction(1), 3)
MINUTES = PeriodUnit("Minutes", 60 * _SECOND_NANOS, NANOS, Fraction(60), 4)
HOURS = PeriodUnit("Hours", 3600 * _SECOND_NANOS, NANOS, Fraction(3600), 5)
HALF_DAYS = PeriodUnit("12Hours", 12 * 3600 * _SECOND_NANOS, NANOS, Fraction(12 * 3600), 6)
FULL_DAYS = PeriodUnit("24Hours", 24 * 3600 * _SECOND_NANOS, NANOS, Fraction(_DAY_SECONDS), 7)
DAYS = PeriodUnit("Days", 1, None, Fraction(_DAY_SECONDS), 8)
WEEKS = PeriodUnit("Weeks", 7, DAYS, Fraction(7 * _DAY_SECONDS), 9)
MONTHS = PeriodUnit("Months", 1, None, _YEAR_SECONDS / 12, 10)
QUARTERS = PeriodUnit("Quarters", 3, MONTHS, _YEAR_SECONDS / 4, 11)
WEEK_BASED_YEARS = PeriodUnit("WeekBasedYears", 1, None, Fraction(7 * 52 * _DAY_SECONDS), 12)
YEARS = PeriodUnit("Years", 12, MONTHS, _YEAR_SECONDS, 13)
DECADES = PeriodUnit("Decades", 120, MONTHS, _YEAR_SECONDS * 10, 14)
CENTURIES = PeriodUnit("Centuries", 1200, MONTHS, _YEAR_SECONDS * 100, 15)
MILLENNIA = PeriodUnit("Millennia", 12000, MONTHS, _YEAR_SECONDS * 1000, 16)
ERAS = PeriodUnit("Eras", 1, None, _YEAR_SECONDS * 1_000_000_000, 17)

ISO_UNITS: List[PeriodUnit] = [
    NANOS, MICROS, MILLIS, SECONDS, MINUTES, HOURS, HALF_DAYS, FULL_DAYS,
    DAYS, WEEKS, MONTHS, QUARTERS, WEEK_BASED_YEARS, YEARS, DECADES,
    CENTURIES, MILLENNIA, ERAS,
]

_BY_NAME: Dict[str, PeriodUnit] = {u.name: u for u in ISO_UNITS}


def unit_for_name(name: str) -> PeriodUnit:
    if name not in _BY_NAME:
        raise KeyError(f"Unknown unit '{name}'. Available: {sorted(_BY_NAME)}")
    return _BY_NAME[name]
