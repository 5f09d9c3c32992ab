"""calendrical: merge calendar and clock fields into dates, times and offsets.

Merging, deriving, rule lookup and the value types are all reachable from here.
"""

# Register the ISO rules and the value-type rules on import
from .rules import iso  # noqa: F401
from . import values as _values  # noqa: F401

from .api import (
    merge,
    derive,
    derive_checked,
    resolve_date,
    resolve_time,
    field,
    rule,
    list_rules,
    resolver_spec,
)
from .core.errors import (
    CalendricalError,
    CalendricalConflictError,
    InvalidFieldValueError,
    IllegalRangeError,
    UnsupportedRuleError,
)
from .core.range import ValueRange
from .engines.engine import CalendricalEngine
from .engines.strategies import ResolverSpec
from .rules.field import Field
from .rules.rule import DateTimeRule
from .values import AmPmOfDay, DayOfWeek, MonthDay, MonthOfYear, OffsetDate, QuarterOfYear, Year, YearMonth

__all__ = [
    "merge",
    "derive",
    "derive_checked",
    "resolve_date",
    "resolve_time",
    "field",
    "rule",
    "list_rules",
    "resolver_spec",
    "CalendricalError",
    "CalendricalConflictError",
    "InvalidFieldValueError",
    "IllegalRangeError",
    "UnsupportedRuleError",
    "ValueRange",
    "CalendricalEngine",
    "ResolverSpec",
    "Field",
    "DateTimeRule",
    "AmPmOfDay",
    "DayOfWeek",
    "MonthDay",
    "MonthOfYear",
    "OffsetDate",
    "QuarterOfYear",
    "Year",
    "YearMonth",
]
