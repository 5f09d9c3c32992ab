"""
calendrical.rules.rule
----------------------
Rule descriptors. A rule is an immutable constant: ISO rules are built once
in `calendrical.rules.iso`, custom rules are built the same way by passing
conversion functions instead of subclassing.
"""

from __future__ import annotations
from datetime import date, time, timezone
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

from ..core.errors import InvalidFieldValueError, UnsupportedRuleError
from ..core.range import ValueRange
from ..core.units import PeriodUnit, compare_units
from .field import Field

if TYPE_CHECKING:
    from ..engines.engine import CalendricalEngine

T = TypeVar("T")

PeriodFunc = Callable[[int], int]
# (date, time, offset) -> value, or None when the inputs are not enough
ExtractFunc = Callable[[Optional[date], Optional[time], Optional[timezone]], Optional[int]]
# lookup(rule) -> Field | None  ->  narrower range | None
ContextRangeFunc = Callable[[Callable[["DateTimeRule"], Optional[Field]]], Optional[ValueRange]]


class CalendricalRule(Generic[T]):
    """A named query that the engine can answer with a value of `reified_type`."""

    def __init__(self, name: str, reified_type: type):
        self.name = name
        self.reified_type = reified_type

    def derive_from(self, engine: "CalendricalEngine") -> Optional[T]:
        return None

    def get_value(self, calendrical: Any) -> Optional[T]:
        from ..engines.engine import value_of
        return value_of(calendrical, self)

    def get_value_checked(self, calendrical: Any) -> T:
        value = self.get_value(calendrical)
        if value is None:
            raise UnsupportedRuleError(self, calendrical)
        return value

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class ObjectRule(CalendricalRule[T]):
    """Rule for a whole value object; the derivation is supplied as a function."""

    def __init__(self, name: str, reified_type: type, derive: Callable[["CalendricalEngine"], Optional[T]]):
        super().__init__(name, reified_type)
        self._derive = derive

    def derive_from(self, engine: "CalendricalEngine") -> Optional[T]:
        return self._derive(engine)


class DateTimeRule(CalendricalRule[Field]):
    """
    A calendrical field definition: a value measured in `period_unit` that
    cycles within `period_range` (None when unbounded).

    `parent` is the rule this one is defined against. When the parent has the
    same unit and range the two are interchangeable and this rule normalizes
    onto it (clock-hour onto hour, for example). Following parents to the top
    gives the base rule; only rules sharing a base rule can convert between
    each other.

    `to_period`/`from_period` map values to and from a zero-based count of
    `period_unit`, defaulting to the identity.
    """

    def __init__(
        self,
        name: str,
        period_unit: PeriodUnit,
        period_range: Optional[PeriodUnit],
        value_range: ValueRange,
        parent: Optional["DateTimeRule"] = None,
        *,
        to_period: Optional[PeriodFunc] = None,
        from_period: Optional[PeriodFunc] = None,
        extract: Optional[ExtractFunc] = None,
        context_range: Optional[ContextRangeFunc] = None,
    ):
        super().__init__(name, Field)
        self.period_unit = period_unit
        self.period_range = period_range
        self.value_range = value_range
        self.parent = parent
        self._to_period = to_period
        self._from_period = from_period
        self._extract = extract
        self._context_range = context_range

        self.base_rule: DateTimeRule = parent.base_rule if parent is not None else self
        if parent is not None and parent.period_unit is period_unit and parent.period_range is period_range:
            self.normalization_rule: DateTimeRule = parent.normalization_rule
        else:
            self.normalization_rule = self

    # ------------------------------------------------------------
    # Values
    # ------------------------------------------------------------

    def get_value_range(self, context: Any = None) -> ValueRange:
        """Context-free range, or a narrower one when `context` pins it down."""
        if context is None or self._context_range is None:
            return self.value_range
        from ..engines.engine import value_of

        def lookup(rule: DateTimeRule) -> Optional[Field]:
            return value_of(context, rule)

        return self._context_range(lookup) or self.value_range

    def is_valid_value(self, value: int) -> bool:
        return self.value_range.is_valid_value(value)

    def is_valid_int_value(self, value: int) -> bool:
        return self.value_range.is_valid_int_value(value)

    def check_valid_value(self, value: int) -> int:
        return self.value_range.check_valid_value(value, self)

    def check_valid_int_value(self, value: int) -> int:
        if not self.is_valid_int_value(value):
            raise InvalidFieldValueError(self, value, self.value_range)
        return value

    def field(self, value: int) -> Field:
        return Field.of(self, value)

    def convert_to_period(self, value: int) -> int:
        return self._to_period(value) if self._to_period is not None else value

    def convert_from_period(self, period: int) -> int:
        return self._from_period(period) if self._from_period is not None else period

    # ------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------

    def derive_from(self, engine: "CalendricalEngine") -> Optional[Field]:
        if self._extract is not None:
            value = self._extract(engine.date, engine.time, engine.offset)
            if value is not None:
                return self.field(value)
        norm = self.normalization_rule
        if norm is not self:
            derived = norm.derive_from(engine)
            if derived is not None:
                return self.field(self.convert_from_period(norm.convert_to_period(derived.value)))
        return None

    # ------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------

    def compare_period_unit(self, other: "DateTimeRule") -> int:
        return compare_units(self.period_unit, other.period_unit)

    def compare_period_range(self, other: "DateTimeRule") -> int:
        return compare_units(self.period_range, other.period_range)

    def compare_to(self, other: "DateTimeRule") -> int:
        """Order by unit, then by range, then by name."""
        c = self.compare_period_unit(other)
        if c == 0:
            c = self.compare_period_range(other)
        if c == 0:
            c = (self.name > other.name) - (self.name < other.name)
        return c

    def __lt__(self, other: "DateTimeRule") -> bool:
        if not isinstance(other, DateTimeRule):
            return NotImplemented
        return self.compare_to(other) < 0
