from __future__ import annotations
from dataclasses import dataclass
from functools import total_ordering
from typing import TYPE_CHECKING, Any, Optional

from ..core.arith import check_int64

if TYPE_CHECKING:
    from .rule import DateTimeRule


@total_ordering
@dataclass(frozen=True)
class Field:
    """
    A (rule, value) pair such as "DayOfMonth 30".

    The value is not checked against the rule's range on construction, so
    lenient values like HourOfDay 25 are representable.
    """
    rule: "DateTimeRule"
    value: int

    def __post_init__(self) -> None:
        check_int64(self.value)

    @staticmethod
    def of(rule: "DateTimeRule", value: int) -> "Field":
        if rule is None:
            raise TypeError("Field rule must not be None")
        return Field(rule, value)

    def with_value(self, value: int) -> "Field":
        return self if value == self.value else Field(self.rule, value)

    def with_rule(self, rule: "DateTimeRule") -> "Field":
        return self if rule is self.rule else Field.of(rule, self.value)

    # validity

    def is_valid_value(self) -> bool:
        return self.rule.is_valid_value(self.value)

    def get_valid_value(self) -> int:
        return self.rule.check_valid_value(self.value)

    def is_valid_int_value(self) -> bool:
        return self.rule.is_valid_int_value(self.value)

    def get_valid_int_value(self) -> int:
        return self.rule.check_valid_int_value(self.value)

    # derivation

    def derive(self, rule: "DateTimeRule") -> Optional["Field"]:
        """
        Convert to a field of `rule` through the canonical period, or None.

        Possible only when both rules share a base rule and the target is no
        finer and no wider than this field: HourOfDay 14 gives HourOfAmPm 2,
        while HourOfAmPm cannot give HourOfDay.
        """
        if rule is self.rule:
            return self
        src = self.rule
        if (
            src.base_rule is not getattr(rule, "base_rule", None)
            or src.compare_period_unit(rule) > 0
            or src.compare_period_range(rule) < 0
        ):
            return None
        period = src.convert_to_period(self.value)
        bottom = rule.period_unit.to_equivalent(src.period_unit)
        if bottom is None:
            return None
        period = period // bottom
        if rule.period_range is not None and src.compare_period_range(rule) != 0:
            top = rule.period_range.to_equivalent(rule.period_unit)
            if top is None:
                return None
            period = period % top
        return rule.field(rule.convert_from_period(period))

    def get(self, rule: Any) -> Optional[Any]:
        """Query any rule or value type, resolving through the engine when needed."""
        if rule is self.rule:
            return self
        from ..engines.engine import CalendricalEngine
        return CalendricalEngine.derive_with(rule, fields=(self,))

    def matches(self, calendrical: Any) -> bool:
        """True when `calendrical` yields this same field."""
        from ..engines.engine import value_of
        return value_of(calendrical, self.rule) == self

    def __lt__(self, other: "Field") -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        c = self.rule.compare_to(other.rule)
        if c != 0:
            return c < 0
        return self.value < other.value

    def __str__(self) -> str:
        return f"{self.rule.name} {self.value}"
