from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from .arith import is_int32
from .errors import IllegalRangeError, InvalidFieldValueError


@dataclass(frozen=True)
class ValueRange:
    """
    Valid values of a rule.

    The four bounds allow a variable range: day-of-month is 1/1 - 28/31,
    meaning the minimum is always 1 while the maximum is somewhere between
    28 and 31 depending on the month.
    """
    minimum: int
    largest_minimum: int
    smallest_maximum: int
    maximum: int

    def __post_init__(self) -> None:
        if not (self.minimum <= self.largest_minimum <= self.smallest_maximum <= self.maximum):
            raise IllegalRangeError(
                f"Range bounds must satisfy min <= largest min <= smallest max <= max, "
                f"got {self.minimum}, {self.largest_minimum}, {self.smallest_maximum}, {self.maximum}"
            )

    @staticmethod
    def of(*bounds: int) -> "ValueRange":
        """of(min, max), of(min, smallest_max, max) or of(min, largest_min, smallest_max, max)."""
        if len(bounds) == 2:
            lo, hi = bounds
            return ValueRange(lo, lo, hi, hi)
        if len(bounds) == 3:
            lo, smax, hi = bounds
            return ValueRange(lo, lo, smax, hi)
        if len(bounds) == 4:
            return ValueRange(*bounds)
        raise TypeError(f"ValueRange.of takes 2 to 4 bounds, got {len(bounds)}")

    def is_fixed(self) -> bool:
        return self.minimum == self.largest_minimum and self.smallest_maximum == self.maximum

    def is_int_value(self) -> bool:
        return is_int32(self.minimum) and is_int32(self.maximum)

    def is_valid_value(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum

    def is_valid_int_value(self, value: int) -> bool:
        return self.is_int_value() and self.is_valid_value(value)

    def check_valid_value(self, value: int, rule: Any = None) -> int:
        if not self.is_valid_value(value):
            raise InvalidFieldValueError(rule, value, self)
        return value

    def __str__(self) -> str:
        lo = str(self.minimum)
        if self.minimum != self.largest_minimum:
            lo += f"/{self.largest_minimum}"
        hi = str(self.smallest_maximum)
        if self.smallest_maximum != self.maximum:
            hi += f"/{self.maximum}"
        return f"{lo} - {hi}"
