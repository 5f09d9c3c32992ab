from __future__ import annotations
from typing import Any, Optional, Tuple


class CalendricalError(Exception):
    """Base error."""


class IllegalRangeError(CalendricalError, ValueError):
    """Raised when range bounds are not ordered min <= largest_min <= smallest_max <= max."""


class CalendricalOverflowError(CalendricalError, OverflowError):
    """Raised when a value or period leaves the signed 64-bit range."""


class InvalidFieldValueError(CalendricalError, ValueError):
    """Raised when a value lies outside the valid range of its rule."""

    def __init__(self, rule: Any, value: int, valid_range: Any = None, message: Optional[str] = None):
        if message is None:
            message = f"Rule {rule} does not accept the value {value}"
            if valid_range is not None:
                message += f": valid values are {valid_range}"
        super().__init__(message)
        self.rule = rule
        self.value = value
        self.range = valid_range


class CalendricalConflictError(CalendricalError):
    """Raised when two inputs disagree on the same calendrical value."""

    def __init__(self, first: Any, second: Any, rule: Any = None, message: Optional[str] = None):
        if message is None:
            what = f"rule {rule}" if rule is not None else "value"
            message = f"Conflicting {what}: {first} differs from {second}"
        super().__init__(message)
        self.rule = rule
        self.values: Tuple[Any, Any] = (first, second)


class UnsupportedRuleError(CalendricalError):
    """Raised by checked queries when no value can be derived."""

    def __init__(self, rule: Any, source: Any = None):
        msg = f"Rule {rule} cannot be derived"
        if source is not None:
            msg += f" from {source}"
        super().__init__(msg)
        self.rule = rule


class UnsupportedCalendricalError(CalendricalError, TypeError):
    """Raised when an object passed for merging contributes nothing known."""
