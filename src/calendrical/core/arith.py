from __future__ import annotations

from .errors import CalendricalOverflowError

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


def check_int64(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected an int, got {type(value).__name__}")
    if value < INT64_MIN or value > INT64_MAX:
        raise CalendricalOverflowError(f"Value {value} exceeds the 64-bit range")
    return value


def is_int32(value: int) -> bool:
    return INT32_MIN <= value <= INT32_MAX


def safe_add(a: int, b: int) -> int:
    return check_int64(a + b)


def safe_multiply(a: int, b: int) -> int:
    return check_int64(a * b)
