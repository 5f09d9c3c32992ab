# tests/test_range.py

import pytest

from calendrical.core.errors import IllegalRangeError, InvalidFieldValueError
from calendrical.core.range import ValueRange


def test_of_min_max():
    r = ValueRange.of(1, 12)
    assert (r.minimum, r.largest_minimum, r.smallest_maximum, r.maximum) == (1, 1, 12, 12)
    assert r.is_fixed()
    assert r.is_int_value()


def test_of_min_max_big():
    r = ValueRange.of(1, 123456789012345)
    assert r.is_fixed()
    assert not r.is_int_value()


def test_of_variable_maximum():
    r = ValueRange.of(1, 28, 31)
    assert (r.minimum, r.largest_minimum, r.smallest_maximum, r.maximum) == (1, 1, 28, 31)
    assert not r.is_fixed()
    assert r.is_int_value()


def test_of_four_bounds():
    r = ValueRange.of(1, 2, 28, 31)
    assert r.largest_minimum == 2
    assert not r.is_fixed()


@pytest.mark.parametrize("bounds", [
    (12, 1),
    (12, 1, 2),
    (1, 31, 28),
    (12, 13, 1, 2),
    (1, 2, 31, 28),
    (2, 1, 31, 28),
])
def test_illegal_bounds(bounds):
    with pytest.raises(IllegalRangeError):
        ValueRange.of(*bounds)


def test_illegal_range_is_a_value_error():
    with pytest.raises(ValueError):
        ValueRange.of(3, 2)


def test_wrong_number_of_bounds():
    with pytest.raises(TypeError):
        ValueRange.of(1)


@pytest.mark.parametrize("value, valid", [(0, False), (1, True), (2, True), (30, True), (31, True), (32, False)])
def test_is_valid_value(value, valid):
    assert ValueRange.of(1, 28, 31).is_valid_value(value) is valid


def test_is_valid_int_value_needs_int_range():
    r = ValueRange.of(1, 28, 2**31)
    for v in (0, 1, 31, 32):
        assert not r.is_valid_int_value(v)
    assert ValueRange.of(1, 28, 31).is_valid_int_value(31)


def test_check_valid_value():
    r = ValueRange.of(1, 12)
    assert r.check_valid_value(12) == 12
    with pytest.raises(InvalidFieldValueError, match="13") as info:
        r.check_valid_value(13, "MonthOfYear")
    assert info.value.value == 13
    assert info.value.range == r


def test_equality_and_hash():
    a, b = ValueRange.of(1, 2, 3, 4), ValueRange.of(1, 2, 3, 4)
    assert a == b
    assert hash(a) == hash(b)
    for other in (ValueRange.of(0, 2, 3, 4), ValueRange.of(1, 3, 3, 4),
                  ValueRange.of(1, 2, 4, 4), ValueRange.of(1, 2, 3, 5)):
        assert a != other
    assert a != "Rubbish"


@pytest.mark.parametrize("bounds, text", [
    ((1, 1, 4, 4), "1 - 4"),
    ((1, 1, 3, 4), "1 - 3/4"),
    ((1, 2, 3, 4), "1/2 - 3/4"),
    ((1, 2, 4, 4), "1/2 - 4"),
])
def test_str(bounds, text):
    assert str(ValueRange.of(*bounds)) == text
