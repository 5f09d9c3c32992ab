# tests/test_field.py

from datetime import date

import pytest

from calendrical.core.arith import INT64_MAX, INT64_MIN
from calendrical.core.errors import CalendricalOverflowError, InvalidFieldValueError
from calendrical.rules import iso
from calendrical.rules.field import Field
from calendrical.values import MonthOfYear

from custom_rules import BIG_CLOCK_HOUR_OF_DAY, REVERSED_HOUR_OF_DAY

NOD_4H = (4 * 3600 + 74) * 1_000_000_000 + 123
NOD_3H = (3 * 3600 + 74) * 1_000_000_000 + 123


@pytest.mark.parametrize("source, target, expected", [
    (Field.of(iso.MONTH_OF_YEAR, 6), iso.QUARTER_OF_YEAR, 2),
    (Field.of(iso.MONTH_OF_YEAR, 6), iso.MONTH_OF_QUARTER, 3),
    (Field.of(iso.ZERO_EPOCH_MONTH, 2012 * 12 + 3), iso.MONTH_OF_YEAR, 4),
    (Field.of(iso.ZERO_EPOCH_MONTH, 2012 * 12 + 3), iso.YEAR, 2012),
    (Field.of(iso.HOUR_OF_DAY, 14), iso.HOUR_OF_AMPM, 2),
    (Field.of(iso.SECOND_OF_DAY, 15 * 3600 + 74), iso.HOUR_OF_DAY, 15),
    (Field.of(iso.SECOND_OF_DAY, 25 * 3600 + 74), iso.HOUR_OF_DAY, 25),
    (Field.of(iso.SECOND_OF_DAY, 3 * 3600 + 74), iso.MINUTE_OF_HOUR, 1),
    (Field.of(iso.SECOND_OF_DAY, 3 * 3600 + 74), iso.SECOND_OF_MINUTE, 14),
    (Field.of(iso.NANO_OF_DAY, NOD_3H), iso.NANO_OF_SECOND, 123),
    (Field.of(iso.NANO_OF_DAY, NOD_3H), iso.SECOND_OF_MINUTE, 14),
    (Field.of(iso.NANO_OF_DAY, 27 * 3600 * 1_000_000_000), iso.HOUR_OF_DAY, 27),
    (Field.of(iso.CLOCK_HOUR_OF_DAY, 24), iso.HOUR_OF_DAY, 0),
    (Field.of(iso.CLOCK_HOUR_OF_DAY, 25), iso.HOUR_OF_DAY, 25),
    (Field.of(iso.HOUR_OF_DAY, 0), iso.CLOCK_HOUR_OF_DAY, 24),
    (Field.of(iso.CLOCK_HOUR_OF_DAY, 23), iso.HOUR_OF_AMPM, 11),
    (Field.of(iso.DAY_OF_MONTH, 30), iso.ALIGNED_WEEK_OF_MONTH, 5),
    (Field.of(iso.DAY_OF_YEAR, 181), iso.ALIGNED_WEEK_OF_YEAR, 26),
    (Field.of(BIG_CLOCK_HOUR_OF_DAY, 1500), iso.HOUR_OF_DAY, 15),
    (Field.of(REVERSED_HOUR_OF_DAY, 7), iso.HOUR_OF_DAY, 17),
    (Field.of(REVERSED_HOUR_OF_DAY, -1), iso.HOUR_OF_DAY, 25),
    (Field.of(REVERSED_HOUR_OF_DAY, 25), iso.HOUR_OF_DAY, -1),
    (Field.of(REVERSED_HOUR_OF_DAY, 18), iso.CLOCK_HOUR_OF_DAY, 6),
    (Field.of(REVERSED_HOUR_OF_DAY, 3), iso.CLOCK_HOUR_OF_AMPM, 9),
    (Field.of(REVERSED_HOUR_OF_DAY, 4), BIG_CLOCK_HOUR_OF_DAY, 2000),
    (Field.of(BIG_CLOCK_HOUR_OF_DAY, 1900), REVERSED_HOUR_OF_DAY, 5),
    (Field.of(iso.NANO_OF_DAY, NOD_4H), BIG_CLOCK_HOUR_OF_DAY, 400),
    (Field.of(iso.NANO_OF_DAY, NOD_4H), REVERSED_HOUR_OF_DAY, 20),
])
def test_derive(source, target, expected):
    assert source.derive(target) == Field.of(target, expected)


@pytest.mark.parametrize("source, target", [
    (Field.of(iso.YEAR, 2008), iso.MONTH_OF_YEAR),
    (Field.of(iso.HOUR_OF_AMPM, 6), iso.HOUR_OF_DAY),
    (Field.of(iso.MONTH_OF_YEAR, 6), iso.YEAR),
    (Field.of(iso.DAY_OF_MONTH, 6), iso.DAY_OF_WEEK),
    (Field.of(iso.DAY_OF_YEAR, 40), iso.MONTH_OF_YEAR),
])
def test_derive_unrelated_gives_none(source, target):
    assert source.derive(target) is None


def test_derive_same_rule_is_identity():
    f = Field.of(iso.YEAR, 2008)
    assert f.derive(iso.YEAR) is f


def test_derive_round_trip_through_base_rule():
    reversed7 = Field.of(REVERSED_HOUR_OF_DAY, 7)
    hod = reversed7.derive(iso.HOUR_OF_DAY)
    assert hod == Field.of(iso.HOUR_OF_DAY, 17)
    assert hod.derive(REVERSED_HOUR_OF_DAY) == reversed7

    big = Field.of(BIG_CLOCK_HOUR_OF_DAY, 1500)
    assert big.derive(iso.HOUR_OF_DAY).derive(BIG_CLOCK_HOUR_OF_DAY) == big


# ------------------------------------------------------------
# get / matches
# ------------------------------------------------------------

def test_get():
    f = Field.of(iso.HOUR_OF_DAY, 18)
    assert f.get(iso.HOUR_OF_DAY) is f
    assert f.get(iso.HOUR_OF_AMPM) == Field.of(iso.HOUR_OF_AMPM, 6)
    assert f.get(iso.MONTH_OF_YEAR) is None


def test_get_value_type():
    assert Field.of(iso.MONTH_OF_YEAR, 9).get(MonthOfYear) is MonthOfYear.SEPTEMBER


def test_get_value_type_of_invalid_field_is_none():
    assert Field.of(iso.MONTH_OF_YEAR, 13).get(MonthOfYear) is None


@pytest.mark.parametrize("f, expected", [
    (Field.of(iso.YEAR, 2008), True),
    (Field.of(iso.MONTH_OF_YEAR, 6), True),
    (Field.of(iso.MONTH_OF_YEAR, -1), False),
    (Field.of(iso.DAY_OF_MONTH, 30), True),
    (Field.of(iso.DAY_OF_WEEK, 1), True),
    (Field.of(iso.HOUR_OF_DAY, 2), False),
])
def test_matches(f, expected):
    assert f.matches(date(2008, 6, 30)) is expected


def test_matches_field():
    assert Field.of(iso.HOUR_OF_AMPM, 6).matches(Field.of(iso.HOUR_OF_DAY, 18))
    assert not Field.of(iso.HOUR_OF_AMPM, 5).matches(Field.of(iso.HOUR_OF_DAY, 18))


# ------------------------------------------------------------
# validity
# ------------------------------------------------------------

def test_lenient_values_are_allowed():
    f = Field.of(iso.HOUR_OF_DAY, 25)
    assert f.value == 25
    assert not f.is_valid_value()


def test_get_valid_value():
    assert Field.of(iso.MONTH_OF_YEAR, 12).get_valid_value() == 12
    with pytest.raises(InvalidFieldValueError, match="MonthOfYear") as info:
        Field.of(iso.MONTH_OF_YEAR, 13).get_valid_value()
    assert info.value.rule is iso.MONTH_OF_YEAR
    assert info.value.value == 13


def test_get_valid_int_value():
    assert Field.of(iso.DAY_OF_WEEK, 3).get_valid_int_value() == 3
    assert not Field.of(iso.EPOCH_SECOND, 0).is_valid_int_value()
    with pytest.raises(InvalidFieldValueError):
        Field.of(iso.EPOCH_SECOND, 0).get_valid_int_value()


def test_value_must_fit_64_bits():
    with pytest.raises(CalendricalOverflowError):
        Field.of(iso.EPOCH_SECOND, INT64_MAX + 1)
    with pytest.raises(TypeError):
        Field.of(iso.YEAR, 2008.0)


# ------------------------------------------------------------
# equality, hash, order
# ------------------------------------------------------------

@pytest.mark.parametrize("rule", [iso.YEAR, iso.MONTH_OF_YEAR, iso.EPOCH_SECOND, REVERSED_HOUR_OF_DAY])
@pytest.mark.parametrize("value", [INT64_MIN, -1, 0, 1, 12, INT64_MAX])
def test_equal_fields_hash_alike(rule, value):
    a, b = Field.of(rule, value), Field.of(rule, value)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Field.of(rule, value - 1 if value > INT64_MIN else value + 1)


def test_fields_of_different_rules_differ():
    assert Field.of(iso.YEAR, 2008) != Field.of(iso.WEEK_BASED_YEAR, 2008)
    assert Field.of(iso.YEAR, 2008) != "Year 2008"


def test_ordering():
    dom7 = Field.of(iso.DAY_OF_MONTH, 7)
    moy6 = Field.of(iso.MONTH_OF_YEAR, 6)
    moy8 = Field.of(iso.MONTH_OF_YEAR, 8)
    assert dom7 < moy6 < moy8
    assert sorted([moy8, dom7, moy6]) == [dom7, moy6, moy8]
    assert moy8 >= moy6


def test_with_value_and_rule():
    f = Field.of(iso.YEAR, 2008)
    assert f.with_value(2008) is f
    assert f.with_value(2009) == Field.of(iso.YEAR, 2009)
    assert f.with_rule(iso.WEEK_BASED_YEAR) == Field.of(iso.WEEK_BASED_YEAR, 2008)


def test_str():
    assert str(Field.of(iso.HOUR_OF_DAY, 18)) == "HourOfDay 18"
    assert str(Field.of(REVERSED_HOUR_OF_DAY, 7)) == "ReversedHourOfDay 7"
