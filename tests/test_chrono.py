# tests/test_chrono.py

from datetime import date

import pytest

from calendrical.core import chrono


@pytest.mark.parametrize("d, epoch_day", [
    (date(1970, 1, 1), 0),
    (date(1970, 1, 2), 1),
    (date(1969, 12, 31), -1),
    (date(2011, 6, 30), 15155),
    (date(2000, 3, 1), 11017),
    (date(1, 1, 1), -719162),
    (date(9999, 12, 31), 2932896),
])
def test_epoch_day(d, epoch_day):
    assert chrono.to_epoch_day(d) == epoch_day
    assert chrono.from_epoch_day(epoch_day) == d


def test_epoch_day_outside_date_range():
    with pytest.raises(ValueError):
        chrono.from_epoch_day(2932897)


@pytest.mark.parametrize("year, month, length", [
    (2011, 2, 28), (2012, 2, 29), (1900, 2, 28), (2000, 2, 29), (2011, 6, 30), (2011, 12, 31),
])
def test_length_of_month(year, month, length):
    assert chrono.length_of_month(year, month) == length


@pytest.mark.parametrize("wby, weeks", [(2011, 52), (2015, 53), (2020, 53), (2021, 52)])
def test_weeks_in_week_based_year(wby, weeks):
    assert chrono.weeks_in_week_based_year(wby) == weeks


def test_week_dates():
    d = date(2011, 6, 30)
    assert chrono.week_based_year(d) == 2011
    assert chrono.week_of_week_based_year(d) == 26
    assert chrono.from_week_date(2011, 26, 4) == d
    # 2011-01-01 belongs to the last week of 2010
    assert chrono.week_based_year(date(2011, 1, 1)) == 2010
    assert chrono.from_week_date(2010, 52, 6) == date(2011, 1, 1)
    assert chrono.zero_epoch_month(d) == 2011 * 12 + 5
