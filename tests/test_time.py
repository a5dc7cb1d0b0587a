# Tests for src/geomag/utils/time.py

from datetime import date, datetime, timedelta, timezone

import pytest

from geomag.utils.time import (
    datetime_to_decimal_year,
    days_in_year,
    decimal_year_to_datetime,
    to_utc,
)


@pytest.mark.parametrize(
        "year,expected",

        [
            (1995.0, datetime(1995, 1, 1, tzinfo=timezone.utc)),
            (1996 - 1.0 / 365, datetime(1995, 12, 31, tzinfo=timezone.utc)),
            (1997 - 1.0 / 366, datetime(1996, 12, 31, tzinfo=timezone.utc)),
            (2004.0, datetime(2004, 1, 1, tzinfo=timezone.utc)),
            (2017.5, datetime(2017, 7, 2, 12, tzinfo=timezone.utc)),
        ]
)
def test_decimal_year_to_datetime(year, expected):
    assert decimal_year_to_datetime(year) == expected


@pytest.mark.parametrize(
        "year",

        [1995.0, 1996 - 1.0 / 365, 1997 - 1.0 / 366, 2004.0, 2017.5]
)
def test_decimal_year_round_trip(year):
    assert datetime_to_decimal_year(decimal_year_to_datetime(year)) == pytest.approx(year, abs=1e-10)


def test_result_is_utc():
    assert decimal_year_to_datetime(2020.25).tzinfo == timezone.utc


def test_naive_datetimes_are_utc():
    naive = datetime(2017, 7, 2, 12)
    assert datetime_to_decimal_year(naive) == pytest.approx(2017.5)


def test_aware_datetimes_are_converted_to_utc():
    plus_two = timezone(timedelta(hours=2))
    assert datetime_to_decimal_year(datetime(2017, 7, 2, 14, tzinfo=plus_two)) == pytest.approx(2017.5)


def test_dates_are_midnight_utc():
    assert datetime_to_decimal_year(date(2004, 1, 1)) == 2004.0
    assert to_utc(date(2016, 2, 29)) == datetime(2016, 2, 29, tzinfo=timezone.utc)


def test_numbers_pass_through():
    assert datetime_to_decimal_year(2004) == 2004.0
    assert isinstance(datetime_to_decimal_year(2004), float)
    assert datetime_to_decimal_year(2017.123) == 2017.123


@pytest.mark.parametrize("year,days", [(1900, 365), (2000, 366), (2016, 366), (2017, 365)])
def test_days_in_year(year, days):
    assert days_in_year(year) == days
