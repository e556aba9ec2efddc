"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from duoledger.utils.date_parser import parse_date, parse_import_date, get_date_range


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2025-01-15") == date(2025, 1, 15)


def test_parse_slash_date_is_day_first():
    """Slash dates are read as DD/MM/YYYY."""
    assert parse_date("02/01/2025") == date(2025, 1, 2)


def test_parse_today():
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """'last month' is the first day of the previous month."""
    expected = (date.today() - relativedelta(months=1)).replace(day=1)
    assert parse_date("last month") == expected


def test_parse_this_year():
    assert parse_date("This Year") == date.today().replace(month=1, day=1)


def test_parse_invalid_date():
    with pytest.raises(ValueError):
        parse_date("not a date")


class TestImportDate:
    """Import dates accept only two explicit formats."""

    def test_iso(self):
        assert parse_import_date("2025-01-02") == date(2025, 1, 2)

    def test_day_month_year(self):
        assert parse_import_date("02/01/2025") == date(2025, 1, 2)

    def test_relative_rejected(self):
        with pytest.raises(ValueError) as excinfo:
            parse_import_date("today")
        assert "use YYYY-MM-DD or DD/MM/YYYY" in str(excinfo.value)

    def test_impossible_date(self):
        with pytest.raises(ValueError) as excinfo:
            parse_import_date("2025-02-30")
        assert "could not be parsed" in str(excinfo.value)


def test_get_date_range_this_month():
    start, end = get_date_range("this-month")
    assert start == date.today().replace(day=1)
    assert end == date.today()


def test_get_date_range_last_year():
    start, end = get_date_range("last-year")
    assert start == date(date.today().year - 1, 1, 1)
    assert end == date(date.today().year - 1, 12, 31)


def test_get_date_range_unknown():
    with pytest.raises(ValueError):
        get_date_range("next-decade")
