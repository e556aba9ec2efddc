"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EU_DATE = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2025-01-15", "15/01/2025", "January 15, 2025", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Slash dates are read day first, as they are written on the ledger sheets.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        if _ISO_DATE.match(date_str):
            return datetime.strptime(date_str, "%Y-%m-%d").date()
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_import_date(date_str: str) -> date:
    """Parse a date from an import row.

    Only ``YYYY-MM-DD`` and ``DD/MM/YYYY`` are accepted; relative or free-form
    dates are rejected so that a whole file is read the same way.

    Raises:
        ValueError: If the format is not accepted or the date does not exist
    """
    text = date_str.strip()
    if _ISO_DATE.match(text):
        fmt = "%Y-%m-%d"
    elif _EU_DATE.match(text):
        fmt = "%d/%m/%Y"
    else:
        raise ValueError(f'date "{text}" is invalid (use YYYY-MM-DD or DD/MM/YYYY)')

    try:
        return datetime.strptime(text, fmt).date()
    except ValueError:
        raise ValueError(f'date "{text}" could not be parsed')


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: Period string (this-month, this-year, last-month, last-year)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
        )
