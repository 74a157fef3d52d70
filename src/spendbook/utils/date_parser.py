"""Date parsing utilities."""

from datetime import date, datetime, time, timedelta, UTC
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_RELATIVE_DAYS = {"today": 0, "yesterday": -1, "tomorrow": 1}


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative forms: "today", "yesterday", "tomorrow", and "last/this/next"
    followed by "month" or "year" (first day of that period).

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    if date_str in _RELATIVE_DAYS:
        return today + timedelta(days=_RELATIVE_DAYS[date_str])

    shift, _, period = date_str.partition(" ")
    offsets = {"last": -1, "this": 0, "next": 1}
    if shift in offsets and period == "month":
        return today.replace(day=1) + relativedelta(months=offsets[shift])
    if shift in offsets and period == "year":
        return today.replace(month=1, day=1) + relativedelta(years=offsets[shift])

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(value: str) -> datetime:
    """Parse a timestamp or date string into an aware datetime.

    ISO 8601 timestamps keep their offset (naive ones are taken as UTC).
    Anything else goes through ``parse_date`` and lands on midnight UTC.

    Raises:
        ValueError: If the string cannot be parsed
    """
    value = value.strip()
    try:
        return as_utc(date_parser.isoparse(value))
    except ValueError:
        pass
    return datetime.combine(parse_date(value), time.min, tzinfo=UTC)


def parse_month(value: str) -> tuple[int, int]:
    """Parse "YYYY-MM" into a (year, month) tuple.

    Raises:
        ValueError: If the string is not a valid year-month
    """
    year_str, sep, month_str = value.strip().partition("-")
    if not sep or not year_str.isdigit() or not month_str.isdigit():
        raise ValueError(f"Could not parse month '{value}': expected YYYY-MM")
    year, month = int(year_str), int(month_str)
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{value}': month must be 1-12")
    return year, month
