"""Input parsing helpers for spendbook."""

from spendbook.utils.date_parser import as_utc, parse_date, parse_datetime, parse_month
from spendbook.utils.amount_parser import parse_amount

__all__ = ["as_utc", "parse_date", "parse_datetime", "parse_month", "parse_amount"]
