"""Amount parsing utilities."""

import re

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹₩₽₺₱₪₫]")


def parse_amount(amount_str: str) -> float:
    """Parse an amount string into a float.

    Handles "123.45", "-123.45", "$1,234.56" and accounting-style
    negatives such as "(123.45)".

    Args:
        amount_str: Amount string

    Returns:
        Parsed amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]

    text = _CURRENCY_SYMBOLS.sub("", text).replace(",", "").strip()

    try:
        amount = float(text)
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    return -amount if negative else amount
