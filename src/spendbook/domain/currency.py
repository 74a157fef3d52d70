"""Currency formatting table.

The table is the single source of truth for which currency codes the
application accepts; ``SUPPORTED_CURRENCIES`` is derived from it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrencyFormat:
    """Display rules for one currency.

    Attributes:
        code: Lowercase ISO-like currency code
        symbol: Symbol printed next to the amount
        comma_decimal: Use ',' as decimal mark and '.' for grouping
        decimals: Print two decimal places
        space: Separate symbol and amount with a space
        symbol_right: Print the symbol after the amount
    """

    code: str
    symbol: str
    comma_decimal: bool = False
    decimals: bool = True
    space: bool = False
    symbol_right: bool = False


CURRENCY_FORMATS: tuple[CurrencyFormat, ...] = (
    CurrencyFormat("usd", "$"),
    CurrencyFormat("eur", "€", comma_decimal=True),
    CurrencyFormat("gbp", "£"),
    CurrencyFormat("jpy", "¥", decimals=False),
    CurrencyFormat("cny", "¥"),
    CurrencyFormat("krw", "₩", decimals=False),
    CurrencyFormat("inr", "₹"),
    CurrencyFormat("rub", "₽", comma_decimal=True),
    CurrencyFormat("brl", "R$", comma_decimal=True),
    CurrencyFormat("zar", "R", space=True, symbol_right=True),
    CurrencyFormat("aed", "AED", space=True, symbol_right=True),
    CurrencyFormat("aud", "A$"),
    CurrencyFormat("cad", "C$"),
    CurrencyFormat("chf", "Fr", space=True, symbol_right=True),
    CurrencyFormat("hkd", "HK$"),
    CurrencyFormat("bdt", "৳"),
    CurrencyFormat("sgd", "S$"),
    CurrencyFormat("thb", "฿"),
    CurrencyFormat("try", "₺", comma_decimal=True),
    CurrencyFormat("mxn", "Mex$"),
    CurrencyFormat("php", "₱"),
    CurrencyFormat("pln", "zł", comma_decimal=True, space=True, symbol_right=True),
    CurrencyFormat("sek", "kr", space=True, symbol_right=True),
    CurrencyFormat("nzd", "NZ$"),
    CurrencyFormat("dkk", "kr.", comma_decimal=True, space=True, symbol_right=True),
    CurrencyFormat("idr", "Rp", space=True, symbol_right=True),
    CurrencyFormat("ils", "₪"),
    CurrencyFormat("vnd", "₫", comma_decimal=True, decimals=False, space=True, symbol_right=True),
    CurrencyFormat("myr", "RM"),
    CurrencyFormat("mad", "DH", space=True, symbol_right=True),
)

FALLBACK_FORMAT = CurrencyFormat("usd", "$")

SUPPORTED_CURRENCIES: frozenset[str] = frozenset(fmt.code for fmt in CURRENCY_FORMATS)

_FORMATS_BY_CODE = {fmt.code: fmt for fmt in CURRENCY_FORMATS}


def get_currency_format(code: str) -> CurrencyFormat:
    """Return display rules for a currency code, or the USD-style fallback."""
    return _FORMATS_BY_CODE.get(code.lower(), FALLBACK_FORMAT)


def format_amount(amount: float, currency: str) -> str:
    """Format the absolute value of an amount for display.

    Examples:
        >>> format_amount(-1234.5, "usd")
        '$1,234.50'
        >>> format_amount(1234.5, "eur")
        '€1.234,50'
        >>> format_amount(1234.5, "pln")
        '1.234,50 zł'
    """
    fmt = get_currency_format(currency)
    value = abs(amount)

    if fmt.decimals:
        number = f"{value:,.2f}"
    else:
        number = f"{value:,.0f}"
    if fmt.comma_decimal:
        # Swap separators: 1,234.56 -> 1.234,56
        number = number.replace(",", "_").replace(".", ",").replace("_", ".")

    sep = " " if fmt.space else ""
    if fmt.symbol_right:
        return f"{number}{sep}{fmt.symbol}"
    return f"{fmt.symbol}{sep}{number}"
