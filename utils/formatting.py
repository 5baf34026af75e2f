# utils/formatting.py
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

import config

_ARABIC_INDIC_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")
_CENT = Decimal("0.01")


def format_currency(amount, symbol: str = None) -> str:
    """
    Format an amount with two decimals and ',' as thousands separator.
    Example: Decimal("1234.5") -> "$1,234.50"
    """
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    value = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def to_arabic_digits(text: str) -> str:
    return str(text).translate(_ARABIC_INDIC_DIGITS)


def format_date(dt: datetime, language: str = "en") -> str:
    text = dt.strftime("%d/%m/%Y")
    return to_arabic_digits(text) if language == "ar" else text


def format_datetime(dt: datetime, language: str = "en") -> str:
    text = dt.strftime("%d/%m/%Y, %H:%M:%S")
    return to_arabic_digits(text) if language == "ar" else text
