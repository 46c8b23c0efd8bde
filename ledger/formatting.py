"""Display helpers. Currency is a label only; nothing here converts."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "INR": "₹"}

def round_half_up(value: float) -> int:
    # matches Number.prototype.toFixed(0) rather than Python's banker's rounding
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: float, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} " if currency else "$")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: str) -> str:
    """'2026-10-19' -> 'Oct 19, 2026'."""
    try:
        d = date.fromisoformat(value)
    except (TypeError, ValueError):
        return value
    return f"{d:%b} {d.day}, {d.year}"


def format_month(key: str) -> str:
    """'2026-10' -> 'October 2026'."""
    try:
        year, month = (int(part) for part in key.split("-")[:2])
        return date(year, month, 1).strftime("%B %Y")
    except (ValueError, TypeError):
        return key
