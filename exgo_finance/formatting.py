"""Formatting utilities for currency display."""

from __future__ import annotations

from typing import Union

from .i18n import normalize_language

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'UAH': '₴',
    'PLN': 'zł',
    'JPY': '¥',
    'CAD': 'CA$',
    'CHF': 'CHF',
}

# Ukrainian grouping separator (narrow no-break space)
_UK_GROUP = '\u202f'


def currency_symbol(currency: str) -> str:
    """Symbol for an ISO 4217 code; unknown codes are shown as-is."""
    code = (currency or '').upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_amount(amount: Union[float, int], language: str = 'en') -> str:
    """Format a magnitude with two decimals and locale grouping.

    Example:
        >>> format_amount(1234.5)
        '1,234.50'
    """
    formatted = f"{abs(float(amount)):,.2f}"
    if normalize_language(language) == 'uk':
        formatted = formatted.replace(',', _UK_GROUP).replace('.', ',')
    return formatted


def format_currency(amount: Union[float, int], currency: str = 'USD', language: str = 'en') -> str:
    """Format a currency amount for display.

    English puts the symbol first (``-$1,234.50``); Ukrainian puts it
    last (``-1 234,50 ₴``).  Negative values keep their sign so an
    over-budget remaining amount is shown as such.
    """
    value = float(amount)
    sign = '-' if value < 0 and round(abs(value), 2) != 0 else ''
    body = format_amount(value, language)
    symbol = currency_symbol(currency)
    if normalize_language(language) == 'uk':
        return f"{sign}{body} {symbol}"
    return f"{sign}{symbol}{body}"
