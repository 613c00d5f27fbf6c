"""Formatting utilities for currency display."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from .config import get_currency_code
from .settings import get_currency_config


def currencies() -> List[Dict[str, str]]:
    """Return the supported currency table (code, symbol, name)."""
    return list(get_currency_config()['currencies'])


def get_currency(code: Optional[str] = None) -> Dict[str, str]:
    """Look up a currency by ISO code.

    Args:
        code: ISO 4217 code; defaults to ``FINTRACK_CURRENCY`` (PHP)

    Raises:
        ValueError: If the code is not in the supported table

    Example:
        >>> get_currency('PHP')['symbol']
        '₱'
    """
    wanted = (code or get_currency_code()).upper()
    for currency in currencies():
        if currency['code'] == wanted:
            return dict(currency)
    raise ValueError(f"Unsupported currency '{wanted}'")


def format_currency(
    amount: Union[float, int],
    currency: Optional[str] = None,
    include_symbol: bool = True,
) -> str:
    """Format an amount with two decimals and thousands separators.

    Example:
        >>> format_currency(1234.5)
        '₱1,234.50'
        >>> format_currency(-20, currency='USD')
        '-$20.00'
        >>> format_currency(1234.56, include_symbol=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    sign = '-' if amount < 0 else ''
    if not include_symbol:
        return f"{sign}{formatted}"
    symbol = get_currency(currency)['symbol']
    return f"{sign}{symbol}{formatted}"
