"""Formatting utilities for currency and text display."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from . import config


def _group_indian(digits: str) -> str:
    """Group an integer digit string as lakhs/crores, e.g. ``'1,00,000'``."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(
    amount: Union[float, int],
    symbol: Optional[str] = None,
    grouping: Optional[str] = None,
) -> str:
    """Format a currency amount with digit grouping and two decimals.

    Args:
        amount: The amount to format
        symbol: Currency symbol; defaults to ``config.CURRENCY_SYMBOL``.
            Pass an empty string for no symbol.
        grouping: ``'indian'`` or ``'western'``; defaults to
            ``config.CURRENCY_GROUPING``

    Returns:
        Formatted currency string; negative amounts put the sign before the symbol

    Example:
        >>> format_currency(100000, symbol="₹")
        '₹1,00,000.00'
        >>> format_currency(100000, symbol="$", grouping="western")
        '$100,000.00'
        >>> format_currency(-20, symbol="$")
        '-$20.00'
    """
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    grouping = config.CURRENCY_GROUPING if grouping is None else grouping
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    if grouping == "indian":
        grouped = _group_indian(whole)
    else:
        grouped = f"{int(whole):,}"
    return f"{sign}{symbol}{grouped}.{fraction}"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not treat them as LaTeX.

    Example:
        >>> escape_dollar_for_markdown("$1,234.56")
        '\\\\$1,234.56'
    """
    return text.replace("$", "\\$")


def format_date(moment: datetime) -> str:
    """Short display date, e.g. ``'Mar 05, 2024'``."""
    return moment.strftime("%b %d, %Y")


def category_label(category: str) -> str:
    """Icon plus capitalized category name, e.g. ``'🏠 Housing'``."""
    icon = config.CATEGORY_ICONS.get(category, "")
    name = category.capitalize()
    return f"{icon} {name}" if icon else name
