"""
Display formatting helpers.

Converts raw numbers into the strings shown next to statistics:
currency amounts, percentages and abbreviated large values.
"""

import math
import re
from typing import Optional

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")

# (threshold, suffix) from largest to smallest
ABBREVIATIONS = [
    (1_000_000_000_000, "Tr"),
    (1_000_000_000, "Bn"),
    (1_000_000, "M"),
    (1_000, "K"),
]


def as_currency(value: float, min_decimals: int = 2, max_decimals: int = 2) -> str:
    """
    Format a number as a US dollar amount.

    Digits beyond ``min_decimals`` are kept only when non-zero, up to
    ``max_decimals``.

    Example:
        as_currency(1234.5) -> "$1,234.50"
        as_currency(0.1234567, 2, 6) -> "$0.123457"
    """
    if value is None or not math.isfinite(value):
        return "$0.00"

    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.{max_decimals}f}"

    if max_decimals > min_decimals:
        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0")
        if len(fraction) < min_decimals:
            fraction = fraction.ljust(min_decimals, "0")
        text = f"{whole}.{fraction}" if fraction else whole

    return f"{sign}${text}"


def as_currency_with_2_decimals(value: float) -> str:
    return as_currency(value, 2, 2)


def as_currency_with_6_decimals(value: float) -> str:
    return as_currency(value, 2, 6)


def as_number_string(value: float) -> str:
    """Format with exactly two decimals, e.g. 1.2345 -> "1.23"."""
    return f"{value:.2f}"


def as_percent_string(value: float) -> str:
    """Format as a percentage, e.g. 1.2345 -> "1.23%"."""
    return as_number_string(value) + "%"


def formatted_with_abbreviations(value: Optional[float]) -> str:
    """
    Abbreviate large numbers with a magnitude suffix.

    Example:
        12456 -> "12.46K"
        1234567 -> "1.23M"
        -1234567890 -> "-1.23Bn"
        123.456 -> "123.46"
    """
    if value is None:
        return ""
    if not math.isfinite(value):
        return str(value)

    sign = "-" if value < 0 else ""
    number = abs(value)

    scaled, unit = number, ""
    for threshold, suffix in reversed(ABBREVIATIONS):
        # Promote when the current unit would round up to 1000
        if number >= threshold or round(scaled, 2) >= 1000:
            scaled, unit = number / threshold, suffix

    return f"{sign}{as_number_string(scaled)}{unit}"


def remove_html(text: Optional[str]) -> str:
    """Strip every HTML tag from text."""
    if not text:
        return ""
    return HTML_TAG_PATTERN.sub("", text)
