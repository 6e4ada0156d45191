"""
Metrics calculation module for portfolio statistics.

Provides:
- Guarded percentage change
- Portfolio value and its value 24 hours ago
"""

import logging
from typing import Iterable, List, Optional

import numpy as np

from ..models import Coin

logger = logging.getLogger(__name__)


def percentage_change(
    current: Optional[float],
    previous: Optional[float]
) -> Optional[float]:
    """
    Calculate the percentage change from ``previous`` to ``current``.

    Args:
        current: Current value
        previous: Reference value

    Returns:
        (current - previous) / previous * 100, or None when the change
        is undefined (previous is zero, missing or not finite)
    """
    if current is None or previous is None:
        return None

    if not np.isfinite(previous) or not np.isfinite(current) or previous == 0:
        return None

    return float((current - previous) / previous * 100)


def previous_value(coin: Coin) -> float:
    """
    Estimate a coin's holdings value 24 hours ago.

    A coin that lost 100% of its price has no recoverable previous
    value and contributes 0.
    """
    current_value = coin.current_holdings_value
    change = (coin.price_change_percentage_24h or 0.0) / 100
    divisor = 1 + change

    if divisor == 0:
        logger.debug(f"{coin.id}: 24h change of -100%, previous value unknown")
        return 0.0

    return current_value / divisor


def portfolio_value(coins: Iterable[Coin]) -> float:
    """Sum of current holdings values."""
    values: List[float] = [coin.current_holdings_value for coin in coins]
    return float(np.sum(values)) if values else 0.0


def portfolio_previous_value(coins: Iterable[Coin]) -> float:
    """Sum of holdings values 24 hours ago."""
    values: List[float] = [previous_value(coin) for coin in coins]
    return float(np.sum(values)) if values else 0.0


def portfolio_percentage_change(coins: Iterable[Coin]) -> Optional[float]:
    """
    24h percentage change of the whole portfolio.

    Returns None for an empty portfolio or one whose previous value is 0.
    """
    coins = list(coins)
    return percentage_change(portfolio_value(coins), portfolio_previous_value(coins))
