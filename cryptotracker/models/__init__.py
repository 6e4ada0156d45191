"""
Models module with the plain records shared across the package.

This module provides:
- Coin market records
- Global market data
- Coin details
- Portfolio entries
- Display statistics
"""

from .coin import Coin
from .market import MarketData
from .detail import CoinDetail
from .portfolio import PortfolioEntry
from .statistic import Statistic

__all__ = [
    "Coin",
    "MarketData",
    "CoinDetail",
    "PortfolioEntry",
    "Statistic"
]
