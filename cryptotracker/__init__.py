"""
Crypto Tracker - Cryptocurrency market and portfolio tracker

This package provides:
- Fetching coin markets, global market data and coin details from CoinGecko
- A locally persisted portfolio of coin holdings
- Reactive pipelines that filter/sort coins and derive summary statistics

Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Crypto Tracker Team"

from .config import Config
from .pipeline import DetailViewModel, HomeViewModel, SortOption

__all__ = ["Config", "HomeViewModel", "DetailViewModel", "SortOption", "__version__"]
