"""
Data module for cryptocurrency data ingestion and portfolio storage.

This module provides:
- CoinGecko API client for fetching market data
- Market payload validation
- Services publishing coins, global market data and coin details
- Portfolio persistence
"""

from .ingestion import APIResponse, CoinGeckoClient
from .validator import MarketDataValidator, ValidationReport
from .services import CoinDataService, CoinDetailService, MarketDataService
from .portfolio import PortfolioDataService, PortfolioStore

__all__ = [
    "APIResponse",
    "CoinGeckoClient",
    "MarketDataValidator",
    "ValidationReport",
    "CoinDataService",
    "CoinDetailService",
    "MarketDataService",
    "PortfolioDataService",
    "PortfolioStore"
]
