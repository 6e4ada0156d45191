"""
Pipeline module with the reactive screen state.

This module provides:
- Home screen aggregation (filter, sort, portfolio, statistics)
- Coin detail statistics
"""

from .home import HomeViewModel, SortOption
from .detail import DetailViewModel

__all__ = ["HomeViewModel", "SortOption", "DetailViewModel"]
