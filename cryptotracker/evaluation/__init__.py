"""
Evaluation module for derived portfolio metrics.

This module provides:
- Guarded percentage change calculation
- Portfolio value aggregation
"""

from .metrics import (
    percentage_change,
    previous_value,
    portfolio_value,
    portfolio_previous_value,
    portfolio_percentage_change
)

__all__ = [
    "percentage_change",
    "previous_value",
    "portfolio_value",
    "portfolio_previous_value",
    "portfolio_percentage_change"
]
