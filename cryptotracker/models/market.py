"""
Global market data returned by the CoinGecko ``/global`` endpoint.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..formatting import as_percent_string, formatted_with_abbreviations


@dataclass(frozen=True)
class MarketData:
    """Aggregate market figures keyed by currency code."""
    total_market_cap: Dict[str, float] = field(default_factory=dict)
    total_volume: Dict[str, float] = field(default_factory=dict)
    market_cap_percentage: Dict[str, float] = field(default_factory=dict)
    market_cap_change_percentage_24h_usd: Optional[float] = None

    @property
    def market_cap(self) -> str:
        value = self.total_market_cap.get('usd')
        if value is None:
            return ""
        return "$" + formatted_with_abbreviations(value)

    @property
    def volume(self) -> str:
        value = self.total_volume.get('usd')
        if value is None:
            return ""
        return "$" + formatted_with_abbreviations(value)

    @property
    def btc_dominance(self) -> str:
        value = self.market_cap_percentage.get('btc')
        if value is None:
            return ""
        return as_percent_string(value)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "MarketData":
        """
        Build from the ``/global`` response.

        The endpoint wraps its figures in a top-level ``data`` object.

        Raises:
            KeyError: If the ``data`` envelope is missing
        """
        data = payload['data']
        change = data.get('market_cap_change_percentage_24h_usd')

        return cls(
            total_market_cap=dict(data.get('total_market_cap') or {}),
            total_volume=dict(data.get('total_volume') or {}),
            market_cap_percentage=dict(data.get('market_cap_percentage') or {}),
            market_cap_change_percentage_24h_usd=float(change) if change is not None else None
        )
