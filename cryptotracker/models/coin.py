"""
Market coin record.

Built from one row of the CoinGecko ``/coins/markets`` response.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple


def _to_float(value: Any) -> Optional[float]:
    """Coerce an API number to float, keeping None for missing values."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class Coin:
    """
    A tradable cryptocurrency with its market attributes.

    Coins are immutable; holdings are attached with ``update_holdings``,
    which returns a new instance.
    """
    id: str
    symbol: str
    name: str
    current_price: float = 0.0
    market_cap_rank: Optional[int] = None
    image: Optional[str] = None
    market_cap: Optional[float] = None
    fully_diluted_valuation: Optional[float] = None
    total_volume: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    price_change_24h: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    market_cap_change_24h: Optional[float] = None
    market_cap_change_percentage_24h: Optional[float] = None
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None
    max_supply: Optional[float] = None
    ath: Optional[float] = None
    ath_change_percentage: Optional[float] = None
    ath_date: Optional[str] = None
    atl: Optional[float] = None
    atl_change_percentage: Optional[float] = None
    atl_date: Optional[str] = None
    last_updated: Optional[str] = None
    sparkline_in_7d: Tuple[float, ...] = ()
    price_change_percentage_24h_in_currency: Optional[float] = None
    current_holdings: Optional[float] = None

    @property
    def rank(self) -> int:
        """Market cap rank, 0 when CoinGecko reports none."""
        return int(self.market_cap_rank or 0)

    @property
    def current_holdings_value(self) -> float:
        return (self.current_holdings or 0.0) * self.current_price

    def update_holdings(self, amount: float) -> "Coin":
        """Return a copy of this coin holding ``amount`` units."""
        return replace(self, current_holdings=amount)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Coin":
        """
        Build a coin from a ``/coins/markets`` row.

        Args:
            payload: Decoded JSON object for a single coin

        Returns:
            Coin instance

        Raises:
            KeyError: If id, symbol or name is missing
        """
        sparkline = payload.get('sparkline_in_7d') or {}
        rank = payload.get('market_cap_rank')

        return cls(
            id=payload['id'],
            symbol=payload['symbol'],
            name=payload['name'],
            current_price=_to_float(payload.get('current_price')) or 0.0,
            market_cap_rank=int(rank) if rank is not None else None,
            image=payload.get('image'),
            market_cap=_to_float(payload.get('market_cap')),
            fully_diluted_valuation=_to_float(payload.get('fully_diluted_valuation')),
            total_volume=_to_float(payload.get('total_volume')),
            high_24h=_to_float(payload.get('high_24h')),
            low_24h=_to_float(payload.get('low_24h')),
            price_change_24h=_to_float(payload.get('price_change_24h')),
            price_change_percentage_24h=_to_float(payload.get('price_change_percentage_24h')),
            market_cap_change_24h=_to_float(payload.get('market_cap_change_24h')),
            market_cap_change_percentage_24h=_to_float(
                payload.get('market_cap_change_percentage_24h')
            ),
            circulating_supply=_to_float(payload.get('circulating_supply')),
            total_supply=_to_float(payload.get('total_supply')),
            max_supply=_to_float(payload.get('max_supply')),
            ath=_to_float(payload.get('ath')),
            ath_change_percentage=_to_float(payload.get('ath_change_percentage')),
            ath_date=payload.get('ath_date'),
            atl=_to_float(payload.get('atl')),
            atl_change_percentage=_to_float(payload.get('atl_change_percentage')),
            atl_date=payload.get('atl_date'),
            last_updated=payload.get('last_updated'),
            sparkline_in_7d=tuple(float(p) for p in sparkline.get('price', []) if p is not None),
            price_change_percentage_24h_in_currency=_to_float(
                payload.get('price_change_percentage_24h_in_currency')
            ),
            current_holdings=_to_float(payload.get('current_holdings'))
        )
