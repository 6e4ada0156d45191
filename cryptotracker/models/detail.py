"""Coin detail record from the CoinGecko ``/coins/{id}`` endpoint."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..formatting import remove_html


@dataclass(frozen=True)
class CoinDetail:
    id: str
    symbol: str
    name: str
    block_time_in_minutes: Optional[int] = None
    hashing_algorithm: Optional[str] = None
    description: Optional[str] = None
    homepage_url: Optional[str] = None
    subreddit_url: Optional[str] = None

    @property
    def readable_description(self) -> str:
        return remove_html(self.description)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CoinDetail":
        links = payload.get('links') or {}
        homepages = [url for url in links.get('homepage') or [] if url]
        block_time = payload.get('block_time_in_minutes')

        return cls(
            id=payload['id'],
            symbol=payload['symbol'],
            name=payload['name'],
            block_time_in_minutes=int(block_time) if block_time is not None else None,
            hashing_algorithm=payload.get('hashing_algorithm'),
            description=(payload.get('description') or {}).get('en'),
            homepage_url=homepages[0] if homepages else None,
            subreddit_url=links.get('subreddit_url') or None
        )
