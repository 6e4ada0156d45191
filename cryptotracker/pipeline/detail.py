"""
Coin detail screen state.

Combines a market coin with its fetched details into overview and
additional statistics, the plain-text description and project links.
"""

import logging
from typing import List, Optional, Tuple

from ..data import CoinDetailService, CoinGeckoClient
from ..formatting import as_currency_with_6_decimals, formatted_with_abbreviations
from ..models import Coin, CoinDetail, Statistic
from ..reactive import Publisher, SubscriptionSet

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "n/a"


def _abbreviated_dollars(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return "$" + formatted_with_abbreviations(value)


def _currency(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return as_currency_with_6_decimals(value)


def create_overview_statistics(coin: Coin) -> List[Statistic]:
    return [
        Statistic(
            title="Current Price",
            value=as_currency_with_6_decimals(coin.current_price),
            percentage_change=coin.price_change_percentage_24h
        ),
        Statistic(
            title="Market Capitalization",
            value=_abbreviated_dollars(coin.market_cap),
            percentage_change=coin.market_cap_change_percentage_24h
        ),
        Statistic(title="Rank", value=str(coin.rank)),
        Statistic(title="Volume", value=_abbreviated_dollars(coin.total_volume))
    ]


def create_additional_statistics(
    coin: Coin,
    detail: Optional[CoinDetail]
) -> List[Statistic]:
    block_time = detail.block_time_in_minutes if detail else None
    hashing = detail.hashing_algorithm if detail else None

    return [
        Statistic(title="24h High", value=_currency(coin.high_24h)),
        Statistic(title="24h Low", value=_currency(coin.low_24h)),
        Statistic(
            title="24h Price Change",
            value=_currency(coin.price_change_24h),
            percentage_change=coin.price_change_percentage_24h
        ),
        Statistic(
            title="24h Market Cap Change",
            value=_abbreviated_dollars(coin.market_cap_change_24h),
            percentage_change=coin.market_cap_change_percentage_24h
        ),
        Statistic(title="Block Time", value=str(block_time) if block_time else NOT_AVAILABLE),
        Statistic(title="Hashing Algorithm", value=hashing or NOT_AVAILABLE)
    ]


def map_data_to_statistics(
    detail: Optional[CoinDetail],
    coin: Coin
) -> Tuple[List[Statistic], List[Statistic]]:
    """Return (overview, additional) statistics for a coin."""
    return create_overview_statistics(coin), create_additional_statistics(coin, detail)


class DetailViewModel:
    """State of the detail screen for one coin."""

    def __init__(self, coin: Coin, detail_service: CoinDetailService):
        self.coin = Publisher(coin)
        self.detail_service = detail_service

        self.overview_statistics = Publisher([])
        self.additional_statistics = Publisher([])
        self.coin_description: Publisher = Publisher(None)
        self.website_url: Publisher = Publisher(None)
        self.reddit_url: Publisher = Publisher(None)

        self.cancellables = SubscriptionSet()
        self.add_subscribers()

    @classmethod
    def for_coin(cls, coin: Coin, client: CoinGeckoClient) -> "DetailViewModel":
        return cls(coin, CoinDetailService(coin, client))

    def add_subscribers(self) -> None:
        self._statistics = (
            self.detail_service.coin_details
            .combine_latest(self.coin)
            .map(map_data_to_statistics)
        )
        self.cancellables.add(self._statistics.sink(self._receive_statistics))
        self.cancellables.add(
            self.detail_service.coin_details.sink(self._receive_details)
        )

    def _receive_statistics(self, statistics: Tuple[List[Statistic], List[Statistic]]) -> None:
        overview, additional = statistics
        self.overview_statistics.send(overview)
        self.additional_statistics.send(additional)

    def _receive_details(self, detail: Optional[CoinDetail]) -> None:
        if detail is None:
            return
        self.coin_description.send(detail.readable_description)
        self.website_url.send(detail.homepage_url)
        self.reddit_url.send(detail.subreddit_url)

    def close(self) -> None:
        self.cancellables.cancel_all()
        self._statistics.detach()
