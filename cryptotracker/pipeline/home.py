"""
Home screen state.

Wires three reactive pipelines:

1. search text + coin list + sort option -> filtered / sorted coins
2. coins + saved portfolio entries -> portfolio coins
3. global market data + portfolio coins -> summary statistics
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from ..config import Config
from ..data import (
    CoinDataService,
    CoinGeckoClient,
    MarketDataService,
    PortfolioDataService,
    PortfolioStore
)
from ..evaluation import portfolio_percentage_change, portfolio_value
from ..formatting import as_currency_with_2_decimals
from ..models import Coin, MarketData, PortfolioEntry, Statistic
from ..reactive import Publisher, Scheduler, SubscriptionSet, combine_latest

logger = logging.getLogger(__name__)


class SortOption(Enum):
    RANK = "rank"
    RANK_REVERSED = "rank_reversed"
    HOLDINGS = "holdings"
    HOLDINGS_REVERSED = "holdings_reversed"
    PRICE = "price"
    PRICE_REVERSED = "price_reversed"


def filter_coins(text: str, coins: List[Coin]) -> List[Coin]:
    """
    Keep coins whose name, symbol or id contains ``text``.

    Matching is case-insensitive; empty text keeps every coin.
    """
    if not text:
        return list(coins)

    lowered = text.lower()
    return [
        coin for coin in coins
        if lowered in coin.name.lower()
        or lowered in coin.symbol.lower()
        or lowered in coin.id.lower()
    ]


def sort_coins(sort: SortOption, coins: List[Coin]) -> List[Coin]:
    """
    Order the market list.

    Holdings options order the market list by rank; holdings ordering
    applies to the portfolio only. Ties keep their input order.
    """
    if sort in (SortOption.RANK, SortOption.HOLDINGS):
        return sorted(coins, key=lambda c: c.rank)
    if sort in (SortOption.RANK_REVERSED, SortOption.HOLDINGS_REVERSED):
        return sorted(coins, key=lambda c: c.rank, reverse=True)
    if sort == SortOption.PRICE:
        return sorted(coins, key=lambda c: c.current_price, reverse=True)
    if sort == SortOption.PRICE_REVERSED:
        return sorted(coins, key=lambda c: c.current_price)
    raise ValueError(f"Unknown sort option: {sort}")


def filter_and_sort_coins(text: str, coins: List[Coin], sort: SortOption) -> List[Coin]:
    return sort_coins(sort, filter_coins(text, coins))


def sort_portfolio_coins(sort: SortOption, coins: List[Coin]) -> List[Coin]:
    """Order portfolio coins by holdings value for the holdings options."""
    if sort == SortOption.HOLDINGS:
        return sorted(coins, key=lambda c: c.current_holdings_value, reverse=True)
    if sort == SortOption.HOLDINGS_REVERSED:
        return sorted(coins, key=lambda c: c.current_holdings_value)
    return list(coins)


def map_all_coins_to_portfolio_coins(
    all_coins: List[Coin],
    entries: List[PortfolioEntry]
) -> List[Coin]:
    """Coins that have a portfolio entry, with their holdings attached."""
    amounts: Dict[str, float] = {entry.coin_id: entry.amount for entry in entries}
    return [
        coin.update_holdings(amounts[coin.id])
        for coin in all_coins
        if coin.id in amounts
    ]


def map_global_market_data(
    market_data: Optional[MarketData],
    portfolio_coins: List[Coin]
) -> List[Statistic]:
    """
    Build the four home screen statistics.

    Returns an empty list until market data is available.
    """
    if market_data is None:
        return []

    value = portfolio_value(portfolio_coins)
    change = portfolio_percentage_change(portfolio_coins)

    return [
        Statistic(
            title="Market Cap",
            value=market_data.market_cap,
            percentage_change=market_data.market_cap_change_percentage_24h_usd
        ),
        Statistic(title="24h Volume", value=market_data.volume),
        Statistic(title="BTC Dominance", value=market_data.btc_dominance),
        Statistic(
            title="Portfolio Value",
            value=as_currency_with_2_decimals(value),
            percentage_change=change
        )
    ]


class HomeViewModel:
    """
    Aggregated home screen state.

    Attributes are Publishers; assign ``search_text.value`` or
    ``sort_option.value`` to drive the pipelines.
    """

    def __init__(
        self,
        coin_service: CoinDataService,
        market_service: MarketDataService,
        portfolio_service: PortfolioDataService,
        debounce_seconds: float = 0.5,
        scheduler: Optional[Scheduler] = None,
        sort_option: SortOption = SortOption.HOLDINGS
    ):
        """
        Initialize the view model and subscribe to the services.

        Args:
            coin_service: Source of the coin list
            market_service: Source of global market data
            portfolio_service: Source of saved portfolio entries
            debounce_seconds: Quiet window applied to search/sort/coin changes
            scheduler: Scheduler for the debounce (default chosen by window)
            sort_option: Initial sort
        """
        self.coin_service = coin_service
        self.market_service = market_service
        self.portfolio_service = portfolio_service
        self.debounce_seconds = debounce_seconds
        self.scheduler = scheduler

        self.statistics = Publisher([])
        self.all_coins = Publisher([])
        self.portfolio_coins = Publisher([])
        self.search_text = Publisher("")
        self.is_loading = Publisher(False)
        self.sort_option = Publisher(sort_option)

        self.cancellables = SubscriptionSet()
        self.add_subscribers()

    @classmethod
    def from_config(
        cls,
        config: Config,
        client: Optional[CoinGeckoClient] = None,
        scheduler: Optional[Scheduler] = None
    ) -> "HomeViewModel":
        """Build the services described by ``config`` and wire a view model."""
        config.create_directories()
        client = client or CoinGeckoClient.from_config(config)

        return cls(
            coin_service=CoinDataService(client, query=config.market_query),
            market_service=MarketDataService(client),
            portfolio_service=PortfolioDataService(PortfolioStore(config.portfolio_path)),
            debounce_seconds=config.debounce_seconds,
            scheduler=scheduler,
            sort_option=SortOption(config.default_sort)
        )

    def add_subscribers(self) -> None:
        coins = (
            combine_latest(self.search_text, self.coin_service.all_coins, self.sort_option)
            .debounce(self.debounce_seconds, self.scheduler)
            .map(filter_and_sort_coins)
        )
        self.cancellables.add(coins.sink(self.all_coins.send))

        portfolio = (
            combine_latest(self.all_coins, self.portfolio_service.saved_entries)
            .map(map_all_coins_to_portfolio_coins)
        )
        self.cancellables.add(portfolio.sink(self._receive_portfolio_coins))

        statistics = (
            combine_latest(self.market_service.market_data, self.portfolio_coins)
            .map(map_global_market_data)
        )
        self.cancellables.add(statistics.sink(self._receive_statistics))

        self._pipelines = [coins, portfolio, statistics]

    def _receive_portfolio_coins(self, coins: List[Coin]) -> None:
        self.portfolio_coins.send(sort_portfolio_coins(self.sort_option.value, coins))

    def _receive_statistics(self, statistics: List[Statistic]) -> None:
        self.statistics.send(statistics)
        self.is_loading.send(False)

    def update_portfolio(self, coin: Coin, amount: float) -> None:
        self.portfolio_service.update_portfolio(coin, amount)

    def reload_data(self) -> None:
        """Refetch coins and market data. Failed fetches keep stale data."""
        logger.info("Reloading market data...")
        self.is_loading.send(True)
        self.coin_service.get_coins()
        self.market_service.get_data()
        # Fetches are synchronous; clear the flag even when both failed
        if self.is_loading.value:
            self.is_loading.send(False)

    def close(self) -> None:
        """Detach every pipeline from the services."""
        self.cancellables.cancel_all()
        for pipeline in self._pipelines:
            pipeline.detach()
        self._pipelines = []
