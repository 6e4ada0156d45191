"""
Data services publishing remote CoinGecko state.

Each service owns a Publisher that downstream pipelines subscribe to.
A failed request or an undecodable payload is logged and leaves the
published value untouched, so consumers keep the last good data.
"""

import logging
from typing import Any, Callable, List, Optional

from ..config import MarketQueryConfig
from ..models import Coin, CoinDetail, MarketData
from ..reactive import Publisher, Subscription
from .ingestion import APIResponse, CoinGeckoClient
from .validator import MarketDataValidator

logger = logging.getLogger(__name__)


def download(
    request: Callable[[], APIResponse],
    decode: Callable[[Any], Any],
    label: str
) -> Publisher:
    """
    Run ``request`` and publish the decoded payload.

    Args:
        request: Zero-argument call returning an APIResponse
        decode: Converts the JSON payload into a model
        label: Name used in log messages

    Returns:
        Publisher holding the decoded value, or no value on failure
    """
    result = Publisher()
    response = request()

    if not response.success:
        logger.error(f"Failed to fetch {label}: {response.error}")
        return result

    try:
        decoded = decode(response.data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.error(f"Failed to decode {label}: {e}")
        return result

    result.send(decoded)
    return result


class CoinDataService:
    """Publishes the market-cap ordered list of coins."""

    def __init__(
        self,
        client: CoinGeckoClient,
        query: Optional[MarketQueryConfig] = None,
        validator: Optional[MarketDataValidator] = None,
        autoload: bool = True
    ):
        self.client = client
        self.query = query or MarketQueryConfig()
        self.validator = validator or MarketDataValidator()
        self.all_coins = Publisher([])
        self.coin_subscription: Optional[Subscription] = None

        if autoload:
            self.get_coins()

    def _decode(self, rows: Any) -> List[Coin]:
        report = self.validator.validate(rows)
        logger.debug(report.summary())
        if not report.critical_passed:
            raise ValueError(f"Invalid coin markets payload: {report.results[-1].message}")
        return [Coin.from_api(row) for row in report.records]

    def get_coins(self) -> None:
        """Fetch coin markets and publish them."""
        logger.info(f"Fetching {self.query.per_page} coins ({self.query.vs_currency})...")

        self.coin_subscription = download(
            lambda: self.client.get_coin_markets(
                vs_currency=self.query.vs_currency,
                per_page=self.query.per_page,
                page=self.query.page,
                sparkline=self.query.sparkline
            ),
            self._decode,
            "coin markets"
        ).first(self._publish)

    def _publish(self, coins: List[Coin]) -> None:
        logger.info(f"✓ Fetched {len(coins)} coins")
        self.all_coins.send(coins)


class MarketDataService:
    """Publishes global market figures."""

    def __init__(self, client: CoinGeckoClient, autoload: bool = True):
        self.client = client
        self.market_data = Publisher(None)
        self.market_data_subscription: Optional[Subscription] = None

        if autoload:
            self.get_data()

    def get_data(self) -> None:
        """Fetch global market data and publish it."""
        self.market_data_subscription = download(
            self.client.get_global,
            MarketData.from_api,
            "global market data"
        ).first(self.market_data.send)


class CoinDetailService:
    """
    Publishes the details of one coin.

    Details are requested once on construction; the request
    subscription is cancelled after the first successful response.
    """

    def __init__(self, coin: Coin, client: CoinGeckoClient):
        self.coin = coin
        self.client = client
        self.coin_details = Publisher(None)
        self.coin_detail_subscription: Optional[Subscription] = None
        self.get_coin_details()

    def get_coin_details(self) -> None:
        self.coin_detail_subscription = download(
            lambda: self.client.get_coin_detail(self.coin.id),
            CoinDetail.from_api,
            f"details for {self.coin.id}"
        ).first(self.coin_details.send)
