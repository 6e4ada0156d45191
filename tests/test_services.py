"""
Unit Tests for Data Services

Tests cover:
- Publishing fetched coins and market data
- Stale data kept on network or decode failures
- One-shot coin detail request
"""

import logging

from cryptotracker.data import (
    APIResponse,
    CoinDataService,
    CoinDetailService,
    MarketDataService,
)
from cryptotracker.config import MarketQueryConfig
from cryptotracker.models import Coin

FAILED = APIResponse(success=False, error="HTTP 500", status_code=500)


class TestCoinDataService:

    def test_publishes_coins_on_construction(self, fake_client):
        service = CoinDataService(fake_client)

        coins = service.all_coins.value
        assert [c.id for c in coins] == ["bitcoin", "ethereum", "tether", "solana", "wrapped-bitcoin"]
        assert all(isinstance(c, Coin) for c in coins)

    def test_query_parameters(self, fake_client):
        CoinDataService(fake_client, query=MarketQueryConfig(vs_currency="eur", per_page=10, sparkline=False))

        fake_client.get_coin_markets.assert_called_once_with(
            vs_currency="eur", per_page=10, page=1, sparkline=False
        )

    def test_no_autoload(self, fake_client):
        service = CoinDataService(fake_client, autoload=False)

        assert service.all_coins.value == []
        fake_client.get_coin_markets.assert_not_called()

    def test_failure_keeps_stale_coins(self, fake_client):
        service = CoinDataService(fake_client)
        received = []
        service.all_coins.subscribe(received.append)

        fake_client.get_coin_markets.return_value = FAILED
        service.get_coins()

        assert len(service.all_coins.value) == 5
        assert len(received) == 1

    def test_undecodable_payload_is_ignored(self, fake_client):
        fake_client.get_coin_markets.return_value = APIResponse(success=True, data={"status": "error"})

        service = CoinDataService(fake_client)

        assert service.all_coins.value == []

    def test_invalid_rows_filtered(self, fake_client, market_rows):
        market_rows.append(dict(market_rows[0]))
        fake_client.get_coin_markets.return_value = APIResponse(success=True, data=market_rows)

        service = CoinDataService(fake_client)

        assert [c.id for c in service.all_coins.value].count("bitcoin") == 1

    def test_validation_summary_logged(self, fake_client, caplog):
        caplog.set_level(logging.DEBUG, logger="cryptotracker.data.services")

        CoinDataService(fake_client)

        assert "Kept: 5 rows" in caplog.text


class TestMarketDataService:

    def test_publishes_market_data(self, fake_client):
        service = MarketDataService(fake_client)

        assert service.market_data.value.market_cap == "$2.50Tr"

    def test_failure_leaves_none(self, fake_client):
        fake_client.get_global.return_value = FAILED

        service = MarketDataService(fake_client)

        assert service.market_data.value is None

    def test_missing_envelope(self, fake_client):
        fake_client.get_global.return_value = APIResponse(success=True, data={"total_market_cap": {}})

        service = MarketDataService(fake_client)

        assert service.market_data.value is None


class TestCoinDetailService:

    def test_fetches_once_and_cancels(self, fake_client, market_rows):
        coin = Coin.from_api(market_rows[0])

        service = CoinDetailService(coin, fake_client)

        assert service.coin_details.value.hashing_algorithm == "SHA-256"
        assert service.coin_detail_subscription.active is False
        fake_client.get_coin_detail.assert_called_once_with("bitcoin")

    def test_failure_publishes_nothing(self, fake_client, market_rows):
        fake_client.get_coin_detail.return_value = FAILED
        coin = Coin.from_api(market_rows[0])

        service = CoinDetailService(coin, fake_client)

        assert service.coin_details.value is None
        assert service.coin_details.next_value().done() is False
