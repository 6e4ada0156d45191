"""
Pytest Configuration and Fixtures

Provides shared fixtures and configuration for all tests.
"""

import copy
import textwrap
from unittest.mock import Mock

import pytest

from cryptotracker.data import APIResponse, CoinGeckoClient
from cryptotracker.reactive import Scheduler


# =============================================================================
# SAMPLE PAYLOADS
# =============================================================================

MARKET_ROWS = [
    {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "image": "https://assets.coingecko.com/coins/images/1/large/bitcoin.png",
        "current_price": 60000.0,
        "market_cap": 1.2e12,
        "market_cap_rank": 1,
        "total_volume": 3.5e10,
        "high_24h": 61000.0,
        "low_24h": 59000.0,
        "price_change_24h": 1176.47,
        "price_change_percentage_24h": 2.0,
        "market_cap_change_24h": 2.4e10,
        "market_cap_change_percentage_24h": 2.1,
        "circulating_supply": 19700000.0,
        "total_supply": 21000000.0,
        "max_supply": 21000000.0,
        "ath": 73738.0,
        "last_updated": "2026-10-19T04:00:00.000Z",
        "sparkline_in_7d": {"price": [58000.0, 59000.5, 60000.0]},
    },
    {
        "id": "ethereum",
        "symbol": "eth",
        "name": "Ethereum",
        "current_price": 3000.0,
        "market_cap": 3.6e11,
        "market_cap_rank": 2,
        "total_volume": 1.5e10,
        "price_change_percentage_24h": -1.5,
    },
    {
        "id": "tether",
        "symbol": "usdt",
        "name": "Tether",
        "current_price": 1.0,
        "market_cap": 1.1e11,
        "market_cap_rank": 3,
        "total_volume": 5.0e10,
        "price_change_percentage_24h": 0.01,
    },
    {
        "id": "solana",
        "symbol": "sol",
        "name": "Solana",
        "current_price": 150.0,
        "market_cap": 7.0e10,
        "market_cap_rank": 5,
        "total_volume": 3.0e9,
        "price_change_percentage_24h": 5.0,
    },
    {
        "id": "wrapped-bitcoin",
        "symbol": "wbtc",
        "name": "Wrapped Bitcoin",
        "current_price": 60000.0,
        "market_cap": 9.0e9,
        "market_cap_rank": 15,
        "total_volume": 2.0e8,
        "price_change_percentage_24h": 2.0,
    },
]

GLOBAL_PAYLOAD = {
    "data": {
        "active_cryptocurrencies": 14000,
        "total_market_cap": {"usd": 2.5e12, "eur": 2.3e12},
        "total_volume": {"usd": 9.8e10, "eur": 9.0e10},
        "market_cap_percentage": {"btc": 52.5, "eth": 14.4},
        "market_cap_change_percentage_24h_usd": 1.75,
    }
}

DETAIL_PAYLOAD = {
    "id": "bitcoin",
    "symbol": "btc",
    "name": "Bitcoin",
    "block_time_in_minutes": 10,
    "hashing_algorithm": "SHA-256",
    "description": {
        "en": 'Bitcoin is the first <a href="https://www.coingecko.com/en?hashing_algorithm=SHA-256">cryptocurrency</a>.'
    },
    "links": {
        "homepage": ["https://bitcoin.org", "", ""],
        "subreddit_url": "https://www.reddit.com/r/Bitcoin/",
    },
}


@pytest.fixture
def market_rows():
    """Sample /coins/markets payload"""
    return copy.deepcopy(MARKET_ROWS)


@pytest.fixture
def global_payload():
    """Sample /global payload"""
    return copy.deepcopy(GLOBAL_PAYLOAD)


@pytest.fixture
def detail_payload():
    """Sample /coins/{id} payload"""
    return copy.deepcopy(DETAIL_PAYLOAD)


# =============================================================================
# FAKES
# =============================================================================

@pytest.fixture
def fake_client(market_rows, global_payload, detail_payload):
    """CoinGecko client double answering every endpoint successfully"""
    client = Mock(spec=CoinGeckoClient)
    client.get_coin_markets.return_value = APIResponse(success=True, data=market_rows, status_code=200)
    client.get_global.return_value = APIResponse(success=True, data=global_payload, status_code=200)
    client.get_coin_detail.return_value = APIResponse(success=True, data=detail_payload, status_code=200)
    return client


class _Handle:
    def __init__(self, action):
        self.action = action
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Collects delayed actions until the test runs them"""

    def __init__(self):
        self.pending = []

    def call_later(self, delay, action):
        handle = _Handle(action)
        self.pending.append(handle)
        return handle

    @property
    def waiting(self):
        return [h for h in self.pending if not h.cancelled]

    def run_pending(self):
        pending, self.pending = self.pending, []
        for handle in pending:
            if not handle.cancelled:
                handle.action()


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


# =============================================================================
# CONFIG
# =============================================================================

@pytest.fixture
def config_file(tmp_path):
    """Write a minimal config pointing the portfolio into tmp_path"""
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(f"""
        api:
          coingecko:
            base_url: "https://api.coingecko.com/api/v3"
            timeout: 5
            max_retries: 1
        market:
          vs_currency: "usd"
          per_page: 100
        portfolio:
          path: "{(tmp_path / 'portfolio.csv').as_posix()}"
        home:
          debounce_seconds: 0
          default_sort: "holdings"
        logging:
          level: "WARNING"
    """))
    return path
