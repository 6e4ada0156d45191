"""
Unit Tests for the CoinGecko Client

Tests cover:
- Endpoint paths and query parameters
- HTTP error, timeout and decode failures
- Retry and rate-limit backoff
- Coin id validation
"""

from unittest.mock import Mock, patch

import pytest
import requests

from cryptotracker.config import Config
from cryptotracker.data import CoinGeckoClient


def make_response(status_code=200, json_data=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = json_data
    return response


@pytest.fixture
def client():
    return CoinGeckoClient(rate_limit_delay=0)


class TestEndpoints:

    def test_coin_markets(self, client, market_rows):
        with patch.object(client.session, "get", return_value=make_response(json_data=market_rows)) as get:
            response = client.get_coin_markets(vs_currency="eur", per_page=50)

        assert response.success is True
        assert response.data == market_rows
        url = get.call_args.args[0]
        params = get.call_args.kwargs["params"]
        assert url == "https://api.coingecko.com/api/v3/coins/markets"
        assert params["vs_currency"] == "eur"
        assert params["per_page"] == 50
        assert params["order"] == "market_cap_desc"
        assert params["sparkline"] == "true"
        assert params["price_change_percentage"] == "24h"

    def test_global(self, client, global_payload):
        with patch.object(client.session, "get", return_value=make_response(json_data=global_payload)) as get:
            response = client.get_global()

        assert response.success is True
        assert get.call_args.args[0].endswith("/global")

    def test_coin_detail(self, client, detail_payload):
        with patch.object(client.session, "get", return_value=make_response(json_data=detail_payload)) as get:
            response = client.get_coin_detail("bitcoin")

        assert response.success is True
        assert get.call_args.args[0].endswith("/coins/bitcoin")
        params = get.call_args.kwargs["params"]
        assert params["market_data"] == "false"
        assert params["localization"] == "false"
        assert params["sparkline"] == "false"

    @pytest.mark.parametrize("coin_id", ["", "bad/id", "../global", "Bitcoin?x=1"])
    def test_invalid_coin_id_skips_network(self, client, coin_id):
        with patch.object(client.session, "get") as get:
            response = client.get_coin_detail(coin_id)

        assert response.success is False
        assert "Invalid coin id" in response.error
        get.assert_not_called()

    def test_ping(self, client):
        with patch.object(client.session, "get", return_value=make_response(json_data={"gecko_says": "(V3) To the Moon!"})):
            assert client.ping() is True


class TestFailures:

    def test_http_error_is_not_retried_by_default(self, client):
        with patch.object(client.session, "get", return_value=make_response(500, text="boom")) as get:
            response = client.get_global()

        assert response.success is False
        assert response.error == "HTTP 500"
        assert response.status_code == 500
        assert get.call_count == 1

    def test_timeout(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.Timeout()):
            response = client.get_global()

        assert response.success is False
        assert response.error == "Timeout"

    def test_connection_error(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.ConnectionError("offline")):
            response = client.get_global()

        assert response.success is False
        assert "offline" in response.error

    def test_decode_failure(self, client):
        bad = make_response()
        bad.json.side_effect = ValueError("Expecting value")

        with patch.object(client.session, "get", return_value=bad):
            response = client.get_global()

        assert response.success is False
        assert response.error.startswith("Decode error")


class TestRetries:

    def test_retries_with_backoff(self):
        client = CoinGeckoClient(max_retries=3, backoff_factor=2.0, rate_limit_delay=0)
        responses = [make_response(502, text="bad gateway"), make_response(json_data={"ok": True})]

        with patch.object(client.session, "get", side_effect=responses) as get, \
                patch("cryptotracker.data.ingestion.time.sleep") as sleep:
            response = client.get_global()

        assert response.success is True
        assert get.call_count == 2
        sleep.assert_called_once_with(1.0)

    def test_rate_limited_waits_longer(self):
        client = CoinGeckoClient(max_retries=2, backoff_factor=2.0, rate_limit_delay=0)
        responses = [make_response(429), make_response(json_data={"ok": True})]

        with patch.object(client.session, "get", side_effect=responses), \
                patch("cryptotracker.data.ingestion.time.sleep") as sleep:
            response = client.get_global()

        assert response.success is True
        sleep.assert_called_once_with(10.0)

    def test_exhausted_retries(self):
        client = CoinGeckoClient(max_retries=2, rate_limit_delay=0)

        with patch.object(client.session, "get", return_value=make_response(503, text="down")), \
                patch("cryptotracker.data.ingestion.time.sleep"):
            response = client.get_global()

        assert response.success is False
        assert response.error == "Max retries (2) exceeded: HTTP 503"


class TestConstruction:

    def test_api_key_header(self):
        client = CoinGeckoClient(api_key="demo-key")
        assert client.session.headers["x-cg-demo-api-key"] == "demo-key"

    def test_no_api_key_header_by_default(self):
        client = CoinGeckoClient()
        assert "x-cg-demo-api-key" not in client.session.headers

    def test_from_config(self, config_file, monkeypatch):
        monkeypatch.delenv("COINGECKO_API_KEY", raising=False)
        client = CoinGeckoClient.from_config(Config(str(config_file)))

        assert client.timeout == 5
        assert client.max_retries == 1
        assert client.base_url == "https://api.coingecko.com/api/v3"
