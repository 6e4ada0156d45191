"""
Integration Tests for the Command Line Front End

The CoinGecko client is replaced by the fake from conftest; the
portfolio lives in tmp_path.
"""

import json
from unittest.mock import patch

import pytest

from cryptotracker.cli import main
from cryptotracker.data import APIResponse, PortfolioStore
from cryptotracker.models import PortfolioEntry


@pytest.fixture
def run(config_file, fake_client):
    def _run(*args):
        with patch("cryptotracker.cli.CoinGeckoClient.from_config", return_value=fake_client):
            return main(["--config", str(config_file), *args])
    return _run


class TestCli:

    def test_home_table(self, run, capsys):
        assert run() == 0

        out = capsys.readouterr().out
        assert "Market Cap" in out
        assert "BTC Dominance" in out
        assert "BTC" in out
        assert "(empty)" in out

    def test_search_and_sort_json(self, run, capsys):
        assert run("--search", "bit", "--sort", "price_reversed", "--format", "json") == 0

        data = json.loads(capsys.readouterr().out)
        assert [c["id"] for c in data["coins"]] == ["bitcoin", "wrapped-bitcoin"]
        assert [s["title"] for s in data["statistics"]][0] == "Market Cap"

    def test_set_holding(self, run, tmp_path, capsys):
        assert run("--set-holding", "bitcoin", "0.5", "--format", "json") == 0

        data = json.loads(capsys.readouterr().out)
        assert data["portfolio"] == [{"id": "bitcoin", "amount": 0.5, "value": 30000.0}]
        assert PortfolioStore(tmp_path / "portfolio.csv").load() == [PortfolioEntry("bitcoin", 0.5)]

    def test_set_holding_unknown_coin(self, run, capsys):
        assert run("--set-holding", "dogecoin", "1") == 1
        assert "Unknown coin" in capsys.readouterr().out

    def test_set_holding_bad_amount(self, run, capsys):
        assert run("--set-holding", "bitcoin", "lots") == 1
        assert "Invalid amount" in capsys.readouterr().out

    def test_detail_json(self, run, capsys):
        assert run("--detail", "bitcoin", "--format", "json") == 0

        data = json.loads(capsys.readouterr().out)
        assert data["id"] == "bitcoin"
        assert data["website"] == "https://bitcoin.org"
        assert len(data["overview"]) == 4
        assert len(data["additional"]) == 6

    def test_detail_table(self, run, capsys):
        assert run("--detail", "bitcoin") == 0

        out = capsys.readouterr().out
        assert "Bitcoin (BTC)" in out
        assert "Hashing Algorithm" in out

    def test_no_market_data(self, run, fake_client, capsys):
        fake_client.get_coin_markets.return_value = APIResponse(success=False, error="Timeout")

        assert run() == 1
        assert "No market data" in capsys.readouterr().out
