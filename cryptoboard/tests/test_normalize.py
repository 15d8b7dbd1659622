"""Normalization and validation tests"""

import pytest

from cryptoboard.core.validation import is_supported_symbol, is_valid_price, normalize_symbol
from cryptoboard.services.normalize import coin_to_row, coin_to_snapshot, rank_sorted, safe_float

from .conftest import make_coin


class TestValidation:
    def test_normalize_symbol(self):
        assert normalize_symbol("  eth ") == "ETH"
        assert normalize_symbol(None) == ""

    @pytest.mark.parametrize("symbol", ["BTC", "eth", " link ", "Dot"])
    def test_supported(self, symbol):
        assert is_supported_symbol(symbol)

    @pytest.mark.parametrize("symbol", ["DOGE", "", None, "BTCX"])
    def test_unsupported(self, symbol):
        assert not is_supported_symbol(symbol)

    def test_price_bounds(self):
        assert is_valid_price(0.0)
        assert is_valid_price(1_000_000.0)
        assert not is_valid_price(-0.01)
        assert not is_valid_price(1_000_000.01)
        assert not is_valid_price(None)


class TestCoinConversion:
    def test_row_from_coin(self):
        row = coin_to_row(make_coin(1, "btc", "Bitcoin", 100.0, 1, percent_change_1h=0.5))

        assert row["symbol"] == "BTC"
        assert row["external_id"] == "1"
        assert row["asset_key"] == "1"
        assert row["price"] == 100.0
        assert row["percent_change_1h"] == 0.5
        assert row["percent_change_7d"] is None

    def test_missing_quote_currency_gives_null_prices(self):
        row = coin_to_row(make_coin(1, "BTC", "Bitcoin", 100.0, 1), currency="EUR")

        assert row["price"] is None
        assert row["currency"] == "EUR"

    def test_snapshot_is_live(self):
        snapshot = coin_to_snapshot(make_coin(1027, "ETH", "Ethereum", 3000.0, 2))

        assert snapshot.source == "live"
        assert snapshot.observed_at is not None

    def test_rank_sorted_drops_unranked(self):
        coins = [make_coin(i, s, s, 1.0, r) for i, s, r in [(1, "A", 3), (2, "B", None), (3, "C", 1)]]
        snapshots = [coin_to_snapshot(c) for c in coins]

        assert [a.symbol for a in rank_sorted(snapshots, 10)] == ["C", "A"]
        assert len(rank_sorted(snapshots, 1)) == 1

    def test_safe_float(self):
        assert safe_float("1.5") == 1.5
        assert safe_float("n/a") is None

