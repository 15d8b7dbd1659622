"""Snapshot store query tests"""

from datetime import datetime, timezone

import pytest

from cryptoboard.core.errors import StoreUnavailableError


def _row(symbol, price, rank=1, external_id=None, name=None, **extra):
    return {"external_id": external_id, "symbol": symbol, "name": name or symbol, "price": price, "rank": rank, **extra}


class TestInsert:
    def test_assigns_id_key_and_timestamp(self, store):
        saved = store.insert(_row("btc", 100.0, external_id="1"))

        assert saved.id is not None
        assert saved.observed_at is not None
        assert saved.source == "cache"
        assert store.count() == 1

    def test_ids_increase(self, store):
        first = store.insert(_row("BTC", 1.0, external_id="1"))
        second = store.insert(_row("BTC", 2.0, external_id="1"))

        assert second.id > first.id


class TestLatest:
    def test_latest_per_asset_uses_max_id(self, store):
        store.insert(_row("BTC", 100.0, rank=1, external_id="1"))
        store.insert(_row("ETH", 10.0, rank=2, external_id="1027"))
        store.insert(_row("BTC", 105.0, rank=1, external_id="1"))

        latest = store.latest_per_asset()

        assert [(a.symbol, a.price) for a in latest] == [("BTC", 105.0), ("ETH", 10.0)]

    def test_assets_without_external_id_group_by_symbol(self, store):
        store.insert(_row("BTC", 100.0, rank=1))
        store.insert(_row("BTC", 99.0, rank=1))

        latest = store.latest_per_asset()

        assert len(latest) == 1
        assert latest[0].price == 99.0

    def test_latest_per_asset_limit_and_rank(self, store):
        for rank, symbol in [(3, "SOL"), (1, "BTC"), (2, "ETH"), (None, "NEW")]:
            store.insert(_row(symbol, 1.0, rank=rank, external_id=symbol))

        assert [a.symbol for a in store.latest_per_asset(limit=2)] == ["BTC", "ETH"]
        assert "NEW" not in [a.symbol for a in store.latest_per_asset()]

    def test_latest_by_symbol_case_insensitive(self, store):
        store.insert(_row("ETH", 1.0, external_id="1027"))
        store.insert(_row("ETH", 2.0, external_id="1027"))

        assert store.latest_by_symbol("eth").price == 2.0
        assert store.latest_by_symbol("DOGE") is None

    def test_search_orders_unranked_last(self, store):
        store.insert(_row("BTCX", 1.0, rank=None, external_id="9", name="Bitcoin Extra"))
        store.insert(_row("BTC", 1.0, rank=1, external_id="1", name="Bitcoin"))
        store.insert(_row("WBTC", 1.0, rank=15, external_id="3717", name="Wrapped Bitcoin"))

        results = store.search_latest("BITCOIN")

        assert [a.symbol for a in results] == ["BTC", "WBTC", "BTCX"]

    @pytest.mark.parametrize("term", ["%", "_", "B_C", "b%"])
    def test_search_wildcards_are_literal(self, store, term):
        store.insert(_row("BTC", 1.0, rank=1, external_id="1", name="Bitcoin"))
        store.insert(_row("ETH", 1.0, rank=2, external_id="1027", name="Ethereum"))

        assert store.search_latest(term) == []

    def test_search_matches_literal_percent_and_underscore(self, store):
        store.insert(_row("USD_X", 1.0, rank=7, external_id="7", name="100% Dollar"))
        store.insert(_row("USDX", 1.0, rank=8, external_id="8", name="Dollar"))

        assert [a.symbol for a in store.search_latest("d_x")] == ["USD_X"]
        assert [a.symbol for a in store.search_latest("0%")] == ["USD_X"]


class TestHistory:
    def test_newest_first_with_id_tiebreak(self, store):
        same_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
        first = store.insert(_row("BTC", 1.0, external_id="1", observed_at=same_time))
        second = store.insert(_row("BTC", 2.0, external_id="1", observed_at=same_time))

        history = store.history_by_external_id("1")

        assert [row.id for row in history] == [second.id, first.id]

    def test_by_symbol_and_by_external_id(self, store):
        store.insert(_row("BTC", 1.0, external_id="1"))
        store.insert(_row("BTC", 2.0))

        assert len(store.history_by_symbol("btc")) == 2
        assert len(store.history_by_external_id("1")) == 1


class TestPrune:
    def test_keeps_newest_rows_per_asset(self, store):
        for price in range(5):
            store.insert(_row("BTC", float(price), external_id="1"))
        store.insert(_row("ETH", 1.0, external_id="1027"))

        removed = store.prune_history(["1", "1027"], keep=2)

        assert removed == 3
        assert [row.price for row in store.history_by_external_id("1")] == [4.0, 3.0]
        assert store.count() == 3

    def test_zero_keep_disables(self, store):
        store.insert(_row("BTC", 1.0, external_id="1"))

        assert store.prune_history(["1"], keep=0) == 0
        assert store.count() == 1


class TestUnavailable:
    def test_errors_are_wrapped(self, broken_store):
        with pytest.raises(StoreUnavailableError):
            broken_store.ping()
        with pytest.raises(StoreUnavailableError):
            broken_store.latest_per_asset()
        with pytest.raises(StoreUnavailableError):
            broken_store.insert(_row("BTC", 1.0))

    def test_ping_and_count(self, store):
        assert store.ping() is True
        assert store.count() == 0
