"""Shared fixtures: in-memory store, scripted price source, service wiring."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from cryptoboard.core.config import ServiceConfig
from cryptoboard.core.db import build_engine, build_session_factory
from cryptoboard.core.errors import SourceUnavailableError
from cryptoboard.ingestion.base import BaseSource
from cryptoboard.models import Base
from cryptoboard.schemas.coinmarketcap import CmcCoin
from cryptoboard.services.analytics_service import AnalyticsEngine
from cryptoboard.services.market_service import MarketDataService
from cryptoboard.services.store import SnapshotStore


def make_coin(cmc_id, symbol, name, price, rank, currency="USD", **quote) -> CmcCoin:
    """Build a CoinMarketCap coin the way the API returns it."""
    return CmcCoin.model_validate(
        {
            "id": cmc_id,
            "name": name,
            "symbol": symbol,
            "cmc_rank": rank,
            "quote": {currency: {"price": price, "market_cap": price * 1000, "volume_24h": price * 10, **quote}},
        }
    )


DEFAULT_COINS = [
    make_coin(1, "BTC", "Bitcoin", 64000.0, 1, percent_change_24h=1.5),
    make_coin(1027, "ETH", "Ethereum", 3100.0, 2, percent_change_24h=-0.4),
    make_coin(5426, "SOL", "Solana", 150.0, 5),
    make_coin(52, "XRP", "XRP", 0.55, 4),
    make_coin(2010, "ADA", "Cardano", 0.45, 9),
]


class FakeSource(BaseSource):
    """Scripted price source that records what it was asked."""

    name = "fake"

    def __init__(self, coins: Optional[List[CmcCoin]] = None, configured: bool = True, fail: bool = False):
        self.coins = list(DEFAULT_COINS if coins is None else coins)
        self.configured = configured
        self.fail = fail
        self.listing_calls: List[int] = []
        self.quote_calls: List[str] = []
        self.closed = False

    def is_configured(self) -> bool:
        return self.configured

    async def latest_listings(self, limit: int, convert: str = "USD") -> List[CmcCoin]:
        self.listing_calls.append(limit)
        if self.fail:
            raise SourceUnavailableError("simulated outage")
        return sorted(self.coins, key=lambda c: c.cmc_rank or 0)[:limit]

    async def latest_quote(self, symbol: str, convert: str = "USD") -> Optional[CmcCoin]:
        self.quote_calls.append(symbol)
        if self.fail:
            raise SourceUnavailableError("simulated outage")
        for coin in self.coins:
            if coin.symbol.upper() == symbol.upper():
                return coin
        return None

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def engine():
    eng = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine) -> SnapshotStore:
    return SnapshotStore(build_session_factory(engine))


@pytest.fixture
def broken_store() -> SnapshotStore:
    """Store whose database file can never be opened."""
    eng = build_engine("sqlite:////nonexistent-dir/cryptoboard/unreachable.db")
    yield SnapshotStore(build_session_factory(eng))
    eng.dispose()


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(max_results=10, sync_batch_size=50, retention_max_rows_per_asset=2000)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def service(store, source, config) -> MarketDataService:
    return MarketDataService(store, source, config)


@pytest.fixture
def analytics(store, config) -> AnalyticsEngine:
    return AnalyticsEngine(store, config)


@pytest.fixture
def add_history(store):
    """Insert a price series for one asset, oldest first, ten minutes apart."""

    def _add(symbol: str, prices: List[Optional[float]], external_id: Optional[str] = "1", **extra) -> List[int]:
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        ids = []
        for i, price in enumerate(prices):
            values: Dict = {
                "external_id": external_id,
                "symbol": symbol,
                "name": extra.get("name", symbol.title()),
                "price": price,
                "rank": extra.get("rank", 1),
                "observed_at": start + timedelta(minutes=10 * i),
            }
            if i == len(prices) - 1:
                values.update({k: v for k, v in extra.items() if k.startswith("percent_change")})
            ids.append(store.insert(values).id)
        return ids

    return _add
