"""Meta routes - runtime configuration and application info."""

from fastapi import APIRouter, Depends

from cryptoboard import __version__
from cryptoboard.api.deps import get_market_service
from cryptoboard.core.config import settings
from cryptoboard.schemas.api import ConfigResponse, InfoResponse
from cryptoboard.services.analytics_service import TIMEFRAME_WINDOWS
from cryptoboard.services.market_service import MarketDataService

router = APIRouter(tags=["meta"])

FEATURES = [
    "Live CoinMarketCap listings and quotes",
    "Snapshot history stored in a relational database",
    "Cache -> live -> static fallback for every read",
    "Scheduled background sync",
    "Search by name or symbol",
    "Per-asset analytics with rolling volatility",
    "Portfolio valuation",
]

ENDPOINTS = {
    "health": "/api/crypto/health",
    "popular": "/api/crypto/popular",
    "search": "/api/crypto/search?q=bitcoin",
    "price": "/api/crypto/price/{symbol}",
    "analytics": "/api/crypto/analytics/{symbol}?timeframe=1h",
    "sync": "/api/crypto/sync",
    "config": "/api/crypto/config",
}


@router.get("/config", response_model=ConfigResponse)
def get_config(service: MarketDataService = Depends(get_market_service)):
    """Current tunables together with source and store status."""
    cfg = service.config
    status = service.status()

    return ConfigResponse(
        max_results=cfg.max_results,
        default_currency=cfg.currency,
        cache_enabled=cfg.cache_enabled,
        sync_enabled=settings.SYNC_ENABLED,
        sync_interval_seconds=cfg.sync_interval_seconds,
        sync_batch_size=cfg.sync_batch_size,
        api_timeout_seconds=cfg.api_timeout_seconds,
        retention_max_rows_per_asset=cfg.retention_max_rows_per_asset,
        analytics_chart_points=cfg.chart_points,
        timeframe_windows=dict(TIMEFRAME_WINDOWS),
        api_configured=status.source_configured,
        database_configured=status.store.configured,
        database_available=status.store.reachable,
        total_snapshots=status.store.snapshot_count,
    )


@router.get("/info", response_model=InfoResponse)
def get_info():
    return InfoResponse(
        app_name="CryptoBoard",
        version=__version__,
        description="Cryptocurrency dashboard backed by CoinMarketCap with cache and static fallback",
        features=FEATURES,
        endpoints=ENDPOINTS,
    )
