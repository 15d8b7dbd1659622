# Services package
from cryptoboard.services.analytics_service import (
    TIMEFRAME_WINDOWS,
    AnalyticsEngine,
    rolling_percent_change,
    rolling_volatility,
)
from cryptoboard.services.market_service import MarketDataService
from cryptoboard.services.store import SnapshotStore

__all__ = [
    "TIMEFRAME_WINDOWS",
    "AnalyticsEngine",
    "rolling_percent_change",
    "rolling_volatility",
    "MarketDataService",
    "SnapshotStore",
]
