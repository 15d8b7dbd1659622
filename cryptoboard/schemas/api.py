from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from cryptoboard.schemas.market import SyncResult


class DatabaseHealth(BaseModel):
    available: bool
    snapshots: int
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    database: DatabaseHealth
    api_configured: bool
    cache_enabled: bool
    timestamp: datetime


class PriceResponse(BaseModel):
    symbol: str
    price: float
    currency: str
    source: str
    timestamp: datetime


class PortfolioResponse(BaseModel):
    symbols: List[str]
    total_value: float
    currency: str
    prices: Dict[str, float]
    missing: List[str]
    timestamp: datetime


class SyncResponse(SyncResult):
    timestamp: datetime


class ConfigResponse(BaseModel):
    max_results: int
    default_currency: str
    cache_enabled: bool
    sync_enabled: bool
    sync_interval_seconds: int
    sync_batch_size: int
    api_timeout_seconds: float
    retention_max_rows_per_asset: int
    analytics_chart_points: int
    timeframe_windows: Dict[str, int]
    api_configured: bool
    database_configured: bool
    database_available: bool
    total_snapshots: int


class InfoResponse(BaseModel):
    app_name: str
    version: str
    description: str
    features: List[str]
    endpoints: Dict[str, str]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
