"""Common shapes returned by the market data service, whatever tier answered."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

Tier = Literal["cache", "live", "fallback"]


class AssetSnapshot(BaseModel):
    """Normalized view of one asset observation."""

    id: Optional[int] = None
    external_id: Optional[str] = None
    symbol: str
    name: str
    price: Optional[float] = None
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None
    rank: Optional[int] = None
    currency: str = "USD"
    observed_at: Optional[datetime] = None
    source: Tier = "cache"

    class Config:
        from_attributes = True


class PriceQuote(BaseModel):
    symbol: str
    price: float
    currency: str
    source: Tier


class PortfolioValuation(BaseModel):
    symbols: List[str]
    total_value: float
    currency: str
    prices: dict[str, float]
    missing: List[str]


class SyncResult(BaseModel):
    status: Literal["ok", "skipped", "failed"]
    received: int = 0
    saved: int = 0
    failed: int = 0
    pruned: int = 0
    message: str


class StoreStatus(BaseModel):
    configured: bool
    reachable: bool
    snapshot_count: int = 0
    error: Optional[str] = None


class ServiceStatus(BaseModel):
    source_configured: bool
    store: StoreStatus
    cache_enabled: bool

    @property
    def label(self) -> str:
        if self.source_configured and self.store.reachable:
            return "healthy"
        if self.source_configured or self.store.reachable:
            return "degraded"
        return "fallback-only"
