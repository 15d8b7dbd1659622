"""Health routes - store reachability and source configuration."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from cryptoboard.api.deps import get_market_service
from cryptoboard.schemas.api import DatabaseHealth, HealthResponse
from cryptoboard.services.market_service import MarketDataService

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(service: MarketDataService = Depends(get_market_service)):
    """
    Health check for load balancers and the dashboard status badge.

    Always answers 200: with the store down or the API key missing the
    service still serves fallback data, which the `status` field reports
    as `degraded` or `fallback-only`.
    """
    status = service.status()

    return HealthResponse(
        status=status.label,
        database=DatabaseHealth(
            available=status.store.reachable,
            snapshots=status.store.snapshot_count,
            error=status.store.error,
        ),
        api_configured=status.source_configured,
        cache_enabled=status.cache_enabled,
        timestamp=datetime.now(timezone.utc),
    )
