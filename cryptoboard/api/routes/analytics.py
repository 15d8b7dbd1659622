"""Analytics routes - per-asset statistics and chart series."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cryptoboard.api.deps import get_analytics_engine
from cryptoboard.core.logging import get_logger
from cryptoboard.schemas.analytics import AnalyticsReport
from cryptoboard.services.analytics_service import TIMEFRAME_WINDOWS, AnalyticsEngine

router = APIRouter(prefix="/analytics", tags=["analytics"])
log = get_logger("analytics_routes")


@router.get("/{symbol}", response_model=AnalyticsReport)
async def get_analytics(
    symbol: str,
    timeframe: Optional[str] = Query(None, description=f"Rolling window: {', '.join(TIMEFRAME_WINDOWS)}"),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
):
    """
    Statistics, performance and chart data built from stored history.

    - 404 when no priced snapshot exists for the symbol
    - 400 for an unknown timeframe
    - 500 when the store is unavailable
    """
    try:
        return await engine.compute_analytics(symbol, timeframe)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
