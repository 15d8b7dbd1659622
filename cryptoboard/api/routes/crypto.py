"""Market routes - listings, prices, search, portfolio and sync."""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from cryptoboard.api.deps import get_market_service
from cryptoboard.core.logging import get_logger
from cryptoboard.schemas.api import PortfolioResponse, PriceResponse, SyncResponse
from cryptoboard.schemas.market import AssetSnapshot
from cryptoboard.services.market_service import MarketDataService

router = APIRouter(tags=["crypto"])
log = get_logger("crypto_routes")


# -----------------------------------------------------------------------------
# Listings
# -----------------------------------------------------------------------------


@router.get("/popular", response_model=List[AssetSnapshot])
async def get_popular(
    limit: Optional[int] = Query(None, le=500, description="Number of assets (defaults to MAX_RESULTS)"),
    service: MarketDataService = Depends(get_market_service),
):
    """
    Most popular assets by market-cap rank.

    Served from the snapshot store when it has data, otherwise fetched live,
    otherwise a static list of well-known assets. Each item carries `source`.
    """
    return await service.get_popular_assets(limit)


@router.get("/popular-fresh", response_model=List[AssetSnapshot])
async def get_popular_fresh(
    limit: Optional[int] = Query(None, le=500),
    service: MarketDataService = Depends(get_market_service),
):
    """Run a sync first, then return popular assets."""
    result = await service.refresh()
    if result.status != "ok":
        log.warning(f"Fresh listing requested but sync {result.status}: {result.message}")
    return await service.get_popular_assets(limit)


@router.get("/top5", response_model=List[AssetSnapshot])
async def get_top5(service: MarketDataService = Depends(get_market_service)):
    """The five best-ranked assets."""
    assets = await service.get_popular_assets()
    return assets[:5]


# -----------------------------------------------------------------------------
# Prices
# -----------------------------------------------------------------------------


@router.get("/price/{symbol}", response_model=PriceResponse)
async def get_price(symbol: str, service: MarketDataService = Depends(get_market_service)):
    """
    Current price of a supported symbol.

    Returns 404 for symbols outside the supported set or with no price anywhere.
    """
    quote = await service.get_price(symbol)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"No price for {symbol.strip().upper()}")

    return PriceResponse(
        symbol=quote.symbol,
        price=quote.price,
        currency=quote.currency,
        source=quote.source,
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/portfolio/value", response_model=PortfolioResponse)
async def portfolio_value(
    symbols: List[str] = Body(..., description="Ticker symbols, e.g. [\"BTC\", \"ETH\"]"),
    service: MarketDataService = Depends(get_market_service),
):
    """Sum of current prices for the given symbols; unknown symbols are listed in `missing`."""
    valuation = await service.calculate_portfolio_value(symbols)
    return PortfolioResponse(**valuation.model_dump(), timestamp=datetime.now(timezone.utc))


# -----------------------------------------------------------------------------
# Search
# -----------------------------------------------------------------------------


@router.get("/search", response_model=List[AssetSnapshot])
async def search(
    q: Optional[str] = Query(None, description="Case-insensitive match on name or symbol"),
    service: MarketDataService = Depends(get_market_service),
):
    """Search assets; an empty query returns the popular list."""
    return await service.search(q)


@router.get("/details/{symbol}", response_model=AssetSnapshot)
async def get_details(symbol: str, service: MarketDataService = Depends(get_market_service)):
    """First search hit for `symbol`, or 404."""
    asset = await service.get_details(symbol)
    if asset is None:
        raise HTTPException(status_code=404, detail=f"No asset matching {symbol}")
    return asset


# -----------------------------------------------------------------------------
# Sync
# -----------------------------------------------------------------------------


async def _perform_sync(response: Response, service: MarketDataService) -> SyncResponse:
    result = await service.refresh()
    if result.status == "failed":
        response.status_code = 500
    return SyncResponse(**result.model_dump(), timestamp=datetime.now(timezone.utc))


@router.post("/sync", response_model=SyncResponse)
async def sync_post(response: Response, service: MarketDataService = Depends(get_market_service)):
    """
    Fetch the latest listings from CoinMarketCap and append them to the store.

    Returns 500 when the fetch failed and `status=skipped` when the API key
    or database is missing.
    """
    return await _perform_sync(response, service)


@router.get("/sync", response_model=SyncResponse)
async def sync_get(response: Response, service: MarketDataService = Depends(get_market_service)):
    """Same as `POST /sync`, reachable from a browser."""
    return await _perform_sync(response, service)
