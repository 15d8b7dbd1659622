"""CoinMarketCap source implementation."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from cryptoboard.core.errors import SourceUnavailableError
from cryptoboard.core.logging import get_logger
from cryptoboard.schemas.coinmarketcap import CmcCoin, CmcListingsResponse, CmcQuotesResponse
from .base import BaseSource

log = get_logger("ingestion.coinmarketcap")

LISTINGS_PATH = "/v1/cryptocurrency/listings/latest"
QUOTES_PATH = "/v1/cryptocurrency/quotes/latest"


class CoinMarketCapSource(BaseSource):
    """Fetches listings and quotes from the CoinMarketCap Pro API.

    One instance owns one ``httpx.AsyncClient`` for the lifetime of the
    process. Every request carries an explicit timeout.
    """

    name = "coinmarketcap"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://pro-api.coinmarketcap.com",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )
        if not self.api_key:
            log.warning("COINMARKETCAP_API_KEY not set; live prices disabled, serving cache/fallback only")

    def is_configured(self) -> bool:
        return self.api_key is not None

    async def latest_listings(self, limit: int, convert: str = "USD") -> List[CmcCoin]:
        payload = await self._get(LISTINGS_PATH, {"limit": limit or 10, "convert": convert or "USD"})
        try:
            response = CmcListingsResponse.model_validate(payload)
        except ValidationError as exc:
            raise SourceUnavailableError(f"Malformed listings payload: {exc}") from exc

        log.info(f"Fetched {len(response.data)} listings from CoinMarketCap")
        return response.data

    async def latest_quote(self, symbol: str, convert: str = "USD") -> Optional[CmcCoin]:
        payload = await self._get(QUOTES_PATH, {"symbol": symbol.upper(), "convert": convert or "USD"})
        try:
            response = CmcQuotesResponse.model_validate(payload)
        except ValidationError as exc:
            raise SourceUnavailableError(f"Malformed quotes payload: {exc}") from exc

        coins = response.coins_for(symbol)
        if not coins:
            log.info(f"CoinMarketCap returned no quote for {symbol}")
            return None
        # Several coins can share a ticker; the best ranked one is the one people mean
        return min(coins, key=lambda coin: coin.cmc_rank or 999_999)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.is_configured():
            raise SourceUnavailableError("CoinMarketCap API key not configured")

        try:
            resp = await self._client.get(path, params=params, headers={"X-CMC_PRO_API_KEY": self.api_key})
        except httpx.TimeoutException as exc:
            raise SourceUnavailableError(f"CoinMarketCap request timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(f"CoinMarketCap request failed: {exc}") from exc

        if resp.status_code == 429:
            raise SourceUnavailableError("CoinMarketCap rate limit reached")
        if resp.status_code in (401, 403):
            raise SourceUnavailableError(f"CoinMarketCap rejected credentials ({resp.status_code})")
        if resp.is_error:
            log.error(f"CoinMarketCap API error {resp.status_code}: {resp.text[:200]}")
            raise SourceUnavailableError(f"CoinMarketCap returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise SourceUnavailableError("CoinMarketCap returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise SourceUnavailableError("CoinMarketCap returned an unexpected payload")
        return data
