"""Market data service - answers every read through cache -> live -> static fallback."""

from __future__ import annotations

from typing import List, Optional

from cryptoboard.core.config import ServiceConfig
from cryptoboard.core.errors import SourceUnavailableError, StoreUnavailableError
from cryptoboard.core.logging import get_logger
from cryptoboard.core.validation import is_supported_symbol, is_valid_price, normalize_symbol
from cryptoboard.ingestion.base import BaseSource
from cryptoboard.schemas.market import (
    AssetSnapshot,
    PortfolioValuation,
    PriceQuote,
    ServiceStatus,
    StoreStatus,
    SyncResult,
)
from cryptoboard.services.fallback import fallback_assets, fallback_price
from cryptoboard.services.normalize import coin_to_row, coin_to_snapshot, matches_term, rank_sorted
from cryptoboard.services.store import SnapshotStore

log = get_logger("market_service")


class MarketDataService:
    """Resolves listings, prices and searches while degrading gracefully.

    Tiers, always in this order:
    1. Cache - the snapshot store (skipped when absent or disabled)
    2. Live - the price source (skipped when it has no credentials)
    3. Fallback - static well-known assets, which never fails

    No dependency failure escapes to the caller: store and source errors are
    logged and answered by the next tier.
    """

    def __init__(self, store: Optional[SnapshotStore], source: BaseSource, config: ServiceConfig):
        self.store = store
        self.source = source
        self.config = config

    @property
    def cache_active(self) -> bool:
        return self.store is not None and self.config.cache_enabled

    def _effective_limit(self, limit: Optional[int]) -> int:
        if limit is None or limit <= 0:
            return self.config.max_results
        return limit

    # -------------------------------------------------------------------------
    # Popular listings
    # -------------------------------------------------------------------------
    async def get_popular_assets(self, limit: Optional[int] = None) -> List[AssetSnapshot]:
        limit = self._effective_limit(limit)

        if self.cache_active:
            try:
                cached = self.store.latest_per_asset(limit=limit)
                if cached:
                    log.debug(f"Serving {len(cached)} popular assets from cache")
                    return rank_sorted(cached, limit)
            except StoreUnavailableError as exc:
                log.warning(f"Cache unavailable for popular assets, trying live source: {exc}")

        if self.source.is_configured():
            try:
                coins = await self.source.latest_listings(limit, self.config.currency)
                live = rank_sorted(
                    (coin_to_snapshot(coin, self.config.currency) for coin in coins),
                    limit,
                )
                if live:
                    log.info(f"Serving {len(live)} popular assets from {self.source.name}")
                    return live
            except SourceUnavailableError as exc:
                log.error(f"Live listings failed, using fallback data: {exc}")
        else:
            log.warning("Price source not configured; skipping live listings")

        log.info("Serving static fallback listings")
        return rank_sorted(fallback_assets(self.config.currency), limit)

    # -------------------------------------------------------------------------
    # Single price
    # -------------------------------------------------------------------------
    async def get_price(self, symbol: str) -> Optional[PriceQuote]:
        """Price for a supported symbol, or None when it cannot be resolved."""
        normalized = normalize_symbol(symbol)
        if not is_supported_symbol(normalized):
            log.info(f"Unsupported symbol requested: {symbol!r}")
            return None

        if self.cache_active:
            try:
                cached = self.store.latest_by_symbol(normalized)
                if cached is not None and is_valid_price(cached.price):
                    return PriceQuote(symbol=normalized, price=cached.price, currency=cached.currency, source="cache")
                if cached is not None:
                    log.warning(f"Cached price for {normalized} out of bounds: {cached.price}")
            except StoreUnavailableError as exc:
                log.warning(f"Cache unavailable for {normalized} price: {exc}")

        if self.source.is_configured():
            try:
                coin = await self.source.latest_quote(normalized, self.config.currency)
                if coin is not None:
                    row = coin_to_row(coin, self.config.currency)
                    if is_valid_price(row["price"]):
                        self._persist_quote(row)
                        return PriceQuote(symbol=normalized, price=row["price"], currency=self.config.currency, source="live")
            except SourceUnavailableError as exc:
                log.error(f"Live quote for {normalized} failed: {exc}")

        price = fallback_price(normalized)
        if price is not None:
            log.info(f"Using fallback price for {normalized}: {price}")
            return PriceQuote(symbol=normalized, price=price, currency=self.config.currency, source="fallback")

        log.info(f"No price available for {normalized}")
        return None

    def _persist_quote(self, row: dict) -> None:
        if self.store is None:
            return
        try:
            self.store.insert(row)
        except StoreUnavailableError as exc:
            log.warning(f"Could not persist live quote for {row['symbol']}: {exc}")

    async def calculate_portfolio_value(self, symbols: List[str]) -> PortfolioValuation:
        prices: dict[str, float] = {}
        missing: List[str] = []
        total = 0.0

        for symbol in symbols:
            quote = await self.get_price(symbol)
            if quote is None:
                missing.append(symbol)
                continue
            prices[quote.symbol] = quote.price
            total += quote.price

        return PortfolioValuation(
            symbols=list(symbols),
            total_value=total,
            currency=self.config.currency,
            prices=prices,
            missing=missing,
        )

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------
    async def search(self, term: Optional[str]) -> List[AssetSnapshot]:
        if term is None or not term.strip():
            return await self.get_popular_assets(self.config.max_results)

        if self.cache_active:
            try:
                return self.store.search_latest(term)
            except StoreUnavailableError as exc:
                log.warning(f"Cache search failed, filtering popular assets instead: {exc}")

        popular = await self.get_popular_assets(self.config.max_results)
        return [asset for asset in popular if matches_term(asset, term)]

    async def get_details(self, symbol: str) -> Optional[AssetSnapshot]:
        results = await self.search(symbol)
        return results[0] if results else None

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------
    async def refresh(self) -> SyncResult:
        """Fetch a fresh batch of listings and append one snapshot per asset."""
        if not self.source.is_configured():
            log.warning("Cannot sync - price source not configured")
            return SyncResult(status="skipped", message="Price source not configured")
        if self.store is None:
            log.warning("Cannot sync - database not available")
            return SyncResult(status="skipped", message="Database not available")

        batch = self.config.sync_batch_size
        log.info(f"Starting sync with {self.source.name} (batch={batch})")
        try:
            coins = await self.source.latest_listings(batch, self.config.currency)
        except SourceUnavailableError as exc:
            log.error(f"Sync failed: {exc}")
            return SyncResult(status="failed", message=str(exc))

        saved = 0
        failed = 0
        touched: List[str] = []
        for coin in coins:
            row = coin_to_row(coin, self.config.currency)
            try:
                self.store.insert(row)
            except StoreUnavailableError as exc:
                failed += 1
                log.error(f"Failed to save {row['symbol']}: {exc}")
                continue
            saved += 1
            touched.append(row["asset_key"])

        pruned = 0
        if touched and self.config.retention_max_rows_per_asset > 0:
            try:
                pruned = self.store.prune_history(touched, self.config.retention_max_rows_per_asset)
            except StoreUnavailableError as exc:
                log.warning(f"Retention prune skipped: {exc}")

        log.info(f"Sync completed: received={len(coins)} saved={saved} failed={failed} pruned={pruned}")
        return SyncResult(
            status="ok",
            received=len(coins),
            saved=saved,
            failed=failed,
            pruned=pruned,
            message=f"Saved {saved} of {len(coins)} snapshots",
        )

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------
    def status(self) -> ServiceStatus:
        if self.store is None:
            store_status = StoreStatus(configured=False, reachable=False)
        else:
            try:
                self.store.ping()
                store_status = StoreStatus(configured=True, reachable=True, snapshot_count=self.store.count())
            except StoreUnavailableError as exc:
                store_status = StoreStatus(configured=True, reachable=False, error=str(exc))

        return ServiceStatus(
            source_configured=self.source.is_configured(),
            store=store_status,
            cache_enabled=self.config.cache_enabled,
        )
