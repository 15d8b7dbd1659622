"""Sync entrypoint - one-shot CoinMarketCap sync for cron jobs and containers.

Usage:
    python -m cryptoboard.sync_entrypoint              # sync once with the configured batch size
    python -m cryptoboard.sync_entrypoint 100          # sync once with a custom batch size
"""

import asyncio
import sys
from typing import Optional

from cryptoboard.core.config import ServiceConfig, settings
from cryptoboard.core.db import SessionLocal, engine
from cryptoboard.core.logging import get_logger
from cryptoboard.ingestion.coinmarketcap import CoinMarketCapSource
from cryptoboard.schemas.market import SyncResult
from cryptoboard.services.market_service import MarketDataService
from cryptoboard.services.store import SnapshotStore

logger = get_logger("sync_entrypoint")


async def run_sync(batch_size: Optional[int] = None) -> SyncResult:
    """Run a single sync against the configured database."""
    config = ServiceConfig.from_settings(settings)
    if batch_size is not None:
        config = config.model_copy(update={"sync_batch_size": batch_size})

    store = SnapshotStore(SessionLocal) if SessionLocal is not None else None
    source = CoinMarketCapSource(
        api_key=settings.COINMARKETCAP_API_KEY,
        base_url=settings.COINMARKETCAP_BASE_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
    )
    try:
        service = MarketDataService(store, source, config)
        return await service.refresh()
    finally:
        await source.aclose()
        if engine is not None:
            engine.dispose()


def parse_batch_size(argv: list[str]) -> Optional[int]:
    if len(argv) < 2:
        return None
    try:
        value = int(argv[1])
    except ValueError:
        value = 0
    if value <= 0:
        logger.error(f"Invalid batch size: {argv[1]}. Must be a positive integer")
        sys.exit(2)
    return value


def main():
    """Main entry point for a one-shot sync."""
    logger.info("Sync starting...")

    result = asyncio.run(run_sync(parse_batch_size(sys.argv)))
    logger.info(f"Sync finished: {result.model_dump()}")

    # Skipped runs are a configuration problem, failed runs an upstream one
    if result.status != "ok" or result.failed:
        sys.exit(1)

    return result


if __name__ == "__main__":
    main()
