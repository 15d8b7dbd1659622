from pathlib import Path
from contextlib import asynccontextmanager
import asyncio
from typing import Optional

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from cryptoboard import __version__
from cryptoboard.api.routes import analytics_router, crypto_router, health_router, meta_router
from cryptoboard.core.config import ServiceConfig, settings
from cryptoboard.core.db import SessionLocal, engine
from cryptoboard.core.errors import NotFoundError, StoreUnavailableError
from cryptoboard.core.logging import get_logger
from cryptoboard.ingestion.coinmarketcap import CoinMarketCapSource
from cryptoboard.schemas.api import ErrorResponse
from cryptoboard.services.analytics_service import AnalyticsEngine
from cryptoboard.services.market_service import MarketDataService
from cryptoboard.services.store import SnapshotStore


log = get_logger("app")

API_PREFIX = "/api/crypto"
STATIC_DIR = Path(__file__).resolve().parent / "static"

# Background task handle
_sync_task: Optional[asyncio.Task] = None


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


async def run_refresh_cycle(service: MarketDataService) -> None:
    """Run one sync; failures are logged so the scheduler keeps going."""
    try:
        result = await service.refresh()
        if result.status == "ok":
            log.info(f"Scheduled sync: saved {result.saved}/{result.received}, pruned {result.pruned}")
        else:
            log.warning(f"Scheduled sync {result.status}: {result.message}")
    except Exception as exc:
        log.exception(f"Scheduled sync failed: {exc}")


async def scheduled_refresh_task(service: MarketDataService, interval: float) -> None:
    """Background task that syncs with the price source at a fixed interval."""
    log.info(f"Scheduled sync task started (interval: {interval}s)")

    # Run immediately on startup
    await run_refresh_cycle(service)

    while True:
        try:
            await asyncio.sleep(interval)
            await run_refresh_cycle(service)
        except asyncio.CancelledError:
            log.info("Scheduled sync task cancelled")
            break


def build_services(store: Optional[SnapshotStore], source: CoinMarketCapSource, config: ServiceConfig):
    return MarketDataService(store, source, config), AnalyticsEngine(store, config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _sync_task

    log.info(f"Starting application in {settings.ENV.upper()} mode")
    if settings.is_production:
        log.info("Production mode: Debug disabled, docs disabled, stricter logging")
    else:
        log.info("Development mode: Debug enabled, docs available")

    # Startup
    store = None
    if settings.database_configured and SessionLocal is not None:
        if settings.RUN_MIGRATIONS:
            try:
                run_migrations()
            except Exception:
                log.exception("Failed to apply migrations on startup; continuing, store calls may fail")
        store = SnapshotStore(SessionLocal)
    else:
        log.warning("DATABASE_URL not set; running without the snapshot store (live/fallback only)")

    config = ServiceConfig.from_settings(settings)
    source = CoinMarketCapSource(
        api_key=settings.COINMARKETCAP_API_KEY,
        base_url=settings.COINMARKETCAP_BASE_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
    )
    market_service, analytics_engine = build_services(store, source, config)
    app.state.market_service = market_service
    app.state.analytics_engine = analytics_engine

    if settings.SYNC_ENABLED:
        log.info("Starting scheduled sync background task...")
        _sync_task = asyncio.create_task(scheduled_refresh_task(market_service, config.sync_interval_seconds))
    else:
        log.info("Scheduled sync is disabled (SYNC_ENABLED=false)")

    yield

    # Shutdown
    log.info("Shutting down services...")

    if _sync_task:
        log.info("Cancelling scheduled sync task...")
        _sync_task.cancel()
        try:
            await _sync_task
        except asyncio.CancelledError:
            pass
        _sync_task = None

    await source.aclose()
    if engine is not None:
        engine.dispose()

    log.info("Application shutdown complete")


# Configure FastAPI based on environment
app = FastAPI(
    title="CryptoBoard",
    description="Cryptocurrency dashboard API with cache, live and fallback data tiers",
    version=__version__,
    lifespan=lifespan,
    # Disable docs in production for security
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    # Debug mode only in development
    debug=settings.debug_enabled,
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content=ErrorResponse(error=f"No data for {exc.symbol}", detail=exc.reason).model_dump())


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    log.error(f"Store unavailable on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=ErrorResponse(error="Data store unavailable", detail=str(exc)).model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error", detail=exc.__class__.__name__).model_dump())


app.include_router(health_router, prefix=API_PREFIX)
app.include_router(crypto_router, prefix=API_PREFIX)
app.include_router(analytics_router, prefix=API_PREFIX)
app.include_router(meta_router, prefix=API_PREFIX)

# Dashboard last so API routes take precedence
app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="dashboard")
