from typing import Literal

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Database (None = run without the snapshot store)
    DATABASE_URL: str | None = None
    RUN_MIGRATIONS: bool = True

    # CoinMarketCap
    COINMARKETCAP_API_KEY: str | None = Field(
        default=None,
        validation_alias=AliasChoices("COINMARKETCAP_API_KEY", "COINMARKET_API_KEY"),
    )
    COINMARKETCAP_BASE_URL: str = "https://pro-api.coinmarketcap.com"
    API_TIMEOUT_SECONDS: float = 5.0

    # Logging
    LOG_LEVEL: str = "INFO"
    SLACK_WEBHOOK_URL: str | None = None

    # Market data
    MAX_RESULTS: int = 10
    DEFAULT_CURRENCY: str = "USD"
    CACHE_ENABLED: bool = True

    # Background sync
    SYNC_ENABLED: bool = True
    SYNC_INTERVAL_SECONDS: int = 5 * 60
    SYNC_BATCH_SIZE: int = 50

    # Snapshots kept per asset after each sync (0 = keep everything)
    RETENTION_MAX_ROWS_PER_ASSET: int = 2000

    # Analytics
    ANALYTICS_CHART_POINTS: int = 100
    ANALYTICS_TABLE_ROWS: int = 50

    # Docs Configuration
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
        populate_by_name=True,
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def database_configured(self) -> bool:
        return bool(self.DATABASE_URL and self.DATABASE_URL.strip())

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        if self.is_production:
            # In production, minimum INFO level (ignore DEBUG)
            return self.LOG_LEVEL if self.LOG_LEVEL.upper() != "DEBUG" else "INFO"
        return self.LOG_LEVEL

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development


class ServiceConfig(BaseModel):
    """Immutable tunables handed to the market data service and analytics engine."""

    max_results: int = 10
    currency: str = "USD"
    cache_enabled: bool = True
    sync_interval_seconds: int = 300
    sync_batch_size: int = 50
    api_timeout_seconds: float = 5.0
    retention_max_rows_per_asset: int = 2000
    chart_points: int = 100
    table_rows: int = 50

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, source: Settings) -> "ServiceConfig":
        return cls(
            max_results=source.MAX_RESULTS,
            currency=source.DEFAULT_CURRENCY.upper(),
            cache_enabled=source.CACHE_ENABLED,
            sync_interval_seconds=source.SYNC_INTERVAL_SECONDS,
            sync_batch_size=source.SYNC_BATCH_SIZE,
            api_timeout_seconds=source.API_TIMEOUT_SECONDS,
            retention_max_rows_per_asset=source.RETENTION_MAX_ROWS_PER_ASSET,
            chart_points=source.ANALYTICS_CHART_POINTS,
            table_rows=source.ANALYTICS_TABLE_ROWS,
        )


settings = Settings()
