"""Settings and service configuration tests"""

import pytest
from pydantic import ValidationError

from cryptoboard.core.config import ServiceConfig, Settings
from cryptoboard.core.logging import _resolve_level


class TestSettings:
    def test_defaults(self, monkeypatch):
        for key in ("DATABASE_URL", "COINMARKETCAP_API_KEY", "COINMARKET_API_KEY", "ENV", "MAX_RESULTS"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.database_configured is False
        assert settings.COINMARKETCAP_API_KEY is None
        assert settings.MAX_RESULTS == 10
        assert settings.SYNC_INTERVAL_SECONDS == 300
        assert settings.docs_enabled is True

    def test_legacy_api_key_name(self, monkeypatch):
        monkeypatch.delenv("COINMARKETCAP_API_KEY", raising=False)
        monkeypatch.setenv("COINMARKET_API_KEY", "legacy-key")

        assert Settings(_env_file=None).COINMARKETCAP_API_KEY == "legacy-key"

    def test_production_caps_debug_logging(self, monkeypatch):
        monkeypatch.setenv("ENV", "prod")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.effective_log_level == "INFO"
        assert settings.docs_enabled is False


class TestServiceConfig:
    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("MAX_RESULTS", "25")
        monkeypatch.setenv("DEFAULT_CURRENCY", "eur")
        monkeypatch.setenv("RETENTION_MAX_ROWS_PER_ASSET", "0")

        config = ServiceConfig.from_settings(Settings(_env_file=None))

        assert config.max_results == 25
        assert config.currency == "EUR"
        assert config.retention_max_rows_per_asset == 0

    def test_is_immutable(self):
        config = ServiceConfig()

        with pytest.raises(ValidationError):
            config.max_results = 99


@pytest.mark.parametrize(
    "raw, expected",
    [("debug", "DEBUG"), ("WARN", "WARNING"), ("nonsense", "INFO"), (None, "INFO")],
)
def test_log_level_resolution(raw, expected):
    assert _resolve_level(raw) == expected
