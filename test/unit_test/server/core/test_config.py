"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that the
grouped configuration models are derived from the flat settings.
"""

import pytest

from productlobby.server.core import constant
from productlobby.server.core.config import (
    CacheConfig,
    CORSConfig,
    Settings,
    SignalScoreConfig,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Drop variables the test session sets so defaults are visible."""
    for name in ("DATABASE_URL", "CACHE_URL", "CACHE_TTL_SECONDS", "PRODUCTLOBBY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000
        assert settings.log_level == "INFO"
        assert settings.database_url == "sqlite+aiosqlite:///./productlobby.db"
        assert settings.database_echo is False
        assert settings.user_header == "X-User-Id"

    def test_grouped_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.cache == CacheConfig(url="memory://", ttl_seconds=300)
        assert settings.signal_score == SignalScoreConfig(stale_minutes=5, refresh_batch_size=100)
        assert settings.cors.origins == ["*"]


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_binding(self, monkeypatch):
        monkeypatch.setenv("PRODUCTLOBBY_SERVER_HOST", "127.0.0.1")
        monkeypatch.setenv("PRODUCTLOBBY_SERVER_PORT", "9001")
        monkeypatch.setenv("PRODUCTLOBBY_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.server_host == "127.0.0.1"
        assert settings.server_port == 9001
        assert settings.log_level.upper() == "DEBUG"

    def test_database_url_binding(self):
        """The test session runs against in-memory SQLite."""
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///:memory:"

    def test_cache_binding(self, monkeypatch):
        monkeypatch.setenv("CACHE_URL", "redis://cache:6379/2")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "60")

        cache = Settings(_env_file=None).cache

        assert isinstance(cache, CacheConfig)
        assert cache.url == "redis://cache:6379/2"
        assert cache.ttl_seconds == 60

    def test_signal_score_binding(self, monkeypatch):
        monkeypatch.setenv("SIGNAL_SCORE_STALE_MINUTES", "15")
        monkeypatch.setenv("SIGNAL_SCORE_REFRESH_BATCH_SIZE", "25")

        config = Settings(_env_file=None).signal_score

        assert config.stale_minutes == 15
        assert config.refresh_batch_size == 25

    def test_cors_binding(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://productlobby.example"]')
        monkeypatch.setenv("CORS_ALLOW_CREDENTIALS", "false")

        cors = Settings(_env_file=None).cors

        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://productlobby.example"]
        assert cors.allow_credentials is False

    def test_unknown_variables_are_ignored(self, monkeypatch):
        monkeypatch.setenv("SOMETHING_ELSE", "1")

        Settings(_env_file=None)


class TestGroupedModels:
    def test_populate_by_name(self):
        assert CacheConfig(url="memory://").url == "memory://"
        assert CacheConfig(CACHE_URL="redis://x").url == "redis://x"


def test_constants():
    assert constant.PROJECT_NAME == "ProductLobby"
    assert constant.API_V1_STR == "/api/v1"
