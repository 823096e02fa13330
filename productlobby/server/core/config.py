"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


class CacheConfig(BaseModel):
    """Key-value cache configuration."""

    url: str = Field(
        default="memory://",
        alias="CACHE_URL",
        description="Cache backend URL: memory:// for in-process, redis://host:port/db for Redis",
    )
    ttl_seconds: int = Field(
        default=300, alias="CACHE_TTL_SECONDS", description="Default time-to-live for cached score payloads"
    )

    model_config = {"populate_by_name": True}


class SignalScoreConfig(BaseModel):
    """Signal score refresh configuration."""

    stale_minutes: int = Field(
        default=5,
        alias="SIGNAL_SCORE_STALE_MINUTES",
        description="Age after which a cached campaign signal score is recomputed",
    )
    refresh_batch_size: int = Field(
        default=100,
        alias="SIGNAL_SCORE_REFRESH_BATCH_SIZE",
        description="Maximum campaigns recomputed per stale refresh pass",
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # ProductLobby Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="ProductLobby server host address to bind to",
        alias="PRODUCTLOBBY_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="ProductLobby server port number",
        alias="PRODUCTLOBBY_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="ProductLobby server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="PRODUCTLOBBY_LOG_LEVEL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./productlobby.db",
        description="Async database connection URL for application database",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements to the log (debugging only)",
        alias="DATABASE_ECHO",
    )

    # =====================================================================
    # Cache Configuration
    # =====================================================================
    cache_url: str = Field(default="memory://", alias="CACHE_URL")
    cache_ttl_seconds: int = Field(default=300, alias="CACHE_TTL_SECONDS")

    # =====================================================================
    # Signal Score Configuration
    # =====================================================================
    signal_score_stale_minutes: int = Field(default=5, alias="SIGNAL_SCORE_STALE_MINUTES")
    signal_score_refresh_batch_size: int = Field(default=100, alias="SIGNAL_SCORE_REFRESH_BATCH_SIZE")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    user_header: str = Field(
        default="X-User-Id",
        alias="PRODUCTLOBBY_USER_HEADER",
        description="Request header carrying the authenticated user id",
    )

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def cache(self) -> CacheConfig:
        """Get cache configuration from environment variables."""
        return CacheConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def signal_score(self) -> SignalScoreConfig:
        """Get signal score refresh configuration from environment variables."""
        return SignalScoreConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
