# folder_share/config.py
"""
Centralized application configuration using pydantic-settings.

All settings are read from environment variables or .env file.
The HMAC secret is deployment configuration; it is never logged or returned.
"""

import os
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Priority: environment variables > .env file > defaults
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )

    # --- Database ---
    DB_URL: str = Field(
        default="postgresql://localhost:5432/folder_share",
        description="PostgreSQL connection URL for share metadata"
    )

    # --- Redis ---
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (rate limiting, redis blob backend, worker)"
    )

    # --- Sharing ---
    HMAC_SECRET: SecretStr = Field(
        default=SecretStr(""),
        description="Shared secret used to verify published folders"
    )
    BLOB_BACKEND: str = Field(
        default="filesystem",
        description="Blob store backend: filesystem or redis"
    )
    BLOB_STORE_PATH: str = Field(
        default="storage",
        description="Root directory of the filesystem blob backend"
    )
    PUBLISH_RATE_LIMIT_PER_HOUR: int = Field(
        default=0,
        ge=0,
        description="Publishes allowed per client IP per hour (0 disables)"
    )

    # --- Server ---
    HOST: str = Field(
        default="127.0.0.1",
        description="Server bind host"
    )
    PORT: int = Field(
        default=8787,
        description="Server bind port"
    )

    # --- Debug / Logging ---
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    TRACING_ENABLED: bool = Field(
        default=False,
        description="Export OpenTelemetry spans to the console"
    )
    SERVICE_NAME: str = Field(
        default="folder-share",
        description="service.name reported in traces"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v_upper

    @field_validator("BLOB_BACKEND")
    @classmethod
    def validate_blob_backend(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"filesystem", "redis"}:
            raise ValueError("BLOB_BACKEND must be 'filesystem' or 'redis'")
        return v_lower


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance (singleton pattern)."""
    return Settings()


# --- Singleton instance for easy import ---
settings = get_settings()


# --- Module-level exports ---

# Database
DATABASE_URL: str = settings.DB_URL

# Redis
REDIS_URL: str = settings.REDIS_URL

# Server
HOST: str = settings.HOST
PORT: int = settings.PORT
DEBUG: bool = settings.DEBUG
LOG_LEVEL: str = settings.LOG_LEVEL
SERVICE_NAME: str = settings.SERVICE_NAME

# --- Paths (computed, not from env) ---
PROJECT_ROOT: str = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LOGS_PATH: str = os.path.join(PROJECT_ROOT, "logs")
