"""Application settings with grouped configuration.

This module provides configuration management using Pydantic Settings
with logical grouping for different concerns.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CacheInvalidation = Literal["full", "address"]

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _normalize_log_level(v: str) -> str:
    upper = v.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {v}. Must be one of {_VALID_LOG_LEVELS}")
    return upper


class CoreSettings(BaseSettings):
    """Core settings.

    Attributes:
        log_level: Logging level
        log_json: Emit JSON structured logs
        seed_file: YAML/JSON file with networks loaded at startup (empty disables)
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_json: bool = False
    seed_file: str = ""

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _normalize_log_level(v)


class CacheSettings(BaseSettings):
    """Match cache settings.

    Attributes:
        cache_enabled: Consult and populate the positive-result cache
        cache_invalidation: "full" clears the cache whenever a remove deletes
            a network, "address" only drops the removed address's own key
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    cache_enabled: bool = True
    cache_invalidation: CacheInvalidation = "full"


class SecuritySettings(BaseSettings):
    """Security-related settings.

    Attributes:
        admin_api_key: API key for mutating endpoints (empty = fail closed)
        enable_api_docs: Whether to enable /docs and /redoc endpoints
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    admin_api_key: str = ""  # Empty = fail closed
    enable_api_docs: bool = False


class Settings(BaseSettings):
    """Main application settings combining all configuration groups.

    Example:
        settings = get_settings()
        if settings.cache.cache_enabled:
            ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = "INFO"
    log_json: bool = False
    seed_file: str = ""

    # Match cache
    cache_enabled: bool = True
    cache_invalidation: CacheInvalidation = "full"

    # Admin
    admin_api_key: str = ""
    enable_api_docs: bool = False

    # HTTP server
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _normalize_log_level(v)

    @property
    def core(self) -> CoreSettings:
        """Get core settings as a group."""
        return CoreSettings(
            log_level=self.log_level,
            log_json=self.log_json,
            seed_file=self.seed_file,
        )

    @property
    def cache(self) -> CacheSettings:
        """Get match cache settings as a group."""
        return CacheSettings(
            cache_enabled=self.cache_enabled,
            cache_invalidation=self.cache_invalidation,
        )

    @property
    def security(self) -> SecuritySettings:
        """Get security settings as a group."""
        return SecuritySettings(
            admin_api_key=self.admin_api_key,
            enable_api_docs=self.enable_api_docs,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment variables
    """
    return Settings()
