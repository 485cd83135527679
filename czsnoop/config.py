"""
Configuration management for czsnoop.

Uses pydantic-settings for type-safe configuration with automatic
environment variable loading (``CZSNOOP_*``) and validation.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from czsnoop.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_DEEP_SEARCH_WORKERS,
    DEFAULT_REQUEST_TIMEOUT,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are validated at startup, so a bad value fails fast
    instead of surfacing in the middle of a search.
    """

    model_config = SettingsConfigDict(
        env_prefix="CZSNOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # RZP Configuration
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Trade Licensing Register",
    )
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        description="Timeout in seconds for a single remote call",
    )
    user_agent: str = Field(
        default="czsnoop (https://github.com/fstaffa/czsnoop)",
        description="User-Agent header sent with every request",
    )

    # Concurrency
    deep_search_workers: int = Field(
        default=DEFAULT_DEEP_SEARCH_WORKERS,
        ge=1,
        description="Maximum number of concurrent detail fetches",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        """Strip whitespace and trailing slashes so paths can be appended."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("user_agent", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string values."""
        if isinstance(v, str):
            return v.strip()
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def get_base_url() -> str:
    """Get RZP base URL from settings."""
    return get_settings().base_url


def get_request_timeout() -> float:
    """Get per-request timeout from settings."""
    return get_settings().request_timeout


def get_deep_search_workers() -> int:
    """Get the deep search worker bound from settings."""
    return get_settings().deep_search_workers
