"""Environment-based configuration using pydantic-settings.

Provides the default retry budget, scheduler timing and logging options.

Example:
    >>> from persevere.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.retries
    10
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # PERSEVERE_RETRY_RETRIES=3
    # PERSEVERE_RETRY_MIN_TIMEOUT=0.25
    # PERSEVERE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, NonNegativeInt, PositiveFloat, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Default retry budget and scheduler timing."""

    model_config = SettingsConfigDict(
        env_prefix="PERSEVERE_RETRY_",
        extra="ignore",
    )

    retries: NonNegativeInt = Field(default=10, description="Retries after the first attempt")
    factor: PositiveFloat = Field(default=2.0, description="Exponential backoff factor")
    min_timeout: NonNegativeFloat = Field(default=1.0, description="Delay before the first retry in seconds")
    max_timeout: PositiveFloat = Field(default=float("inf"), description="Maximum delay in seconds")
    randomize: bool = Field(default=False, description="Multiply delays by a random factor in [1, 2)")
    forever: bool = Field(default=False, description="Keep retrying after the budget is spent")
    max_retry_time: PositiveFloat | None = Field(default=None, description="Stop retrying after this many seconds")

    @model_validator(mode="after")
    def _check_bounds(self) -> RetrySettings:
        if self.min_timeout > self.max_timeout:
            raise ValueError("min_timeout must not exceed max_timeout")
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PERSEVERE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"


class PersevereSettings(BaseSettings):
    """Root settings for persevere.

    Loads configuration from environment variables with PERSEVERE_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        PERSEVERE_RETRY_RETRIES=5
        PERSEVERE_RETRY_RANDOMIZE=true
        PERSEVERE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSEVERE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> PersevereSettings:
    """Get the global settings instance (cached)."""
    return PersevereSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
