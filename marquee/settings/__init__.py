"""Centralized configuration for Marquee.

All configuration values are sourced from environment variables
(.env file). Every section has safe defaults so the pipeline can run
in development without external credentials; missing provider keys
surface as fetch errors on first call.

Usage:
    from marquee.settings import settings

    settings.tmdb.api_key
    settings.pipeline.movie_concurrency
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from marquee.settings.api import APISettings
from marquee.settings.base import LoggingSettings, PipelineSettings
from marquee.settings.database import DatabaseSettings
from marquee.settings.notify import NotifySettings
from marquee.settings.sources import IMDBAPISettings, OMDBSettings, TMDBSettings

__all__ = [
    # Main
    "Settings",
    "settings",
    # Base
    "LoggingSettings",
    "PipelineSettings",
    # Database
    "DatabaseSettings",
    # API
    "APISettings",
    # Notify
    "NotifySettings",
    # Sources
    "TMDBSettings",
    "OMDBSettings",
    "IMDBAPISettings",
    # Utilities
    "get_masked_settings",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    Access via the singleton: `from marquee.settings import settings`
    """

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    # Sources
    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    omdb: OMDBSettings = Field(default_factory=OMDBSettings)
    imdbapi: IMDBAPISettings = Field(default_factory=IMDBAPISettings)

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    notify: NotifySettings = Field(default_factory=NotifySettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid ENVIRONMENT. Valid: {valid_envs}")
        return v_lower

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

settings = Settings()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_masked_settings() -> dict[str, Any]:
    """Return settings dict with sensitive values masked.

    Returns:
        Configuration dictionary safe for logging.
    """
    config = settings.model_dump()
    mask = "***MASKED***"

    secrets = [
        ("tmdb", "api_key"),
        ("tmdb", "read_access_token"),
        ("omdb", "api_key"),
        ("database", "password"),
        ("database", "url"),
        ("notify", "notifier_token"),
        ("notify", "resend_api_key"),
        ("api", "cron_secret"),
    ]

    for section, key in secrets:
        if section in config and key in config[section] and config[section][key]:
            config[section][key] = mask

    return config
