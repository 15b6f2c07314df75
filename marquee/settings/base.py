"""Base configuration settings.

Contains foundational settings for logging and the refresh pipeline.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# LOGGING SETTINGS
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Log files directory.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL. Valid: {valid_levels}")
        return v_upper


# =============================================================================
# PIPELINE SETTINGS
# =============================================================================


class PipelineSettings(BaseSettings):
    """Catalog refresh pipeline configuration.

    Concurrency ceilings are kept low on purpose: every movie fans out
    to ~5 catalog calls plus ~5 calls per cast member, and all store
    writes share one connection pool.

    Attributes:
        primary_language: Language whose fields are used verbatim.
        secondary_language: Language falling back to primary values.
        region: Catalog region for the now-playing listing.
        max_pages: Number of listing pages to ingest.
        movie_concurrency: Movies processed simultaneously.
        actor_concurrency: Cast members processed simultaneously per movie.
        movie_delay_seconds: Spacing between movie starts.
        actor_delay_seconds: Spacing between cast member starts.
        movie_timeout_seconds: Upper bound for one movie (0 disables).
        max_cast_members: Top-N cast members linked per movie.
        skip_existing: Skip remote enrichment for movies already stored.
        refresh_existing_ratings: Re-reconcile ratings of stored movies.
        ledger_requires_delivery: Only record notifications that were delivered.
    """

    primary_language: str = Field(default="en-US", alias="PIPELINE_PRIMARY_LANGUAGE")
    secondary_language: str = Field(default="he-IL", alias="PIPELINE_SECONDARY_LANGUAGE")
    region: str = Field(default="IL", alias="PIPELINE_REGION")
    max_pages: int = Field(default=1, ge=1, alias="PIPELINE_MAX_PAGES")

    movie_concurrency: int = Field(default=2, ge=1, alias="PIPELINE_MOVIE_CONCURRENCY")
    actor_concurrency: int = Field(default=1, ge=1, alias="PIPELINE_ACTOR_CONCURRENCY")
    movie_delay_seconds: float = Field(default=0.05, ge=0, alias="PIPELINE_MOVIE_DELAY")
    actor_delay_seconds: float = Field(default=0.1, ge=0, alias="PIPELINE_ACTOR_DELAY")
    movie_timeout_seconds: float = Field(default=300.0, ge=0, alias="PIPELINE_MOVIE_TIMEOUT")
    max_cast_members: int = Field(default=15, ge=0, alias="PIPELINE_MAX_CAST_MEMBERS")

    skip_existing: bool = Field(default=True, alias="PIPELINE_SKIP_EXISTING")
    refresh_existing_ratings: bool = Field(
        default=False,
        alias="PIPELINE_REFRESH_EXISTING_RATINGS",
    )
    ledger_requires_delivery: bool = Field(
        default=False,
        alias="PIPELINE_LEDGER_REQUIRES_DELIVERY",
    )

    poster_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w300",
        alias="PIPELINE_POSTER_BASE_URL",
    )
    youtube_base_url: str = Field(
        default="https://www.youtube.com/watch?v=",
        alias="PIPELINE_YOUTUBE_BASE_URL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def languages(self) -> tuple[str, str]:
        """Primary and secondary languages, in that order."""
        return self.primary_language, self.secondary_language
