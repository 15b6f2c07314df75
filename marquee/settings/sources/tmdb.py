"""TMDB API configuration settings.

Primary catalog source: now-playing listing, details, credits, videos.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TMDBSettings(BaseSettings):
    """TMDB API configuration.

    Attributes:
        api_key: TMDB v3 API key.
        read_access_token: TMDB v4 read access token (preferred when set).
        base_url: TMDB API base URL.
    """

    api_key: str = Field(default="", alias="TMDB_API_KEY")
    read_access_token: str = Field(default="", alias="TMDB_READ_ACCESS_TOKEN")
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        alias="TMDB_BASE_URL",
    )
    timeout_seconds: float = Field(default=30.0, alias="TMDB_TIMEOUT")

    # Rate limiting
    requests_per_period: int = Field(default=40, alias="TMDB_REQUESTS_PER_PERIOD")
    period_seconds: int = Field(default=10, alias="TMDB_PERIOD_SECONDS")
    min_request_delay: float = Field(default=0.05, alias="TMDB_MIN_REQUEST_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if TMDB credentials are configured."""
        return bool(self.read_access_token or self.api_key)
