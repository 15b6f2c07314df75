"""Rating provider settings.

Provider A (OMDb) and fallback Provider B (imdbapi.dev).
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OMDBSettings(BaseSettings):
    """OMDb API configuration.

    Attributes:
        api_key: OMDb API key.
        base_url: OMDb API base URL.
    """

    api_key: str = Field(default="", alias="OMDB_API_KEY")
    base_url: str = Field(default="https://www.omdbapi.com", alias="OMDB_BASE_URL")
    timeout_seconds: float = Field(default=15.0, alias="OMDB_TIMEOUT")
    min_request_delay: float = Field(default=0.1, alias="OMDB_MIN_REQUEST_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        """Check if OMDb API key is configured."""
        return bool(self.api_key)


class IMDBAPISettings(BaseSettings):
    """imdbapi.dev configuration (no key required)."""

    base_url: str = Field(default="https://api.imdbapi.dev", alias="IMDBAPI_BASE_URL")
    timeout_seconds: float = Field(default=15.0, alias="IMDBAPI_TIMEOUT")
    min_request_delay: float = Field(default=0.1, alias="IMDBAPI_MIN_REQUEST_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
