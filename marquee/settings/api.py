"""API configuration settings.

FastAPI application and cron trigger settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """FastAPI configuration.

    Attributes:
        host: API host address.
        port: API port.
        title: OpenAPI title.
        version: OpenAPI version.
        cron_secret: Shared secret expected from the scheduler.
    """

    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=8000, alias="API_PORT")
    title: str = Field(default="Marquee API", alias="API_TITLE")
    version: str = Field(default="1.0.0", alias="API_VERSION")
    cron_secret: str = Field(default="", alias="CRON_SECRET")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
