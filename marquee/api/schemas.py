"""Pydantic schemas for API responses."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

# =============================================================================
# HEALTH
# =============================================================================


class DatabaseComponentHealth(BaseModel):
    """Database connection health status."""

    connected: bool = False


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(examples=["healthy"])
    version: str = Field(examples=["1.0.0"])
    environment: str = Field(examples=["production"])
    database: DatabaseComponentHealth = Field(default_factory=DatabaseComponentHealth)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# CRON
# =============================================================================


class CronRefreshResponse(BaseModel):
    """Successful refresh trigger response."""

    ok: bool = True
    count: int = Field(ge=0, description="Movies in the now-playing listing")


class CronErrorResponse(BaseModel):
    """Failed refresh trigger response."""

    ok: bool = False
    error: str = Field(examples=["failed"])
