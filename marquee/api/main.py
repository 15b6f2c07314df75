"""FastAPI application entry point.

Exposes the cron refresh trigger, a health check and the
Prometheus /metrics endpoint.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from marquee.api.routers import cron
from marquee.api.schemas import DatabaseComponentHealth, HealthResponse
from marquee.database import close_database, get_database
from marquee.monitoring.middleware import PrometheusMiddleware, mount_metrics
from marquee.settings import settings

# =============================================================================
# LIFESPAN
# =============================================================================


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Releases the database pool on shutdown.

    Args:
        _app: FastAPI application instance.

    Yields:
        None after startup tasks complete.
    """
    yield
    await close_database()


# =============================================================================
# APPLICATION FACTORY
# =============================================================================


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance.
    """
    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description="Now-playing catalog refresh and rating alerts",
        lifespan=lifespan,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )
    app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)
    _register_routers(app)
    return app


def _register_routers(app: FastAPI) -> None:
    """Register API routers.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(cron.router, prefix="/api")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

app = create_app()


@app.get(
    "/api/v1/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check",
    description="Verify API is running and the database is reachable.",
)
async def health_check() -> HealthResponse:
    """Health check endpoint (no authentication required).

    Returns:
        API health status with version and database status.
    """
    connected = await get_database().check_connection()
    return HealthResponse(
        status="healthy" if connected else "degraded",
        version=settings.api.version,
        environment=settings.environment,
        database=DatabaseComponentHealth(connected=connected),
    )
