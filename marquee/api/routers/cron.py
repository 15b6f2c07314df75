"""Cron trigger endpoints.

Runs the now-playing catalog refresh on behalf of an external
scheduler and reports the listing size.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from marquee.api.dependencies.cron_auth import verify_cron_secret
from marquee.api.schemas import CronErrorResponse, CronRefreshResponse
from marquee.etl.pipeline import refresh_now_playing_catalog
from marquee.etl.types import RefreshSummary
from marquee.etl.utils import setup_logger

logger = setup_logger("api.cron")

RefreshRunner = Callable[[], Awaitable[RefreshSummary]]

router = APIRouter(
    prefix="/cron",
    tags=["Cron"],
    dependencies=[Depends(verify_cron_secret)],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================


def get_refresh_runner() -> RefreshRunner:
    """Provide the refresh entry point (overridable in tests).

    Returns:
        Coroutine function running one refresh.
    """
    return refresh_now_playing_catalog


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.get(
    "/now-playing-refresh",
    response_model=CronRefreshResponse,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Invalid cron secret"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": CronErrorResponse},
    },
    summary="Refresh now-playing catalog",
    description="Ingest the now-playing listing, enrich new movies and send alerts.",
)
async def now_playing_refresh(
    runner: Annotated[RefreshRunner, Depends(get_refresh_runner)],
) -> CronRefreshResponse | JSONResponse:
    """Run the catalog refresh.

    Args:
        runner: Refresh entry point.

    Returns:
        Listing size on success, 500 with a generic error otherwise.
    """
    logger.info("Starting now-playing catalog refresh")
    try:
        summary = await runner()
    except Exception as e:
        logger.error(f"Catalog refresh cron failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CronErrorResponse(error="failed").model_dump(),
        )

    logger.info(f"Catalog refresh completed: {summary.listed} movies listed")
    return CronRefreshResponse(count=summary.listed)
