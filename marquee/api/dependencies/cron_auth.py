"""Cron trigger authentication.

The scheduler calls the refresh endpoint with
``Authorization: Bearer {CRON_SECRET}``. The check only applies
in production.
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from marquee.settings import settings

logger = logging.getLogger(__name__)


def verify_cron_secret(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject requests without the expected bearer secret.

    Args:
        authorization: Raw Authorization header.

    Raises:
        HTTPException: 401 if the secret is missing or wrong.
    """
    if not settings.is_production:
        return

    expected = f"Bearer {settings.api.cron_secret}"
    if not settings.api.cron_secret or not authorization:
        logger.warning("Missing CRON_SECRET header or secret not configured")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not secrets.compare_digest(authorization.encode(), expected.encode()):
        logger.warning("Invalid CRON_SECRET header")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


CronAuthorized = Annotated[None, Depends(verify_cron_secret)]
