"""Alert dispatcher.

Posts one JSON payload per (subscription, channel) to the notifier
webhook. Delivery is fire-and-forget: failures surface as
NotifierError and are never retried here.
"""

import logging
from types import TracebackType
from typing import Self

import httpx

from marquee.etl.errors import NotifierError
from marquee.etl.types import NotificationPayload
from marquee.settings import NotifySettings, settings

logger = logging.getLogger(__name__)


class Notifier:
    """Webhook client for alert delivery.

    When NOTIFIER_URL is unset every payload is logged instead
    of being sent.
    """

    def __init__(
        self,
        config: NotifySettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize notifier.

        Args:
            config: Notify settings (defaults to global settings).
            transport: Optional httpx transport (tests).
        """
        self._config = config or settings.notify
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter context and create HTTP client."""
        headers = {"Content-Type": "application/json"}
        if self._config.notifier_token:
            headers["Authorization"] = f"Bearer {self._config.notifier_token}"
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            headers=headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Exit context and close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def configured(self) -> bool:
        """Whether payloads are actually sent."""
        return self._config.notifier_configured

    async def dispatch(self, payload: NotificationPayload) -> None:
        """Send one alert payload.

        Args:
            payload: Alert body for a single channel.

        Raises:
            NotifierError: On transport failure or non-2xx answer.
        """
        movie = payload["movie"]
        if not self.configured:
            logger.info(
                f"[notify] {payload['channel']} -> {payload['userId']}: "
                f"{movie['title']} ({movie['rating']})"
            )
            return

        if self._client is None:
            raise NotifierError("Notifier not initialized. Use async with.")

        try:
            response = await self._client.post(self._config.notifier_url, json=payload)
        except httpx.HTTPError as e:
            raise NotifierError(f"Notifier unreachable: {e}") from e

        if response.is_error:
            raise NotifierError(
                f"Notifier answered {response.status_code} for "
                f"{payload['userId']}/{payload['channel']}"
            )
