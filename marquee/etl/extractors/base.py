"""Base async HTTP client for external providers.

Shared rate limiting, retry with exponential backoff and response
handling for the catalog and rating provider clients.
"""

import asyncio
import logging
import time
from types import TracebackType
from typing import Any, Self

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from marquee.etl.errors import (
    ExternalFetchError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (httpx.TransportError, RateLimitError, ServiceUnavailableError)


class BaseAPIClient:
    """Async HTTP client with rate limiting and retries.

    Implements sliding-window rate limiting plus a minimum delay
    between requests. Timeouts, 429 and 5xx answers are retried
    with exponential backoff.

    Attributes:
        name: Provider name used in logs and errors.
        not_found_error: Exception raised on 404.
    """

    name: str = "api"
    not_found_error: type[ExternalFetchError] = ExternalFetchError

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        min_request_delay: float = 0.0,
        requests_per_period: int = 0,
        period_seconds: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client configuration.

        Args:
            base_url: API base URL.
            timeout: Request timeout in seconds.
            min_request_delay: Minimum delay between requests.
            requests_per_period: Window request cap (0 disables).
            period_seconds: Window length in seconds.
            transport: Optional httpx transport (tests).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

        # Rate limiting state
        self._requests_per_period = requests_per_period
        self._period_seconds = period_seconds
        self._min_delay = min_request_delay
        self._request_times: list[float] = []
        self._rate_lock = asyncio.Lock()

        # HTTP client
        self._client: httpx.AsyncClient | None = None

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> Self:
        """Enter context and create HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=self._default_headers(),
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Exit context and close HTTP client.

        Args:
            _exc_type: Exception type if raised.
            _exc_val: Exception value if raised.
            _exc_tb: Exception traceback if raised.
        """
        if self._client:
            await self._client.aclose()
            self._client = None

    def _default_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {"Accept": "application/json", "User-Agent": "marquee/1.0"}

    def _default_params(self) -> dict[str, Any]:
        """Query parameters sent with every request."""
        return {}

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    async def _wait_for_rate_limit(self) -> None:
        """Wait if necessary to respect rate limits."""
        async with self._rate_lock:
            now = time.monotonic()

            if self._requests_per_period > 0:
                cutoff = now - self._period_seconds
                self._request_times = [t for t in self._request_times if t > cutoff]

                if len(self._request_times) >= self._requests_per_period:
                    wait_time = self._request_times[0] + self._period_seconds - now
                    if wait_time > 0:
                        logger.debug(f"{self.name} rate limit: waiting {wait_time:.2f}s")
                        await asyncio.sleep(wait_time)

            if self._request_times and self._min_delay > 0:
                elapsed = time.monotonic() - self._request_times[-1]
                if elapsed < self._min_delay:
                    await asyncio.sleep(self._min_delay - elapsed)

            self._request_times.append(time.monotonic())

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    async def _get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute GET request, mapping transport failures.

        Args:
            endpoint: API endpoint path.
            params: Optional query parameters.

        Returns:
            JSON response as dictionary.

        Raises:
            ExternalFetchError: On API or transport errors.
            ParseError: When the body is not a JSON object.
        """
        try:
            return await self._get_with_retry(endpoint, params)
        except httpx.HTTPError as e:
            raise ExternalFetchError(f"{self.name} request failed: {endpoint}: {e}") from e

    @retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _get_with_retry(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute GET request with rate limiting and retries.

        Args:
            endpoint: API endpoint path.
            params: Optional query parameters.

        Returns:
            JSON response as dictionary.
        """
        if self._client is None:
            raise ExternalFetchError(f"{self.name} client not initialized. Use async with.")

        await self._wait_for_rate_limit()

        request_params = self._default_params()
        if params:
            request_params.update(params)

        url = f"{self._base_url}{endpoint}"

        try:
            response = await self._client.get(url, params=request_params)
        except httpx.TimeoutException:
            logger.warning(f"{self.name} request timeout: {endpoint}")
            raise

        return self._handle_response(response, endpoint)

    def _handle_response(
        self,
        response: httpx.Response,
        endpoint: str,
    ) -> dict[str, Any]:
        """Handle HTTP response and extract JSON.

        Args:
            response: HTTP response object.
            endpoint: API endpoint (for logging).

        Returns:
            JSON response as dictionary.

        Raises:
            ExternalFetchError: On API errors.
            RateLimitError: When rate limit exceeded (429).
            ServiceUnavailableError: On 5xx answers.
            ParseError: When the body is not a JSON object.
        """
        if response.status_code == 200:
            try:
                payload = response.json()
            except ValueError as e:
                raise ParseError(f"{self.name} returned invalid JSON: {endpoint}") from e
            if not isinstance(payload, dict):
                raise ParseError(f"{self.name} returned non-object JSON: {endpoint}")
            return payload

        if response.status_code == 404:
            raise self.not_found_error(f"{self.name} not found: {endpoint}")

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "10")
            logger.warning(f"{self.name} rate limited. Retry after {retry_after}s")
            raise RateLimitError(f"{self.name} rate limited: {endpoint}")

        error_msg = f"{self.name} API error {response.status_code}: {endpoint}"
        if response.status_code >= 500:
            logger.warning(error_msg)
            raise ServiceUnavailableError(error_msg)

        logger.error(error_msg)
        raise ExternalFetchError(error_msg)
