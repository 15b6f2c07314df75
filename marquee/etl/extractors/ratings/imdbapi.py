"""imdbapi.dev client (rating Provider B)."""

import httpx

from marquee.etl.extractors.base import BaseAPIClient
from marquee.etl.extractors.ratings.parsing import parse_imdbapi_title
from marquee.etl.types import ImdbApiTitle
from marquee.settings import IMDBAPISettings, settings


class ImdbApiClient(BaseAPIClient):
    """HTTP client for imdbapi.dev (no authentication)."""

    name = "imdbapi"

    def __init__(
        self,
        config: IMDBAPISettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize imdbapi client with settings.

        Args:
            config: imdbapi settings (defaults to global settings).
            transport: Optional httpx transport (tests).
        """
        config = config or settings.imdbapi
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            min_request_delay=config.min_request_delay,
            transport=transport,
        )

    async def get_title(self, imdb_id: str) -> ImdbApiTitle:
        """Fetch the aggregate rating of a title.

        Args:
            imdb_id: IMDb id (tt...).

        Returns:
            Parsed title ratings.

        Raises:
            ExternalFetchError: When unreachable or title unknown.
            ParseError: On a malformed payload.
        """
        payload = await self._get(f"/titles/{imdb_id}")
        return parse_imdbapi_title(imdb_id, payload)
