"""OMDb API client (rating Provider A)."""

import httpx

from marquee.etl.errors import ExternalFetchError
from marquee.etl.extractors.base import BaseAPIClient
from marquee.etl.extractors.ratings.parsing import parse_omdb_title
from marquee.etl.types import OmdbTitle
from marquee.settings import OMDBSettings, settings


class OMDbClient(BaseAPIClient):
    """HTTP client for the OMDb API.

    Titles are looked up by IMDb id; ratings come back as
    display strings and are parsed into OmdbTitle.
    """

    name = "omdb"

    def __init__(
        self,
        config: OMDBSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize OMDb client with settings.

        Args:
            config: OMDb settings (defaults to global settings).
            transport: Optional httpx transport (tests).
        """
        config = config or settings.omdb
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            min_request_delay=config.min_request_delay,
            transport=transport,
        )
        self._api_key = config.api_key

    async def get_title(self, imdb_id: str) -> OmdbTitle:
        """Fetch ratings of a title.

        Args:
            imdb_id: IMDb id (tt...).

        Returns:
            Parsed title ratings.

        Raises:
            ExternalFetchError: When unconfigured, unreachable or title unknown.
            ParseError: On a malformed payload.
        """
        if not self._api_key:
            raise ExternalFetchError("OMDb API key not configured")

        payload = await self._get("/", {"i": imdb_id, "apikey": self._api_key})
        if str(payload.get("Response", "True")).lower() == "false":
            raise ExternalFetchError(f"OMDb has no title {imdb_id}: {payload.get('Error')}")
        return parse_omdb_title(imdb_id, payload)
