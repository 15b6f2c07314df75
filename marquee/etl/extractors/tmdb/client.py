"""TMDB API client with rate limiting.

Handles HTTP communication with The Movie Database API
including authentication, rate limiting, and retries.
"""

from typing import Any, cast

import httpx

from marquee.etl.errors import TMDBNotFoundError
from marquee.etl.extractors.base import BaseAPIClient
from marquee.etl.types import (
    TMDBCreditsData,
    TMDBExternalIds,
    TMDBGenreListResponse,
    TMDBMovieDetails,
    TMDBNowPlayingResponse,
    TMDBPersonDetails,
    TMDBVideosResponse,
)
from marquee.settings import TMDBSettings, settings


class TMDBClient(BaseAPIClient):
    """HTTP client for TMDB API with rate limiting.

    Implements window rate limiting to respect TMDB's API
    limits (40 requests per 10 seconds). Authenticates with the
    read access token when set, else with the v3 API key.
    """

    name = "tmdb"
    not_found_error = TMDBNotFoundError

    def __init__(
        self,
        config: TMDBSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize TMDB client with settings.

        Args:
            config: TMDB settings (defaults to global settings).
            transport: Optional httpx transport (tests).
        """
        config = config or settings.tmdb
        super().__init__(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            min_request_delay=config.min_request_delay,
            requests_per_period=config.requests_per_period,
            period_seconds=config.period_seconds,
            transport=transport,
        )
        self._api_key = config.api_key
        self._read_access_token = config.read_access_token

    def _default_headers(self) -> dict[str, str]:
        """Add bearer authentication when a read access token is set."""
        headers = super()._default_headers()
        if self._read_access_token:
            headers["Authorization"] = f"Bearer {self._read_access_token}"
        return headers

    def _default_params(self) -> dict[str, Any]:
        """Add the v3 API key when no bearer token is used."""
        if self._read_access_token or not self._api_key:
            return {}
        return {"api_key": self._api_key}

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    async def get_now_playing(
        self,
        page: int = 1,
        language: str = "en-US",
        region: str | None = None,
    ) -> TMDBNowPlayingResponse:
        """Get the currently-showing listing.

        Args:
            page: Page number.
            language: Response language.
            region: ISO 3166-1 region filter.

        Returns:
            Now playing response with results.
        """
        params: dict[str, Any] = {"page": page, "language": language}
        if region:
            params["region"] = region
        return cast(TMDBNowPlayingResponse, await self._get("/movie/now_playing", params))

    async def get_movie_details(self, movie_id: int, language: str) -> TMDBMovieDetails:
        """Get movie details in one language.

        Args:
            movie_id: TMDB movie ID.
            language: Response language.

        Returns:
            Movie details response.
        """
        data = await self._get(f"/movie/{movie_id}", {"language": language})
        return cast(TMDBMovieDetails, data)

    async def get_movie_external_ids(self, movie_id: int) -> TMDBExternalIds:
        """Get cross-reference ids of a movie.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            External ids response (imdb_id may be null).
        """
        return cast(TMDBExternalIds, await self._get(f"/movie/{movie_id}/external_ids"))

    async def get_movie_credits(self, movie_id: int) -> TMDBCreditsData:
        """Get movie cast.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            Credits response with cast.
        """
        return cast(TMDBCreditsData, await self._get(f"/movie/{movie_id}/credits"))

    async def get_movie_videos(self, movie_id: int, language: str) -> TMDBVideosResponse:
        """Get videos attached to a movie.

        Args:
            movie_id: TMDB movie ID.
            language: Video language filter.

        Returns:
            Videos response.
        """
        data = await self._get(f"/movie/{movie_id}/videos", {"language": language})
        return cast(TMDBVideosResponse, data)

    async def get_person_details(self, person_id: int, language: str) -> TMDBPersonDetails:
        """Get person details in one language.

        Args:
            person_id: TMDB person ID.
            language: Response language.

        Returns:
            Person details response.
        """
        data = await self._get(f"/person/{person_id}", {"language": language})
        return cast(TMDBPersonDetails, data)

    async def get_genres(self, language: str) -> TMDBGenreListResponse:
        """Get list of movie genres in one language.

        Args:
            language: Response language.

        Returns:
            Genres response with list of genre objects.
        """
        data = await self._get("/genre/movie/list", {"language": language})
        return cast(TMDBGenreListResponse, data)
