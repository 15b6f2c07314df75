"""Rating reconciliation across two providers.

Provider A (OMDb) is authoritative when it has both a rating and a
vote count. Otherwise Provider B (imdbapi.dev) fills every field it
has, Provider A's partial values covering the rest.
"""

from marquee.etl.errors import ExternalFetchError, ParseError
from marquee.etl.extractors.ratings import ImdbApiClient, OMDbClient
from marquee.etl.types import ImdbApiTitle, OmdbTitle, RatingResult, RatingSource
from marquee.etl.utils.logger import setup_logger


class RatingReconciler:
    """Merges the two rating providers into one RatingResult."""

    def __init__(self, omdb: OMDbClient, imdbapi: ImdbApiClient) -> None:
        """Initialize with provider clients.

        Args:
            omdb: Provider A client.
            imdbapi: Provider B client.
        """
        self._omdb = omdb
        self._imdbapi = imdbapi
        self._logger = setup_logger("etl.processor.rating")

    async def reconcile(self, imdb_id: str | None) -> RatingResult:
        """Compute the authoritative rating of a title.

        Args:
            imdb_id: Cross-reference id; None skips every provider call.

        Returns:
            RatingResult, (None, None) when no provider had data.
        """
        if not imdb_id:
            return RatingResult()

        primary = await self._fetch_primary(imdb_id)
        if primary is not None and primary.complete:
            return RatingResult(rating=primary.rating, votes=primary.votes, source="omdb")

        fallback = await self._fetch_fallback(imdb_id)
        return self._merge(primary, fallback)

    @staticmethod
    def _merge(primary: OmdbTitle | None, fallback: ImdbApiTitle | None) -> RatingResult:
        """Combine partial provider answers field by field."""
        rating, rating_from = None, None
        votes, votes_from = None, None

        if fallback is not None and fallback.rating is not None:
            rating, rating_from = fallback.rating, "imdbapi"
        elif primary is not None and primary.rating is not None:
            rating, rating_from = primary.rating, "omdb"

        if fallback is not None and fallback.votes is not None:
            votes, votes_from = fallback.votes, "imdbapi"
        elif primary is not None and primary.votes is not None:
            votes, votes_from = primary.votes, "omdb"

        contributors = {name for name in (rating_from, votes_from) if name}
        source: RatingSource
        if not contributors:
            source = "none"
        elif len(contributors) > 1:
            source = "mixed"
        else:
            source = "omdb" if "omdb" in contributors else "imdbapi"

        return RatingResult(rating=rating, votes=votes, source=source)

    async def _fetch_primary(self, imdb_id: str) -> OmdbTitle | None:
        """Query Provider A, treating failures as no data."""
        try:
            return await self._omdb.get_title(imdb_id)
        except (ExternalFetchError, ParseError) as e:
            self._logger.warning(f"OMDb lookup failed for {imdb_id}: {e}")
            return None

    async def _fetch_fallback(self, imdb_id: str) -> ImdbApiTitle | None:
        """Query Provider B, treating failures as no data."""
        try:
            return await self._imdbapi.get_title(imdb_id)
        except (ExternalFetchError, ParseError) as e:
            self._logger.warning(f"imdbapi lookup failed for {imdb_id}: {e}")
            return None
