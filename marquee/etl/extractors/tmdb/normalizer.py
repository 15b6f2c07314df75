"""TMDB data normalizer.

Transforms raw TMDB API responses into rows ready for the
catalog repositories, applying the bilingual fallback rules.
"""

import logging
from datetime import date

from marquee.database.repositories import ActorData, MovieTranslationData, TrailerData
from marquee.etl.types import (
    TMDBListingItem,
    TMDBMovieDetails,
    TMDBPersonDetails,
    TMDBVideoData,
)

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown"
SYNTHETIC_ID_PREFIX = "source-"


def clean_text(value: str | None) -> str | None:
    """Strip a string, mapping empty values to None."""
    if value is None:
        return None
    return value.strip() or None


def canonical_id(imdb_id: str | None, tmdb_id: int) -> str:
    """Return the stable catalog key of a movie or person.

    Args:
        imdb_id: Cross-reference id, if known.
        tmdb_id: TMDB id.

    Returns:
        The IMDb id, else ``source-{tmdb_id}``.
    """
    if imdb_id and imdb_id.strip():
        return imdb_id.strip()
    return f"{SYNTHETIC_ID_PREFIX}{tmdb_id}"


class TMDBNormalizer:
    """Normalizes TMDB API data for database insertion.

    Attributes:
        poster_base_url: Prefix for poster and profile paths.
        youtube_base_url: Prefix for trailer keys.
    """

    TRAILER_TYPE = "Trailer"
    TRAILER_SITE = "YouTube"

    def __init__(self, poster_base_url: str, youtube_base_url: str) -> None:
        """Initialize URL prefixes.

        Args:
            poster_base_url: Image base URL (e.g. .../t/p/w300).
            youtube_base_url: Watch URL prefix.
        """
        self.poster_base_url = poster_base_url.rstrip("/")
        self.youtube_base_url = youtube_base_url

    # -------------------------------------------------------------------------
    # Movie Normalization
    # -------------------------------------------------------------------------

    def movie_translations(
        self,
        movie_id: str,
        listing: TMDBListingItem,
        primary: TMDBMovieDetails,
        secondary: TMDBMovieDetails,
        languages: tuple[str, str],
    ) -> list[MovieTranslationData]:
        """Build the primary and secondary translations of a movie.

        Primary fields are used verbatim, its title falling back to the
        listing title then "Unknown". Secondary fields fall back per field
        to the primary value.

        Args:
            movie_id: Canonical movie id.
            listing: Listing item (title fallback).
            primary: Primary-language details.
            secondary: Secondary-language details.
            languages: (primary, secondary) language tags.

        Returns:
            Two translation rows, primary first.
        """
        primary_language, secondary_language = languages

        primary_row = MovieTranslationData(
            movie_id=movie_id,
            language=primary_language,
            title=(
                clean_text(primary.get("title"))
                or clean_text(listing.get("title"))
                or UNKNOWN_TITLE
            ),
            original_title=clean_text(primary.get("original_title")),
            description=clean_text(primary.get("overview")),
            poster_url=self.image_url(primary.get("poster_path")),
        )
        secondary_row = MovieTranslationData(
            movie_id=movie_id,
            language=secondary_language,
            title=clean_text(secondary.get("title")) or primary_row["title"] or UNKNOWN_TITLE,
            original_title=(
                clean_text(secondary.get("original_title")) or primary_row["original_title"]
            ),
            description=clean_text(secondary.get("overview")) or primary_row["description"],
            poster_url=self.image_url(secondary.get("poster_path")) or primary_row["poster_url"],
        )
        return [primary_row, secondary_row]

    def trailers(
        self,
        movie_id: str,
        videos: list[TMDBVideoData],
        language: str,
    ) -> list[TrailerData]:
        """Keep YouTube trailers and map them to trailer rows.

        Args:
            movie_id: Canonical movie id.
            videos: Raw video entries.
            language: Language tag stored on each trailer.

        Returns:
            Trailer rows, one per distinct key.
        """
        rows: dict[str, TrailerData] = {}
        for video in videos:
            key = video.get("key")
            if (
                not key
                or video.get("type") != self.TRAILER_TYPE
                or video.get("site") != self.TRAILER_SITE
            ):
                continue
            rows[key] = TrailerData(
                movie_id=movie_id,
                key=key,
                title=clean_text(video.get("name")),
                language=language,
                url=f"{self.youtube_base_url}{key}",
            )
        return list(rows.values())

    # -------------------------------------------------------------------------
    # Person Normalization
    # -------------------------------------------------------------------------

    def actor(self, actor_id: str, person: TMDBPersonDetails) -> ActorData:
        """Build the actor base row.

        Args:
            actor_id: Canonical actor id.
            person: Primary-language person details.

        Returns:
            Actor row.
        """
        return ActorData(
            id=actor_id,
            tmdb_id=person["id"],
            imdb_id=clean_text(person.get("imdb_id")),
            profile_url=self.image_url(person.get("profile_path")),
            popularity=person.get("popularity"),
            birthday=self.parse_date(person.get("birthday")),
            deathday=self.parse_date(person.get("deathday")),
            place_of_birth=clean_text(person.get("place_of_birth")),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def image_url(self, path: str | None) -> str | None:
        """Build an absolute image URL from a TMDB path."""
        if not path:
            return None
        return f"{self.poster_base_url}/{path.lstrip('/')}"

    @staticmethod
    def parse_date(value: str | None) -> date | None:
        """Parse an ISO date string, None when empty or invalid."""
        if not value:
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            logger.debug(f"Invalid date: {value}")
            return None

