"""Genre normalizer and run-scoped cache.

Genres are upserted once per run by TMDB id with one translation
per language, then linked to movies by full replacement.
"""

from marquee.database import DatabaseConnection, GenreRepository
from marquee.etl.context import RunContext
from marquee.etl.errors import ConflictError, MarqueeError
from marquee.etl.extractors import TMDBClient
from marquee.etl.processors.base import BaseProcessor
from marquee.etl.types import TMDBGenreData

# Built-in Hebrew names used when the catalog has no he-IL translation
HEBREW_GENRE_NAMES: dict[int, str] = {
    28: "פעולה",
    12: "הרפתקאות",
    16: "אנימציה",
    35: "קומדיה",
    80: "פשע",
    99: "דוקומנטרי",
    18: "דרמה",
    10751: "משפחה",
    14: "פנטזיה",
    36: "היסטוריה",
    27: "אימה",
    10402: "מוזיקה",
    9648: "מסתורין",
    10749: "רומנטיקה",
    878: "מדע בדיוני",
    10770: "סרט טלוויזיה",
    53: "מתח",
    10752: "מלחמה",
    37: "מערבון",
}


class GenreProcessor(BaseProcessor):
    """Upserts genres and replaces movie genre links."""

    name = "genre"

    def __init__(self, db: DatabaseConnection, tmdb: TMDBClient) -> None:
        """Initialize genre processor.

        Args:
            db: Database connection.
            tmdb: Catalog client for genre lists.
        """
        super().__init__(db)
        self._tmdb = tmdb

    # -------------------------------------------------------------------------
    # Run cache
    # -------------------------------------------------------------------------

    async def cache_genre_translations(self, context: RunContext) -> int:
        """Fill the run cache with catalog genre names in both languages.

        A failure is logged and the run continues with primary-name
        fallbacks.

        Args:
            context: Current run context.

        Returns:
            Number of cached (genre, language) names.
        """
        for language in context.config.languages:
            try:
                response = await self._tmdb.get_genres(language)
            except MarqueeError as e:
                self._logger.warning(f"Genre list unavailable for {language}: {e}")
                continue

            for genre in response.get("genres", []):
                if genre.get("name"):
                    context.genre_names[(genre["id"], language)] = genre["name"]

        self._logger.info(f"Cached {len(context.genre_names)} genre names")
        return len(context.genre_names)

    # -------------------------------------------------------------------------
    # Movie genres
    # -------------------------------------------------------------------------

    async def process_movie_genres(
        self,
        movie_id: str,
        genres: list[TMDBGenreData],
        context: RunContext,
    ) -> list[int]:
        """Upsert unseen genres and replace the movie's genre set.

        Args:
            movie_id: Canonical movie id.
            genres: Genres from the primary-language details.
            context: Current run context.

        Returns:
            TMDB genre ids now linked to the movie.

        Raises:
            MarqueeError: On any store failure other than a conflict race.
        """
        for genre in genres:
            if genre["id"] in context.processed_genres:
                self._record_skip()
                continue
            await self._upsert_genre(genre, context)

        genre_ids = list(dict.fromkeys(genre["id"] for genre in genres))
        async with self._db.async_session() as session:
            await GenreRepository(session).replace_movie_genres(movie_id, genre_ids)
        return genre_ids

    async def _upsert_genre(self, genre: TMDBGenreData, context: RunContext) -> None:
        """Upsert one genre and its two translations.

        Args:
            genre: Genre from the catalog payload.
            context: Current run context.
        """
        primary_language, secondary_language = context.config.languages
        primary_name = genre.get("name") or context.genre_name(genre["id"], primary_language)
        primary_name = primary_name or str(genre["id"])
        secondary_name = context.genre_name(genre["id"], secondary_language) or primary_name

        try:
            async with self._db.async_session() as session:
                repo = GenreRepository(session)
                genre_id = await repo.upsert(genre["id"])
                await repo.upsert_translation(genre_id, primary_language, primary_name)
                await repo.upsert_translation(genre_id, secondary_language, secondary_name)
        except ConflictError:
            self._logger.debug(f"Genre {genre['id']} inserted concurrently, skipping")
            self._record_skip()
        else:
            self._record_processed()

        context.processed_genres.add(genre["id"])

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    async def seed_genres(self, context: RunContext) -> int:
        """Upsert the full catalog genre list with both translations.

        Secondary names come from the catalog's translated list, then
        the built-in Hebrew table, then the primary name.

        Args:
            context: Current run context.

        Returns:
            Number of genres seeded.

        Raises:
            MarqueeError: When the primary genre list is unavailable.
        """
        primary_language, secondary_language = context.config.languages
        response = await self._tmdb.get_genres(primary_language)
        genres = response.get("genres", [])

        try:
            secondary = await self._tmdb.get_genres(secondary_language)
            for genre in secondary.get("genres", []):
                if genre.get("name"):
                    context.genre_names[(genre["id"], secondary_language)] = genre["name"]
        except MarqueeError as e:
            self._logger.warning(f"Genre list unavailable for {secondary_language}: {e}")

        if secondary_language.startswith("he"):
            for genre_id, name in HEBREW_GENRE_NAMES.items():
                context.genre_names.setdefault((genre_id, secondary_language), name)

        for genre in genres:
            await self._upsert_genre(genre, context)

        self._log_summary()
        return len(genres)
