"""Tests for the genre normalizer and run cache."""

import pytest

from marquee.database import DatabaseConnection, GenreRepository, MovieRepository
from marquee.etl.context import RunContext
from marquee.etl.errors import ExternalFetchError
from marquee.etl.extractors import TMDBClient
from marquee.etl.processors import HEBREW_GENRE_NAMES, GenreProcessor


@pytest.fixture
def processor(db: DatabaseConnection, tmdb_client: TMDBClient) -> GenreProcessor:
    return GenreProcessor(db, tmdb_client)


async def _store_movie(
    db: DatabaseConnection, movie_id: str = "tt0111161", tmdb_id: int = 278
) -> None:
    async with db.async_session() as session:
        await MovieRepository(session).upsert({"id": movie_id, "tmdb_id": tmdb_id})


async def _names(db: DatabaseConnection, language: str) -> dict[int, str]:
    async with db.async_session() as session:
        return await GenreRepository(session).get_names(language)


# -------------------------------------------------------------------------
# Run cache
# -------------------------------------------------------------------------


class TestCacheGenreTranslations:
    @staticmethod
    async def test_caches_both_languages(
        processor: GenreProcessor, context: RunContext, now_playing
    ) -> None:
        count = await processor.cache_genre_translations(context)
        assert count == 4
        assert context.genre_name(18, "he-IL") == "דרמה"
        assert context.genre_name(80, "en-US") == "Crime"

    @staticmethod
    async def test_unavailable_list_tolerated(
        processor: GenreProcessor, context: RunContext, catalog
    ) -> None:
        catalog.failing_paths.add("/genre/movie/list")
        assert await processor.cache_genre_translations(context) == 0


# -------------------------------------------------------------------------
# Movie genres
# -------------------------------------------------------------------------


class TestProcessMovieGenres:
    @staticmethod
    async def test_upserts_and_links(
        processor: GenreProcessor, context: RunContext, db: DatabaseConnection, now_playing
    ) -> None:
        await _store_movie(db)
        await processor.cache_genre_translations(context)

        linked = await processor.process_movie_genres(
            "tt0111161", [{"id": 18, "name": "Drama"}, {"id": 80, "name": "Crime"}], context
        )

        assert linked == [18, 80]
        assert context.processed_genres == {18, 80}
        assert await _names(db, "en-US") == {18: "Drama", 80: "Crime"}
        assert await _names(db, "he-IL") == {18: "דרמה", 80: "פשע"}

    @staticmethod
    async def test_secondary_name_falls_back_to_primary(
        processor: GenreProcessor, context: RunContext, db: DatabaseConnection
    ) -> None:
        await _store_movie(db)
        await processor.process_movie_genres("tt0111161", [{"id": 53, "name": "Thriller"}], context)
        assert await _names(db, "he-IL") == {53: "Thriller"}

    @staticmethod
    async def test_cached_genres_not_upserted_again(
        processor: GenreProcessor, context: RunContext, db: DatabaseConnection
    ) -> None:
        await _store_movie(db, "tt1", 1)
        await _store_movie(db, "tt2", 2)
        genres = [{"id": 18, "name": "Drama"}]

        await processor.process_movie_genres("tt1", genres, context)
        await processor.process_movie_genres("tt2", [{"id": 18, "name": "Renamed"}], context)

        assert processor.stats.processed == 1
        assert processor.stats.skipped == 1
        assert await _names(db, "en-US") == {18: "Drama"}
        async with db.async_session() as session:
            assert await GenreRepository(session).get_movie_genre_tmdb_ids("tt2") == [18]

    @staticmethod
    async def test_set_replaced_on_reprocess(
        processor: GenreProcessor, context: RunContext, db: DatabaseConnection
    ) -> None:
        await _store_movie(db)
        await processor.process_movie_genres(
            "tt0111161", [{"id": 18, "name": "Drama"}, {"id": 80, "name": "Crime"}], context
        )
        await processor.process_movie_genres("tt0111161", [{"id": 80, "name": "Crime"}], context)

        async with db.async_session() as session:
            assert await GenreRepository(session).get_movie_genre_tmdb_ids("tt0111161") == [80]

    @staticmethod
    async def test_empty_payload_clears_links(
        processor: GenreProcessor, context: RunContext, db: DatabaseConnection
    ) -> None:
        await _store_movie(db)
        await processor.process_movie_genres("tt0111161", [{"id": 18, "name": "Drama"}], context)
        assert await processor.process_movie_genres("tt0111161", [], context) == []

        async with db.async_session() as session:
            assert await GenreRepository(session).get_movie_genre_tmdb_ids("tt0111161") == []


# -------------------------------------------------------------------------
# Seeding
# -------------------------------------------------------------------------


class TestSeedGenres:
    @staticmethod
    async def test_seed_uses_builtin_hebrew_names(
        processor: GenreProcessor, context: RunContext, db: DatabaseConnection, catalog
    ) -> None:
        catalog.genres = {
            "en-US": [{"id": 27, "name": "Horror"}, {"id": 18, "name": "Drama"}],
            "he-IL": [{"id": 18, "name": "דרמה (קטלוג)"}],
        }

        assert await processor.seed_genres(context) == 2
        assert await _names(db, "he-IL") == {27: HEBREW_GENRE_NAMES[27], 18: "דרמה (קטלוג)"}

    @staticmethod
    async def test_seed_fails_without_primary_list(
        processor: GenreProcessor, context: RunContext, catalog
    ) -> None:
        catalog.failing_paths.add("/genre/movie/list")
        with pytest.raises(ExternalFetchError):
            await processor.seed_genres(context)
