"""Repository tests against a SQLite store.

Upserts must be idempotent, genre links replaced as a set and
the notification ledger insert-or-ignore.
"""

from datetime import date

import pytest

from marquee.database import (
    ActorRepository,
    AlertRepository,
    DatabaseConnection,
    GenreRepository,
    MovieRepository,
    Notification,
    RefreshRunRepository,
    Subscription,
)
from marquee.database.repositories import MovieData, MovieTranslationData, TrailerData
from marquee.etl.errors import ConflictError, PersistenceError


def _movie(**overrides) -> MovieData:
    data = MovieData(
        id="tt0111161",
        tmdb_id=278,
        imdb_id="tt0111161",
        rating=9.3,
        votes=2_700_000,
        runtime=142,
        release_date=date(1994, 9, 23),
        original_language="en",
    )
    data.update(overrides)
    return data


async def _store_movie(db: DatabaseConnection, **overrides) -> None:
    async with db.async_session() as session:
        await MovieRepository(session).upsert(_movie(**overrides))


# -------------------------------------------------------------------------
# Movies
# -------------------------------------------------------------------------


class TestMovieRepository:
    @staticmethod
    async def test_upsert_is_idempotent(db: DatabaseConnection) -> None:
        await _store_movie(db)
        await _store_movie(db, rating=9.2)

        async with db.async_session() as session:
            repo = MovieRepository(session)
            assert await repo.count() == 1
            movie = await repo.get_by_tmdb_id(278)

        assert movie is not None
        assert movie.rating == 9.2
        assert movie.status == "now_playing"
        assert movie.release_date == date(1994, 9, 23)

    @staticmethod
    async def test_exists_by_tmdb_id(db: DatabaseConnection) -> None:
        await _store_movie(db)
        async with db.async_session() as session:
            repo = MovieRepository(session)
            assert await repo.exists_by_tmdb_id(278) is True
            assert await repo.exists_by_tmdb_id(42) is False

    @staticmethod
    async def test_duplicate_tmdb_id_under_other_key_conflicts(db: DatabaseConnection) -> None:
        await _store_movie(db)
        with pytest.raises(ConflictError):
            await _store_movie(db, id="source-278", imdb_id=None)

    @staticmethod
    async def test_update_rating(db: DatabaseConnection) -> None:
        await _store_movie(db)
        async with db.async_session() as session:
            assert await MovieRepository(session).update_rating("tt0111161", 9.1, 2_800_000)
            assert not await MovieRepository(session).update_rating("tt404", 1.0, 1)

        async with db.async_session() as session:
            movie = await MovieRepository(session).get_by_id("tt0111161")
        assert (movie.rating, movie.votes) == (9.1, 2_800_000)

    @staticmethod
    async def test_translations_keyed_by_language(db: DatabaseConnection) -> None:
        await _store_movie(db)
        rows = [
            MovieTranslationData(
                movie_id="tt0111161",
                language=language,
                title=title,
                original_title=None,
                description=None,
                poster_url=None,
            )
            for language, title in [("en-US", "Shawshank"), ("he-IL", "חומות של תקווה")]
        ]
        async with db.async_session() as session:
            repo = MovieRepository(session)
            for row in rows:
                await repo.upsert_translation(row)
            await repo.upsert_translation({**rows[0], "title": "The Shawshank Redemption"})

        async with db.async_session() as session:
            translations = await MovieRepository(session).get_translations("tt0111161")
        assert [(t.language, t.title) for t in translations] == [
            ("en-US", "The Shawshank Redemption"),
            ("he-IL", "חומות של תקווה"),
        ]

    @staticmethod
    async def test_trailers_upserted_by_key(db: DatabaseConnection) -> None:
        await _store_movie(db)
        trailer = TrailerData(
            movie_id="tt0111161",
            key="abc",
            title="Trailer",
            language="en-US",
            url="https://www.youtube.com/watch?v=abc",
        )
        async with db.async_session() as session:
            repo = MovieRepository(session)
            assert await repo.bulk_upsert_trailers([trailer]) == 1
            assert await repo.bulk_upsert_trailers([{**trailer, "title": "Final Trailer"}]) == 1
            assert await repo.bulk_upsert_trailers([]) == 0

        async with db.async_session() as session:
            trailers = await MovieRepository(session).get_trailers("tt0111161")
        assert [(t.key, t.title) for t in trailers] == [("abc", "Final Trailer")]


# -------------------------------------------------------------------------
# Genres
# -------------------------------------------------------------------------


class TestGenreRepository:
    @staticmethod
    async def test_upsert_returns_stable_id(db: DatabaseConnection) -> None:
        async with db.async_session() as session:
            repo = GenreRepository(session)
            first = await repo.upsert(18)
            second = await repo.upsert(18)
            other = await repo.upsert(80)
        assert first == second
        assert other != first

    @staticmethod
    async def test_names_by_language(db: DatabaseConnection) -> None:
        async with db.async_session() as session:
            repo = GenreRepository(session)
            genre_id = await repo.upsert(18)
            await repo.upsert_translation(genre_id, "en-US", "Drama")
            await repo.upsert_translation(genre_id, "he-IL", "דרמה")
            await repo.upsert_translation(genre_id, "en-US", "Drama!")

        async with db.async_session() as session:
            repo = GenreRepository(session)
            assert await repo.get_names("en-US") == {18: "Drama!"}
            assert await repo.get_names("he-IL") == {18: "דרמה"}

    @staticmethod
    async def test_replace_movie_genres(db: DatabaseConnection) -> None:
        await _store_movie(db)
        async with db.async_session() as session:
            repo = GenreRepository(session)
            for tmdb_id in (18, 80, 27):
                await repo.upsert(tmdb_id)
            assert await repo.replace_movie_genres("tt0111161", [18, 80]) == 2

        async with db.async_session() as session:
            repo = GenreRepository(session)
            assert await repo.replace_movie_genres("tt0111161", [27, 18, 27]) == 2
            assert await repo.get_movie_genre_tmdb_ids("tt0111161") == [18, 27]

    @staticmethod
    async def test_replace_with_empty_clears(db: DatabaseConnection) -> None:
        await _store_movie(db)
        async with db.async_session() as session:
            repo = GenreRepository(session)
            await repo.upsert(18)
            await repo.replace_movie_genres("tt0111161", [18])
            assert await repo.replace_movie_genres("tt0111161", []) == 0
            assert await repo.get_movie_genre_tmdb_ids("tt0111161") == []


# -------------------------------------------------------------------------
# Actors
# -------------------------------------------------------------------------


class TestActorRepository:
    @staticmethod
    async def test_actor_and_cast_link(db: DatabaseConnection) -> None:
        await _store_movie(db)
        async with db.async_session() as session:
            repo = ActorRepository(session)
            await repo.upsert({"id": "nm0000151", "tmdb_id": 192, "imdb_id": "nm0000151"})
            await repo.upsert_translation("nm0000151", "en-US", "Morgan Freeman", None)
            await repo.upsert_translation("nm0000151", "he-IL", "מורגן פרימן", None)
            await repo.upsert_cast_member("tt0111161", "nm0000151", "Red", 1)
            await repo.upsert_cast_member("tt0111161", "nm0000151", "Ellis 'Red' Redding", 1)

        async with db.async_session() as session:
            repo = ActorRepository(session)
            cast = await repo.get_cast("tt0111161")
            translations = await repo.get_translations("nm0000151")

        assert [(c.actor_id, c.character) for c in cast] == [("nm0000151", "Ellis 'Red' Redding")]
        assert [t.language for t in translations] == ["en-US", "he-IL"]


# -------------------------------------------------------------------------
# Alerts
# -------------------------------------------------------------------------


class TestAlertRepository:
    @staticmethod
    async def _add_subscriptions(db: DatabaseConnection) -> None:
        async with db.async_session() as session:
            session.add_all(
                [
                    Subscription(user_id="u1", threshold=8.0, channels=["email"]),
                    Subscription(user_id="u2", threshold=9.0, genre_tmdb_id=27, channels=["sms"]),
                    Subscription(user_id="u3", threshold=9.5, channels=["email"]),
                    Subscription(user_id="u4", threshold=5.0, channels=["email"], active=False),
                    Subscription(user_id="u5", threshold=8.5, genre_tmdb_id=18, channels=["sms"]),
                ]
            )

    async def test_find_matching(self, db: DatabaseConnection) -> None:
        await self._add_subscriptions(db)
        async with db.async_session() as session:
            matches = await AlertRepository(session).find_matching(8.5, [18, 80])
        assert [s.user_id for s in matches] == ["u1", "u5"]

    async def test_threshold_inclusive(self, db: DatabaseConnection) -> None:
        await self._add_subscriptions(db)
        async with db.async_session() as session:
            matches = await AlertRepository(session).find_matching(9.0, [27])
        assert [s.user_id for s in matches] == ["u1", "u2"]

    @staticmethod
    async def test_ledger_insert_or_ignore(db: DatabaseConnection) -> None:
        await _store_movie(db)
        async with db.async_session() as session:
            repo = AlertRepository(session)
            assert await repo.record_notification("u1", "tt0111161", 9.3, True) is True
            assert await repo.record_notification("u1", "tt0111161", 9.3, True) is False
            assert await repo.record_notification("u2", "tt0111161", 9.3, False) is True

        async with db.async_session() as session:
            repo = AlertRepository(session)
            assert await repo.has_notification("u1", "tt0111161") is True
            assert await repo.has_notification("u3", "tt0111161") is False
            assert await repo.count_notifications() == 2
            assert await repo.count_notifications("u1") == 1

    @staticmethod
    async def test_store_errors_translated(db: DatabaseConnection) -> None:
        async with db.async_engine.begin() as conn:
            await conn.run_sync(Notification.__table__.drop)
            await conn.run_sync(Subscription.__table__.drop)

        with pytest.raises(PersistenceError):
            async with db.async_session() as session:
                await AlertRepository(session).find_matching(8.5, [18])
        with pytest.raises(PersistenceError):
            async with db.async_session() as session:
                await AlertRepository(session).has_notification("u1", "tt0111161")


# -------------------------------------------------------------------------
# Refresh runs
# -------------------------------------------------------------------------


class TestRefreshRunRepository:
    @staticmethod
    async def test_start_and_finish(db: DatabaseConnection) -> None:
        async with db.async_session() as session:
            run = await RefreshRunRepository(session).start_run("cli")
            run_id = run.id

        async with db.async_session() as session:
            await RefreshRunRepository(session).finish_run(
                run_id,
                status="success",
                counts={"movies_listed": 3, "movies_processed": 2, "movies_skipped": 1},
                duration_seconds=1.2345,
            )

        async with db.async_session() as session:
            latest = await RefreshRunRepository(session).get_latest()

        assert latest is not None
        assert latest.id == run_id
        assert latest.trigger == "cli"
        assert latest.status == "success"
        assert latest.is_running is False
        assert latest.movies_listed == 3
        assert latest.duration_seconds == 1.23
        assert latest.completed_at is not None
