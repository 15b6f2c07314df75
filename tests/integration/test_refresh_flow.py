"""End-to-end refresh runs against the provider stub and SQLite."""

import dataclasses

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
from marquee.etl.errors import ExternalFetchError, TMDBNotFoundError
from marquee.etl.pipeline import RefreshOrchestrator

pytestmark = pytest.mark.integration


async def _subscribe(db: DatabaseConnection, *subscriptions: Subscription) -> None:
    async with db.async_session() as session:
        session.add_all(subscriptions)


async def _latest_run(db: DatabaseConnection):
    async with db.async_session() as session:
        return await RefreshRunRepository(session).get_latest()


# -------------------------------------------------------------------------
# Full refresh
# -------------------------------------------------------------------------


class TestRefreshNowPlaying:
    @staticmethod
    async def test_catalog_stored(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        summary = await orchestrator.refresh_now_playing()

        assert (summary.listed, summary.processed, summary.skipped, summary.failed) == (2, 2, 0, 0)

        async with db.async_session() as session:
            movies = MovieRepository(session)
            rated = await movies.get_by_id("tt0111161")
            unrated = await movies.get_by_id("source-42")
            cast = await ActorRepository(session).get_cast("tt0111161")
            genres = await GenreRepository(session).get_movie_genre_tmdb_ids("source-42")

        assert (rated.rating, rated.votes) == (9.3, 2_700_000)
        assert unrated.rating is None
        assert [link.character for link in cast] == ["Andy Dufresne", "Red"]
        assert genres == [18]

    @staticmethod
    async def test_run_audited(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        summary = await orchestrator.refresh_now_playing(trigger="cli")

        run = await _latest_run(db)
        assert run.id == summary.run_id
        assert (run.trigger, run.status) == ("cli", "success")
        assert (run.movies_listed, run.movies_processed) == (2, 2)
        assert run.completed_at is not None

    @staticmethod
    async def test_subscriber_notified_once_across_runs(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        await _subscribe(
            db,
            Subscription(user_id="u1", threshold=8.0, channels=["email"]),
            Subscription(user_id="u2", threshold=9.5, channels=["email"]),
        )

        first = await orchestrator.refresh_now_playing()
        second = await orchestrator.refresh_now_playing()

        assert first.notifications == 1
        assert (second.skipped, second.notifications) == (2, 0)
        assert [payload["userId"] for payload in now_playing.dispatched] == ["u1"]
        assert now_playing.dispatched[0]["movie"] == {
            "id": "tt0111161",
            "title": "The Shawshank Redemption",
            "rating": 9.3,
        }

    @staticmethod
    async def test_unrated_movie_never_notifies(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        del now_playing.omdb["tt0111161"]
        await _subscribe(db, Subscription(user_id="u1", threshold=0.0, channels=["email"]))

        summary = await orchestrator.refresh_now_playing()

        assert summary.notifications == 0
        assert now_playing.dispatched == []

    @staticmethod
    async def test_alert_store_failure_keeps_movie(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        async with db.async_engine.begin() as conn:
            await conn.run_sync(Notification.__table__.drop)
            await conn.run_sync(Subscription.__table__.drop)

        summary = await orchestrator.refresh_now_playing()

        assert (summary.processed, summary.failed, summary.notifications) == (2, 0, 0)

    @staticmethod
    async def test_failing_movie_isolated(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        del now_playing.movies[278]

        summary = await orchestrator.refresh_now_playing()

        assert (summary.processed, summary.failed) == (1, 1)
        assert summary.errors[0].startswith("Movie 278: TMDBNotFoundError")
        run = await _latest_run(db)
        assert (run.status, run.movies_failed) == ("success", 1)

    @staticmethod
    async def test_listing_failure_fails_run(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        now_playing.failing_paths.add("/movie/now_playing")

        with pytest.raises(ExternalFetchError):
            await orchestrator.refresh_now_playing()

        run = await _latest_run(db)
        assert run.status == "failed"
        assert run.error_message

    @staticmethod
    async def test_listing_pages_deduplicated(
        orchestrator: RefreshOrchestrator, now_playing
    ) -> None:
        # The stub serves the same results on every page
        now_playing.total_pages = 3
        orchestrator.config = dataclasses.replace(orchestrator.config, max_pages=3)

        summary = await orchestrator.refresh_now_playing()

        listing_calls = [
            r for r in now_playing.tmdb_requests if r.url.path.endswith("/movie/now_playing")
        ]
        assert len(listing_calls) == 3
        assert summary.listed == 2


# -------------------------------------------------------------------------
# Targeted refresh and seeding
# -------------------------------------------------------------------------


class TestRefreshMovie:
    @staticmethod
    async def test_existing_movie_reenriched(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        await orchestrator.refresh_now_playing()
        now_playing.omdb["tt0111161"] = {"imdbRating": "9.1", "imdbVotes": "2,900,000"}

        outcome = await orchestrator.refresh_movie(278)

        assert (outcome.status, outcome.rating) == ("created", 9.1)
        async with db.async_session() as session:
            assert (await MovieRepository(session).get_by_id("tt0111161")).votes == 2_900_000
        run = await _latest_run(db)
        assert (run.trigger, run.status, run.movies_processed) == ("movie", "success", 1)

    @staticmethod
    async def test_refresh_does_not_renotify(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        await _subscribe(db, Subscription(user_id="u1", threshold=8.0, channels=["email"]))
        await orchestrator.refresh_now_playing()

        await orchestrator.refresh_movie(278)

        assert len(now_playing.dispatched) == 1
        async with db.async_session() as session:
            assert await AlertRepository(session).count_notifications() == 1

    @staticmethod
    async def test_unknown_movie_fails_run(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        with pytest.raises(TMDBNotFoundError):
            await orchestrator.refresh_movie(999)

        run = await _latest_run(db)
        assert (run.status, run.movies_failed) == ("failed", 1)


class TestSeedGenres:
    @staticmethod
    async def test_seed(
        orchestrator: RefreshOrchestrator, db: DatabaseConnection, now_playing
    ) -> None:
        assert await orchestrator.seed_genres() == 2

        async with db.async_session() as session:
            names = await GenreRepository(session).get_names("he-IL")
        assert names == {18: "דרמה", 80: "פשע"}
