"""Refresh orchestration.

Drives the now-playing refresh: genre cache, listing, bounded
per-movie processing with failure isolation, alert matching,
run audit and completion summary.

Provides:
    - RefreshOrchestrator: wiring of processors around injected clients
    - refresh_now_playing_catalog: full refresh with real clients
    - refresh_specific_movie: targeted refresh of one movie
    - seed_genres: genre reference seeding
"""

import asyncio
import dataclasses
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from marquee.database import DatabaseConnection, RefreshRunRepository, get_database
from marquee.etl.context import RefreshConfig, RunContext
from marquee.etl.errors import MarqueeError, NotifierError
from marquee.etl.extractors import ImdbApiClient, OMDbClient, TMDBClient, TMDBNormalizer
from marquee.etl.extractors.tmdb import UNKNOWN_TITLE
from marquee.etl.notify import Notifier, SummaryMailer
from marquee.etl.processors import (
    CastProcessor,
    GenreProcessor,
    MovieProcessor,
    NotificationMatcher,
    RatingReconciler,
)
from marquee.etl.types import MovieOutcome, RefreshSummary, TMDBListingItem
from marquee.etl.utils import bind_run_id, setup_logger
from marquee.etl.utils.pool import SleepFn, WorkerPool, WorkerResult
from marquee.monitoring.metrics import (
    MOVIES_PROCESSED_TOTAL,
    REFRESH_DURATION,
    REFRESH_RUNS_TOTAL,
)

logger = setup_logger("etl.pipeline.orchestrator")


class RefreshOrchestrator:
    """Top-level driver of a catalog refresh.

    Attributes:
        config: Pipeline configuration.
        genres: Genre normalizer.
        cast: Cast processor.
        movies: Movie enrichment processor.
        matcher: Notification matcher.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        tmdb: TMDBClient,
        omdb: OMDbClient,
        imdbapi: ImdbApiClient,
        notifier: Notifier,
        config: RefreshConfig,
        mailer: SummaryMailer | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Wire processors around the given clients.

        Args:
            db: Database connection.
            tmdb: Catalog client.
            omdb: Rating Provider A client.
            imdbapi: Rating Provider B client.
            notifier: Alert dispatcher.
            config: Pipeline configuration.
            mailer: Optional completion summary mailer.
            sleep: Awaitable sleep used for pool spacing.
        """
        self.config = config
        self._db = db
        self._tmdb = tmdb
        self._mailer = mailer
        self._sleep = sleep

        normalizer = TMDBNormalizer(config.poster_base_url, config.youtube_base_url)
        self.genres = GenreProcessor(db, tmdb)
        self.cast = CastProcessor(db, tmdb, normalizer, sleep=sleep)
        self.movies = MovieProcessor(
            db,
            tmdb,
            RatingReconciler(omdb, imdbapi),
            self.genres,
            self.cast,
            normalizer,
        )
        self.matcher = NotificationMatcher(db, notifier, config.ledger_requires_delivery)

    # =========================================================================
    # FULL REFRESH
    # =========================================================================

    async def refresh_now_playing(self, trigger: str = "cron") -> RefreshSummary:
        """Refresh every movie of the now-playing listing.

        Per-movie failures are logged and counted. A top-level failure
        (listing unreachable, store down) marks the run failed, sends the
        failure summary and re-raises.

        Args:
            trigger: What started the run (stored on the audit row).

        Returns:
            RefreshSummary of the run.
        """
        start = time.perf_counter()
        context = RunContext(config=self.config)
        summary = context.summary
        summary.run_id = await self._start_run(trigger)

        logger.info(
            f"Starting now-playing refresh (run={summary.run_id}, trigger={trigger}, "
            f"region={self.config.region}, pages={self.config.max_pages})"
        )

        try:
            await self.genres.cache_genre_translations(context)
            listing = await self._fetch_listing()
            summary.listed = len(listing)
            logger.info(f"Listing returned {summary.listed} movies")

            pool = WorkerPool(
                concurrency=self.config.movie_concurrency,
                delay=self.config.movie_delay_seconds,
                timeout=self.config.movie_timeout_seconds,
                sleep=self._sleep,
            )
            results = await pool.map(lambda item: self._process_item(item, context), listing)
            for result in results:
                self._record_result(result, summary)
        except Exception as e:
            summary.duration_seconds = time.perf_counter() - start
            logger.error(f"Refresh run {summary.run_id} failed: {e}", exc_info=True)
            await self._finish_run(summary, "failed", str(e))
            await self._send_summary(summary, success=False, error_message=str(e))
            raise

        summary.duration_seconds = time.perf_counter() - start
        await self._finish_run(summary, "success")
        await self._send_summary(summary, success=True)

        logger.info(
            f"Refresh run {summary.run_id} done in {summary.duration_seconds:.1f}s: "
            f"listed={summary.listed}, processed={summary.processed}, "
            f"skipped={summary.skipped}, failed={summary.failed}, "
            f"notifications={summary.notifications}"
        )
        return summary

    # =========================================================================
    # TARGETED REFRESH
    # =========================================================================

    async def refresh_movie(self, tmdb_id: int, trigger: str = "movie") -> MovieOutcome:
        """Fully re-enrich one movie, bypassing skip_existing.

        Args:
            tmdb_id: TMDB movie id.
            trigger: Audit trigger label.

        Returns:
            MovieOutcome of the movie.

        Raises:
            MarqueeError: When the movie cannot be fetched or stored.
        """
        start = time.perf_counter()
        context = RunContext(config=self.config)
        summary = context.summary
        summary.run_id = await self._start_run(trigger)
        summary.listed = 1

        try:
            await self.genres.cache_genre_translations(context)
            details = await self._tmdb.get_movie_details(tmdb_id, self.config.primary_language)
            item = TMDBListingItem(
                id=tmdb_id,
                title=details.get("title") or UNKNOWN_TITLE,
                release_date=details.get("release_date"),
            )
            outcome = await self._process_item(item, context, force=True)
            summary.processed = 1
        except Exception as e:
            summary.failed = 1
            summary.duration_seconds = time.perf_counter() - start
            logger.error(f"Refresh of movie {tmdb_id} failed: {e}", exc_info=True)
            await self._finish_run(summary, "failed", str(e))
            raise

        summary.duration_seconds = time.perf_counter() - start
        await self._finish_run(summary, "success")
        return outcome

    # =========================================================================
    # GENRE SEEDING
    # =========================================================================

    async def seed_genres(self) -> int:
        """Seed the genre reference table in both languages.

        Returns:
            Number of genres seeded.
        """
        context = RunContext(config=self.config)
        count = await self.genres.seed_genres(context)
        logger.info(f"Seeded {count} genres")
        return count

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _fetch_listing(self) -> list[TMDBListingItem]:
        """Fetch the now-playing listing, deduplicated by TMDB id.

        Returns:
            Listing items in source order.
        """
        items: dict[int, TMDBListingItem] = {}
        for page in range(1, self.config.max_pages + 1):
            response = await self._tmdb.get_now_playing(
                page=page,
                language=self.config.primary_language,
                region=self.config.region,
            )
            for item in response.get("results", []):
                items.setdefault(item["id"], item)
            if page >= response.get("total_pages", 1):
                break
        return list(items.values())

    async def _process_item(
        self,
        item: TMDBListingItem,
        context: RunContext,
        force: bool = False,
    ) -> MovieOutcome:
        """Process one movie then evaluate alerts on its rating.

        Args:
            item: Listing item.
            context: Current run context.
            force: Bypass skip_existing.

        Returns:
            MovieOutcome of the movie.
        """
        outcome = await self.movies.process(item, context, force=force)
        if not outcome.notifiable:
            return outcome

        try:
            match = await self.matcher.evaluate(outcome)
        except MarqueeError as e:
            logger.error(f"Alert matching failed for {outcome.movie_id}: {e}")
        else:
            context.summary.notifications += match.recorded
        return outcome

    @staticmethod
    def _record_result(
        result: WorkerResult[TMDBListingItem, MovieOutcome],
        summary: RefreshSummary,
    ) -> None:
        """Fold one pool result into the run summary."""
        if not result.ok or result.value is None:
            summary.failed += 1
            message = f"Movie {result.item['id']}: {type(result.error).__name__}: {result.error}"
            summary.errors.append(message)
            logger.warning(message)
            MOVIES_PROCESSED_TOTAL.labels(status="failed").inc()
            return

        MOVIES_PROCESSED_TOTAL.labels(status=result.value.status).inc()
        if result.value.status == "skipped":
            summary.skipped += 1
        else:
            summary.processed += 1

    async def _start_run(self, trigger: str) -> int:
        """Create the audit row of a run."""
        async with self._db.async_session() as session:
            run = await RefreshRunRepository(session).start_run(trigger)
        bind_run_id(run.id)
        return run.id

    async def _finish_run(
        self,
        summary: RefreshSummary,
        status: str,
        error_message: str | None = None,
    ) -> None:
        """Close the audit row of a run and record metrics."""
        REFRESH_RUNS_TOTAL.labels(status=status).inc()
        REFRESH_DURATION.observe(summary.duration_seconds)
        if summary.run_id is None:
            return
        try:
            async with self._db.async_session() as session:
                await RefreshRunRepository(session).finish_run(
                    summary.run_id,
                    status=status,
                    counts=summary.as_counts(),
                    duration_seconds=summary.duration_seconds,
                    error_message=error_message,
                )
        except MarqueeError as e:
            logger.error(f"Could not close refresh run {summary.run_id}: {e}")

    async def _send_summary(
        self,
        summary: RefreshSummary,
        success: bool,
        error_message: str | None = None,
    ) -> None:
        """Send the completion email, never failing the run."""
        if self._mailer is None:
            return
        try:
            await self._mailer.send(summary, success, error_message)
        except NotifierError as e:
            logger.warning(f"Summary email not sent: {e}")


# =============================================================================
# MODULE-LEVEL ENTRY POINTS
# =============================================================================


@asynccontextmanager
async def build_orchestrator(
    db: DatabaseConnection | None = None,
    config: RefreshConfig | None = None,
) -> AsyncGenerator[RefreshOrchestrator, None]:
    """Open every client and yield a wired orchestrator.

    Args:
        db: Database connection (defaults to the shared one).
        config: Pipeline configuration (defaults to settings).

    Yields:
        RefreshOrchestrator bound to open clients.
    """
    async with (
        TMDBClient() as tmdb,
        OMDbClient() as omdb,
        ImdbApiClient() as imdbapi,
        Notifier() as notifier,
    ):
        yield RefreshOrchestrator(
            db=db or get_database(),
            tmdb=tmdb,
            omdb=omdb,
            imdbapi=imdbapi,
            notifier=notifier,
            config=config or RefreshConfig.from_settings(),
            mailer=SummaryMailer(),
        )


async def refresh_now_playing_catalog(
    trigger: str = "cron",
    max_pages: int | None = None,
    db: DatabaseConnection | None = None,
) -> RefreshSummary:
    """Run a full now-playing refresh with the configured clients.

    Args:
        trigger: Audit trigger label.
        max_pages: Override of the configured listing pages.
        db: Database connection (defaults to the shared one).

    Returns:
        RefreshSummary of the run.
    """
    config = RefreshConfig.from_settings()
    if max_pages is not None:
        config = dataclasses.replace(config, max_pages=max_pages)
    async with build_orchestrator(db, config) as orchestrator:
        return await orchestrator.refresh_now_playing(trigger)


async def refresh_specific_movie(
    tmdb_id: int,
    db: DatabaseConnection | None = None,
) -> MovieOutcome:
    """Fully re-enrich one movie with the configured clients.

    Args:
        tmdb_id: TMDB movie id.
        db: Database connection (defaults to the shared one).

    Returns:
        MovieOutcome of the movie.
    """
    async with build_orchestrator(db) as orchestrator:
        return await orchestrator.refresh_movie(tmdb_id)


async def seed_genres(db: DatabaseConnection | None = None) -> int:
    """Seed genres with the configured clients.

    Args:
        db: Database connection (defaults to the shared one).

    Returns:
        Number of genres seeded.
    """
    async with build_orchestrator(db) as orchestrator:
        return await orchestrator.seed_genres()
