"""Cast and actor processor.

Fetches the top-billed cast of a movie person by person, upserts
actors with their translations and links them to the movie.
"""

import asyncio

from marquee.database import ActorRepository, DatabaseConnection
from marquee.etl.context import RunContext
from marquee.etl.extractors import TMDBClient, TMDBNormalizer, canonical_id
from marquee.etl.extractors.tmdb import UNKNOWN_TITLE, clean_text
from marquee.etl.processors.base import BaseProcessor
from marquee.etl.types import CastResult, TMDBCastData
from marquee.etl.utils.pool import SleepFn, WorkerPool
from marquee.monitoring.metrics import ACTORS_PROCESSED_TOTAL


class CastProcessor(BaseProcessor):
    """Links cast members to movies with bounded concurrency."""

    name = "actor"

    def __init__(
        self,
        db: DatabaseConnection,
        tmdb: TMDBClient,
        normalizer: TMDBNormalizer,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Initialize cast processor.

        Args:
            db: Database connection.
            tmdb: Catalog client for person details.
            normalizer: Row builder.
            sleep: Awaitable sleep used for actor spacing.
        """
        super().__init__(db)
        self._tmdb = tmdb
        self._normalizer = normalizer
        self._sleep = sleep

    async def process_cast(
        self,
        movie_id: str,
        cast: list[TMDBCastData],
        context: RunContext,
    ) -> CastResult:
        """Process the top-billed cast of a movie.

        A failing cast member is logged and counted; siblings and
        the parent movie continue.

        Args:
            movie_id: Canonical movie id.
            cast: Raw cast list from the credits endpoint.
            context: Current run context.

        Returns:
            Linked and failed counts.
        """
        config = context.config
        # Entries without a billing order go last and take their position
        members = sorted(
            cast, key=lambda member: (member.get("order") is None, member.get("order") or 0)
        )
        members = [
            member if member.get("order") is not None else {**member, "order": position}
            for position, member in enumerate(members[: config.max_cast_members])
        ]
        result = CastResult()
        if not members:
            return result

        pool = WorkerPool(
            concurrency=config.actor_concurrency,
            delay=config.actor_delay_seconds,
            sleep=self._sleep,
        )
        outcomes = await pool.map(
            lambda member: self._process_member(movie_id, member, context),
            members,
        )

        for outcome in outcomes:
            if outcome.ok:
                result.linked += 1
                self._record_processed()
                ACTORS_PROCESSED_TOTAL.labels(status="linked").inc()
            else:
                result.failed += 1
                self._record_error(
                    f"Actor {outcome.item['id']} failed for movie {movie_id}: {outcome.error}"
                )
                ACTORS_PROCESSED_TOTAL.labels(status="failed").inc()

        self._logger.debug(
            f"Movie {movie_id}: {result.linked} actors linked, {result.failed} failed"
        )
        return result

    async def _process_member(
        self,
        movie_id: str,
        member: TMDBCastData,
        context: RunContext,
    ) -> str:
        """Fetch, upsert and link one cast member.

        Args:
            movie_id: Canonical movie id.
            member: Cast entry.
            context: Current run context.

        Returns:
            Canonical actor id.
        """
        primary_language, secondary_language = context.config.languages
        primary = await self._tmdb.get_person_details(member["id"], primary_language)
        secondary = await self._tmdb.get_person_details(member["id"], secondary_language)

        primary_name = (
            clean_text(primary.get("name")) or clean_text(member.get("name")) or UNKNOWN_TITLE
        )
        secondary_name = clean_text(secondary.get("name")) or primary_name
        primary_bio = clean_text(primary.get("biography"))
        secondary_bio = clean_text(secondary.get("biography")) or primary_bio

        async with self._db.async_session() as session:
            repo = ActorRepository(session)

            # Keep the id assigned on first sighting
            existing = await repo.get_by_field("tmdb_id", member["id"])
            if existing is not None:
                actor_id = existing.id
            else:
                actor_id = canonical_id(primary.get("imdb_id"), member["id"])

            await repo.upsert(self._normalizer.actor(actor_id, {**primary, "id": member["id"]}))
            await repo.upsert_translation(actor_id, primary_language, primary_name, primary_bio)
            await repo.upsert_translation(
                actor_id, secondary_language, secondary_name, secondary_bio
            )
            await repo.upsert_cast_member(
                movie_id=movie_id,
                actor_id=actor_id,
                character=clean_text(member.get("character")),
                display_order=member["order"],
            )

        return actor_id
