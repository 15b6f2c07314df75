"""Movie enrichment processor.

Turns one now-playing listing item into a stored movie: canonical
id, reconciled rating, two translations, trailers, genre links
and cast links.
"""

import asyncio

from marquee.database import DatabaseConnection, GenreRepository, Movie, MovieRepository
from marquee.database.repositories import MovieData
from marquee.etl.context import RunContext
from marquee.etl.extractors import TMDBClient, TMDBNormalizer, canonical_id
from marquee.etl.extractors.tmdb import UNKNOWN_TITLE, clean_text
from marquee.etl.processors.actor import CastProcessor
from marquee.etl.processors.base import BaseProcessor
from marquee.etl.processors.genre import GenreProcessor
from marquee.etl.processors.rating import RatingReconciler
from marquee.etl.types import MovieOutcome, TMDBListingItem

NOW_PLAYING = "now_playing"


class MovieProcessor(BaseProcessor):
    """Enriches and stores one listing item at a time."""

    name = "movie"

    def __init__(
        self,
        db: DatabaseConnection,
        tmdb: TMDBClient,
        reconciler: RatingReconciler,
        genres: GenreProcessor,
        cast: CastProcessor,
        normalizer: TMDBNormalizer,
    ) -> None:
        """Initialize movie processor.

        Args:
            db: Database connection.
            tmdb: Catalog client.
            reconciler: Rating reconciliation.
            genres: Genre normalizer.
            cast: Cast processor.
            normalizer: Row builder.
        """
        super().__init__(db)
        self._tmdb = tmdb
        self._reconciler = reconciler
        self._genres = genres
        self._cast = cast
        self._normalizer = normalizer

    async def process(
        self,
        item: TMDBListingItem,
        context: RunContext,
        force: bool = False,
    ) -> MovieOutcome:
        """Process one listing item.

        Stored movies skip remote enrichment unless forced; with
        refresh_existing_ratings they only get their rating reconciled.

        Args:
            item: Listing item.
            context: Current run context.
            force: Enrich even if the movie is already stored.

        Returns:
            MovieOutcome describing what happened.
        """
        config = context.config
        tmdb_id = item["id"]

        async with self._db.async_session() as session:
            existing = await MovieRepository(session).get_by_tmdb_id(tmdb_id)

        if existing is not None and config.skip_existing and not force:
            if config.refresh_existing_ratings:
                return await self._refresh_rating(existing, item)

            self._record_skip()
            self._logger.debug(f"Movie {tmdb_id} already stored as {existing.id}, skipping")
            return MovieOutcome(
                tmdb_id=tmdb_id,
                movie_id=existing.id,
                title=item.get("title") or UNKNOWN_TITLE,
                rating=existing.rating,
                votes=existing.votes,
                status="skipped",
            )

        return await self._enrich(item, context, existing)

    async def _enrich(
        self,
        item: TMDBListingItem,
        context: RunContext,
        existing: Movie | None,
    ) -> MovieOutcome:
        """Fetch every remote resource and store the movie.

        Args:
            item: Listing item.
            context: Current run context.
            existing: Stored movie, if any (keeps its canonical id).

        Returns:
            MovieOutcome with status 'created'.
        """
        config = context.config
        tmdb_id = item["id"]
        primary_language, secondary_language = config.languages

        external_ids, primary, secondary, videos, credits = await asyncio.gather(
            self._tmdb.get_movie_external_ids(tmdb_id),
            self._tmdb.get_movie_details(tmdb_id, primary_language),
            self._tmdb.get_movie_details(tmdb_id, secondary_language),
            self._tmdb.get_movie_videos(tmdb_id, primary_language),
            self._tmdb.get_movie_credits(tmdb_id),
        )

        imdb_id = clean_text(external_ids.get("imdb_id"))
        movie_id = existing.id if existing is not None else canonical_id(imdb_id, tmdb_id)
        rating = await self._reconciler.reconcile(imdb_id)

        translations = self._normalizer.movie_translations(
            movie_id, item, primary, secondary, config.languages
        )
        trailers = self._normalizer.trailers(
            movie_id, videos.get("results", []), primary_language
        )

        async with self._db.async_session() as session:
            repo = MovieRepository(session)
            await repo.upsert(
                MovieData(
                    id=movie_id,
                    tmdb_id=tmdb_id,
                    imdb_id=imdb_id,
                    status=NOW_PLAYING,
                    rating=rating.rating,
                    votes=rating.votes,
                    runtime=primary.get("runtime") or None,
                    release_date=self._normalizer.parse_date(
                        primary.get("release_date") or item.get("release_date")
                    ),
                    original_language=primary.get("original_language"),
                )
            )
            for translation in translations:
                await repo.upsert_translation(translation)
            await repo.bulk_upsert_trailers(trailers)

        genre_ids = await self._genres.process_movie_genres(
            movie_id, primary.get("genres", []), context
        )
        cast_result = await self._cast.process_cast(movie_id, credits.get("cast", []), context)

        self._record_processed()
        self._logger.info(
            f"Stored {movie_id} '{translations[0]['title']}' "
            f"(rating={rating.rating}, source={rating.source}, "
            f"trailers={len(trailers)}, actors={cast_result.linked})"
        )
        return MovieOutcome(
            tmdb_id=tmdb_id,
            movie_id=movie_id,
            title=translations[0]["title"],
            rating=rating.rating,
            votes=rating.votes,
            genre_ids=genre_ids,
            status="created",
            actors_linked=cast_result.linked,
            actors_failed=cast_result.failed,
        )

    async def _refresh_rating(self, movie: Movie, item: TMDBListingItem) -> MovieOutcome:
        """Re-reconcile the rating of a stored movie.

        Args:
            movie: Stored movie.
            item: Listing item.

        Returns:
            MovieOutcome with status 'rating_refreshed'.
        """
        rating = await self._reconciler.reconcile(movie.imdb_id)
        new_rating, new_votes = movie.rating, movie.votes

        async with self._db.async_session() as session:
            # A provider outage never erases a stored rating
            if rating.has_rating and (rating.rating, rating.votes) != (movie.rating, movie.votes):
                await MovieRepository(session).update_rating(movie.id, rating.rating, rating.votes)
                self._logger.info(f"Rating of {movie.id}: {movie.rating} -> {rating.rating}")
                new_rating, new_votes = rating.rating, rating.votes
            genre_ids = await GenreRepository(session).get_movie_genre_tmdb_ids(movie.id)

        self._record_processed()
        return MovieOutcome(
            tmdb_id=movie.tmdb_id,
            movie_id=movie.id,
            title=item.get("title") or UNKNOWN_TITLE,
            rating=new_rating,
            votes=new_votes,
            genre_ids=genre_ids,
            status="rating_refreshed",
        )
