"""Movie repository for catalog upserts.

Covers the movie base record, its translations and trailers.
"""

from typing import TypedDict

from sqlalchemy import func, select, update

from marquee.database.models import Movie, MovieTranslation, Trailer
from marquee.database.repositories.base import BaseRepository


class MovieData(TypedDict, total=False):
    """Typed dictionary for movie base input data."""

    id: str
    tmdb_id: int
    imdb_id: str | None
    status: str
    rating: float | None
    votes: int | None
    runtime: int | None
    release_date: object
    original_language: str | None


class MovieTranslationData(TypedDict):
    """Typed dictionary for movie translation input data."""

    movie_id: str
    language: str
    title: str
    original_title: str | None
    description: str | None
    poster_url: str | None


class TrailerData(TypedDict):
    """Typed dictionary for trailer input data."""

    movie_id: str
    key: str
    title: str | None
    language: str | None
    url: str


class MovieRepository(BaseRepository[Movie]):
    """Repository for Movie entity operations.

    Movies are keyed by canonical id; tmdb_id is the existence
    check key used before any remote enrichment.
    """

    model = Movie

    async def get_by_tmdb_id(self, tmdb_id: int) -> Movie | None:
        """Retrieve movie by TMDB identifier.

        Args:
            tmdb_id: TMDB movie ID.

        Returns:
            Movie instance or None.
        """
        return await self.get_by_field("tmdb_id", tmdb_id)

    async def exists_by_tmdb_id(self, tmdb_id: int) -> bool:
        """Check if a movie with this TMDB id is already stored.

        Args:
            tmdb_id: TMDB movie ID.

        Returns:
            True if stored.
        """
        stmt = select(Movie.id).where(Movie.tmdb_id == tmdb_id)
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def upsert(self, data: MovieData) -> None:
        """Insert or update the movie base record by canonical id.

        Args:
            data: Movie fields, must include id and tmdb_id.
        """
        stmt = self._insert().values(**data)
        updates = {key: stmt.excluded[key] for key in data if key != "id"}
        updates["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=["id"], set_=updates)
        await self._execute(stmt)

    async def update_rating(
        self,
        movie_id: str,
        rating: float | None,
        votes: int | None,
    ) -> bool:
        """Update the reconciled rating of a stored movie.

        Args:
            movie_id: Canonical movie id.
            rating: New rating.
            votes: New vote count.

        Returns:
            True if a row was updated.
        """
        stmt = (
            update(Movie)
            .where(Movie.id == movie_id)
            .values(rating=rating, votes=votes, updated_at=func.now())
        )
        result = await self._execute(stmt)
        return result.rowcount > 0

    async def upsert_translation(self, data: MovieTranslationData) -> None:
        """Insert or update a translation keyed by (movie, language).

        Args:
            data: Translation fields.
        """
        stmt = self._insert(MovieTranslation).values(**data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["movie_id", "language"],
            set_={
                "title": stmt.excluded.title,
                "original_title": stmt.excluded.original_title,
                "description": stmt.excluded.description,
                "poster_url": stmt.excluded.poster_url,
                "updated_at": func.now(),
            },
        )
        await self._execute(stmt)

    async def get_translations(self, movie_id: str) -> list[MovieTranslation]:
        """Get every translation of a movie.

        Args:
            movie_id: Canonical movie id.

        Returns:
            Translations ordered by language.
        """
        stmt = (
            select(MovieTranslation)
            .where(MovieTranslation.movie_id == movie_id)
            .order_by(MovieTranslation.language)
        )
        result = await self._session.scalars(stmt)
        return list(result.all())

    async def bulk_upsert_trailers(self, trailers: list[TrailerData]) -> int:
        """Bulk insert or update trailers keyed by (movie, video key).

        Args:
            trailers: Trailer rows.

        Returns:
            Number of trailers processed.
        """
        if not trailers:
            return 0

        stmt = self._insert(Trailer).values(trailers)
        stmt = stmt.on_conflict_do_update(
            index_elements=["movie_id", "key"],
            set_={
                "title": stmt.excluded.title,
                "language": stmt.excluded.language,
                "url": stmt.excluded.url,
                "updated_at": func.now(),
            },
        )
        await self._execute(stmt)
        return len(trailers)

    async def get_trailers(self, movie_id: str) -> list[Trailer]:
        """Get trailers of a movie.

        Args:
            movie_id: Canonical movie id.

        Returns:
            List of trailers.
        """
        stmt = select(Trailer).where(Trailer.movie_id == movie_id).order_by(Trailer.key)
        result = await self._session.scalars(stmt)
        return list(result.all())
