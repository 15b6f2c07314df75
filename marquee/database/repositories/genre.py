"""Genre repository for reference data and movie links."""

from sqlalchemy import delete, func, select

from marquee.database.models import Genre, GenreTranslation, MovieGenre
from marquee.database.repositories.base import BaseRepository


class GenreRepository(BaseRepository[Genre]):
    """Repository for Genre entity operations.

    Genres are shared reference data upserted by TMDB id and
    looked up frequently during a refresh.
    """

    model = Genre

    async def get_by_tmdb_id(self, tmdb_id: int) -> Genre | None:
        """Retrieve genre by TMDB identifier.

        Args:
            tmdb_id: TMDB genre ID.

        Returns:
            Genre instance or None.
        """
        return await self.get_by_field("tmdb_id", tmdb_id)

    async def upsert(self, tmdb_id: int) -> int:
        """Insert the genre if missing and return its internal id.

        Args:
            tmdb_id: TMDB genre ID.

        Returns:
            Internal genre id.
        """
        stmt = self._insert().values(tmdb_id=tmdb_id)
        stmt = stmt.on_conflict_do_update(
            index_elements=["tmdb_id"],
            set_={"updated_at": func.now()},
        )
        await self._execute(stmt)

        result = await self._session.execute(select(Genre.id).where(Genre.tmdb_id == tmdb_id))
        return result.scalar_one()

    async def upsert_translation(self, genre_id: int, language: str, name: str) -> None:
        """Insert or update a genre name keyed by (genre, language).

        Args:
            genre_id: Internal genre id.
            language: Language tag.
            name: Display name.
        """
        stmt = self._insert(GenreTranslation).values(
            genre_id=genre_id,
            language=language,
            name=name,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["genre_id", "language"],
            set_={"name": stmt.excluded.name, "updated_at": func.now()},
        )
        await self._execute(stmt)

    async def get_names(self, language: str) -> dict[int, str]:
        """Get mapping of TMDB genre IDs to names in one language.

        Args:
            language: Language tag.

        Returns:
            Dictionary mapping tmdb_id to name.
        """
        stmt = (
            select(Genre.tmdb_id, GenreTranslation.name)
            .join(GenreTranslation, GenreTranslation.genre_id == Genre.id)
            .where(GenreTranslation.language == language)
        )
        result = await self._session.execute(stmt)
        return {row[0]: row[1] for row in result.all()}

    async def replace_movie_genres(self, movie_id: str, tmdb_ids: list[int]) -> int:
        """Replace a movie's genre set with exactly the given genres.

        An empty list clears the set.

        Args:
            movie_id: Canonical movie id.
            tmdb_ids: TMDB genre ids (must already be stored).

        Returns:
            Number of links written.
        """
        await self._execute(delete(MovieGenre).where(MovieGenre.movie_id == movie_id))
        if not tmdb_ids:
            return 0

        result = await self._session.execute(
            select(Genre.id).where(Genre.tmdb_id.in_(set(tmdb_ids)))
        )
        genre_ids = list(result.scalars().all())
        if not genre_ids:
            return 0

        rows = [{"movie_id": movie_id, "genre_id": genre_id} for genre_id in genre_ids]
        await self._execute(self._insert(MovieGenre).values(rows))
        return len(rows)

    async def get_movie_genre_tmdb_ids(self, movie_id: str) -> list[int]:
        """Get the TMDB genre ids linked to a movie.

        Args:
            movie_id: Canonical movie id.

        Returns:
            Sorted TMDB genre ids.
        """
        stmt = (
            select(Genre.tmdb_id)
            .join(MovieGenre, MovieGenre.genre_id == Genre.id)
            .where(MovieGenre.movie_id == movie_id)
            .order_by(Genre.tmdb_id)
        )
        result = await self._session.scalars(stmt)
        return list(result.all())
