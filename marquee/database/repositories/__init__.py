"""Database repositories for the Marquee catalog.

Usage:
    from marquee.database.repositories import MovieRepository

    async with db.async_session() as session:
        repo = MovieRepository(session)
        await repo.exists_by_tmdb_id(550)
"""

from marquee.database.repositories.actor import ActorData, ActorRepository
from marquee.database.repositories.alerts import AlertRepository
from marquee.database.repositories.audit import RefreshRunRepository
from marquee.database.repositories.base import BaseRepository
from marquee.database.repositories.genre import GenreRepository
from marquee.database.repositories.movie import (
    MovieData,
    MovieRepository,
    MovieTranslationData,
    TrailerData,
)

__all__ = [
    "BaseRepository",
    "MovieRepository",
    "MovieData",
    "MovieTranslationData",
    "TrailerData",
    "GenreRepository",
    "ActorRepository",
    "ActorData",
    "AlertRepository",
    "RefreshRunRepository",
]
