"""Database package for Marquee.

Provides connection management, ORM models, and repositories.

Usage:
    from marquee.database import get_database, MovieRepository

    db = get_database()
    async with db.async_session() as session:
        repo = MovieRepository(session)
        movie = await repo.get_by_tmdb_id(550)
"""

from marquee.database.connection import (
    DatabaseConnection,
    close_database,
    get_async_session,
    get_database,
)
from marquee.database.models import (
    Actor,
    ActorTranslation,
    Base,
    CastMember,
    Genre,
    GenreTranslation,
    Movie,
    MovieGenre,
    MovieTranslation,
    Notification,
    RefreshRun,
    Subscription,
    Trailer,
)
from marquee.database.repositories import (
    ActorRepository,
    AlertRepository,
    BaseRepository,
    GenreRepository,
    MovieRepository,
    RefreshRunRepository,
)

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    "get_async_session",
    "close_database",
    # Models
    "Base",
    "Movie",
    "MovieTranslation",
    "Trailer",
    "Genre",
    "GenreTranslation",
    "MovieGenre",
    "Actor",
    "ActorTranslation",
    "CastMember",
    "Subscription",
    "Notification",
    "RefreshRun",
    # Repositories
    "BaseRepository",
    "MovieRepository",
    "GenreRepository",
    "ActorRepository",
    "AlertRepository",
    "RefreshRunRepository",
]
