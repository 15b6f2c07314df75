"""SQLAlchemy ORM models for the Marquee catalog.

Usage:
    from marquee.database.models import Base, Movie, Genre

Tables:
    - movies: Canonical movie records with reconciled ratings
    - movie_translations: Localized movie fields
    - trailers: YouTube trailers
    - genres: Genre reference data
    - genre_translations: Localized genre names
    - movie_genres: Movie-Genre association
    - actors: Cast members
    - actor_translations: Localized actor fields
    - cast_members: Movie-Actor association
    - subscriptions: User rating alerts
    - notifications: Sent-alert ledger
    - refresh_runs: Batch execution tracking
"""

from marquee.database.models.actor import Actor, ActorTranslation, CastMember
from marquee.database.models.alerts import Notification, Subscription
from marquee.database.models.audit import RefreshRun
from marquee.database.models.base import Base, TimestampMixin
from marquee.database.models.genre import Genre, GenreTranslation, MovieGenre
from marquee.database.models.movie import Movie, MovieTranslation, Trailer

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Catalog
    "Movie",
    "MovieTranslation",
    "Trailer",
    "Genre",
    "GenreTranslation",
    "MovieGenre",
    "Actor",
    "ActorTranslation",
    "CastMember",
    # Alerts
    "Subscription",
    "Notification",
    # Audit
    "RefreshRun",
]
