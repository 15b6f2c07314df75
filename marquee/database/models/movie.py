"""Movie catalog models.

A movie is keyed by its canonical id: the IMDb id when known,
else the synthetic key ``source-{tmdb_id}``.
"""

from datetime import date

from sqlalchemy import (
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from marquee.database.models.base import Base, TimestampMixin


class Movie(Base, TimestampMixin):
    """Currently-showing movie with its reconciled rating.

    Attributes:
        id: Canonical id (IMDb id or source-{tmdb_id}).
        tmdb_id: TMDB identifier (existence check key).
        imdb_id: IMDb identifier (format: tt1234567).
        status: Catalog status.
        rating: Reconciled rating, None when no provider had data.
        votes: Reconciled vote count.
        runtime: Runtime in minutes.
        release_date: Release date.
        original_language: ISO 639-1 code.
    """

    __tablename__ = "movies"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    tmdb_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        index=True,
    )
    imdb_id: Mapped[str | None] = mapped_column(String(20), index=True)
    status: Mapped[str] = mapped_column(String(20), default="now_playing")

    # Reconciled rating
    rating: Mapped[float | None] = mapped_column(Float)
    votes: Mapped[int | None] = mapped_column(Integer)

    # Metadata
    runtime: Mapped[int | None] = mapped_column(Integer)
    release_date: Mapped[date | None] = mapped_column(Date)
    original_language: Mapped[str | None] = mapped_column(String(10))

    __table_args__ = (
        CheckConstraint(
            "rating IS NULL OR (rating >= 0 AND rating <= 10)",
            name="chk_movie_rating",
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Movie(id='{self.id}', tmdb_id={self.tmdb_id}, rating={self.rating})>"


class MovieTranslation(Base, TimestampMixin):
    """Localized movie fields, one row per (movie, language).

    Attributes:
        id: Primary key.
        movie_id: Foreign key to movies.
        language: Language tag (e.g., 'en-US').
        title: Localized title.
        original_title: Original title as shown in that language.
        description: Localized overview.
        poster_url: Absolute poster URL.
    """

    __tablename__ = "movie_translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    movie_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    original_title: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text)
    poster_url: Mapped[str | None] = mapped_column(String(500))

    __table_args__ = (
        UniqueConstraint("movie_id", "language", name="uq_movie_translation"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<MovieTranslation(movie_id='{self.movie_id}', language='{self.language}')>"


class Trailer(Base, TimestampMixin):
    """YouTube trailer attached to a movie.

    Attributes:
        id: Primary key.
        movie_id: Foreign key to movies.
        key: YouTube video key.
        title: Video title.
        language: Language tag the video was listed under.
        url: Watch URL.
    """

    __tablename__ = "trailers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    movie_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str | None] = mapped_column(String(500))
    language: Mapped[str | None] = mapped_column(String(10))
    url: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (UniqueConstraint("movie_id", "key", name="uq_trailer_key"),)
