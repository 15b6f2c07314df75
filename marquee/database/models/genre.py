"""Genre reference models.

Genres are shared across movies and keyed by the TMDB genre id.
"""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from marquee.database.models.base import Base, TimestampMixin


class Genre(Base, TimestampMixin):
    """Genre reference table.

    Attributes:
        id: Primary key.
        tmdb_id: TMDB genre identifier (e.g., 27 for Horror).
    """

    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tmdb_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Genre(id={self.id}, tmdb_id={self.tmdb_id})>"


class GenreTranslation(Base, TimestampMixin):
    """Localized genre name.

    Attributes:
        id: Primary key.
        genre_id: Foreign key to genres.
        language: Language tag.
        name: Display name.
    """

    __tablename__ = "genre_translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    genre_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("genres.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("genre_id", "language", name="uq_genre_translation"),
    )


class MovieGenre(Base):
    """Association table for Movie-Genre relationship.

    Attributes:
        movie_id: Foreign key to movies.
        genre_id: Foreign key to genres.
    """

    __tablename__ = "movie_genres"

    movie_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
    )
    genre_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("genres.id", ondelete="CASCADE"),
        primary_key=True,
    )
