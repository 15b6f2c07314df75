"""Actor and cast link models."""

from datetime import date

from sqlalchemy import (
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


class Actor(Base, TimestampMixin):
    """Person appearing in a movie cast.

    Attributes:
        id: Canonical id (IMDb person id or source-{tmdb_id}).
        tmdb_id: TMDB person identifier.
        imdb_id: IMDb person identifier (format: nm1234567).
        profile_url: Absolute profile image URL.
        popularity: TMDB popularity score.
        birthday: Date of birth.
        deathday: Date of death.
        place_of_birth: Birth place as reported by TMDB.
    """

    __tablename__ = "actors"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    tmdb_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    imdb_id: Mapped[str | None] = mapped_column(String(20))
    profile_url: Mapped[str | None] = mapped_column(String(500))
    popularity: Mapped[float | None] = mapped_column(Float)
    birthday: Mapped[date | None] = mapped_column(Date)
    deathday: Mapped[date | None] = mapped_column(Date)
    place_of_birth: Mapped[str | None] = mapped_column(String(255))

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Actor(id='{self.id}', tmdb_id={self.tmdb_id})>"


class ActorTranslation(Base, TimestampMixin):
    """Localized actor name and biography."""

    __tablename__ = "actor_translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    actor_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("actors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    biography: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("actor_id", "language", name="uq_actor_translation"),
    )


class CastMember(Base, TimestampMixin):
    """Link between a movie and an actor.

    Attributes:
        id: Primary key.
        movie_id: Foreign key to movies.
        actor_id: Foreign key to actors.
        character: Character name.
        display_order: Billing order.
    """

    __tablename__ = "cast_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    movie_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("actors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    character: Mapped[str | None] = mapped_column(String(500))
    display_order: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (UniqueConstraint("movie_id", "actor_id", name="uq_cast_member"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CastMember(movie_id='{self.movie_id}', actor_id='{self.actor_id}')>"
