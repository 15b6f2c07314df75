"""Rating alert subscriptions and the notification ledger."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from marquee.database.models.base import Base, TimestampMixin


class Subscription(Base, TimestampMixin):
    """User alert rule on newly rated movies.

    Attributes:
        id: Primary key.
        user_id: Owner identifier (managed by the auth layer).
        threshold: Minimum rating, inclusive.
        genre_tmdb_id: Optional TMDB genre filter.
        channels: Delivery channels ('email', 'sms').
        active: Disabled subscriptions are never matched.
    """

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    threshold: Mapped[float] = mapped_column(Float, nullable=False)
    genre_tmdb_id: Mapped[int | None] = mapped_column(Integer)
    channels: Mapped[list[str]] = mapped_column(JSON, default=list)
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Subscription(id={self.id}, user='{self.user_id}', "
            f"threshold={self.threshold}, genre={self.genre_tmdb_id})>"
        )


class Notification(Base):
    """Ledger entry: a user was alerted about a movie.

    Append-only, at most one row per (user, movie).

    Attributes:
        id: Primary key.
        user_id: Alerted user.
        movie_id: Foreign key to movies.
        rating: Rating that triggered the alert.
        delivered: Whether every channel dispatch succeeded.
        created_at: Ledger timestamp.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    movie_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[float | None] = mapped_column(Float)
    delivered: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (UniqueConstraint("user_id", "movie_id", name="uq_notification"),)
