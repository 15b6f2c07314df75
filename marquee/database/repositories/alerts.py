"""Subscription and notification ledger repository."""

from sqlalchemy import func, or_, select

from marquee.database.models import Notification, Subscription
from marquee.database.repositories.base import BaseRepository


class AlertRepository(BaseRepository[Subscription]):
    """Repository for rating alerts.

    Subscriptions are read-only input; the notification ledger is
    append-only with at most one row per (user, movie).
    """

    model = Subscription

    async def find_matching(self, rating: float, genre_ids: list[int]) -> list[Subscription]:
        """Find active subscriptions triggered by a rating.

        Args:
            rating: Movie rating (threshold is inclusive).
            genre_ids: TMDB genre ids of the movie.

        Returns:
            Matching subscriptions ordered by id.
        """
        stmt = (
            select(Subscription)
            .where(
                Subscription.active.is_(True),
                Subscription.threshold <= rating,
                or_(
                    Subscription.genre_tmdb_id.is_(None),
                    Subscription.genre_tmdb_id.in_(genre_ids),
                ),
            )
            .order_by(Subscription.id)
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def has_notification(self, user_id: str, movie_id: str) -> bool:
        """Check whether the ledger already holds (user, movie).

        Args:
            user_id: Subscriber id.
            movie_id: Canonical movie id.

        Returns:
            True if already notified.
        """
        stmt = select(Notification.id).where(
            Notification.user_id == user_id,
            Notification.movie_id == movie_id,
        )
        result = await self._execute(stmt)
        return result.first() is not None

    async def record_notification(
        self,
        user_id: str,
        movie_id: str,
        rating: float | None,
        delivered: bool,
    ) -> bool:
        """Append a ledger entry, ignoring an existing (user, movie) pair.

        Args:
            user_id: Subscriber id.
            movie_id: Canonical movie id.
            rating: Rating that triggered the alert.
            delivered: Whether every channel dispatch succeeded.

        Returns:
            True if a new entry was written.
        """
        stmt = self._insert(Notification).values(
            user_id=user_id,
            movie_id=movie_id,
            rating=rating,
            delivered=delivered,
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "movie_id"])
        result = await self._execute(stmt)
        return result.rowcount > 0

    async def count_notifications(self, user_id: str | None = None) -> int:
        """Count ledger entries, optionally for one user.

        Args:
            user_id: Restrict to this subscriber.

        Returns:
            Number of entries.
        """
        stmt = select(func.count()).select_from(Notification)
        if user_id is not None:
            stmt = stmt.where(Notification.user_id == user_id)
        result = await self._execute(stmt)
        return result.scalar() or 0
