"""Notification matcher.

Evaluates active subscriptions against a newly rated movie and
keeps the at-most-once ledger of sent alerts.
"""

from marquee.database import AlertRepository, DatabaseConnection, Subscription
from marquee.etl.errors import NotifierError
from marquee.etl.notify import Notifier
from marquee.etl.processors.base import BaseProcessor
from marquee.etl.types import MatchResult, MovieOutcome, NotificationPayload
from marquee.monitoring.metrics import NOTIFICATIONS_DISPATCHED_TOTAL


class NotificationMatcher(BaseProcessor):
    """Dispatches alerts for subscriptions matching a movie rating.

    Attributes:
        ledger_requires_delivery: Only append ledger entries after
            every channel dispatch succeeded.
    """

    name = "notification"

    def __init__(
        self,
        db: DatabaseConnection,
        notifier: Notifier,
        ledger_requires_delivery: bool = False,
    ) -> None:
        """Initialize matcher.

        Args:
            db: Database connection.
            notifier: Alert dispatcher.
            ledger_requires_delivery: See class attributes.
        """
        super().__init__(db)
        self._notifier = notifier
        self.ledger_requires_delivery = ledger_requires_delivery

    async def evaluate(self, outcome: MovieOutcome) -> MatchResult:
        """Notify every matching subscriber not yet alerted.

        A null rating short-circuits without querying subscriptions.

        Args:
            outcome: Processed movie with its rating and genres.

        Returns:
            Match counts.
        """
        result = MatchResult()
        if outcome.rating is None or outcome.movie_id is None:
            return result

        async with self._db.async_session() as session:
            subscriptions = await AlertRepository(session).find_matching(
                outcome.rating, outcome.genre_ids
            )

        result.matched = len(subscriptions)
        for subscription in subscriptions:
            await self._notify(subscription, outcome, result)

        if result.matched:
            self._logger.info(
                f"{outcome.movie_id} ({outcome.rating}): matched={result.matched}, "
                f"recorded={result.recorded}, already={result.already_notified}, "
                f"failed={result.failed}"
            )
        return result

    async def _notify(
        self,
        subscription: Subscription,
        outcome: MovieOutcome,
        result: MatchResult,
    ) -> None:
        """Dispatch and record one subscription.

        Args:
            subscription: Matching subscription.
            outcome: Processed movie.
            result: Counters updated in place.
        """
        movie_id = outcome.movie_id
        if not subscription.channels:
            # No ledger entry: the pair stays open until a channel is set
            result.failed += 1
            self._record_error(
                f"Subscription {subscription.id} of {subscription.user_id} has no channel"
            )
            return

        async with self._db.async_session() as session:
            if await AlertRepository(session).has_notification(subscription.user_id, movie_id):
                result.already_notified += 1
                self._record_skip()
                return

        delivered = True
        for channel in subscription.channels:
            payload = NotificationPayload(
                userId=subscription.user_id,
                channel=channel,
                movie={"id": movie_id, "title": outcome.title, "rating": outcome.rating},
            )
            try:
                await self._notifier.dispatch(payload)
            except NotifierError as e:
                delivered = False
                result.failed += 1
                self._record_error(f"Dispatch to {subscription.user_id}/{channel} failed: {e}")
                NOTIFICATIONS_DISPATCHED_TOTAL.labels(channel=channel, status="failed").inc()
            else:
                result.dispatched += 1
                NOTIFICATIONS_DISPATCHED_TOTAL.labels(channel=channel, status="sent").inc()

        if not delivered and self.ledger_requires_delivery:
            self._logger.info(f"Ledger entry for {subscription.user_id}/{movie_id} deferred")
            return

        async with self._db.async_session() as session:
            recorded = await AlertRepository(session).record_notification(
                user_id=subscription.user_id,
                movie_id=movie_id,
                rating=outcome.rating,
                delivered=delivered,
            )

        if recorded:
            result.recorded += 1
            self._record_processed()
        else:
            # Another run appended the same pair in the meantime
            result.already_notified += 1
            self._record_skip()
