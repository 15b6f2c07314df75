"""Refresh pipeline data types."""

from dataclasses import dataclass, field
from typing import Literal, TypedDict

MovieStatus = Literal["created", "skipped", "rating_refreshed"]


@dataclass
class MovieOutcome:
    """Result of processing one listing item.

    Attributes:
        tmdb_id: TMDB movie id.
        movie_id: Canonical id (None when skipped before lookup).
        title: Primary-language title.
        rating: Reconciled rating.
        votes: Reconciled vote count.
        genre_ids: TMDB genre ids of the movie.
        status: What happened to the movie.
        actors_linked: Cast links written.
        actors_failed: Cast members whose processing failed.
    """

    tmdb_id: int
    movie_id: str | None
    title: str
    rating: float | None = None
    votes: int | None = None
    genre_ids: list[int] = field(default_factory=list)
    status: MovieStatus = "created"
    actors_linked: int = 0
    actors_failed: int = 0

    @property
    def notifiable(self) -> bool:
        """Whether the matcher should evaluate this movie."""
        return self.status != "skipped" and self.movie_id is not None and self.rating is not None


@dataclass
class CastResult:
    """Counts returned by the cast processor."""

    linked: int = 0
    failed: int = 0


@dataclass
class MatchResult:
    """Counts returned by the notification matcher.

    Attributes:
        matched: Subscriptions matching the rating.
        already_notified: Pairs already present in the ledger.
        recorded: Ledger entries appended.
        dispatched: Channel payloads delivered.
        failed: Channel payloads that failed.
    """

    matched: int = 0
    already_notified: int = 0
    recorded: int = 0
    dispatched: int = 0
    failed: int = 0


class NotificationPayload(TypedDict):
    """Body posted to the notifier for one channel."""

    userId: str
    channel: str
    movie: dict[str, str | float | None]


@dataclass
class RefreshSummary:
    """Aggregate result of a refresh run.

    Attributes:
        run_id: RefreshRun audit id.
        listed: Listing size.
        processed: Movies enriched or rating-refreshed.
        skipped: Movies already stored.
        failed: Movies whose processing raised.
        notifications: Ledger entries appended.
        duration_seconds: Wall time.
        errors: One message per failed movie.
    """

    run_id: int | None = None
    listed: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    notifications: int = 0
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)

    def as_counts(self) -> dict[str, int]:
        """Return the audit row metric columns."""
        return {
            "movies_listed": self.listed,
            "movies_processed": self.processed,
            "movies_skipped": self.skipped,
            "movies_failed": self.failed,
            "notifications_sent": self.notifications,
        }
