"""RefreshRun model for batch execution tracking."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marquee.database.models.base import Base


class RefreshRun(Base):
    """Catalog refresh execution record.

    Attributes:
        id: Primary key.
        trigger: What started the run (cron, cli, movie).
        status: Execution status (running, success, failed).
        movies_listed: Items in the now-playing listing.
        movies_processed: Movies enriched and stored.
        movies_skipped: Movies already stored.
        movies_failed: Movies whose processing raised.
        notifications_sent: Ledger entries appended.
        duration_seconds: Total execution time.
        error_message: Error details if failed.
        started_at: Run start timestamp.
        completed_at: Run completion timestamp.
    """

    __tablename__ = "refresh_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    trigger: Mapped[str] = mapped_column(String(20), default="cron")
    status: Mapped[str] = mapped_column(String(20), default="running")

    # Metrics
    movies_listed: Mapped[int] = mapped_column(Integer, default=0)
    movies_processed: Mapped[int] = mapped_column(Integer, default=0)
    movies_skipped: Mapped[int] = mapped_column(Integer, default=0)
    movies_failed: Mapped[int] = mapped_column(Integer, default=0)
    notifications_sent: Mapped[int] = mapped_column(Integer, default=0)
    duration_seconds: Mapped[float | None] = mapped_column(Float)

    # Error tracking
    error_message: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def is_running(self) -> bool:
        """Check if the run is still in progress."""
        return self.status == "running"

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<RefreshRun(id={self.id}, trigger='{self.trigger}', status='{self.status}')>"
