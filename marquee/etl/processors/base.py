"""Base processor class.

Provides shared logging and statistics tracking for the
refresh processors writing to the catalog store.
"""

import logging
from dataclasses import dataclass, field

from marquee.database import DatabaseConnection
from marquee.etl.utils.logger import setup_logger


@dataclass
class ProcessorStats:
    """Statistics for a processor over one run.

    Attributes:
        processed: Entities written successfully.
        skipped: Entities skipped (cached, existing or raced).
        errors: Entities that failed.
        error_messages: List of error descriptions.
    """

    processed: int = 0
    skipped: int = 0
    errors: int = 0
    error_messages: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Total entities seen."""
        return self.processed + self.skipped + self.errors


class BaseProcessor:
    """Base class for refresh processors.

    Attributes:
        name: Processor identifier for logging.
    """

    name: str = "base"

    def __init__(self, db: DatabaseConnection) -> None:
        """Initialize processor with a database connection.

        Args:
            db: Connection providing one session per unit of work.
        """
        self._db = db
        self._logger = setup_logger(f"etl.processor.{self.name}")
        self._stats = ProcessorStats()

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    @property
    def stats(self) -> ProcessorStats:
        """Get current processor statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset statistics for a new run."""
        self._stats = ProcessorStats()

    def _record_processed(self) -> None:
        """Record a successful write."""
        self._stats.processed += 1

    def _record_skip(self) -> None:
        """Record a skipped entity."""
        self._stats.skipped += 1

    def _record_error(self, message: str) -> None:
        """Record an error with message.

        Args:
            message: Error description.
        """
        self._stats.errors += 1
        self._stats.error_messages.append(message)
        self._logger.warning(message)

    def _log_summary(self) -> None:
        """Log final processor statistics."""
        self._logger.info(
            f"{self.name} summary: processed={self._stats.processed}, "
            f"skipped={self._stats.skipped}, errors={self._stats.errors}"
        )
