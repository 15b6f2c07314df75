"""Refresh run repository for batch tracking."""

from datetime import UTC, datetime

from sqlalchemy import select, update

from marquee.database.models import RefreshRun
from marquee.database.repositories.base import BaseRepository


class RefreshRunRepository(BaseRepository[RefreshRun]):
    """Repository for RefreshRun entity operations."""

    model = RefreshRun

    async def start_run(self, trigger: str = "cron") -> RefreshRun:
        """Create a new run in 'running' status.

        Args:
            trigger: What started the run.

        Returns:
            Newly created RefreshRun.
        """
        run = RefreshRun(trigger=trigger, status="running", started_at=datetime.now(UTC))
        return await self.create(run)

    async def finish_run(
        self,
        run_id: int,
        status: str,
        counts: dict[str, int],
        duration_seconds: float,
        error_message: str | None = None,
    ) -> None:
        """Mark a run as finished.

        Args:
            run_id: Run primary key.
            status: Final status (success or failed).
            counts: Metric columns (movies_listed, movies_processed, ...).
            duration_seconds: Total execution time.
            error_message: Error details if failed.
        """
        stmt = (
            update(RefreshRun)
            .where(RefreshRun.id == run_id)
            .values(
                status=status,
                duration_seconds=round(duration_seconds, 2),
                error_message=error_message,
                completed_at=datetime.now(UTC),
                **counts,
            )
        )
        await self._execute(stmt)

    async def get_latest(self) -> RefreshRun | None:
        """Get the most recent run.

        Returns:
            Most recent RefreshRun or None.
        """
        stmt = select(RefreshRun).order_by(RefreshRun.id.desc()).limit(1)
        result = await self._session.scalars(stmt)
        return result.first()
