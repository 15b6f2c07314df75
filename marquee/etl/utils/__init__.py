"""Pipeline utilities: logging and bounded concurrency."""

from marquee.etl.utils.logger import bind_run_id, setup_logger
from marquee.etl.utils.pool import WorkerPool, WorkerResult

__all__ = [
    "bind_run_id",
    "setup_logger",
    "WorkerPool",
    "WorkerResult",
]
