"""Bounded worker pool for outbound-call fan-out.

Runs an async callable over a list of items with a concurrency
ceiling, a fixed spacing between item starts and an optional
per-item timeout. Failures are captured per item instead of
cancelling siblings.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")

SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class WorkerResult(Generic[ItemT, ResultT]):
    """Outcome of one pool item.

    Attributes:
        index: Position of the item in the input sequence.
        item: Input item.
        value: Callable result when successful.
        error: Exception raised by the callable, if any.
    """

    index: int
    item: ItemT
    value: ResultT | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        """Whether the item completed without error."""
        return self.error is None


class WorkerPool:
    """Semaphore-bounded executor with spacing between item starts.

    Attributes:
        concurrency: Maximum number of items running at once.
        delay: Seconds waited before every item except the first.
        timeout: Per-item timeout in seconds (None disables).
    """

    def __init__(
        self,
        concurrency: int,
        delay: float = 0.0,
        timeout: float | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Initialize the pool.

        Args:
            concurrency: Maximum simultaneous items (>= 1).
            delay: Spacing between item starts in seconds.
            timeout: Per-item timeout in seconds, None or 0 to disable.
            sleep: Awaitable sleep, injectable for deterministic tests.

        Raises:
            ValueError: If concurrency is lower than 1.
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.concurrency = concurrency
        self.delay = delay
        self.timeout = timeout or None
        self._sleep = sleep

    async def map(
        self,
        func: Callable[[ItemT], Awaitable[ResultT]],
        items: Sequence[ItemT],
    ) -> list[WorkerResult[ItemT, ResultT]]:
        """Run func over items and collect one result per item.

        Args:
            func: Async callable applied to each item.
            items: Items to process, in start order.

        Returns:
            Results in input order.
        """
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run(index: int, item: ItemT) -> WorkerResult[ItemT, ResultT]:
            async with semaphore:
                if index > 0 and self.delay > 0:
                    await self._sleep(self.delay)
                try:
                    if self.timeout is None:
                        value = await func(item)
                    else:
                        value = await asyncio.wait_for(func(item), timeout=self.timeout)
                except Exception as e:
                    return WorkerResult(index=index, item=item, error=e)
                return WorkerResult(index=index, item=item, value=value)

        tasks = [run(index, item) for index, item in enumerate(items)]
        return list(await asyncio.gather(*tasks))
