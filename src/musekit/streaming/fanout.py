"""Fan-out/fan-in combinator for independent async jobs.

One task per key, all started together, joined with "wait for all". A
failing job never cancels or affects its siblings; its exception is
recorded in that key's outcome instead.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass(frozen=True)
class TaskOutcome(Generic[T]):
    """Result of one fanned-out job: a value or the error that ended it."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def fan_out(jobs: Mapping[K, Callable[[], Awaitable[T]]]) -> dict[K, TaskOutcome[T]]:
    """Run every job concurrently and wait until all have terminated.

    Args:
        jobs: Mapping from key to a zero-argument coroutine factory

    Returns:
        Outcome per key, in the same key order as ``jobs``
    """
    keys = list(jobs)
    tasks = [asyncio.create_task(jobs[key]()) for key in keys]
    try:
        results = await asyncio.gather(*tasks, return_exceptions=True)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    outcomes: dict[K, TaskOutcome[T]] = {}
    for key, result in zip(keys, results):
        if isinstance(result, BaseException):
            logger.warning("Fan-out job %r failed: %s", key, result)
            outcomes[key] = TaskOutcome(error=result)
        else:
            outcomes[key] = TaskOutcome(value=result)
    return outcomes
