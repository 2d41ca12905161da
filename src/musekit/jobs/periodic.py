"""Cancellable self-rescheduling task.

Hidden design decisions:
- How the next tick is scheduled (sleep-then-tick inside one asyncio task)
- How an owner-requested stop is told apart from an outer cancellation
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Tick = Callable[[], Awaitable[bool]]


class PeriodicTask:
    """Runs ``tick`` every ``interval`` seconds until it reports completion.

    The first tick runs one interval after ``start()``. ``tick`` returns True
    to stop, False to be scheduled again with the same interval; if it
    raises, the task stops and ``wait()`` re-raises the error. ``cancel()``
    stops the schedule immediately: no tick runs after it returns.
    """

    def __init__(self, tick: Tick, interval: float, name: str | None = None):
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self._tick = tick
        self._interval = interval
        self._name = name or "periodic-task"
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False
        self._ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """Number of ticks started so far."""
        return self._ticks

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._stop_requested

    def start(self) -> None:
        """Schedule the first tick."""
        if self._task is not None:
            raise RuntimeError(f"{self._name} already started")
        self._task = asyncio.create_task(self._run(), name=self._name)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._ticks += 1
            if await self._tick():
                logger.debug("%s finished after %d ticks", self._name, self._ticks)
                return

    def cancel(self) -> None:
        """Stop the schedule; a pending sleep or in-flight tick is abandoned."""
        self._stop_requested = True
        if self._task is not None and not self._task.done():
            logger.debug("%s cancelled after %d ticks", self._name, self._ticks)
            self._task.cancel()

    async def wait(self) -> bool:
        """Wait for the schedule to end.

        Returns:
            True if ``tick`` reported completion, False if ``cancel()`` stopped it

        Raises:
            Whatever ``tick`` raised
        """
        if self._task is None:
            raise RuntimeError(f"{self._name} was never started")
        try:
            await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if self._stop_requested and not (current and current.cancelling()):
                return False
            raise
        return True
