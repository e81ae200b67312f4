"""
Periodic cleanup scheduling.

Runs a callback on a fixed interval as an asyncio task with an explicit
cancellation handle.
"""

import asyncio
from typing import Callable, Optional

from esg_cache.utils.logger import get_logger

logger = get_logger(__name__)


class CleanupScheduler:
    """Fixed-interval background task."""

    def __init__(self, callback: Callable[[], object], interval_seconds: float):
        """
        Initialize scheduler.

        Args:
            callback: Synchronous function run on every tick
            interval_seconds: Seconds between ticks
        """
        self._callback = callback
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        """Check if the background task is active."""
        return self._task is not None and not self._task.done()

    @property
    def ticks(self) -> int:
        """Get number of completed ticks."""
        return self._ticks

    def start(self) -> None:
        """
        Start the background task on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        logger.info("Cleanup scheduler started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Cleanup scheduler stopped", ticks=self._ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._tick()

    def _tick(self) -> None:
        """Run callback once; a failing tick does not stop the loop."""
        try:
            self._callback()
        except Exception as e:
            logger.error("Scheduled cleanup failed", error=str(e))
        self._ticks += 1
