"""Periodic cleanup sweep for the cache.

Runs `CacheService.cleanup()` on a fixed interval as an asyncio task on the
host's event loop. Each pass completes synchronously between event-loop
turns, so it needs no locking against ordinary get/set traffic.
"""

import asyncio
import logging
from typing import Optional

from cliniccache.domain.interfaces.cache import CacheService
from cliniccache.domain.models.cache import CleanupReport

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


class CleanupSweep:
    """Background task purging expired and corrupted cache entries."""

    def __init__(self, cache: CacheService, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Schedules the sweep loop on the running event loop."""
        if self._running:
            logger.debug("Cleanup sweep already running")
            return
        self._running = True
        self._task = asyncio.get_running_loop().create_task(self._sweep_loop())
        logger.info(f"Cleanup sweep started (interval={self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancels the sweep loop and waits for it to finish."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Cleanup sweep stopped")

    async def _sweep_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception as e:
                logger.error(f"Cleanup sweep iteration failed: {e}", exc_info=True)

    def run_once(self) -> CleanupReport:
        """Runs a single cleanup pass synchronously and returns what it removed."""
        report = self.cache.cleanup()
        if report.total > 0:
            logger.info(
                f"Cleanup sweep removed {report.total} entries "
                f"(memory={report.memory_removed}, persistent={report.persistent_removed})"
            )
        return report
