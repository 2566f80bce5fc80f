"""Round scheduler — runs one ping round per tick."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from pinger.coordinator import RoundCoordinator
from pinger.registry import DestinationRegistry
from pinger.reporter import ResultReporter
from pinger.status import PingStatus

logger = logging.getLogger(__name__)


class RoundScheduler:
    """Triggers rounds, either from an external clock via :meth:`tick` or
    from its own background loop (:meth:`start` / :meth:`stop`).

    Each loop tick runs as a separate task, so a slow round may overlap the
    next one.
    """

    def __init__(
        self,
        registry: DestinationRegistry,
        coordinator: RoundCoordinator,
        reporter: ResultReporter,
        interval_seconds: float = 20.0,
    ) -> None:
        self.registry = registry
        self.coordinator = coordinator
        self.reporter = reporter
        self.interval = interval_seconds
        self._running = False
        self._task: asyncio.Task | None = None
        self._ticks: set[asyncio.Task] = set()
        self._last_tick: str | None = None

    async def tick(self) -> list[PingStatus] | None:
        """Run one round over the current destinations and report it.

        Returns the round's statuses, or ``None`` when there was nothing to
        ping or the round failed.
        """
        self._last_tick = datetime.now(timezone.utc).isoformat()
        try:
            destinations = self.registry.snapshot()
            if not destinations:
                return None
            results = await self.coordinator.run_round(destinations)
            await self.reporter.report(results)
            return results
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Ping round failed")
            return None

    async def start(self) -> None:
        if self._running:
            logger.warning("Round scheduler is already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("Round scheduler started (interval=%.1f s)", self.interval)

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        for task in list(self._ticks):
            task.cancel()
        if self._ticks:
            await asyncio.gather(*self._ticks, return_exceptions=True)
        logger.info("Round scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_tick(self) -> str | None:
        """ISO timestamp of the most recent tick, or None."""
        return self._last_tick

    async def _loop(self) -> None:
        while self._running:
            task = asyncio.create_task(self.tick())
            self._ticks.add(task)
            task.add_done_callback(self._ticks.discard)
            await asyncio.sleep(self.interval)
