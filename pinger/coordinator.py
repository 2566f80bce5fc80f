"""Round coordinator — fans out one ping per destination under a time budget.

A round goes through four phases:

* launching  — one task per destination, all started at once;
* waiting    — a single timed wait for the whole batch (``rounds * wait_millis``);
* finalizing — tasks still running are cancelled and reported as timeouts;
* reported   — exactly one :class:`PingStatus` per destination is returned.

Overlapping rounds are not prevented: a slow round may still be running
when the next tick starts another one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Sequence

from pinger.config import ROUNDS, TIMEOUT_MILLIS, WAIT_MILLIS, PingerConfig
from pinger.destination import Destination
from pinger.status import PingStatus, now_millis

logger = logging.getLogger(__name__)

__all__ = ["ROUNDS", "TIMEOUT_MILLIS", "WAIT_MILLIS", "Prober", "RoundCoordinator"]


class Prober(Protocol):
    async def probe(self, destination: Destination, deadline: float | None = None) -> PingStatus:
        ...


class RoundCoordinator:
    """Runs rounds of pings against a :class:`Prober`."""

    def __init__(self, prober: Prober, config: PingerConfig | None = None) -> None:
        self.prober = prober
        self.config = config or PingerConfig()

    @property
    def timeout_millis(self) -> int:
        return self.config.timeout_millis

    async def run_round(self, destinations: Sequence[Destination]) -> list[PingStatus]:
        """Ping every destination and return one status for each.

        Pings that have not finished when the budget runs out are cancelled
        and reported with :meth:`PingStatus.timeout`.
        """
        if not destinations:
            return []

        loop = asyncio.get_running_loop()
        budget = self.config.timeout_seconds
        started = loop.time()
        deadline = started + budget

        tasks: dict[asyncio.Task[PingStatus], Destination] = {}
        for destination in destinations:
            task = asyncio.create_task(
                self.prober.probe(destination, deadline),
                name=f"ping:{destination.resource_id}",
            )
            tasks[task] = destination

        try:
            done, pending = await asyncio.wait(tasks, timeout=budget)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        results: list[PingStatus] = []
        for task in done:
            results.append(self._result_of(task, tasks[task], loop.time() - started))

        if pending:
            for task in pending:
                task.cancel()
            # Let the cancelled pings release their connections.
            await asyncio.wait(pending, timeout=self.config.grace_seconds)
            for task in pending:
                task.add_done_callback(_discard_late_result)
            elapsed_ms = int((loop.time() - started) * 1000)
            duration = max(elapsed_ms, self.timeout_millis)
            timestamp = now_millis()
            for task in pending:
                destination = tasks[task]
                logger.warning("Ping of %s timed out after %d ms", destination.url, duration)
                results.append(PingStatus.timeout(destination, timestamp, duration))

        logger.info(
            "Round complete: %d destination(s), %d error(s), %d timed out, %.0f ms",
            len(results),
            sum(1 for status in results if status.is_error),
            len(pending),
            (loop.time() - started) * 1000,
        )
        return results

    @staticmethod
    def _result_of(task: asyncio.Task, destination: Destination, elapsed: float) -> PingStatus:
        if task.cancelled():
            return PingStatus.error(destination, now_millis(), int(elapsed * 1000))
        exc = task.exception()
        if exc is not None:
            logger.error("Ping of %s raised %r", destination.url, exc)
            return PingStatus.error(destination, now_millis(), int(elapsed * 1000))
        return task.result()


def _discard_late_result(task: asyncio.Task) -> None:
    """Retrieve the outcome of a ping that outlived its round."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned %s finished with %r", task.get_name(), exc)
