"""In-process event bus for alerting consumers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from pinger.publishers.base import BusPublisher, SingleMetric

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BusMessage:
    tenant_id: str
    samples: tuple[SingleMetric, ...]


class QueueBusPublisher(BusPublisher):
    """Puts one :class:`BusMessage` per hand-off on an :class:`asyncio.Queue`.

    When the queue is bounded and full the message is dropped with a
    warning; the prober never waits on a slow consumer.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self.queue: asyncio.Queue[BusMessage] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    async def publish_samples(self, tenant_id: str, samples: list[SingleMetric]) -> None:
        if not samples:
            return
        try:
            self.queue.put_nowait(BusMessage(tenant_id, tuple(samples)))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Alerting bus full, dropped %d sample(s) for %s", len(samples), tenant_id)

    async def get(self) -> BusMessage:
        return await self.queue.get()
