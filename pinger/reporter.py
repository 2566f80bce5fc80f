"""Result reporter — turns a round's statuses into collaborator hand-offs.

For every :class:`~pinger.status.PingStatus` it produces:

* two metric records (``<id>.status.duration`` / ``<id>.status.code``) for
  the metrics store;
* two :class:`SingleMetric` samples with the same names for the alerting bus;
* one :class:`TraitUpdate` for the trait store, sent fire-and-forget.

Hand-offs are one way: failures are logged, never retried or re-raised.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Sequence

from pinger.publishers.base import (
    BusPublisher,
    MetricsPublisher,
    SingleMetric,
    TraitsPublisher,
    TraitUpdate,
)
from pinger.status import PingStatus

logger = logging.getLogger(__name__)

DURATION = "duration"
CODE = "code"


def metric_id(resource_id: str, name: str) -> str:
    return f"{resource_id}.status.{name}"


class ResultReporter:
    def __init__(
        self,
        metrics: MetricsPublisher,
        bus: BusPublisher,
        traits: TraitsPublisher,
    ) -> None:
        self.metrics = metrics
        self.bus = bus
        self.traits = traits
        self._background: set[asyncio.Task] = set()

    # ------------------------------------------------------------------ #
    # Shaping                                                              #
    # ------------------------------------------------------------------ #

    @staticmethod
    def build_metrics(results: Sequence[PingStatus]) -> dict[str, list[dict[str, Any]]]:
        """Metric records grouped by tenant id."""
        by_tenant: dict[str, list[dict[str, Any]]] = defaultdict(list)
        for status in results:
            rid = status.destination.resource_id
            for name, value in ((DURATION, status.duration), (CODE, status.code)):
                by_tenant[status.destination.tenant_id].append(
                    {
                        "id": metric_id(rid, name),
                        "data": [{"timestamp": status.timestamp, "value": value}],
                    }
                )
        return dict(by_tenant)

    @staticmethod
    def build_samples(results: Sequence[PingStatus]) -> dict[str, list[SingleMetric]]:
        """Alerting-bus samples grouped by tenant id."""
        by_tenant: dict[str, list[SingleMetric]] = defaultdict(list)
        for status in results:
            rid = status.destination.resource_id
            samples = by_tenant[status.destination.tenant_id]
            samples.append(SingleMetric(metric_id(rid, DURATION), status.timestamp, float(status.duration)))
            samples.append(SingleMetric(metric_id(rid, CODE), status.timestamp, float(status.code)))
        return dict(by_tenant)

    @staticmethod
    def build_trait_updates(results: Sequence[PingStatus]) -> list[TraitUpdate]:
        return [
            TraitUpdate(
                tenant_id=s.destination.tenant_id,
                environment_id=s.destination.environment_id,
                resource_id=s.destination.resource_id,
                timestamp=s.traits.timestamp,
                traits=s.traits.as_dict(),
            )
            for s in results
        ]

    # ------------------------------------------------------------------ #
    # Hand-off                                                             #
    # ------------------------------------------------------------------ #

    async def report(self, results: Sequence[PingStatus]) -> None:
        """Hand a complete round over to the collaborators."""
        if not results:
            return

        for tenant_id, records in self.build_metrics(results).items():
            try:
                await self.metrics.send_metrics(tenant_id, records)
            except Exception as exc:
                logger.warning("Metrics hand-off failed for tenant %s: %s", tenant_id, exc)

        for tenant_id, samples in self.build_samples(results).items():
            try:
                await self.bus.publish_samples(tenant_id, samples)
            except Exception as exc:
                logger.warning("Bus hand-off failed for tenant %s: %s", tenant_id, exc)

        for update in self.build_trait_updates(results):
            task = asyncio.create_task(
                self.traits.publish(update), name=f"traits:{update.resource_id}"
            )
            self._background.add(task)
            task.add_done_callback(self._trait_task_done)

    async def drain(self) -> None:
        """Wait for outstanding trait hand-offs (shutdown, tests)."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    @property
    def pending(self) -> int:
        return len(self._background)

    def _trait_task_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Trait hand-off %s failed: %s", task.get_name(), exc)
