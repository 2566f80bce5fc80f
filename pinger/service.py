"""Ping service — wires discovery, registry, rounds and publishing together.

Usage::

    service = PingService(config, discovery, metrics, bus, traits)
    await service.start()      # subscribe, bulk-load, start the scheduler
    ...
    await service.stop()
"""

from __future__ import annotations

import logging

from pinger.config import PingerConfig
from pinger.coordinator import Prober, RoundCoordinator
from pinger.destination import Destination
from pinger.discovery import DiscoverySource
from pinger.prober import Pinger
from pinger.publishers.base import BusPublisher, MetricsPublisher, NullPublisher, TraitsPublisher
from pinger.publishers.http import HttpMetricsPublisher, HttpTraitsPublisher
from pinger.registry import DestinationRegistry
from pinger.reporter import ResultReporter
from pinger.scheduler import RoundScheduler
from pinger.status import PingStatus

logger = logging.getLogger(__name__)


class PingService:
    """Owns one :class:`DestinationRegistry` and everything that acts on it."""

    def __init__(
        self,
        config: PingerConfig,
        discovery: DiscoverySource,
        metrics: MetricsPublisher,
        bus: BusPublisher,
        traits: TraitsPublisher,
        prober: Prober | None = None,
    ) -> None:
        self.config = config
        self.discovery = discovery
        self.registry = DestinationRegistry()
        self._owns_prober = prober is None
        self.prober = prober if prober is not None else Pinger(config)
        self.coordinator = RoundCoordinator(self.prober, config)
        self.reporter = ResultReporter(metrics, bus, traits)
        self.scheduler = RoundScheduler(
            self.registry, self.coordinator, self.reporter, config.interval_seconds
        )
        self._closeables: list = []
        for publisher in (metrics, bus, traits):
            if hasattr(publisher, "aclose") and publisher not in self._closeables:
                self._closeables.append(publisher)
        self._started = False

    @classmethod
    def from_config(
        cls,
        config: PingerConfig,
        discovery: DiscoverySource,
        bus: BusPublisher | None = None,
    ) -> PingService:
        """Build a service with REST publishers for the URLs set in *config*.

        Collaborators without a configured URL get a :class:`NullPublisher`.
        """
        null = NullPublisher()
        metrics: MetricsPublisher = null
        traits: TraitsPublisher = null
        if config.metrics_url:
            metrics = HttpMetricsPublisher(config.metrics_url, config.tenant_header)
        if config.inventory_url:
            traits = HttpTraitsPublisher(config.inventory_url)
        return cls(config, discovery, metrics, bus or null, traits)

    async def startup(self) -> int:
        """Subscribe to new resources, then load the existing ones.

        The subscription comes first so that a URL created while the bulk
        list is being read lands in the pending buffer instead of being lost.
        Returns the number of destinations loaded.
        """
        if self._started:
            return 0
        self.discovery.on_resource_created(self.registry.record_resource)
        urls = self.discovery.list_all_url_destinations()
        logger.debug("About to initialize pinger with %d URLs", len(urls))
        added = self.registry.load(urls)
        self._started = True
        logger.info("Initialized pinger with %d URLs", added)
        return added

    async def start(self) -> None:
        await self.startup()
        await self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.reporter.drain()
        if self._owns_prober:
            await self.prober.aclose()
        for publisher in self._closeables:
            await publisher.aclose()

    async def run_once(self) -> list[PingStatus] | None:
        return await self.scheduler.tick()

    # ------------------------------------------------------------------ #
    # Administrative                                                       #
    # ------------------------------------------------------------------ #

    def add_destination(self, destination: Destination) -> bool:
        return self.registry.add(destination)

    def remove_destination(self, resource_id: str) -> bool:
        return self.registry.remove(resource_id)

    def list_destinations(self) -> list[Destination]:
        return self.registry.list()
