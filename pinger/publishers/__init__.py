"""Publishing collaborators: metrics store, alerting bus and trait store.

Exports:
    MetricsPublisher / BusPublisher / TraitsPublisher — abstract interfaces
    HttpMetricsPublisher, HttpTraitsPublisher         — REST adapters (httpx)
    QueueBusPublisher                                 — in-process asyncio bus
    NullPublisher                                     — discards everything
"""

from __future__ import annotations

from pinger.publishers.base import (
    BusPublisher,
    MetricsPublisher,
    NullPublisher,
    SingleMetric,
    TraitsPublisher,
    TraitUpdate,
)
from pinger.publishers.bus import BusMessage, QueueBusPublisher
from pinger.publishers.http import HttpMetricsPublisher, HttpTraitsPublisher

__all__ = [
    "BusMessage",
    "BusPublisher",
    "HttpMetricsPublisher",
    "HttpTraitsPublisher",
    "MetricsPublisher",
    "NullPublisher",
    "QueueBusPublisher",
    "SingleMetric",
    "TraitUpdate",
    "TraitsPublisher",
]
