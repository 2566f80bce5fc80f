"""Abstract publishing collaborators and the payloads handed to them."""

from __future__ import annotations

import abc
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class SingleMetric:
    """A narrowly typed numeric sample for the low-latency alerting bus."""

    metric_name: str
    timestamp: int
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"metricName": self.metric_name, "timestamp": self.timestamp, "value": self.value}


@dataclass(frozen=True)
class TraitUpdate:
    """Traits of one resource, tagged with its identity, for the property store."""

    tenant_id: str
    environment_id: str
    resource_id: str
    timestamp: int
    traits: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {
            "tenantId": data["tenant_id"],
            "environmentId": data["environment_id"],
            "resourceId": data["resource_id"],
            "timestamp": data["timestamp"],
            "traits": data["traits"],
        }


class MetricsPublisher(abc.ABC):
    """Receives generic metric records: ``{"id": str, "data": [{"timestamp", "value"}]}``."""

    @abc.abstractmethod
    async def send_metrics(self, tenant_id: str, records: list[dict[str, Any]]) -> None:
        raise NotImplementedError


class BusPublisher(abc.ABC):
    """Receives :class:`SingleMetric` samples destined for alerting."""

    @abc.abstractmethod
    async def publish_samples(self, tenant_id: str, samples: list[SingleMetric]) -> None:
        raise NotImplementedError


class TraitsPublisher(abc.ABC):
    """Stores a :class:`TraitUpdate` on the resource it belongs to."""

    @abc.abstractmethod
    async def publish(self, update: TraitUpdate) -> None:
        raise NotImplementedError


class NullPublisher(MetricsPublisher, BusPublisher, TraitsPublisher):
    """Discards everything.  Handy for wiring and tests."""

    async def send_metrics(self, tenant_id: str, records: list[dict[str, Any]]) -> None:
        return None

    async def publish_samples(self, tenant_id: str, samples: list[SingleMetric]) -> None:
        return None

    async def publish(self, update: TraitUpdate) -> None:
        return None
