"""REST publishers for the metrics store and the inventory (property store).

Both reuse one :class:`httpx.AsyncClient` for keep-alive.  Failures are
raised as :class:`~pinger.errors.PublishError`; the reporter logs them and
moves on.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pinger.errors import PublishError
from pinger.publishers.base import MetricsPublisher, TraitsPublisher, TraitUpdate
from pinger.traits import trait_properties

logger = logging.getLogger(__name__)


class _RestPublisher:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, method: str, path: str, payload: Any, headers: dict[str, str]) -> None:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise PublishError(f"Cannot reach {url}: {exc}") from exc
        if response.is_error:
            raise PublishError(f"{method} {url} returned {response.status_code}")


class HttpMetricsPublisher(_RestPublisher, MetricsPublisher):
    """POSTs gauge data to ``<base_url>/gauges/data`` for a tenant."""

    def __init__(
        self,
        base_url: str,
        tenant_header: str = "Hawkular-Tenant",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout, client)
        self.tenant_header = tenant_header

    async def send_metrics(self, tenant_id: str, records: list[dict[str, Any]]) -> None:
        if not records:
            return
        await self._send("POST", "/gauges/data", records, {self.tenant_header: tenant_id})
        logger.debug("Sent %d metric record(s) for tenant %s", len(records), tenant_id)


class HttpTraitsPublisher(_RestPublisher, TraitsPublisher):
    """PUTs trait properties onto ``<base_url>/<tenant>/<env>/resources/<id>``."""

    async def publish(self, update: TraitUpdate) -> None:
        properties = trait_properties(update.timestamp, update.traits)
        path = f"/{update.tenant_id}/{update.environment_id}/resources/{update.resource_id}"
        await self._send("PUT", path, {"properties": properties}, {})
        logger.debug("Stored %d trait(s) on %s", len(update.traits), update.resource_id)
