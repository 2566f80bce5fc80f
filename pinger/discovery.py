"""Discovery collaborator — the inventory that knows which URLs exist.

The pinger needs two things from it: a bulk list of the URL destinations
that already exist, and a push-style subscription for resources created
afterwards.
"""

from __future__ import annotations

import abc
import logging
import threading
from typing import Any, Callable, Mapping

from pinger.destination import Destination

logger = logging.getLogger(__name__)

ResourceCallback = Callable[[Mapping[str, Any]], None]


class DiscoverySource(abc.ABC):
    """Abstract inventory interface."""

    @abc.abstractmethod
    def list_all_url_destinations(self) -> set[Destination]:
        """Return every URL resource currently known, as destinations."""
        raise NotImplementedError

    @abc.abstractmethod
    def on_resource_created(self, callback: ResourceCallback) -> None:
        """Register *callback* for every resource created from now on.

        The callback may be invoked on any thread and receives the raw
        resource record, whatever its type.
        """
        raise NotImplementedError


class InMemoryDiscovery(DiscoverySource):
    """Thread-safe in-memory inventory.

    :meth:`create` stores a resource record and notifies subscribers on the
    calling thread.
    """

    def __init__(self, records: list[Mapping[str, Any]] | None = None) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, Mapping[str, Any]] = {}
        self._callbacks: list[ResourceCallback] = []
        for record in records or []:
            self._records[record["id"]] = record

    def list_all_url_destinations(self) -> set[Destination]:
        with self._lock:
            records = list(self._records.values())
        return {Destination.from_resource(r) for r in records if Destination.is_url(r)}

    def on_resource_created(self, callback: ResourceCallback) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def create(self, record: Mapping[str, Any]) -> None:
        with self._lock:
            self._records[record["id"]] = record
            callbacks = list(self._callbacks)
        for callback in callbacks:
            try:
                callback(record)
            except Exception:
                logger.exception("Resource-created callback failed for %s", record.get("id"))
