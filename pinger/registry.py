"""Destination registry — the live set of URLs to ping.

Two actors touch the registry: the discovery listener, which runs on
whatever thread the inventory delivers events on, and the scheduler.  New
destinations reported by the listener are parked in a pending buffer and
merged into the live set at the start of the next round, so an event that
arrives while a round is being prepared is never lost.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Mapping

from pinger.destination import Destination

logger = logging.getLogger(__name__)


class DestinationRegistry:
    """Owns the set of known :class:`Destination` objects (unique by resource id)."""

    def __init__(self, destinations: Iterable[Destination] = ()) -> None:
        self._lock = threading.Lock()
        self._destinations: dict[str, Destination] = {}
        self._pending: list[Destination] = []
        self.load(destinations)

    def __len__(self) -> int:
        with self._lock:
            return len(self._destinations)

    def __contains__(self, item: object) -> bool:
        key = item.resource_id if isinstance(item, Destination) else item
        with self._lock:
            return key in self._destinations

    # ------------------------------------------------------------------ #
    # Administrative                                                       #
    # ------------------------------------------------------------------ #

    def add(self, destination: Destination) -> bool:
        """Insert *destination* unless one with the same id is known.

        Returns ``True`` if it was added.
        """
        with self._lock:
            if destination.resource_id in self._destinations:
                return False
            self._destinations[destination.resource_id] = destination
        logger.debug("Added destination %s", destination.name())
        return True

    def remove(self, resource_id: str) -> bool:
        """Forget the destination with *resource_id*; a no-op if unknown.

        A not-yet-merged discovery of the same id is discarded as well.
        """
        with self._lock:
            removed = self._destinations.pop(resource_id, None) is not None
            pending = len(self._pending)
            self._pending = [d for d in self._pending if d.resource_id != resource_id]
            removed = removed or len(self._pending) != pending
        if removed:
            logger.debug("Removed destination %s", resource_id)
        return removed

    def load(self, destinations: Iterable[Destination]) -> int:
        """Bulk insert (startup).  Returns the number of new destinations."""
        added = 0
        with self._lock:
            for d in destinations:
                if d.resource_id not in self._destinations:
                    self._destinations[d.resource_id] = d
                    added += 1
        return added

    def list(self) -> list[Destination]:
        """Return the live set without merging pending discoveries."""
        with self._lock:
            return list(self._destinations.values())

    # ------------------------------------------------------------------ #
    # Discovery                                                            #
    # ------------------------------------------------------------------ #

    def record_discovered(self, destination: Destination) -> None:
        """Buffer a newly discovered destination; safe to call from any thread."""
        with self._lock:
            self._pending.append(destination)

    def record_resource(self, record: Mapping[str, Any]) -> None:
        """Discovery callback: buffer *record* if it is a URL resource."""
        if not Destination.is_url(record):
            return
        self.record_discovered(Destination.from_resource(record))

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def snapshot(self) -> list[Destination]:
        """Merge pending discoveries into the live set and return a copy of it."""
        with self._lock:
            pending, self._pending = self._pending, []
            for d in pending:
                self._destinations.setdefault(d.resource_id, d)
            current = list(self._destinations.values())
        if pending:
            logger.info("Merged %d newly discovered URL(s)", len(pending))
        return current
