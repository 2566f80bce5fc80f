"""pytest configuration and shared fixtures for pinger tests."""

from __future__ import annotations

import asyncio

import pytest

from pinger.config import PingerConfig
from pinger.destination import Destination
from pinger.status import PingStatus, now_millis

TENANT = "test-tenant"
ENVIRONMENT = "test-env"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


def make_destination(resource_id: str = "test-rsrc", url: str = "http://example.test/",
                     method: str = "GET", tenant_id: str = TENANT) -> Destination:
    return Destination(tenant_id, ENVIRONMENT, resource_id, url, method)


class FakeProber:
    """Answers 200 after ``delays[resource_id]`` seconds (0 by default).

    A delay of ``None`` means the destination never answers.
    """

    def __init__(self, delays: dict[str, float | None] | None = None) -> None:
        self.delays = delays or {}
        self.calls: list[str] = []
        self.cancelled: list[str] = []

    async def probe(self, destination, deadline=None):
        self.calls.append(destination.resource_id)
        delay = self.delays.get(destination.resource_id, 0)
        try:
            if delay is None:
                await asyncio.Event().wait()
            elif delay:
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self.cancelled.append(destination.resource_id)
            raise
        return PingStatus.ok(destination, 200, now_millis(), int(delay * 1000) if delay else 0)


@pytest.fixture()
def fast_config() -> PingerConfig:
    """A config with a 100 ms round budget."""
    return PingerConfig(rounds=2, wait_millis=50, grace_seconds=0.2, interval_seconds=0.05)
