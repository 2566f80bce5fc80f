"""Tests for the pinger admin API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import FakeProber

from pinger.admin_api import create_app
from pinger.config import PingerConfig
from pinger.discovery import InMemoryDiscovery
from pinger.publishers import NullPublisher
from pinger.service import PingService


@pytest.fixture()
def service():
    null = NullPublisher()
    return PingService(PingerConfig(), InMemoryDiscovery(), null, null, null, prober=FakeProber())


@pytest.fixture()
def client(service):
    return TestClient(create_app(service))


_BODY = {
    "tenant_id": "t1",
    "environment_id": "e1",
    "resource_id": "r1",
    "url": "http://example.test/",
}


class TestDestinationsEndpoint:
    def test_list_empty(self, client):
        resp = client.get("/destinations")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_add(self, client, service):
        resp = client.post("/destinations", json=_BODY)
        assert resp.status_code == 201
        assert resp.json()["method"] == "GET"
        assert [d.resource_id for d in service.list_destinations()] == ["r1"]

    def test_add_is_idempotent(self, client):
        client.post("/destinations", json=_BODY)
        client.post("/destinations", json={**_BODY, "url": "http://other.test/"})
        data = client.get("/destinations").json()
        assert len(data) == 1
        assert data[0]["url"] == "http://example.test/"

    def test_add_rejects_incomplete(self, client):
        resp = client.post("/destinations", json={"resource_id": "r1"})
        assert resp.status_code == 422

    def test_remove(self, client, service):
        client.post("/destinations", json=_BODY)
        resp = client.delete("/destinations/r1")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert service.list_destinations() == []

    def test_remove_unknown_is_ok(self, client):
        assert client.delete("/destinations/nope").status_code == 200


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["destinations"] == 0
        assert data["scheduler_running"] is False
