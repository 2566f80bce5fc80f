"""Tests for the httpx-based Pinger (no network: httpx.MockTransport)."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import make_destination

from pinger.config import PingerConfig
from pinger.prober import Pinger
from pinger.status import ERROR_CODE


def _pinger(handler, config=None) -> Pinger:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Pinger(config or PingerConfig(), client=client)


class TestProbe:
    async def test_ok_response(self):
        seen = []

        def handler(request):
            seen.append((request.method, str(request.url)))
            return httpx.Response(200, headers=[("Server", "nginx")])

        pinger = _pinger(handler)
        status = await pinger.probe(make_destination(url="http://example.test/"))
        assert status.code == 200
        assert status.timed_out is False
        assert status.duration >= 0
        assert status.traits.as_dict() == {"server": "nginx"}
        assert seen == [("GET", "http://example.test/")]

    @pytest.mark.parametrize("method", ["HEAD", "POST"])
    async def test_uses_destination_method(self, method):
        seen = []

        def handler(request):
            seen.append(request.method)
            return httpx.Response(204)

        pinger = _pinger(handler)
        status = await pinger.probe(make_destination(method=method))
        assert status.code == 204
        assert seen == [method]

    async def test_error_status_is_reported_not_raised(self):
        pinger = _pinger(lambda request: httpx.Response(503))
        status = await pinger.probe(make_destination())
        assert status.code == 503

    async def test_repeated_trait_headers(self):
        def handler(request):
            return httpx.Response(
                200,
                headers=[
                    ("X-Powered-By", "PHP/7"),
                    ("X-Powered-By", "PHP/8"),
                    ("Server", "apache"),
                ],
            )

        status = await _pinger(handler).probe(make_destination())
        assert status.traits.as_dict() == {"x-powered-by": "PHP/7, PHP/8", "server": "apache"}


class TestTransportErrors:
    async def test_connect_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        status = await _pinger(handler).probe(make_destination())
        assert status.code == ERROR_CODE
        assert status.timed_out is False
        assert dict(status.traits.items) == {}

    async def test_unexpected_exception(self):
        def handler(request):
            raise RuntimeError("boom")

        status = await _pinger(handler).probe(make_destination())
        assert status.code == ERROR_CODE

    async def test_transport_timeout_is_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        status = await _pinger(handler).probe(make_destination())
        assert status.code == ERROR_CODE


class TestCancellation:
    async def test_cancel_propagates(self):
        started = asyncio.Event()

        async def handler(request):
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200)

        pinger = _pinger(handler)
        task = asyncio.create_task(pinger.probe(make_destination()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestTimeoutFor:
    async def test_deadline_adds_grace(self):
        pinger = Pinger(PingerConfig(grace_seconds=0.5))
        try:
            loop = asyncio.get_running_loop()
            timeout = pinger._timeout_for(loop.time() + 2.0)
            assert 2.0 < timeout <= 2.5
            assert pinger._timeout_for(loop.time() - 5) == pytest.approx(0.5)
        finally:
            await pinger.aclose()

    async def test_no_deadline_uses_budget(self):
        async with Pinger(PingerConfig(rounds=4, wait_millis=250, grace_seconds=1.0)) as pinger:
            assert pinger._timeout_for(None) == pytest.approx(2.0)
