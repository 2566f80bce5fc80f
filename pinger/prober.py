"""Pinger — issues the HTTP request for one destination and times it.

Uses a single :class:`httpx.AsyncClient` for connection pooling.  Transport
problems never escape :meth:`Pinger.probe`; they come back as a
:class:`~pinger.status.PingStatus` carrying :data:`~pinger.status.ERROR_CODE`.
"""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from pinger.config import PingerConfig
from pinger.destination import Destination
from pinger.status import PingStatus, now_millis
from pinger.traits import Traits

logger = logging.getLogger(__name__)


class Pinger:
    """Async HTTP prober.

    Call :meth:`aclose` (or use as an async context manager) when done.
    """

    def __init__(
        self,
        config: PingerConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or PingerConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            verify=self.config.verify_tls,
            follow_redirects=False,
            timeout=self.config.timeout_seconds + self.config.grace_seconds,
            limits=httpx.Limits(
                max_connections=self.config.pool_size,
                max_keepalive_connections=self.config.pool_size,
            ),
            headers={"User-Agent": self.config.user_agent},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Pinger":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def probe(self, destination: Destination, deadline: float | None = None) -> PingStatus:
        """Ping *destination* once.

        Args:
            destination: What to ping.
            deadline:    Event-loop time (``loop.time()``) the caller gives up
                         at.  The transport timeout is the time remaining plus
                         ``grace_seconds``.

        Cancellation is propagated; the response stream is closed on the way out.
        """
        timeout = self._timeout_for(deadline)
        start = time.monotonic()
        try:
            async with self._client.stream(
                destination.method, destination.url, timeout=timeout
            ) as response:
                stop = time.monotonic()
                timestamp = now_millis()
                traits = Traits.collect(response.headers.multi_items(), timestamp)
                code = response.status_code
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            duration = _elapsed_ms(start)
            logger.debug("Ping of %s failed after %d ms: %s", destination.url, duration, exc)
            return PingStatus.error(destination, now_millis(), duration)
        except Exception:
            duration = _elapsed_ms(start)
            logger.exception("Unexpected error pinging %s", destination.url)
            return PingStatus.error(destination, now_millis(), duration)

        duration = _elapsed_ms(start, stop)
        logger.debug("Ping of %s: %d in %d ms", destination.url, code, duration)
        return PingStatus.ok(destination, code, timestamp, duration, traits)

    def _timeout_for(self, deadline: float | None) -> float:
        if deadline is None:
            return self.config.timeout_seconds + self.config.grace_seconds
        remaining = deadline - asyncio.get_running_loop().time()
        return max(remaining, 0.0) + self.config.grace_seconds


def _elapsed_ms(start: float, stop: float | None = None) -> int:
    if stop is None:
        stop = time.monotonic()
    return max(int((stop - start) * 1000), 0)
