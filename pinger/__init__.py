"""Pinger — round-based HTTP probing engine.

Probes every known URL destination once per round, records status code and
latency, extracts fingerprinting traits from response headers and hands the
results to metrics, event-bus and inventory collaborators.

Quickstart::

    from pinger.config import PingerConfig
    from pinger.discovery import InMemoryDiscovery
    from pinger.publishers import NullPublisher
    from pinger.service import PingService

    sink = NullPublisher()
    service = PingService(PingerConfig.from_env(), InMemoryDiscovery(), sink, sink, sink)
    await service.start()
"""

__version__ = "1.0.0"
