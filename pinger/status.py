"""Outcome of a single ping."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from pinger.destination import Destination
from pinger.traits import Traits

# Sentinel codes; neither is a real HTTP status.
ERROR_CODE = -1
TIMEOUT_CODE = -2


def now_millis() -> int:
    """Current wall-clock time as UNIX epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class PingStatus:
    """The result of pinging one :class:`Destination` in one round."""

    destination: Destination
    code: int
    timestamp: int
    duration: int
    timed_out: bool = False
    traits: Traits = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.traits is None:
            object.__setattr__(self, "traits", Traits.empty(self.timestamp))
        if self.duration < 0:
            object.__setattr__(self, "duration", 0)

    @classmethod
    def ok(
        cls,
        destination: Destination,
        code: int,
        timestamp: int,
        duration: int,
        traits: Traits | None = None,
    ) -> PingStatus:
        return cls(destination, code, timestamp, duration, traits=traits)

    @classmethod
    def error(cls, destination: Destination, timestamp: int, duration: int) -> PingStatus:
        """A transport-level failure (DNS, connect, TLS, malformed URL...)."""
        return cls(destination, ERROR_CODE, timestamp, duration)

    @classmethod
    def timeout(cls, destination: Destination, timestamp: int, duration: int) -> PingStatus:
        """A ping that did not finish within the round budget.

        *duration* must be at least the configured timeout.
        """
        return cls(destination, TIMEOUT_CODE, timestamp, duration, timed_out=True)

    @property
    def is_error(self) -> bool:
        return self.code == ERROR_CODE
