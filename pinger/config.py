"""Configuration for the pinger — loaded from a JSON file or the environment."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

from pinger.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "PINGER_"

# How many WAIT_MILLIS intervals a round waits for results.
ROUNDS = 15
WAIT_MILLIS = 500
# Budget after which outstanding pings are cancelled and reported as timeouts.
TIMEOUT_MILLIS = ROUNDS * WAIT_MILLIS


@dataclass
class PingerConfig:
    """Pinger configuration.

    The round budget is ``rounds * wait_millis`` (15 x 500 ms by default).
    """

    # Round budget
    rounds: int = ROUNDS
    wait_millis: int = WAIT_MILLIS
    grace_seconds: float = 1.0  # extra transport time past the budget

    # Scheduling
    interval_seconds: float = 20.0

    # HTTP
    pool_size: int = 100  # sized for the expected destination count
    user_agent: str = "pinger/1.0"
    verify_tls: bool = False

    # Collaborators
    metrics_url: str = ""
    inventory_url: str = ""
    tenant_header: str = "Hawkular-Tenant"

    @property
    def timeout_millis(self) -> int:
        return self.rounds * self.wait_millis

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_millis / 1000

    @property
    def wait_seconds(self) -> float:
        return self.wait_millis / 1000

    def validate(self) -> PingerConfig:
        for name in ("rounds", "wait_millis", "interval_seconds", "pool_size"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.grace_seconds < 0:
            raise ConfigError(f"grace_seconds must not be negative, got {self.grace_seconds!r}")
        return self

    @classmethod
    def load(cls, path: str | Path) -> PingerConfig:
        path = Path(path)
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                known = {k for k in cls.__dataclass_fields__}
                filtered = {k: v for k, v in data.items() if k in known}
                return cls(**filtered).validate()
            except (ValueError, TypeError, AttributeError) as exc:
                raise ConfigError(f"Invalid config file {path}: {exc}") from exc
        logger.warning("Config not found at %s, using defaults", path)
        return cls()

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> PingerConfig:
        """Build a config from ``PINGER_*`` variables (e.g. ``PINGER_ROUNDS=10``)."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce(f.name, raw, type(getattr(cls, f.name)))
        return cls(**values).validate()


def _coerce(name: str, raw: str, kind: type) -> object:
    try:
        if kind is bool:
            return raw.strip().lower() in ("1", "true", "yes", "on")
        if kind in (int, float):
            return kind(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from exc
    return raw
