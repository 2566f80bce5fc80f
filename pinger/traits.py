"""Traits — interesting facts about a monitored site taken from response headers.

A trait is, for example, the name of the web server implementation serving
the site or the technology used by the application behind it.  Only the
headers listed in :class:`TraitHeader` are considered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

TRAITS_COLLECTED_ON = "traits-collected-on"
TRAIT_PREFIX = "trait-"


class TraitHeader(Enum):
    """Response headers that bear interesting information about a site."""

    SERVER = "server"
    X_ASPNET_VERSION = "x-aspnet-version"
    X_POWERED_BY = "x-powered-by"
    X_RUNTIME = "x-runtime"
    X_VERSION = "x-version"

    @classmethod
    def fast_value_of(cls, header: str | None) -> TraitHeader | None:
        """Case-insensitive lookup; ``None`` for unknown (or missing) header names."""
        if header is None:
            return None
        return _INDEX.get(header.lower())

    def __str__(self) -> str:
        return self.value


_INDEX: dict[str, TraitHeader] = {h.value: h for h in TraitHeader}


@dataclass(frozen=True)
class Traits:
    """An immutable set of traits plus the UNIX timestamp (ms) they were captured at."""

    timestamp: int
    items: Mapping[TraitHeader, str] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    @classmethod
    def collect(cls, headers: Iterable[tuple[str, str]], timestamp: int) -> Traits:
        """Collect the traits from response *headers*, in response order.

        A header occurring several times ends up as a single comma-separated
        string of its distinct values in alphabetical order.  Every kind is
        merged under its own key.
        """
        items: dict[TraitHeader, str] = {}
        multi: dict[TraitHeader, set[str]] = {}

        for name, value in headers:
            kind = TraitHeader.fast_value_of(name)
            if kind is None:
                continue
            logger.debug("Found a trait header %s: %s", name, value)
            if kind not in items:
                items[kind] = value
                continue
            # Header keys are typically unique; fall back to a set on repeats only.
            values = multi.setdefault(kind, {items[kind]})
            values.add(value)

        for kind, values in multi.items():
            items[kind] = ", ".join(sorted(values))

        return cls(timestamp, MappingProxyType(items))

    @classmethod
    def empty(cls, timestamp: int) -> Traits:
        return cls(timestamp)

    def as_dict(self) -> dict[str, str]:
        """Return ``{header_name: value}`` with plain string keys."""
        return {k.value: v for k, v in self.items.items()}

    def as_properties(self) -> dict[str, object]:
        """Return the inventory property shape for these traits."""
        return trait_properties(self.timestamp, self.as_dict())


def trait_properties(timestamp: int, traits: Mapping[str, str]) -> dict[str, object]:
    """Inventory properties for *traits* keyed by header name.

    ``traits-collected-on`` holds the timestamp and every trait is stored
    as ``trait-<header>``.
    """
    props: dict[str, object] = {TRAITS_COLLECTED_ON: timestamp}
    for name, value in traits.items():
        props[TRAIT_PREFIX + name] = value
    return props
