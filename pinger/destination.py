"""Ping destinations — the URL resources that get probed every round."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

URL_TYPE = "URL"
DEFAULT_METHOD = "GET"


@dataclass(frozen=True)
class Destination:
    """A destination for pinging.

    Two destinations are equal when their ``resource_id`` matches, whatever
    their url or method.  The registry relies on this to keep one entry per
    inventory resource.
    """

    tenant_id: str = field(compare=False)
    environment_id: str = field(compare=False)
    resource_id: str
    url: str = field(compare=False)
    method: str = field(default=DEFAULT_METHOD, compare=False)

    URL_TYPE = URL_TYPE
    DEFAULT_METHOD = DEFAULT_METHOD

    def __post_init__(self) -> None:
        if not self.method:
            object.__setattr__(self, "method", DEFAULT_METHOD)

    def name(self) -> str:
        return f"{self.resource_id}.{self.url}"

    def to_dict(self) -> dict[str, str]:
        return {
            "tenant_id": self.tenant_id,
            "environment_id": self.environment_id,
            "resource_id": self.resource_id,
            "url": self.url,
            "method": self.method,
        }

    # ------------------------------------------------------------------ #
    # Raw inventory records                                                #
    # ------------------------------------------------------------------ #

    @staticmethod
    def is_url(record: Mapping[str, Any]) -> bool:
        """Return True if *record* is a resource of type ``URL``.

        The type may be given either as a plain string or as a mapping with
        an ``id`` key (the shape the inventory emits).
        """
        rtype = record.get("type")
        if isinstance(rtype, Mapping):
            rtype = rtype.get("id")
        return rtype == URL_TYPE

    @classmethod
    def from_resource(cls, record: Mapping[str, Any]) -> Destination:
        """Build a :class:`Destination` from a raw inventory resource record.

        Expected shape::

            {"id": "r1", "tenantId": "t", "environmentId": "e",
             "type": {"id": "URL"}, "properties": {"url": "...", "method": "GET"}}

        ``tenant_id`` / ``environment_id`` are accepted as well.
        """
        props = record.get("properties") or {}
        return cls(
            tenant_id=record.get("tenantId", record.get("tenant_id", "")),
            environment_id=record.get("environmentId", record.get("environment_id", "")),
            resource_id=record["id"],
            url=props.get("url", ""),
            method=props.get("method") or DEFAULT_METHOD,
        )
