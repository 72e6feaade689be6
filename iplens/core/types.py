"""Shared types and dataclasses for iplens."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

# Provider fields that get their own attribute; everything else is pass-through.
_KNOWN_FIELDS = ("ip", "city", "region", "country", "loc", "org")


class AddressKind(str, Enum):
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    INVALID = "invalid"


class SessionPhase(str, Enum):
    IDLE = "idle"
    LOOKING_UP = "looking_up"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class GeoRecord:
    """Result of one geolocation lookup, as returned by the provider."""

    ip: str | None = None
    city: str | None = None
    region: str | None = None
    country: str | None = None
    loc: str | None = None  # "lat,lon", may be malformed
    org: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)  # opaque provider fields, read-only

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> GeoRecord:
        known = {
            name: _optional_str(payload.get(name)) for name in _KNOWN_FIELDS
        }
        extra = {k: v for k, v in payload.items() if k not in _KNOWN_FIELDS}
        return cls(**known, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name in _KNOWN_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        result.update(self.extra)
        return result

    @property
    def summary(self) -> str:
        """One-line label: "city, region, country" when a city is known, else the org."""
        if self.city:
            return ", ".join(
                part for part in (self.city, self.region, self.country) if part
            )
        return self.org or ""


@dataclass(frozen=True)
class HistoryEntry:
    """A manual lookup captured in history. `ip` is the dedup key."""

    ip: str
    data: GeoRecord
    when: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip": self.ip,
            "data": self.data.to_dict(),
            "when": self.when.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> HistoryEntry:
        return cls(
            ip=raw["ip"],
            data=GeoRecord.from_dict(raw["data"]),
            when=datetime.fromisoformat(raw["when"].replace("Z", "+00:00")),
        )


@dataclass(frozen=True)
class MapCommand:
    """A single command issued to a map surface."""

    name: str
    args: tuple[Any, ...] = ()


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
