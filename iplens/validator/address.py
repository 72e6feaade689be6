"""Address classification for lookup input."""

from __future__ import annotations

import re

from iplens.core.errors import ValidationError
from iplens.core.types import AddressKind

_OCTET = r"(25[0-5]|2[0-4]\d|1?\d{1,2})"
_IPV4_RE = re.compile(rf"^{_OCTET}(\.{_OCTET}){{3}}$")

# Full eight-group form or the ::1 loopback. Other compressed forms are not accepted.
_IPV6_RE = re.compile(r"^(([0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}|::1)$")


def classify(text: str | None) -> AddressKind:
    """Classify `text` as IPv4, IPv6 or invalid. Surrounding whitespace is ignored."""
    if not text:
        return AddressKind.INVALID
    candidate = text.strip()
    if _IPV4_RE.fullmatch(candidate):
        return AddressKind.IPV4
    if _IPV6_RE.fullmatch(candidate):
        return AddressKind.IPV6
    return AddressKind.INVALID


def is_valid(text: str | None) -> bool:
    return classify(text) is not AddressKind.INVALID


def require_valid(text: str | None) -> str:
    """Return the trimmed address, or raise ValidationError."""
    candidate = (text or "").strip()
    if not candidate:
        raise ValidationError(candidate, "Please enter an IP address.")
    if classify(candidate) is AddressKind.INVALID:
        raise ValidationError(candidate)
    return candidate
