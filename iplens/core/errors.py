"""Error taxonomy for iplens."""

from __future__ import annotations


class IPLensError(Exception):
    """Base class for every error raised by iplens."""


class ValidationError(IPLensError):
    """Text is not an address we accept. Never reaches the network."""

    def __init__(self, text: str, message: str = "Please enter a valid IPv4 or IPv6 address.") -> None:
        super().__init__(message)
        self.text = text
        self.message = message


class GeoLookupError(IPLensError):
    """The geolocation provider could not be reached or returned garbage."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PersistenceCorruption(IPLensError):
    """Durable history data could not be decoded. Absorbed by the history store."""


class PersistenceWriteFailure(IPLensError):
    """Durable history data could not be written. In-memory state still applies."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"Failed to persist {key!r}: {cause}")
        self.key = key
        self.cause = cause
