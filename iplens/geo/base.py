"""Abstract geolocation client."""

from __future__ import annotations

from abc import ABC, abstractmethod

from iplens.core.types import GeoRecord

# Distinguished query meaning "the caller's own address".
SELF = "self"


class GeoClient(ABC):
    """One fallible request per lookup. Implementations raise GeoLookupError on failure."""

    @abstractmethod
    async def lookup(self, query: str) -> GeoRecord: ...

    async def aclose(self) -> None:
        return None
