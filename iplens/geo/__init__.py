from iplens.geo.base import SELF, GeoClient
from iplens.geo.ipinfo import IpInfoClient

__all__ = ["GeoClient", "IpInfoClient", "SELF"]
