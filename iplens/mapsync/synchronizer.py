"""MapSynchronizer: reflects the current GeoRecord onto a MapSurface."""

from __future__ import annotations

import html
import logging
import math

from iplens.core.types import GeoRecord
from iplens.mapsync.surface import MapSurface

logger = logging.getLogger(__name__)

DEFAULT_ZOOM = 12
DEFAULT_CIRCLE_RADIUS = 500.0  # meters; IP geolocation is coarse

_POPUP_FIELDS = (
    ("IP", "ip"),
    ("City", "city"),
    ("Region", "region"),
    ("Country", "country"),
    ("Org", "org"),
)


def parse_loc(loc: str | None) -> tuple[float, float] | None:
    """Parse "lat,lon". Returns None unless there are exactly two finite numbers."""
    if not loc:
        return None
    parts = loc.split(",")
    if len(parts) != 2:
        return None
    try:
        lat, lon = (float(p.strip()) for p in parts)
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    return lat, lon


def popup_content(record: GeoRecord) -> str:
    lines: list[str] = []
    for label, attr in _POPUP_FIELDS:
        value = getattr(record, attr)
        if value:
            lines.append(f"<strong>{label}:</strong> {html.escape(value)}")
    return "<br/>".join(lines)


class MapSynchronizer:
    """
    Issues map commands for each new current record.

    A record without a usable ``loc`` leaves the marker and viewport where
    they are and only drops the precision circle. The circle is always
    removed and re-added, never updated in place.
    """

    def __init__(
        self,
        surface: MapSurface,
        *,
        zoom: int = DEFAULT_ZOOM,
        circle_radius: float = DEFAULT_CIRCLE_RADIUS,
    ) -> None:
        self._surface = surface
        self.zoom = zoom
        self.circle_radius = circle_radius
        self.marker_placed = False
        self.has_overlay = False
        self.last_position: tuple[float, float] | None = None

    @property
    def surface(self) -> MapSurface:
        return self._surface

    async def sync(self, record: GeoRecord | None) -> bool:
        """Apply `record` to the surface. Returns True if the map was moved."""
        if record is None:
            return False

        position = parse_loc(record.loc)
        if position is None:
            logger.debug("No usable loc for %s: %r", record.ip, record.loc)
            await self._drop_overlay()
            return False

        lat, lon = position
        await self._surface.set_viewport(lat, lon, self.zoom)
        await self._surface.place_or_move_marker(lat, lon)
        self.marker_placed = True
        self.last_position = position

        await self._surface.bind_popup(popup_content(record))
        await self._surface.open_popup()

        await self._drop_overlay()
        await self._surface.add_overlay_circle(lat, lon, self.circle_radius)
        self.has_overlay = True
        return True

    async def _drop_overlay(self) -> None:
        if self.has_overlay:
            await self._surface.remove_overlay_circle()
            self.has_overlay = False
