"""Map surfaces: the command interface the synchronizer drives, plus adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from playwright.async_api import Page

from iplens.core.types import MapCommand

LEAFLET_VERSION = "1.9.4"
_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
_TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)

# Initial world view before any lookup resolves
_INITIAL_CENTER = (20.0, 0.0)
_INITIAL_ZOOM = 2
_MAX_ZOOM = 19

_SHELL_HTML = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8"/>
  <link rel="stylesheet" href="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.css"/>
  <script src="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.js"></script>
  <style>html, body, #map {{ height: 100%; margin: 0; }}</style>
</head>
<body><div id="map"></div></body>
</html>
"""


class MapSurface(ABC):
    """Commands a map rendering surface accepts. Coordinates are decimal degrees."""

    @abstractmethod
    async def set_viewport(self, lat: float, lon: float, zoom: int) -> None: ...

    @abstractmethod
    async def place_or_move_marker(self, lat: float, lon: float) -> None: ...

    @abstractmethod
    async def bind_popup(self, content: str) -> None: ...

    @abstractmethod
    async def open_popup(self) -> None: ...

    @abstractmethod
    async def add_overlay_circle(self, lat: float, lon: float, radius_m: float) -> None: ...

    @abstractmethod
    async def remove_overlay_circle(self) -> None: ...


class RecordingSurface(MapSurface):
    """Keeps every command it receives. Useful headless and in tests."""

    def __init__(self) -> None:
        self.commands: list[MapCommand] = []

    def names(self) -> list[str]:
        return [c.name for c in self.commands]

    def clear(self) -> None:
        self.commands.clear()

    async def set_viewport(self, lat: float, lon: float, zoom: int) -> None:
        self.commands.append(MapCommand("set_viewport", (lat, lon, zoom)))

    async def place_or_move_marker(self, lat: float, lon: float) -> None:
        self.commands.append(MapCommand("place_or_move_marker", (lat, lon)))

    async def bind_popup(self, content: str) -> None:
        self.commands.append(MapCommand("bind_popup", (content,)))

    async def open_popup(self) -> None:
        self.commands.append(MapCommand("open_popup"))

    async def add_overlay_circle(self, lat: float, lon: float, radius_m: float) -> None:
        self.commands.append(MapCommand("add_overlay_circle", (lat, lon, radius_m)))

    async def remove_overlay_circle(self) -> None:
        self.commands.append(MapCommand("remove_overlay_circle"))


class LeafletPageSurface(MapSurface):
    """
    Drives a Leaflet map living in a Playwright page.

    Usage:
        surface = LeafletPageSurface(page)
        await surface.mount()
        sync = MapSynchronizer(surface)

    All map objects live under ``window.__iplens`` in the page. The marker is
    created on first placement and moved afterwards.
    """

    def __init__(self, page: Page) -> None:
        self._page = page
        self._marker_created = False

    @property
    def page(self) -> Page:
        return self._page

    async def mount(self) -> None:
        """Load the Leaflet shell into the page and create the map."""
        await self._page.set_content(_SHELL_HTML)
        await self._page.wait_for_function("() => window.L !== undefined")
        await self._page.evaluate(
            """([center, zoom, maxZoom, tileUrl, attribution]) => {
                const map = L.map('map', { center, zoom, minZoom: zoom });
                L.tileLayer(tileUrl, { maxZoom, attribution }).addTo(map);
                window.__iplens = { map, marker: null, circle: null };
            }""",
            [list(_INITIAL_CENTER), _INITIAL_ZOOM, _MAX_ZOOM, _TILE_URL, _TILE_ATTRIBUTION],
        )
        self._marker_created = False

    async def set_viewport(self, lat: float, lon: float, zoom: int) -> None:
        await self._page.evaluate(
            "([lat, lon, zoom]) => window.__iplens.map.setView([lat, lon], zoom, { animate: true })",
            [lat, lon, zoom],
        )

    async def place_or_move_marker(self, lat: float, lon: float) -> None:
        if not self._marker_created:
            await self._page.evaluate(
                """([lat, lon]) => {
                    const s = window.__iplens;
                    s.marker = L.marker([lat, lon]).addTo(s.map);
                }""",
                [lat, lon],
            )
            self._marker_created = True
        else:
            await self._page.evaluate(
                "([lat, lon]) => window.__iplens.marker.setLatLng([lat, lon])",
                [lat, lon],
            )

    async def bind_popup(self, content: str) -> None:
        await self._page.evaluate(
            "(content) => window.__iplens.marker.bindPopup(content)", content
        )

    async def open_popup(self) -> None:
        await self._page.evaluate("() => window.__iplens.marker.openPopup()")

    async def add_overlay_circle(self, lat: float, lon: float, radius_m: float) -> None:
        await self._page.evaluate(
            """([lat, lon, radius]) => {
                const s = window.__iplens;
                s.circle = L.circle([lat, lon], {
                    radius, opacity: 0.2, fillOpacity: 0.05,
                }).addTo(s.map);
            }""",
            [lat, lon, radius_m],
        )

    async def remove_overlay_circle(self) -> None:
        await self._page.evaluate(
            """() => {
                const s = window.__iplens;
                if (s.circle) { s.map.removeLayer(s.circle); s.circle = null; }
            }"""
        )
