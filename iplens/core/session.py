"""SessionController: lookup state machine, history commands and map sync."""

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from iplens.config import Settings
from iplens.core.errors import GeoLookupError, ValidationError
from iplens.core.types import GeoRecord, HistoryEntry, SessionPhase
from iplens.geo.base import SELF, GeoClient
from iplens.geo.ipinfo import IpInfoClient
from iplens.history.history import HistoryStore
from iplens.history.store import JsonFileStore
from iplens.mapsync.surface import MapSurface
from iplens.mapsync.synchronizer import MapSynchronizer
from iplens.validator.address import require_valid

logger = logging.getLogger(__name__)

LOOKUP_FAILED_MESSAGE = "Unable to fetch geolocation for the provided IP."

# Listeners may be plain functions or coroutine functions.
Listener = Callable[[Any], Any]


class SessionController:
    """
    Orchestrates validator -> geolocation client -> history store -> map.

    Usage:
        session = SessionController(client, HistoryStore(MemoryStore()))
        await session.start()            # self-lookup, not recorded
        await session.search("8.8.8.8")  # manual lookup, recorded

    Every dispatch gets a sequence number; a response is applied only if its
    number is still the latest one, so the last dispatch wins no matter in
    which order responses arrive.
    """

    def __init__(
        self,
        client: GeoClient,
        history: HistoryStore,
        *,
        map_sync: MapSynchronizer | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._history = history
        self._map_sync = map_sync
        self._clock = clock or (lambda: datetime.now(timezone.utc))

        self.phase = SessionPhase.IDLE
        self.current: GeoRecord | None = None
        self.query = ""
        self.error: str | None = None
        self.warning: str | None = None

        self._seq = 0
        self._map_lock = asyncio.Lock()
        self._selection: set[str] = set()
        self._record_listeners: list[Listener] = []
        self._history_listeners: list[Listener] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        surface: MapSurface | None = None,
    ) -> SessionController:
        settings = settings or Settings.from_env()
        client = IpInfoClient(
            base_url=settings.provider_url,
            token=settings.provider_token,
            timeout=settings.timeout,
        )
        history = HistoryStore(
            JsonFileStore(settings.home),
            key=settings.history_key,
            capacity=settings.history_capacity,
        )
        map_sync = None
        if surface is not None:
            map_sync = MapSynchronizer(
                surface, zoom=settings.map_zoom, circle_radius=settings.circle_radius
            )
        return cls(client, history, map_sync=map_sync)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def history(self) -> list[HistoryEntry]:
        return self._history.entries

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._selection)

    @property
    def is_loading(self) -> bool:
        return self.phase is SessionPhase.LOOKING_UP

    @property
    def latest_dispatch(self) -> int:
        return self._seq

    def on_record(self, callback: Listener) -> None:
        """Call `callback(record)` whenever the current record is replaced."""
        self._record_listeners.append(callback)

    def on_history(self, callback: Listener) -> None:
        """Call `callback(entries)` whenever the history sequence changes."""
        self._history_listeners.append(callback)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Look up the caller's own address. The result is never recorded."""
        return await self._dispatch(SELF, record=False)

    async def search(self, text: str) -> bool:
        """Validate `text` and look it up. Returns True if the result was applied."""
        self.query = text
        try:
            ip = require_valid(text)
        except ValidationError as exc:
            # The newest user action is this failed search; anything in flight is stale.
            self._seq += 1
            self.phase = SessionPhase.ERROR
            self.error = exc.message
            logger.debug("Rejected search input %r", text)
            return False
        return await self._dispatch(ip, record=True)

    async def clear_search(self) -> bool:
        self.query = ""
        self.error = None
        return await self._dispatch(SELF, record=False)

    async def select_from_history(self, ip: str) -> bool:
        """Re-run a stored lookup. History IPs were validated when recorded."""
        self.query = ip
        return await self._dispatch(ip, record=True)

    async def close(self) -> None:
        await self._client.aclose()

    async def _dispatch(self, query: str, *, record: bool) -> bool:
        self._seq += 1
        seq = self._seq
        self.phase = SessionPhase.LOOKING_UP
        self.error = None
        logger.debug("Dispatch #%d for %s", seq, query)

        try:
            geo = await self._client.lookup(query)
        except GeoLookupError as exc:
            if seq != self._seq:
                logger.debug("Discarding stale failure of dispatch #%d", seq)
                return False
            logger.warning("Lookup for %s failed: %s", query, exc)
            self.phase = SessionPhase.ERROR
            self.error = LOOKUP_FAILED_MESSAGE
            return False

        if seq != self._seq:
            logger.debug("Discarding stale result of dispatch #%d (latest #%d)", seq, self._seq)
            return False

        self.current = geo
        self.phase = SessionPhase.READY

        if record:
            entry = HistoryEntry(ip=query, data=geo, when=self._clock())
            self._history.record_lookup(entry)
            await self._history_changed()

        if self._map_sync is not None:
            # One sync at a time; a dispatch superseded before its turn leaves the map alone.
            async with self._map_lock:
                if seq != self._seq:
                    logger.debug("Skipping map sync for superseded dispatch #%d", seq)
                    return True
                await self._map_sync.sync(geo)
        if seq != self._seq:
            return True
        await _notify(self._record_listeners, geo)
        return True

    # ------------------------------------------------------------------
    # History commands
    # ------------------------------------------------------------------

    def select_for_deletion(self, ip: str, selected: bool = True) -> None:
        if selected and self._history.get(ip) is not None:
            self._selection.add(ip)
        else:
            self._selection.discard(ip)

    def toggle_selection(self, ip: str) -> None:
        self.select_for_deletion(ip, ip not in self._selection)

    async def commit_deletion(self) -> list[HistoryEntry]:
        """Delete every selected entry, then clear the selection."""
        entries = self.history
        indices = {i for i, e in enumerate(entries) if e.ip in self._selection}
        self._history.delete_indices(indices)
        self._selection.clear()
        await self._history_changed()
        return self.history

    async def clear_all_history(self) -> list[HistoryEntry]:
        self._history.clear()
        self._selection.clear()
        await self._history_changed()
        return self.history

    async def _history_changed(self) -> None:
        failure = self._history.last_write_failure
        self.warning = str(failure) if failure is not None else None
        # Selection is keyed by ip; drop keys that no longer exist.
        present = {e.ip for e in self._history}
        self._selection &= present
        await _notify(self._history_listeners, self.history)


async def _notify(listeners: list[Listener], payload: Any) -> None:
    for callback in listeners:
        result = callback(payload)
        if inspect.isawaitable(result):
            await result
