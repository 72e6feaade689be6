"""HistoryStore: bounded, deduplicated, newest-first lookup history."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from typing import Any

from iplens.core.errors import PersistenceCorruption, PersistenceWriteFailure
from iplens.core.types import HistoryEntry
from iplens.history.store import Store

logger = logging.getLogger(__name__)

HISTORY_KEY = "ipHistory_v1"
HISTORY_CAPACITY = 50


class HistoryStore:
    """
    Owns the history sequence and is the only writer of its durable slot.

    Invariants: newest entry first, at most one entry per ``ip`` (exact match),
    at most ``capacity`` entries. Every mutation rewrites the whole slot.
    Unreadable slot contents are treated as an empty history. Write failures
    do not roll back the in-memory sequence; they are kept in
    ``last_write_failure`` for the caller to surface.
    """

    def __init__(
        self,
        store: Store,
        *,
        key: str = HISTORY_KEY,
        capacity: int = HISTORY_CAPACITY,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._store = store
        self._key = key
        self._capacity = capacity
        self.last_write_failure: PersistenceWriteFailure | None = None
        self._entries: list[HistoryEntry] = self.load()

    @property
    def key(self) -> str:
        return self._key

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def get(self, ip: str) -> HistoryEntry | None:
        for entry in self._entries:
            if entry.ip == ip:
                return entry
        return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> list[HistoryEntry]:
        """Read and validate the durable slot. Never raises for bad data."""
        try:
            raw = self._store.load(self._key)
        except OSError as exc:
            logger.debug("Cannot read history slot %r: %s", self._key, exc)
            return []
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Ignoring unparsable history in slot %r", self._key)
            return []
        if not isinstance(decoded, list):
            logger.debug("Ignoring non-list history in slot %r", self._key)
            return []

        entries: list[HistoryEntry] = []
        for item in decoded:
            try:
                entries.append(_decode_entry(item))
            except PersistenceCorruption as exc:
                logger.debug("Dropping history entry: %s", exc)
        return self._normalize(entries)

    def record_lookup(self, entry: HistoryEntry) -> list[HistoryEntry]:
        """Put `entry` at the front, replacing any older entry for the same ip."""
        self._entries = self._normalize(
            [entry, *(e for e in self._entries if e.ip != entry.ip)]
        )
        logger.info("Recorded lookup for %s (%d in history)", entry.ip, len(self._entries))
        self._persist()
        return self.entries

    def delete_indices(self, indices: Iterable[int]) -> list[HistoryEntry]:
        doomed = set(indices)
        before = len(self._entries)
        self._entries = [e for i, e in enumerate(self._entries) if i not in doomed]
        logger.info("Deleted %d history entries", before - len(self._entries))
        self._persist()
        return self.entries

    def delete_ips(self, ips: Iterable[str]) -> list[HistoryEntry]:
        """Delete by stable key: resolves the current positions, then delete_indices()."""
        wanted = set(ips)
        return self.delete_indices(
            i for i, e in enumerate(self._entries) if e.ip in wanted
        )

    def clear(self) -> list[HistoryEntry]:
        self._entries = []
        logger.info("Cleared history")
        try:
            self._store.remove(self._key)
        except OSError as exc:
            self._write_failed(exc)
        else:
            self.last_write_failure = None
        return []

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _normalize(self, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        seen: set[str] = set()
        result: list[HistoryEntry] = []
        for entry in entries:
            if entry.ip in seen:
                continue
            seen.add(entry.ip)
            result.append(entry)
        return result[: self._capacity]

    def _persist(self) -> None:
        payload = json.dumps([e.to_dict() for e in self._entries])
        try:
            self._store.save(self._key, payload)
        except OSError as exc:
            self._write_failed(exc)
        else:
            self.last_write_failure = None

    def _write_failed(self, exc: OSError) -> None:
        self.last_write_failure = PersistenceWriteFailure(self._key, exc)
        logger.warning("%s", self.last_write_failure)


def _decode_entry(item: Any) -> HistoryEntry:
    if not isinstance(item, dict):
        raise PersistenceCorruption(f"expected an object, got {type(item).__name__}")
    ip, data, when = item.get("ip"), item.get("data"), item.get("when")
    if not isinstance(ip, str) or not ip:
        raise PersistenceCorruption("missing ip")
    if not isinstance(data, dict):
        raise PersistenceCorruption(f"entry {ip!r} has no data object")
    if not isinstance(when, str):
        raise PersistenceCorruption(f"entry {ip!r} has no timestamp")
    try:
        return HistoryEntry.from_dict(item)
    except ValueError as exc:
        raise PersistenceCorruption(f"entry {ip!r}: {exc}") from exc
