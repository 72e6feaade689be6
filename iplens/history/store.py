"""Durable key-value slots backing the lookup history."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = os.path.join(os.path.expanduser("~"), ".iplens")


class Store(ABC):
    """A named-slot text store. `save` may raise OSError; `load` returns None for a missing slot."""

    @abstractmethod
    def load(self, key: str) -> str | None: ...

    @abstractmethod
    def save(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...


class MemoryStore(Store):
    """Process-local store, used for ephemeral sessions and tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self._slots.get(key)

    def save(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._slots


class JsonFileStore(Store):
    """
    Filesystem store: one file per slot.

    Directory layout::

        {store_dir}/
            ipHistory_v1.json     # one slot per key
    """

    def __init__(self, store_dir: str | os.PathLike[str] | None = None) -> None:
        self._dir = Path(store_dir or DEFAULT_STORE_DIR)

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read slot %s: %s", path, exc)
            return None

    def save(self, key: str, value: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        # Write to a sibling temp file, then rename over the slot
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)

    def remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass
