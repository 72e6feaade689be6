from iplens.history.history import HISTORY_CAPACITY, HISTORY_KEY, HistoryStore
from iplens.history.store import JsonFileStore, MemoryStore, Store

__all__ = [
    "HISTORY_CAPACITY",
    "HISTORY_KEY",
    "HistoryStore",
    "JsonFileStore",
    "MemoryStore",
    "Store",
]
