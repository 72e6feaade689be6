from iplens.config import Settings
from iplens.core.errors import (
    GeoLookupError,
    IPLensError,
    PersistenceCorruption,
    PersistenceWriteFailure,
    ValidationError,
)
from iplens.core.session import SessionController
from iplens.core.types import (
    AddressKind,
    GeoRecord,
    HistoryEntry,
    MapCommand,
    SessionPhase,
)
from iplens.geo import SELF, GeoClient, IpInfoClient
from iplens.history import HistoryStore, JsonFileStore, MemoryStore, Store
from iplens.mapsync import (
    LeafletPageSurface,
    MapSurface,
    MapSynchronizer,
    RecordingSurface,
)
from iplens.validator import classify, is_valid, require_valid

__all__ = [
    "AddressKind",
    "GeoClient",
    "GeoLookupError",
    "GeoRecord",
    "HistoryEntry",
    "HistoryStore",
    "IPLensError",
    "IpInfoClient",
    "JsonFileStore",
    "LeafletPageSurface",
    "MapCommand",
    "MapSurface",
    "MapSynchronizer",
    "MemoryStore",
    "PersistenceCorruption",
    "PersistenceWriteFailure",
    "RecordingSurface",
    "SELF",
    "SessionController",
    "SessionPhase",
    "Settings",
    "Store",
    "ValidationError",
    "classify",
    "is_valid",
    "require_valid",
]
