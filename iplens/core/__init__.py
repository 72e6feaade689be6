from iplens.core.errors import (
    GeoLookupError,
    IPLensError,
    PersistenceCorruption,
    PersistenceWriteFailure,
    ValidationError,
)
from iplens.core.types import AddressKind, GeoRecord, HistoryEntry, MapCommand, SessionPhase

__all__ = [
    "AddressKind",
    "GeoLookupError",
    "GeoRecord",
    "HistoryEntry",
    "IPLensError",
    "MapCommand",
    "PersistenceCorruption",
    "PersistenceWriteFailure",
    "SessionPhase",
    "ValidationError",
]
