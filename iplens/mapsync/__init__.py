from iplens.mapsync.surface import LeafletPageSurface, MapSurface, RecordingSurface
from iplens.mapsync.synchronizer import MapSynchronizer, parse_loc, popup_content

__all__ = [
    "LeafletPageSurface",
    "MapSurface",
    "MapSynchronizer",
    "RecordingSurface",
    "parse_loc",
    "popup_content",
]
