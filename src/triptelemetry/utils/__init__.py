from .config import load_yaml, resolve_path
from .logging import setup_logging
from .timestamps import duration_s, parse_timestamp
from .types import CameraEncounter, EncodedPath, GeoPoint, Segment, TripRecord

__all__ = [
    "CameraEncounter",
    "EncodedPath",
    "GeoPoint",
    "Segment",
    "TripRecord",
    "duration_s",
    "load_yaml",
    "parse_timestamp",
    "resolve_path",
    "setup_logging",
]
