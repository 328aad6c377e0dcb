from .distance import EARTH_RADIUS_KM, distance_to_segment_km, haversine_km, haversine_m, midpoint, nearest_segment, path_length_km
from .polyline import decode_polyline

__all__ = [
    "EARTH_RADIUS_KM",
    "decode_polyline",
    "distance_to_segment_km",
    "haversine_km",
    "haversine_m",
    "midpoint",
    "nearest_segment",
    "path_length_km",
]
