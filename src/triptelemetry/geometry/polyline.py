from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from triptelemetry.utils.types import GeoPoint


logger = logging.getLogger("triptelemetry.geometry.polyline")

POLYLINE_PRECISION = 1e5


def _read_value(encoded: str, index: int) -> Tuple[Optional[int], int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            return None, index
        b = ord(encoded[index]) - 63
        index += 1
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: Optional[str]) -> List[GeoPoint]:
    """Decode a compact (Google-style) polyline into ordered points.

    Latitude and longitude are delta coded and accumulate independently
    across points. A string that ends in the middle of a value yields the
    points decoded before it.
    """
    if not encoded:
        return []
    points: List[GeoPoint] = []
    index = 0
    lat = 0
    lon = 0
    while index < len(encoded):
        d_lat, index = _read_value(encoded, index)
        if d_lat is None:
            logger.debug("Truncated polyline after %d points", len(points))
            break
        d_lon, index = _read_value(encoded, index)
        if d_lon is None:
            logger.debug("Truncated polyline after %d points", len(points))
            break
        lat += d_lat
        lon += d_lon
        points.append(GeoPoint(lat=lat / POLYLINE_PRECISION, lon=lon / POLYLINE_PRECISION))
    return points
