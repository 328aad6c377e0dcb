from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from triptelemetry.utils.types import GeoPoint, Segment

EARTH_RADIUS_KM = 6371.0


def haversine_km(p1: GeoPoint, p2: GeoPoint) -> float:
    phi1 = math.radians(p1.lat)
    phi2 = math.radians(p2.lat)
    dphi = math.radians(p2.lat - p1.lat)
    dlmb = math.radians(p2.lon - p1.lon)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    a = min(1.0, max(0.0, a))
    return float(EARTH_RADIUS_KM * 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a)))


def haversine_m(p1: GeoPoint, p2: GeoPoint) -> float:
    return haversine_km(p1, p2) * 1000.0


def midpoint(p1: GeoPoint, p2: GeoPoint) -> GeoPoint:
    return GeoPoint(lat=0.5 * (p1.lat + p2.lat), lon=0.5 * (p1.lon + p2.lon))


def distance_to_segment_km(point: GeoPoint, start: GeoPoint, end: GeoPoint) -> float:
    """Smallest distance from point to the segment start, end or midpoint."""
    return min(
        haversine_km(point, start),
        haversine_km(point, end),
        haversine_km(point, midpoint(start, end)),
    )


def nearest_segment(point: GeoPoint, segments: Sequence[Segment]) -> Tuple[Optional[Segment], float]:
    best: Optional[Segment] = None
    best_km = float("inf")
    for seg in segments:
        d = distance_to_segment_km(point, seg.start, seg.end)
        if d < best_km:
            best = seg
            best_km = d
    return best, best_km


def path_length_km(points: Sequence[GeoPoint]) -> float:
    total = 0.0
    for i in range(len(points) - 1):
        total += haversine_km(points[i], points[i + 1])
    return float(total)
