from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from triptelemetry.utils.timestamps import parse_timestamp

EncodedPath = str
LatLon = Tuple[float, float]


def _to_float(x: Any) -> float:
    if x is None:
        return float("nan")
    try:
        return float(x)
    except (TypeError, ValueError):
        return float("nan")


def _optional_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x)
    return s if s else None


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float

    @property
    def is_valid(self) -> bool:
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            return False
        if abs(self.lat) > 90.0 or abs(self.lon) > 180.0:
            return False
        return not (self.lat == 0.0 and self.lon == 0.0)

    def as_tuple(self) -> LatLon:
        return (float(self.lat), float(self.lon))


@dataclass(frozen=True)
class CameraEncounter:
    camera_type: str
    point: GeoPoint
    timestamp: Optional[datetime]
    speed_kmh: float
    max_speed_kmh: float
    stationary: bool = False
    trajectory: Optional[EncodedPath] = None
    road_name: Optional[str] = None

    @property
    def has_valid_speed(self) -> bool:
        return math.isfinite(self.speed_kmh) and self.speed_kmh > 0.0

    @property
    def is_usable(self) -> bool:
        return self.point.is_valid and self.has_valid_speed

    def trajectory_points(self) -> List[GeoPoint]:
        from triptelemetry.geometry.polyline import decode_polyline

        return decode_polyline(self.trajectory or "")

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CameraEncounter":
        camera_type = d.get("speedTrapType", d.get("type", ""))
        return CameraEncounter(
            camera_type=str(camera_type or ""),
            point=GeoPoint(lat=_to_float(d.get("latitude")), lon=_to_float(d.get("longitude"))),
            timestamp=parse_timestamp(d.get("timestamp")),
            speed_kmh=_to_float(d.get("speed")),
            max_speed_kmh=_to_float(d.get("maxSpeed")),
            stationary=bool(d.get("stationary", False)),
            trajectory=_optional_str(d.get("trajectory")),
            road_name=_optional_str(d.get("roadName")),
        )


@dataclass(frozen=True, eq=False)
class TripRecord:
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    path: EncodedPath
    distance_km: Optional[float] = None
    encounters: List[CameraEncounter] = field(default_factory=list)
    trip_id: Optional[str] = None

    @property
    def duration_s(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return float((self.end_time - self.start_time).total_seconds())

    @staticmethod
    def from_dict(d: Dict[str, Any], trip_id: Optional[str] = None) -> "TripRecord":
        raw_events = d.get("speedTrapEvents", d.get("encounters")) or []
        distance = d.get("distanceKm")
        return TripRecord(
            start_time=parse_timestamp(d.get("startTime")),
            end_time=parse_timestamp(d.get("endTime")),
            path=str(d.get("polyline", d.get("path")) or ""),
            distance_km=None if distance is None else _to_float(distance),
            encounters=[CameraEncounter.from_dict(e) for e in raw_events if isinstance(e, dict)],
            trip_id=trip_id if trip_id is not None else _optional_str(d.get("id")),
        )


@dataclass(frozen=True)
class Segment:
    start: GeoPoint
    end: GeoPoint
    distance_km: float
    speed_kmh: float
    index: int

    @property
    def midpoint(self) -> GeoPoint:
        return GeoPoint(lat=0.5 * (self.start.lat + self.end.lat), lon=0.5 * (self.start.lon + self.end.lon))
