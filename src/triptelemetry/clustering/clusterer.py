from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from triptelemetry.classification.compliance import CameraType, ComplianceStatus, classify_encounter, classify_type
from triptelemetry.geometry.distance import haversine_km
from triptelemetry.utils.config import positive_float
from triptelemetry.utils.timestamps import parse_timestamp
from triptelemetry.utils.types import CameraEncounter, GeoPoint, TripRecord


logger = logging.getLogger("triptelemetry.clustering")

EncounterPair = Tuple[CameraEncounter, TripRecord]


@dataclass(frozen=True)
class ClusteringConfig:
    proximity_km: float = 0.05

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ClusteringConfig":
        return ClusteringConfig(proximity_km=positive_float(d, "proximity_m", 50.0) / 1000.0)


@dataclass(frozen=True)
class ClusterMember:
    encounter: CameraEncounter
    trip: TripRecord
    date: Optional[datetime]


@dataclass
class ClusteredCamera:
    camera_id: str
    point: GeoPoint
    camera_type_tag: str
    camera_type: CameraType
    road_name: str
    members: List[ClusterMember] = field(default_factory=list)
    compliant: int = 0
    warnings: int = 0
    violations: int = 0
    unknown: int = 0
    min_speed_kmh: float = float("nan")
    max_speed_kmh: float = float("nan")
    average_speed_kmh: float = float("nan")
    average_speed_limit_kmh: float = float("nan")
    first_encounter: Optional[datetime] = None
    last_encounter: Optional[datetime] = None
    _speed_sum: float = field(default=0.0, repr=False)
    _limit_sum: float = field(default=0.0, repr=False)
    _limit_count: int = field(default=0, repr=False)

    @property
    def total_encounters(self) -> int:
        return len(self.members)

    def accepts(self, encounter: CameraEncounter, proximity_km: float) -> bool:
        if encounter.camera_type.lower() != self.camera_type_tag.lower():
            return False
        return haversine_km(encounter.point, self.point) <= proximity_km

    def add(self, member: ClusterMember) -> None:
        e = member.encounter
        self.members.append(member)

        v = float(e.speed_kmh)
        self._speed_sum += v
        self.average_speed_kmh = self._speed_sum / len(self.members)
        self.min_speed_kmh = v if math.isnan(self.min_speed_kmh) else min(self.min_speed_kmh, v)
        self.max_speed_kmh = v if math.isnan(self.max_speed_kmh) else max(self.max_speed_kmh, v)
        if not math.isnan(e.max_speed_kmh):
            self._limit_sum += float(e.max_speed_kmh)
            self._limit_count += 1
            self.average_speed_limit_kmh = self._limit_sum / self._limit_count

        status = classify_encounter(e)
        if status is ComplianceStatus.COMPLIANT:
            self.compliant += 1
        elif status is ComplianceStatus.WARNING:
            self.warnings += 1
        elif status is ComplianceStatus.VIOLATION:
            self.violations += 1
        else:
            self.unknown += 1

        if member.date is not None:
            if self.first_encounter is None or member.date < self.first_encounter:
                self.first_encounter = member.date
            if self.last_encounter is None or member.date > self.last_encounter:
                self.last_encounter = member.date


def _fingerprint(encounter: CameraEncounter) -> str:
    return f"{encounter.point.lat:.6f}_{encounter.point.lon:.6f}_{encounter.camera_type}"


def encounter_date(encounter: CameraEncounter, trip: TripRecord) -> Optional[datetime]:
    return parse_timestamp(encounter.timestamp if encounter.timestamp is not None else trip.start_time)


def collect_encounters(trips: Iterable[TripRecord]) -> List[EncounterPair]:
    """
    Flatten trips into (encounter, trip) pairs in chronological order.

    This is the canonical clustering order. The sort is stable, so encounters
    with equal dates keep their input order; undated encounters go last.
    """
    pairs: List[EncounterPair] = [(e, t) for t in trips for e in t.encounters]
    dated = [(p, encounter_date(*p)) for p in pairs]
    dated.sort(key=lambda x: (x[1] is None, x[1].timestamp() if x[1] is not None else 0.0))
    return [p for p, _ in dated]


class CameraClusterer:
    def __init__(self, cfg: Optional[ClusteringConfig] = None) -> None:
        self._cfg = cfg or ClusteringConfig()

    def cluster(self, pairs: Sequence[EncounterPair]) -> List[ClusteredCamera]:
        clusters: List[ClusteredCamera] = []
        skipped = 0
        for encounter, trip in pairs:
            if not encounter.is_usable:
                skipped += 1
                continue
            member = ClusterMember(encounter=encounter, trip=trip, date=encounter_date(encounter, trip))

            target: Optional[ClusteredCamera] = None
            for c in clusters:
                if c.accepts(encounter, self._cfg.proximity_km):
                    target = c
                    break

            if target is None:
                target = ClusteredCamera(
                    camera_id=_fingerprint(encounter),
                    point=encounter.point,
                    camera_type_tag=encounter.camera_type,
                    camera_type=classify_type(encounter.camera_type),
                    road_name=encounter.road_name or "Unknown Road",
                )
                clusters.append(target)
            target.add(member)

        if skipped:
            logger.debug("Skipped %d encounters without usable position or speed", skipped)
        return clusters

    def cluster_trips(self, trips: Iterable[TripRecord]) -> List[ClusteredCamera]:
        return self.cluster(collect_encounters(trips))
