from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Sequence

from triptelemetry.classification.compliance import CameraType
from triptelemetry.clustering.clusterer import ClusteredCamera


class CameraFilter(str, Enum):
    ALL = "all"
    VIOLATIONS = "violations"
    WARNINGS = "warnings"
    COMPLIANT = "compliant"
    SPEED_CAM = "speedcam"
    SPEED_TRAP = "speedtrap"
    AVERAGE_SPEED_CHECK = "averagespeedcheck"


class CameraSort(str, Enum):
    FREQUENCY = "frequency"
    RECENT = "recent"
    VIOLATIONS = "violations"
    SPEED = "speed"
    NAME = "name"


_TYPE_FILTERS = {
    CameraFilter.SPEED_CAM: CameraType.SPEED_CAM,
    CameraFilter.SPEED_TRAP: CameraType.SPEED_TRAP,
    CameraFilter.AVERAGE_SPEED_CHECK: CameraType.AVERAGE_SPEED_CHECK,
}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CameraSummary:
    unique_cameras: int
    total_encounters: int
    total_violations: int
    total_warnings: int
    total_compliant: int
    violation_rate_pct: float
    compliance_rate_pct: float


def _matches(camera: ClusteredCamera, how: CameraFilter) -> bool:
    if how is CameraFilter.VIOLATIONS:
        return camera.violations > 0
    if how is CameraFilter.WARNINGS:
        return camera.warnings > 0
    if how is CameraFilter.COMPLIANT:
        return camera.compliant > 0 and camera.violations == 0 and camera.warnings == 0
    if how in _TYPE_FILTERS:
        return camera.camera_type is _TYPE_FILTERS[how]
    return True


def filter_cameras(cameras: Sequence[ClusteredCamera], how: CameraFilter = CameraFilter.ALL) -> List[ClusteredCamera]:
    how = CameraFilter(how)
    return [c for c in cameras if _matches(c, how)]


def sort_cameras(cameras: Sequence[ClusteredCamera], by: CameraSort = CameraSort.FREQUENCY) -> List[ClusteredCamera]:
    """Return a sorted copy; ties keep cluster order."""
    by = CameraSort(by)
    if by is CameraSort.FREQUENCY:
        return sorted(cameras, key=lambda c: -c.total_encounters)
    if by is CameraSort.RECENT:
        return sorted(cameras, key=lambda c: c.last_encounter or _EPOCH, reverse=True)
    if by is CameraSort.VIOLATIONS:
        return sorted(cameras, key=lambda c: -(c.violations + c.warnings))
    if by is CameraSort.SPEED:
        return sorted(cameras, key=lambda c: -c.average_speed_kmh)
    return sorted(cameras, key=lambda c: c.road_name.lower())


def summarize_cameras(cameras: Sequence[ClusteredCamera]) -> CameraSummary:
    total = sum(c.total_encounters for c in cameras)
    violations = sum(c.violations for c in cameras)
    warnings = sum(c.warnings for c in cameras)
    compliant = sum(c.compliant for c in cameras)
    return CameraSummary(
        unique_cameras=len(cameras),
        total_encounters=total,
        total_violations=violations,
        total_warnings=warnings,
        total_compliant=compliant,
        violation_rate_pct=(violations / total) * 100.0 if total > 0 else 0.0,
        compliance_rate_pct=(compliant / total) * 100.0 if total > 0 else 0.0,
    )
