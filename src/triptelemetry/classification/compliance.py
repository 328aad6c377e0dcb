from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from triptelemetry.utils.types import CameraEncounter


WARNING_TOLERANCE_KMH = 4.0


class CameraType(str, Enum):
    SPEED_CAM = "speedcam"
    SPEED_TRAP = "speedtrap"
    AVERAGE_SPEED_CHECK = "averagespeedcheck"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    CameraType.SPEED_CAM: "Speed Camera",
    CameraType.SPEED_TRAP: "Speed Trap",
    CameraType.AVERAGE_SPEED_CHECK: "Average Speed Check",
    CameraType.UNKNOWN: "Unknown Camera",
}

_KNOWN_TAGS = {
    "speedcam": CameraType.SPEED_CAM,
    "speedtrap": CameraType.SPEED_TRAP,
    "averagespeedcheck": CameraType.AVERAGE_SPEED_CHECK,
}


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    WARNING = "warning"
    VIOLATION = "violation"
    UNKNOWN = "unknown"


def classify_type(type_tag: Optional[str]) -> CameraType:
    if not type_tag:
        return CameraType.UNKNOWN
    return _KNOWN_TAGS.get(str(type_tag).lower(), CameraType.UNKNOWN)


def _is_nan(x: Optional[float]) -> bool:
    return x is None or math.isnan(float(x))


def classify_compliance(recorded_speed_kmh: Optional[float], posted_limit_kmh: Optional[float]) -> ComplianceStatus:
    if _is_nan(recorded_speed_kmh) or _is_nan(posted_limit_kmh):
        return ComplianceStatus.UNKNOWN
    diff = float(recorded_speed_kmh) - float(posted_limit_kmh)
    if diff <= 0.0:
        return ComplianceStatus.COMPLIANT
    if diff <= WARNING_TOLERANCE_KMH:
        return ComplianceStatus.WARNING
    return ComplianceStatus.VIOLATION


def classify_encounter(encounter: CameraEncounter) -> ComplianceStatus:
    return classify_compliance(encounter.speed_kmh, encounter.max_speed_kmh)


def speed_difference(encounter: CameraEncounter) -> float:
    """Recorded minus posted speed; NaN when either is unavailable."""
    return float(encounter.speed_kmh) - float(encounter.max_speed_kmh)


@dataclass
class TypeBreakdown:
    camera_type: CameraType
    total: int = 0
    compliant: int = 0
    warnings: int = 0
    violations: int = 0
    unknown: int = 0
    max_violation_kmh: float = 0.0
    encounters: List[CameraEncounter] = field(default_factory=list)

    def add(self, encounter: CameraEncounter) -> None:
        self.total += 1
        self.encounters.append(encounter)
        status = classify_encounter(encounter)
        if status is ComplianceStatus.COMPLIANT:
            self.compliant += 1
        elif status is ComplianceStatus.WARNING:
            self.warnings += 1
        elif status is ComplianceStatus.VIOLATION:
            self.violations += 1
            diff = speed_difference(encounter)
            if math.isfinite(diff):
                self.max_violation_kmh = max(self.max_violation_kmh, diff)
        else:
            self.unknown += 1


def analyze_by_type(encounters: Iterable[CameraEncounter]) -> Dict[CameraType, TypeBreakdown]:
    out: Dict[CameraType, TypeBreakdown] = {}
    for e in encounters:
        t = classify_type(e.camera_type)
        group = out.get(t)
        if group is None:
            group = TypeBreakdown(camera_type=t)
            out[t] = group
        group.add(e)
    return out
