from .compliance import (
    WARNING_TOLERANCE_KMH,
    CameraType,
    ComplianceStatus,
    TypeBreakdown,
    analyze_by_type,
    classify_compliance,
    classify_encounter,
    classify_type,
    speed_difference,
)

__all__ = [
    "CameraType",
    "ComplianceStatus",
    "TypeBreakdown",
    "WARNING_TOLERANCE_KMH",
    "analyze_by_type",
    "classify_compliance",
    "classify_encounter",
    "classify_type",
    "speed_difference",
]
