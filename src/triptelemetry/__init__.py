from .calibration import CalibrationEstimator, CalibrationResult
from .classification import CameraType, ComplianceStatus, classify_compliance, classify_type
from .clustering import CameraClusterer, ClusteredCamera
from .geometry import decode_polyline, haversine_km
from .pipeline import AnalysisReport, EngineConfig, TelemetryEngine
from .reconstruction import SegmentSpeedReconstructor
from .utils import CameraEncounter, GeoPoint, Segment, TripRecord

__all__ = [
    "AnalysisReport",
    "CalibrationEstimator",
    "CalibrationResult",
    "CameraClusterer",
    "CameraEncounter",
    "CameraType",
    "ClusteredCamera",
    "ComplianceStatus",
    "EngineConfig",
    "GeoPoint",
    "Segment",
    "SegmentSpeedReconstructor",
    "TelemetryEngine",
    "TripRecord",
    "classify_compliance",
    "classify_type",
    "decode_polyline",
    "haversine_km",
]
