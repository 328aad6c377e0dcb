from .estimator import CalibrationConfig, CalibrationEstimator, CalibrationMatch, CalibrationResult
from .summary import CalibrationStatus, confidence_label, format_calibration_summary

__all__ = [
    "CalibrationConfig",
    "CalibrationEstimator",
    "CalibrationMatch",
    "CalibrationResult",
    "CalibrationStatus",
    "confidence_label",
    "format_calibration_summary",
]
