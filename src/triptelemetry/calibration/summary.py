from __future__ import annotations

from enum import Enum

from triptelemetry.calibration.estimator import CalibrationResult


LOW_CONFIDENCE = 0.3
HIGH_CONFIDENCE = 0.7


class CalibrationStatus(str, Enum):
    NO_DATA = "No Data"
    LOW = "Low Confidence"
    MODERATE = "Moderate"
    HIGH = "High Confidence"


def confidence_label(result: CalibrationResult) -> CalibrationStatus:
    if result.matched_cameras == 0:
        return CalibrationStatus.NO_DATA
    if result.confidence < LOW_CONFIDENCE:
        return CalibrationStatus.LOW
    if result.confidence < HIGH_CONFIDENCE:
        return CalibrationStatus.MODERATE
    return CalibrationStatus.HIGH


def format_calibration_summary(result: CalibrationResult) -> str:
    if result.matched_cameras == 0:
        return (
            f"Speed calibration: no camera encounters matched a trip segment "
            f"(0/{result.total_cameras} cameras). Factor stays at 1.000."
        )
    lines = [
        f"Speed calibration ({confidence_label(result).value})",
        f"Cameras matched: {result.matched_cameras}/{result.total_cameras}",
        f"Optimal factor: {result.optimal_factor:.3f} ({(result.optimal_factor - 1.0) * 100.0:+.1f}%)",
        f"Mean error before: {result.before_error:.1f} km/h (std {result.before_std:.1f})",
        f"Mean error after: {result.after_error:.1f} km/h (std {result.after_std:.1f})",
        f"Improvement: {result.improvement_pct:.1f}%",
        f"Confidence: {round(result.confidence * 100.0)}%",
    ]
    return "\n".join(lines)
