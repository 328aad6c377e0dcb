from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from triptelemetry.geometry.distance import nearest_segment
from triptelemetry.reconstruction.reconstructor import SegmentSpeedReconstructor
from triptelemetry.utils.config import positive_float
from triptelemetry.utils.types import CameraEncounter, TripRecord


logger = logging.getLogger("triptelemetry.calibration")


@dataclass(frozen=True)
class CalibrationConfig:
    max_match_distance_km: float = 0.1
    min_factor: float = 0.5
    max_factor: float = 2.0
    full_confidence_matches: int = 20

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CalibrationConfig":
        factor = d.get("factor_bounds", {}) or {}
        min_factor = positive_float(factor, "min", 0.5)
        max_factor = positive_float(factor, "max", 2.0)
        if min_factor > max_factor:
            raise ValueError("factor_bounds.min must not exceed factor_bounds.max")
        full = int(d.get("full_confidence_matches", 20))
        if full < 1:
            raise ValueError("full_confidence_matches must be >= 1")
        return CalibrationConfig(
            max_match_distance_km=positive_float(d, "max_match_distance_m", 100.0) / 1000.0,
            min_factor=min_factor,
            max_factor=max_factor,
            full_confidence_matches=full,
        )


@dataclass(frozen=True)
class CalibrationMatch:
    encounter: CameraEncounter
    estimated_speed_kmh: float
    recorded_speed_kmh: float
    difference_kmh: float
    distance_m: float


@dataclass(frozen=True)
class CalibrationResult:
    optimal_factor: float
    confidence: float
    matched_cameras: int
    total_cameras: int
    before_error: float
    before_std: float
    after_error: float
    after_std: float
    matches: List[CalibrationMatch] = field(default_factory=list)

    @property
    def improvement_pct(self) -> float:
        if self.before_error <= 0.0:
            return 0.0
        return (self.before_error - self.after_error) / self.before_error * 100.0


class CalibrationEstimator:
    """
    Fits one multiplicative factor mapping reconstructed segment speeds onto
    camera-recorded speeds.

    Each usable encounter is matched to the closest segment of its own trip
    (endpoint/midpoint distance). The factor is the least-squares solution of
    recorded ~ factor * estimated, clamped to the configured bounds.
    """

    def __init__(self, cfg: Optional[CalibrationConfig] = None, reconstructor: Optional[SegmentSpeedReconstructor] = None) -> None:
        self._cfg = cfg or CalibrationConfig()
        self._reconstructor = reconstructor or SegmentSpeedReconstructor()

    def match(self, trips: Sequence[TripRecord]) -> List[CalibrationMatch]:
        matches: List[CalibrationMatch] = []
        for trip in trips:
            if not trip.encounters:
                continue
            segments = self._reconstructor.reconstruct_trip(trip)
            if not segments:
                continue
            for e in trip.encounters:
                if not e.is_usable:
                    continue
                seg, d_km = nearest_segment(e.point, segments)
                if seg is None or d_km > self._cfg.max_match_distance_km:
                    continue
                matches.append(
                    CalibrationMatch(
                        encounter=e,
                        estimated_speed_kmh=float(seg.speed_kmh),
                        recorded_speed_kmh=float(e.speed_kmh),
                        difference_kmh=float(e.speed_kmh - seg.speed_kmh),
                        distance_m=float(d_km * 1000.0),
                    )
                )
        return matches

    def estimate(self, trips: Sequence[TripRecord]) -> CalibrationResult:
        total = sum(len(t.encounters) for t in trips)
        matches = self.match(trips)
        if not matches:
            logger.info("No camera encounters within %.0f m of a segment (%d total)", self._cfg.max_match_distance_km * 1000.0, total)
            return CalibrationResult(
                optimal_factor=1.0,
                confidence=0.0,
                matched_cameras=0,
                total_cameras=total,
                before_error=0.0,
                before_std=0.0,
                after_error=0.0,
                after_std=0.0,
                matches=[],
            )

        recorded = np.asarray([m.recorded_speed_kmh for m in matches], dtype=np.float64)
        estimated = np.asarray([m.estimated_speed_kmh for m in matches], dtype=np.float64)

        before = np.abs(recorded - estimated)
        before_error = float(np.mean(before))

        denom = float(np.dot(estimated, estimated))
        factor = float(np.dot(recorded, estimated)) / denom if denom > 0.0 else 1.0
        factor = min(self._cfg.max_factor, max(self._cfg.min_factor, factor))

        after = np.abs(recorded - factor * estimated)
        after_error = float(np.mean(after))

        confidence = self._confidence(len(matches), before_error, after_error)
        logger.info(
            "Calibration factor=%.3f confidence=%.2f matched=%d/%d mae %.2f -> %.2f km/h",
            factor,
            confidence,
            len(matches),
            total,
            before_error,
            after_error,
        )
        return CalibrationResult(
            optimal_factor=factor,
            confidence=confidence,
            matched_cameras=len(matches),
            total_cameras=total,
            before_error=before_error,
            before_std=float(np.std(before)),
            after_error=after_error,
            after_std=float(np.std(after)),
            matches=matches,
        )

    def _confidence(self, n_matches: int, before_error: float, after_error: float) -> float:
        sample = min(1.0, n_matches / float(self._cfg.full_confidence_matches))
        if before_error > 0.0:
            improvement = 2.0 * (before_error - after_error) / before_error
            improvement = max(0.0, min(1.0, improvement))
        else:
            improvement = 0.0
        return float(0.5 * (sample + improvement))
