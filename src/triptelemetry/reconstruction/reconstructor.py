"""
Segment speed reconstruction from a trip's path and its two timestamps.

Trips carry only a start and an end time, never per-point timing. Speeds are
therefore inferred, not measured: the trip duration is split uniformly over
the (noise-merged) segments, so a segment's speed is proportional to its
length. Long straight stretches recorded with sparse points read fast and
densely sampled stretches read slow. Smoothing, clamping against the trip's
average speed and an optional calibration factor keep the profile plausible,
but values are an approximation, good for route colouring and rough
comparison against camera readings, not for per-point speed claims.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from triptelemetry.geometry.distance import haversine_km
from triptelemetry.geometry.polyline import decode_polyline
from triptelemetry.reconstruction.limits import SpeedBoundsConfig, clamp_segment_speed_kmh, distance_scale_factor
from triptelemetry.reconstruction.smoothing import centered_moving_average
from triptelemetry.utils.config import positive_float
from triptelemetry.utils.timestamps import TimestampLike, duration_s
from triptelemetry.utils.types import EncodedPath, GeoPoint, Segment, TripRecord


logger = logging.getLogger("triptelemetry.reconstruction")


@dataclass(frozen=True)
class ReconstructionConfig:
    min_segment_distance_km: float = 0.005
    smoothing_window: int = 3
    bounds: SpeedBoundsConfig = SpeedBoundsConfig(
        max_speed_kmh=250.0,
        max_deviation_factor=3.0,
        min_deviation_factor=0.1,
        min_enforce_reference_kmh=10.0,
    )
    rescale_tolerance: float = 0.1

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ReconstructionConfig":
        noise = d.get("noise_filter", {}) or {}
        smoothing = d.get("smoothing", {}) or {}
        bounds = d.get("speed_bounds", {}) or {}
        rescale = d.get("distance_rescale", {}) or {}

        window = int(smoothing.get("window", 3))
        if window < 1:
            raise ValueError("smoothing.window must be >= 1")
        min_factor = float(bounds.get("min_deviation_factor", 0.1))
        max_factor = positive_float(bounds, "max_deviation_factor", 3.0)
        if min_factor < 0.0 or min_factor > max_factor:
            raise ValueError("speed_bounds.min_deviation_factor must be in [0, max_deviation_factor]")

        return ReconstructionConfig(
            min_segment_distance_km=float(noise.get("min_segment_distance_m", 5.0)) / 1000.0,
            smoothing_window=window,
            bounds=SpeedBoundsConfig(
                max_speed_kmh=positive_float(bounds, "max_speed_kmh", 250.0),
                max_deviation_factor=max_factor,
                min_deviation_factor=min_factor,
                min_enforce_reference_kmh=float(bounds.get("min_enforce_reference_kmh", 10.0)),
            ),
            rescale_tolerance=float(rescale.get("tolerance", 0.1)),
        )


@dataclass
class _Run:
    start: GeoPoint
    end: GeoPoint
    distance_km: float


class SegmentSpeedReconstructor:
    def __init__(self, cfg: Optional[ReconstructionConfig] = None) -> None:
        self._cfg = cfg or ReconstructionConfig()

    @property
    def config(self) -> ReconstructionConfig:
        return self._cfg

    def reconstruct(
        self,
        path: EncodedPath,
        start_time: TimestampLike,
        end_time: TimestampLike,
        reference_distance_km: Optional[float] = None,
        speed_factor: float = 1.0,
    ) -> List[Segment]:
        points = decode_polyline(path)
        if len(points) < 2:
            return []
        total_s = duration_s(start_time, end_time)
        if total_s is None or total_s <= 0.0:
            return []

        raw, raw_total_km = self._raw_segments(points)
        runs = self._merge_noise(raw)
        if not runs:
            return []

        reference_km = raw_total_km
        if reference_distance_km is not None and math.isfinite(reference_distance_km) and reference_distance_km > 0.0:
            reference_km = float(reference_distance_km)
        reference_speed = reference_km / (total_s / 3600.0)

        # Uniform, not distance-proportional: no per-point timestamps exist.
        segment_h = (total_s / len(runs)) / 3600.0
        speeds = [r.distance_km / segment_h for r in runs]
        speeds = centered_moving_average(speeds, self._cfg.smoothing_window)

        factor = float(speed_factor) if math.isfinite(speed_factor) and speed_factor > 0.0 else 1.0
        clamped = [clamp_segment_speed_kmh(v * factor, reference_speed, self._cfg.bounds) for v in speeds]
        n_clamped = sum(1 for v, c in zip(speeds, clamped) if abs(v * factor - c) > 1e-9)
        if n_clamped:
            logger.debug("Clamped %d/%d segment speeds (reference %.1f km/h)", n_clamped, len(runs), reference_speed)

        filtered_km = sum(r.distance_km for r in runs)
        scale = distance_scale_factor(reference_km, filtered_km, self._cfg.rescale_tolerance)
        if filtered_km <= 0.0:
            logger.debug("Path has no usable distance; skipping distance rescale")
        elif scale != 1.0:
            logger.debug("Rescaling segment distances by %.4f (%.3f km -> %.3f km)", scale, filtered_km, reference_km)

        return [
            Segment(start=r.start, end=r.end, distance_km=float(r.distance_km * scale), speed_kmh=float(v), index=i)
            for i, (r, v) in enumerate(zip(runs, clamped))
        ]

    def reconstruct_trip(self, trip: TripRecord, speed_factor: float = 1.0) -> List[Segment]:
        return self.reconstruct(
            trip.path,
            trip.start_time,
            trip.end_time,
            reference_distance_km=trip.distance_km,
            speed_factor=speed_factor,
        )

    @staticmethod
    def _raw_segments(points: List[GeoPoint]) -> Tuple[List[_Run], float]:
        raw: List[_Run] = []
        total = 0.0
        for p0, p1 in zip(points[:-1], points[1:]):
            d = haversine_km(p0, p1)
            total += d
            raw.append(_Run(start=p0, end=p1, distance_km=d))
        return raw, total

    def _merge_noise(self, raw: List[_Run]) -> List[_Run]:
        runs: List[_Run] = []
        acc = 0.0
        run_start = 0
        last = len(raw) - 1
        for i, seg in enumerate(raw):
            acc += seg.distance_km
            if acc >= self._cfg.min_segment_distance_km or i == last:
                runs.append(_Run(start=raw[run_start].start, end=seg.end, distance_km=acc))
                acc = 0.0
                run_start = i + 1
        return runs
