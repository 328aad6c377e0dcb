from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SpeedBoundsConfig:
    max_speed_kmh: float
    max_deviation_factor: float
    min_deviation_factor: float
    min_enforce_reference_kmh: float


def clamp_segment_speed_kmh(speed_kmh: float, reference_speed_kmh: float, cfg: SpeedBoundsConfig) -> float:
    if not math.isfinite(speed_kmh):
        speed_kmh = 0.0
    v = max(0.0, min(float(cfg.max_speed_kmh), float(speed_kmh)))
    if not math.isfinite(reference_speed_kmh):
        return v
    v_max = min(float(cfg.max_speed_kmh), float(reference_speed_kmh) * float(cfg.max_deviation_factor))
    v_min = min(float(cfg.max_speed_kmh), max(0.0, float(reference_speed_kmh) * float(cfg.min_deviation_factor)))
    if v > v_max:
        return float(v_max)
    # Slow or stopped trips keep their low speeds.
    if v < v_min and reference_speed_kmh > cfg.min_enforce_reference_kmh:
        return float(v_min)
    return float(v)


def distance_scale_factor(reference_km: float, measured_km: float, tolerance: float) -> float:
    if measured_km <= 0.0 or not math.isfinite(measured_km) or not math.isfinite(reference_km):
        return 1.0
    scale = float(reference_km) / float(measured_km)
    if abs(scale - 1.0) > float(tolerance):
        return scale
    return 1.0
