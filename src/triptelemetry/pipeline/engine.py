from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from triptelemetry.calibration.estimator import CalibrationConfig, CalibrationEstimator, CalibrationResult
from triptelemetry.clustering.clusterer import CameraClusterer, ClusteredCamera, ClusteringConfig
from triptelemetry.clustering.views import CameraSummary, summarize_cameras
from triptelemetry.reconstruction.reconstructor import ReconstructionConfig, SegmentSpeedReconstructor
from triptelemetry.utils.config import load_yaml, section
from triptelemetry.utils.types import Segment, TripRecord


logger = logging.getLogger("triptelemetry.pipeline.engine")


@dataclass(frozen=True)
class EngineConfig:
    reconstruction: ReconstructionConfig = field(default_factory=ReconstructionConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    max_workers: int = 4

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "EngineConfig":
        runtime = section(d, "runtime")
        max_workers = int(runtime.get("max_workers", 4))
        if max_workers < 1:
            raise ValueError("runtime.max_workers must be >= 1")
        return EngineConfig(
            reconstruction=ReconstructionConfig.from_dict(section(d, "reconstruction")),
            clustering=ClusteringConfig.from_dict(section(d, "clustering")),
            calibration=CalibrationConfig.from_dict(section(d, "calibration")),
            max_workers=max_workers,
        )

    @staticmethod
    def load(path: str) -> "EngineConfig":
        return EngineConfig.from_dict(load_yaml(path))


@dataclass(frozen=True)
class AnalysisReport:
    segments: List[List[Segment]]
    cameras: List[ClusteredCamera]
    camera_summary: CameraSummary
    calibration: CalibrationResult
    applied_factor: float = 1.0


class TelemetryEngine:
    def __init__(self, cfg: Optional[EngineConfig] = None) -> None:
        self._cfg = cfg or EngineConfig()
        self._reconstructor = SegmentSpeedReconstructor(self._cfg.reconstruction)
        self._clusterer = CameraClusterer(self._cfg.clustering)
        self._estimator = CalibrationEstimator(self._cfg.calibration, self._reconstructor)

    def reconstruct(self, trip: TripRecord, speed_factor: float = 1.0) -> List[Segment]:
        return self._reconstructor.reconstruct_trip(trip, speed_factor=speed_factor)

    def reconstruct_all(
        self,
        trips: Sequence[TripRecord],
        speed_factor: float = 1.0,
        max_workers: Optional[int] = None,
    ) -> List[List[Segment]]:
        n_workers = max(1, int(max_workers if max_workers is not None else self._cfg.max_workers))
        results: List[List[Segment]] = [[] for _ in trips]
        if n_workers == 1 or len(trips) <= 1:
            for i, trip in enumerate(trips):
                results[i] = self.reconstruct(trip, speed_factor)
            return results

        errors: List[BaseException] = []
        lock = threading.Lock()
        next_index = [0]

        def _worker() -> None:
            while True:
                with lock:
                    i = next_index[0]
                    next_index[0] += 1
                if i >= len(trips):
                    return
                try:
                    results[i] = self.reconstruct(trips[i], speed_factor)
                except Exception as e:
                    logger.exception("Segment reconstruction failed for trip %s", trips[i].trip_id or i)
                    with lock:
                        errors.append(e)

        threads = [threading.Thread(target=_worker, daemon=True) for _ in range(min(n_workers, len(trips)))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        if errors:
            raise RuntimeError(f"{len(errors)} trip reconstruction(s) failed") from errors[0]
        return results

    def cluster(self, trips: Sequence[TripRecord]) -> List[ClusteredCamera]:
        return self._clusterer.cluster_trips(trips)

    def calibrate(self, trips: Sequence[TripRecord]) -> CalibrationResult:
        return self._estimator.estimate(trips)

    def analyze(self, trips: Sequence[TripRecord], apply_calibration: bool = False) -> AnalysisReport:
        calibration = self.calibrate(trips)
        factor = calibration.optimal_factor if apply_calibration else 1.0
        segments = self.reconstruct_all(trips, speed_factor=factor)
        cameras = self.cluster(trips)
        summary = summarize_cameras(cameras)
        logger.info(
            "Analyzed %d trips: %d segments, %d cameras from %d encounters, factor %.3f%s",
            len(trips),
            sum(len(s) for s in segments),
            summary.unique_cameras,
            summary.total_encounters,
            calibration.optimal_factor,
            " (applied)" if apply_calibration else "",
        )
        return AnalysisReport(
            segments=segments,
            cameras=cameras,
            camera_summary=summary,
            calibration=calibration,
            applied_factor=factor,
        )
