from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from triptelemetry.calibration.summary import format_calibration_summary
from triptelemetry.clustering.views import CameraSort, sort_cameras
from triptelemetry.pipeline.engine import EngineConfig, TelemetryEngine
from triptelemetry.utils.config import resolve_path
from triptelemetry.utils.logging import setup_logging
from triptelemetry.utils.types import TripRecord


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--trips", required=True, help="trips.json from a data export (object with a 'trips' list, or a list)")
    ap.add_argument("--config", default="configs/engine.yaml", help="Engine YAML")
    ap.add_argument("--apply-calibration", action="store_true", help="Feed the fitted factor back into reconstruction")
    ap.add_argument("--top", type=int, default=10, help="Number of most frequent cameras to list")
    ap.add_argument("--log-level", default="INFO")
    ap.add_argument("--log-file", default=None)
    args = ap.parse_args()

    base_dir = os.getcwd()
    setup_logging(level=args.log_level, log_file=args.log_file)

    with open(resolve_path(args.trips, base_dir), "r", encoding="utf-8") as f:
        raw = json.load(f)
    raw_trips = raw.get("trips", []) if isinstance(raw, dict) else raw
    trips = [TripRecord.from_dict(t, trip_id=str(i)) for i, t in enumerate(raw_trips) if isinstance(t, dict)]

    engine = TelemetryEngine(EngineConfig.load(resolve_path(args.config, base_dir)))
    report = engine.analyze(trips, apply_calibration=args.apply_calibration)

    s = report.camera_summary
    print(f"trips={len(trips)} segments={sum(len(x) for x in report.segments)}")
    print(
        f"cameras={s.unique_cameras} encounters={s.total_encounters} "
        f"violations={s.total_violations} ({s.violation_rate_pct:.1f}%) compliant={s.total_compliant} ({s.compliance_rate_pct:.1f}%)"
    )
    for cam in sort_cameras(report.cameras, CameraSort.FREQUENCY)[: max(0, args.top)]:
        print(
            f"  {cam.camera_type.display_name:<20} {cam.road_name:<30} n={cam.total_encounters:<4} "
            f"avg={cam.average_speed_kmh:.1f} km/h violations={cam.violations} warnings={cam.warnings}"
        )
    print(format_calibration_summary(report.calibration))


if __name__ == "__main__":
    main()
