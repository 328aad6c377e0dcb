import math
from datetime import datetime, timedelta
from typing import List, Optional

from triptelemetry.classification.compliance import CameraType
from triptelemetry.clustering.clusterer import CameraClusterer, ClusteredCamera, ClusteringConfig, collect_encounters, encounter_date
from triptelemetry.clustering.views import CameraFilter, CameraSort, filter_cameras, sort_cameras, summarize_cameras
from triptelemetry.utils.types import CameraEncounter, TripRecord

from trip_fixtures import BASE_LAT, T0, make_encounter, make_trip, straight_path

# 0.0001 degrees of latitude is ~11 m
STEP_11M = 0.0001


def _trip(encounters: List[CameraEncounter], start: datetime = T0, trip_id: Optional[str] = None) -> TripRecord:
    return make_trip(straight_path(3), duration_s=120.0, encounters=encounters, start=start, trip_id=trip_id)


def test_nearby_same_type_encounters_merge() -> None:
    trip = _trip(
        [
            make_encounter(BASE_LAT, speed=48.0, limit=50.0, at=T0 + timedelta(minutes=1), road_name="A10"),
            make_encounter(BASE_LAT + 2 * STEP_11M, speed=53.0, limit=50.0, at=T0 + timedelta(minutes=2)),
            make_encounter(BASE_LAT + STEP_11M, speed=60.0, limit=float("nan"), camera_type="SpeedCam", at=T0),
        ]
    )
    cams = CameraClusterer().cluster([(e, trip) for e in trip.encounters])
    assert len(cams) == 1
    c = cams[0]
    assert c.total_encounters == 3
    assert c.camera_type is CameraType.SPEED_CAM
    assert c.road_name == "A10"
    assert c.camera_id == f"{BASE_LAT:.6f}_{4.9:.6f}_speedcam"
    assert (c.compliant, c.warnings, c.violations, c.unknown) == (1, 1, 0, 1)
    assert c.min_speed_kmh == 48.0
    assert c.max_speed_kmh == 60.0
    assert abs(c.average_speed_kmh - (48.0 + 53.0 + 60.0) / 3.0) < 1e-9
    assert abs(c.average_speed_limit_kmh - 50.0) < 1e-9
    assert c.first_encounter == T0
    assert c.last_encounter == T0 + timedelta(minutes=2)
    assert all(m.trip is trip for m in c.members)


def test_type_and_distance_split_clusters() -> None:
    trip = _trip(
        [
            make_encounter(BASE_LAT),
            make_encounter(BASE_LAT, camera_type="speedtrap"),
            make_encounter(BASE_LAT + 10 * STEP_11M),
        ]
    )
    cams = CameraClusterer().cluster([(e, trip) for e in trip.encounters])
    assert len(cams) == 3
    assert cams[0].road_name == "Unknown Road"
    assert math.isnan(CameraClusterer().cluster([(make_encounter(BASE_LAT, limit=float("nan")), trip)])[0].average_speed_limit_kmh)


def test_proximity_is_configurable() -> None:
    trip = _trip([make_encounter(BASE_LAT), make_encounter(BASE_LAT + 10 * STEP_11M)])
    pairs = [(e, trip) for e in trip.encounters]
    assert len(CameraClusterer(ClusteringConfig.from_dict({"proximity_m": 150.0})).cluster(pairs)) == 1
    assert len(CameraClusterer(ClusteringConfig.from_dict({})).cluster(pairs)) == 2


def test_unusable_encounters_are_skipped() -> None:
    trip = _trip(
        [
            make_encounter(BASE_LAT, speed=float("nan")),
            make_encounter(BASE_LAT, speed=0.0),
            make_encounter(0.0, lon=0.0),
            make_encounter(float("nan")),
        ]
    )
    assert CameraClusterer().cluster([(e, trip) for e in trip.encounters]) == []


def test_clustering_is_repeatable() -> None:
    trips = [
        _trip([make_encounter(BASE_LAT + i * 3 * STEP_11M, speed=40.0 + i) for i in range(6)], trip_id="a"),
        _trip([make_encounter(BASE_LAT + i * 4 * STEP_11M, speed=45.0 + i) for i in range(6)], trip_id="b"),
    ]
    clusterer = CameraClusterer()
    first = clusterer.cluster_trips(trips)
    second = clusterer.cluster_trips(trips)
    assert [c.camera_id for c in first] == [c.camera_id for c in second]
    assert [[m.encounter for m in c.members] for c in first] == [[m.encounter for m in c.members] for c in second]
    assert first[0] is not second[0]


def test_collect_encounters_is_chronological() -> None:
    early = make_encounter(BASE_LAT, at=T0 + timedelta(hours=1))
    late = make_encounter(BASE_LAT, at=T0 + timedelta(hours=5))
    undated_late_trip = make_encounter(BASE_LAT)
    t1 = _trip([late, undated_late_trip], start=T0 + timedelta(hours=3))
    t2 = _trip([early], start=T0)
    undated = make_encounter(BASE_LAT + STEP_11M)
    t3 = TripRecord(start_time=None, end_time=None, path="", encounters=[undated])
    pairs = collect_encounters([t3, t1, t2])
    assert [e for e, _ in pairs] == [early, undated_late_trip, late, undated]
    assert pairs[0][1] is t2


def test_naive_and_aware_dates_mix_as_utc() -> None:
    aware = make_encounter(BASE_LAT, at=T0 + timedelta(hours=2))
    naive = make_encounter(BASE_LAT, at=datetime(2024, 3, 1, 9, 0, 0))
    trip = _trip([aware, naive], start=datetime(2024, 3, 1, 7, 0, 0))
    pairs = collect_encounters([trip])
    assert [e for e, _ in pairs] == [naive, aware]
    cams = CameraClusterer().cluster_trips([trip])
    assert len(cams) == 1
    assert cams[0].first_encounter == T0 + timedelta(hours=1)
    assert cams[0].last_encounter == T0 + timedelta(hours=2)
    assert cams[0].first_encounter.tzinfo is not None
    assert encounter_date(make_encounter(BASE_LAT), trip) == T0 - timedelta(hours=1)


def _cams() -> List[ClusteredCamera]:
    trip = _trip(
        [
            make_encounter(BASE_LAT, speed=45.0, road_name="Ring"),
            make_encounter(BASE_LAT, speed=47.0),
            make_encounter(BASE_LAT, speed=49.0),
            make_encounter(BASE_LAT + 20 * STEP_11M, speed=70.0, camera_type="speedtrap", road_name="A2", at=T0 + timedelta(days=2)),
            make_encounter(BASE_LAT + 40 * STEP_11M, speed=52.0, camera_type="averagespeedcheck", road_name="N201", at=T0 + timedelta(days=1)),
        ]
    )
    return CameraClusterer().cluster([(e, trip) for e in trip.encounters])


def test_filter_sort_and_summary() -> None:
    cams = _cams()
    assert len(cams) == 3
    assert [c.road_name for c in filter_cameras(cams, CameraFilter.VIOLATIONS)] == ["A2"]
    assert [c.road_name for c in filter_cameras(cams, CameraFilter.WARNINGS)] == ["N201"]
    assert [c.road_name for c in filter_cameras(cams, CameraFilter.COMPLIANT)] == ["Ring"]
    assert [c.road_name for c in filter_cameras(cams, "speedtrap")] == ["A2"]
    assert len(filter_cameras(cams)) == 3

    assert [c.road_name for c in sort_cameras(cams, CameraSort.FREQUENCY)][0] == "Ring"
    assert [c.road_name for c in sort_cameras(cams, CameraSort.SPEED)] == ["A2", "N201", "Ring"]
    assert [c.road_name for c in sort_cameras(cams, CameraSort.NAME)] == ["A2", "N201", "Ring"]
    assert [c.road_name for c in sort_cameras(cams, CameraSort.RECENT)] == ["A2", "N201", "Ring"]
    assert [c.road_name for c in sort_cameras(cams, CameraSort.VIOLATIONS)][-1] == "Ring"

    s = summarize_cameras(cams)
    assert s.unique_cameras == 3
    assert s.total_encounters == 5
    assert (s.total_violations, s.total_warnings, s.total_compliant) == (1, 1, 3)
    assert abs(s.violation_rate_pct - 20.0) < 1e-9
    assert abs(s.compliance_rate_pct - 60.0) < 1e-9
    empty = summarize_cameras([])
    assert empty.violation_rate_pct == 0.0 and empty.compliance_rate_pct == 0.0
