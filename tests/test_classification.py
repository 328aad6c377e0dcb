import math

from triptelemetry.classification.compliance import (
    CameraType,
    ComplianceStatus,
    analyze_by_type,
    classify_compliance,
    classify_encounter,
    classify_type,
    speed_difference,
)

from trip_fixtures import make_encounter


def test_classify_compliance_thresholds() -> None:
    assert classify_compliance(50.0, 50.0) is ComplianceStatus.COMPLIANT
    assert classify_compliance(30.0, 50.0) is ComplianceStatus.COMPLIANT
    assert classify_compliance(53.0, 50.0) is ComplianceStatus.WARNING
    assert classify_compliance(54.0, 50.0) is ComplianceStatus.WARNING
    assert classify_compliance(54.1, 50.0) is ComplianceStatus.VIOLATION
    assert classify_compliance(60.0, 50.0) is ComplianceStatus.VIOLATION


def test_classify_compliance_unknown_inputs() -> None:
    nan = float("nan")
    assert classify_compliance(60.0, nan) is ComplianceStatus.UNKNOWN
    assert classify_compliance(nan, 50.0) is ComplianceStatus.UNKNOWN
    assert classify_compliance(None, 50.0) is ComplianceStatus.UNKNOWN


def test_classify_type_case_insensitive() -> None:
    assert classify_type("speedcam") is CameraType.SPEED_CAM
    assert classify_type("SpeedTrap") is CameraType.SPEED_TRAP
    assert classify_type("averageSpeedCheck") is CameraType.AVERAGE_SPEED_CHECK
    assert classify_type("average speed check") is CameraType.UNKNOWN
    assert classify_type("") is CameraType.UNKNOWN
    assert CameraType.AVERAGE_SPEED_CHECK.display_name == "Average Speed Check"


def test_encounter_helpers() -> None:
    e = make_encounter(52.0, speed=57.0, limit=50.0)
    assert classify_encounter(e) is ComplianceStatus.VIOLATION
    assert speed_difference(e) == 7.0
    assert math.isnan(speed_difference(make_encounter(52.0, limit=float("nan"))))


def test_analyze_by_type_counts() -> None:
    encounters = [
        make_encounter(52.0, speed=48.0, limit=50.0, camera_type="speedcam"),
        make_encounter(52.0, speed=52.0, limit=50.0, camera_type="speedcam"),
        make_encounter(52.0, speed=61.0, limit=50.0, camera_type="speedcam"),
        make_encounter(52.0, speed=58.0, limit=50.0, camera_type="SPEEDCAM"),
        make_encounter(52.0, speed=80.0, limit=float("nan"), camera_type="speedtrap"),
        make_encounter(52.0, speed=80.0, limit=70.0, camera_type="helicopter"),
    ]
    out = analyze_by_type(encounters)
    assert set(out.keys()) == {CameraType.SPEED_CAM, CameraType.SPEED_TRAP, CameraType.UNKNOWN}
    cam = out[CameraType.SPEED_CAM]
    assert (cam.total, cam.compliant, cam.warnings, cam.violations, cam.unknown) == (4, 1, 1, 2, 0)
    assert cam.max_violation_kmh == 11.0
    assert len(cam.encounters) == 4
    assert out[CameraType.SPEED_TRAP].unknown == 1
    assert out[CameraType.SPEED_TRAP].max_violation_kmh == 0.0
    assert out[CameraType.UNKNOWN].violations == 1
