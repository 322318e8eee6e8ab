import math

import pytest

from ErgoFit_Analytics.config.ergo_thresholds import GeometryThresholds
from ErgoFit_Analytics.core.geometry import (
    GeometryEngine, angle_at_vertex, compute_geometry, trunk_lean_deg,
)
from ErgoFit_Analytics.landmarks.pose_landmarks import LandmarkFrame, LandmarkPoint, PoseIndex


def P(x, y):
    return LandmarkPoint(x, y)


class TestAngleAtVertex:
    def test_right_angle(self):
        assert angle_at_vertex(P(0, 1), P(0, 0), P(1, 0)) == pytest.approx(90.0)

    def test_symmetric_under_swap(self):
        a, b, c = P(0.1, 0.7), P(0.4, 0.4), P(0.9, 0.5)
        assert angle_at_vertex(a, b, c) == pytest.approx(angle_at_vertex(c, b, a))

    def test_collinear_same_side_is_zero(self):
        assert angle_at_vertex(P(0.2, 0.2), P(0, 0), P(0.5, 0.5)) == pytest.approx(0.0, abs=1e-6)

    def test_opposite_points_is_180(self):
        assert angle_at_vertex(P(-0.3, 0), P(0, 0), P(0.4, 0)) == pytest.approx(180.0)

    def test_degenerate_arm_returns_zero(self):
        assert angle_at_vertex(P(0.5, 0.5), P(0.5, 0.5), P(0.9, 0.1)) == 0.0


def test_trunk_lean_upright_and_diagonal():
    assert trunk_lean_deg(P(0.5, 0.3), P(0.5, 0.6)) == pytest.approx(0.0)
    assert trunk_lean_deg(P(0.8, 0.3), P(0.5, 0.6)) == pytest.approx(45.0)


def test_upright_frame_angles(upright_frame):
    result = compute_geometry(upright_frame)
    angles = result.angles
    assert angles['neckFlexionDeg'] == pytest.approx(0.0)
    assert angles['trunkLeanDeg'] == pytest.approx(0.0)
    assert angles['shoulderTiltDeg'] == pytest.approx(0.0)
    assert angles['leftElbowDeg'] == pytest.approx(90.0)
    assert angles['rightElbowDeg'] == pytest.approx(90.0)
    assert angles['leftKneeDeg'] == pytest.approx(180.0)
    assert angles['rightKneeDeg'] == pytest.approx(180.0)
    assert result.shoulder_mid.x == pytest.approx(0.5)
    assert result.hip_mid.y == pytest.approx(0.6)
    assert result.wrist_mid.y == pytest.approx(0.45)
    assert result.missing == []


def test_neck_offset_scaled_and_clamped(make_frame, upright_points):
    upright_points['LEFT_EAR'] = (0.75, 0.2)
    upright_points['RIGHT_EAR'] = (0.85, 0.2)
    angles = compute_geometry(make_frame(upright_points)).angles
    assert angles['neckFlexionDeg'] == pytest.approx(36.0)

    # Landmarks may fall outside the frame
    upright_points['LEFT_EAR'] = (1.2, 0.2)
    upright_points['RIGHT_EAR'] = (1.3, 0.2)
    assert compute_geometry(make_frame(upright_points)).angles['neckFlexionDeg'] == 60.0


def test_missing_ear_defaults_neck_to_zero(make_frame, upright_points):
    upright_points['LEFT_EAR'] = (0.9, 0.2)
    del upright_points['RIGHT_EAR']
    result = compute_geometry(make_frame(upright_points))
    assert result.angles['neckFlexionDeg'] == 0.0
    assert 'neckFlexionDeg' in result.missing


def test_shoulder_tilt_scaled_and_clamped(make_frame, upright_points):
    upright_points['RIGHT_SHOULDER'] = (0.6, 0.35)
    assert compute_geometry(make_frame(upright_points)).angles['shoulderTiltDeg'] == pytest.approx(9.0)

    upright_points['RIGHT_SHOULDER'] = (0.6, 0.5)
    assert compute_geometry(make_frame(upright_points)).angles['shoulderTiltDeg'] == 30.0


def test_missing_limb_point_omits_only_that_angle(make_frame, upright_points):
    del upright_points['LEFT_WRIST']
    del upright_points['RIGHT_ANKLE']
    result = compute_geometry(make_frame(upright_points))
    assert 'leftElbowDeg' not in result.angles
    assert 'rightKneeDeg' not in result.angles
    assert 'rightElbowDeg' in result.angles
    assert 'leftKneeDeg' in result.angles
    assert result.wrist_mid is None


@pytest.mark.parametrize('joint', ['LEFT_SHOULDER', 'RIGHT_SHOULDER', 'LEFT_HIP', 'RIGHT_HIP'])
def test_missing_mandatory_landmark_gives_none(make_frame, upright_points, joint):
    del upright_points[joint]
    assert compute_geometry(make_frame(upright_points)) is None


def test_absent_or_short_frame_gives_none():
    assert compute_geometry(None) is None
    assert compute_geometry(LandmarkFrame([])) is None
    assert compute_geometry(LandmarkFrame.from_sequence([(0.5, 0.5)] * 12)) is None


def test_non_finite_landmark_is_missing(make_frame, upright_points):
    upright_points['LEFT_HIP'] = (math.nan, 0.6)
    assert compute_geometry(make_frame(upright_points)) is None


def test_visibility_floor(upright_points):
    points = {getattr(PoseIndex, k): (x, y, 0.0, 0.9) for k, (x, y) in upright_points.items()}
    points[PoseIndex.LEFT_EAR] = (0.9, 0.2, 0.0, 0.1)
    frame = LandmarkFrame.from_mapping(points)

    strict = GeometryEngine(GeometryThresholds(MIN_VISIBILITY=0.5))
    assert strict.analyze(frame).angles['neckFlexionDeg'] == 0.0
    assert GeometryEngine().analyze(frame).angles['neckFlexionDeg'] > 0


def test_no_nan_in_angles_for_degenerate_pose():
    frame = LandmarkFrame.from_mapping({
        PoseIndex.LEFT_SHOULDER: (0.5, 0.5), PoseIndex.RIGHT_SHOULDER: (0.5, 0.5),
        PoseIndex.LEFT_HIP: (0.5, 0.5), PoseIndex.RIGHT_HIP: (0.5, 0.5),
        PoseIndex.LEFT_ELBOW: (0.5, 0.5), PoseIndex.LEFT_WRIST: (0.5, 0.5),
    })
    angles = compute_geometry(frame).angles
    assert all(math.isfinite(v) for v in angles.values())
