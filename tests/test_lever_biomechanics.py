import pytest

from ErgoFit_Analytics.core.lever_biomechanics import LeverBiomechanicsEngine
from ErgoFit_Analytics.core.posture_scorer import RiskLevel
from ErgoFit_Analytics.landmarks.pose_landmarks import LandmarkPoint


@pytest.fixture
def engine():
    return LeverBiomechanicsEngine()


def P(x, y):
    return LandmarkPoint(x, y)


def test_indices_from_midpoints(engine):
    m = engine.compute(P(0.5, 0.3), P(0.5, 0.6), P(0.5, 0.45))
    assert m.shoulder_moment_index == pytest.approx(1.5)
    assert m.low_back_moment_index == pytest.approx(3.6)
    assert m.strain_index == pytest.approx(27.0)
    assert m.strain_level == RiskLevel.LOW


def test_medium_strain_from_long_reach(engine):
    m = engine.compute(P(0.5, 0.3), P(0.5, 0.6), P(0.5, 0.8))
    assert m.strain_level == RiskLevel.MEDIUM


def test_high_strain_when_reach_plus_lean_exceeds_one(engine):
    m = engine.compute(P(0.5, 0.3), P(0.5, 0.8), P(0.5, 0.9))
    assert m.strain_level == RiskLevel.HIGH
    assert m.strain_index == pytest.approx(66.0)


def test_strain_index_clamped(engine):
    m = engine.compute(P(0.0, 0.0), P(0.0, 1.0), P(1.0, 0.0))
    assert m.strain_index == 100


def test_from_frame(engine, upright_frame):
    m = engine.analyze(upright_frame)
    assert m.shoulder_moment_index == pytest.approx(1.5)
    assert m.low_back_moment_index == pytest.approx(3.6)
    assert m.wrist_mid.y == pytest.approx(0.45)


def test_missing_torso_gives_none(engine, make_frame, upright_points):
    assert engine.analyze(None) is None
    del upright_points['RIGHT_HIP']
    assert engine.analyze(make_frame(upright_points)) is None


def test_missing_wrists_zero_reach(engine, make_frame, upright_points):
    del upright_points['LEFT_WRIST']
    m = engine.analyze(make_frame(upright_points))
    assert m.shoulder_moment_index == 0.0
    assert m.to_dict()['points']['wristMid'] is None


def test_to_dict_shape(engine, upright_frame):
    data = engine.analyze(upright_frame).to_dict()
    assert list(data) == ['shoulderMomentIndex', 'lowBackMomentIndex', 'strainIndex', 'strainLevel', 'points']
    assert data['strainLevel'] == 'Low'
    assert data['points']['shoulderMid'] == pytest.approx({'x': 0.5, 'y': 0.3})
