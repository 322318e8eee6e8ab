import pytest

from ErgoFit_Analytics.core.force_estimator import ForceEstimate, ForceEstimator, round_half_up
from ErgoFit_Analytics.core.posture_scorer import RiskLevel
from ErgoFit_Analytics.landmarks.pose_landmarks import LandmarkPoint


@pytest.fixture
def estimator():
    return ForceEstimator()


def test_first_call_is_static_baseline(estimator):
    assert estimator.estimate(LandmarkPoint(0, 0), 1.0, 0) == ForceEstimate(RiskLevel.LOW, 10)


def test_second_call_without_motion(estimator):
    estimator.estimate(LandmarkPoint(0, 0), 1.0, 0)
    # leverNorm 0.5 * 50 + speedNorm 0 * 50
    assert estimator.estimate(LandmarkPoint(0, 0), 1.0, 1000) == ForceEstimate(RiskLevel.LOW, 25)


def test_fast_motion_with_long_lever_is_high(estimator):
    estimator.estimate(LandmarkPoint(0.2, 0.5), 2.0, 0)
    result = estimator.estimate(LandmarkPoint(0.7, 0.5), 2.0, 500)
    assert result == ForceEstimate(RiskLevel.HIGH, 80)


def test_dt_floor_on_repeated_timestamp(estimator):
    estimator.estimate(LandmarkPoint(0.5, 0.5), 1.4, 100)
    result = estimator.estimate(LandmarkPoint(0.51, 0.5), 1.4, 100)
    assert result == ForceEstimate(RiskLevel.MEDIUM, 54)


def test_missing_point_resets(estimator):
    estimator.estimate(LandmarkPoint(0, 0), 1.0, 0)
    assert estimator.estimate(None, 1.0, 100) == ForceEstimate(RiskLevel.LOW, 0)
    assert not estimator.has_history
    assert estimator.estimate(LandmarkPoint(0.9, 0.9), 1.0, 200) == ForceEstimate(RiskLevel.LOW, 10)


def test_baseline_clamped_to_100(estimator):
    assert estimator.estimate(LandmarkPoint(0, 0), 15.0, 0).value == 100


def test_reset(estimator):
    estimator.estimate(LandmarkPoint(0, 0), 1.0, 0)
    estimator.reset()
    assert estimator.estimate(LandmarkPoint(0.5, 0.5), 1.0, 10).value == 10


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(24.5) == 25
    assert round_half_up(0.49) == 0


def test_to_dict(estimator):
    assert estimator.estimate(LandmarkPoint(0, 0), 1.0, 0).to_dict() == {'level': 'Low', 'value': 10}
