"""Shared synthetic landmark frames."""

import pytest

from ErgoFit_Analytics.landmarks.pose_landmarks import LandmarkFrame, PoseIndex


def _make_frame(points):
    """Build a frame from {'LEFT_SHOULDER': (x, y), ...}; unlisted joints are missing."""
    return LandmarkFrame.from_mapping({getattr(PoseIndex, name): xy for name, xy in points.items()})


# Shoulders level, ears centered, trunk vertical, elbows at 90°, knees at 180°
UPRIGHT_POINTS = {
    'LEFT_EAR': (0.45, 0.2), 'RIGHT_EAR': (0.55, 0.2),
    'LEFT_SHOULDER': (0.4, 0.3), 'RIGHT_SHOULDER': (0.6, 0.3),
    'LEFT_ELBOW': (0.4, 0.45), 'RIGHT_ELBOW': (0.6, 0.45),
    'LEFT_WRIST': (0.48, 0.45), 'RIGHT_WRIST': (0.52, 0.45),
    'LEFT_HIP': (0.4, 0.6), 'RIGHT_HIP': (0.6, 0.6),
    'LEFT_KNEE': (0.4, 0.75), 'RIGHT_KNEE': (0.6, 0.75),
    'LEFT_ANKLE': (0.4, 0.9), 'RIGHT_ANKLE': (0.6, 0.9),
}


@pytest.fixture
def make_frame():
    return _make_frame


@pytest.fixture
def upright_points():
    return dict(UPRIGHT_POINTS)


@pytest.fixture
def upright_frame():
    return _make_frame(UPRIGHT_POINTS)
