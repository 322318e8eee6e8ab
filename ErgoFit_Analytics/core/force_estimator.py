"""
Force Estimator Module
Dynamic force/intensity index (0-100) from the speed of a tracked point and
the current lever index. Stateful: keeps the previous point and time.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Dict, Any

from ..config.ergo_thresholds import ERGO_THRESHOLDS, ForceThresholds
from ..landmarks.pose_landmarks import LandmarkPoint
from .geometry import round_half_up
from .posture_scorer import RiskLevel


@dataclass(frozen=True)
class ForceEstimate:
    level: RiskLevel
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {'level': self.level.value, 'value': self.value}


class ForceEstimator:
    """
    value = leverNorm * 50 + speedNorm * 50, where leverNorm = min(lever / 2, 1)
    and speedNorm = min(speed * 0.6, 1). The first observation has no velocity
    and returns a Low baseline of lever * 10.
    """

    def __init__(self, thresholds: Optional[ForceThresholds] = None):
        self.thresholds = thresholds or ERGO_THRESHOLDS['force']
        self._prev_point: Optional[LandmarkPoint] = None
        self._prev_time_ms: Optional[float] = None

    def estimate(self, point: Optional[LandmarkPoint], lever_index: float, timestamp_ms: float) -> ForceEstimate:
        t = self.thresholds
        if point is None:
            self.reset()
            return ForceEstimate(RiskLevel.LOW, 0)

        if self._prev_point is None or self._prev_time_ms is None:
            self._prev_point, self._prev_time_ms = point, timestamp_ms
            baseline = round_half_up(lever_index * t.BASELINE_GAIN)
            return ForceEstimate(RiskLevel.LOW, int(np.clip(baseline, 0, 100)))

        dt = max((timestamp_ms - self._prev_time_ms) / 1000, t.MIN_DT_SEC)
        speed = np.hypot(point.x - self._prev_point.x, point.y - self._prev_point.y) / dt
        speed_norm = min(speed * t.SPEED_GAIN, 1.0)
        lever_norm = min(lever_index / t.LEVER_SCALE, 1.0)
        value = round_half_up(lever_norm * 50 + speed_norm * 50)

        if value >= t.HIGH:
            level = RiskLevel.HIGH
        elif value >= t.MEDIUM:
            level = RiskLevel.MEDIUM
        else:
            level = RiskLevel.LOW

        self._prev_point, self._prev_time_ms = point, timestamp_ms
        return ForceEstimate(level, value)

    @property
    def has_history(self) -> bool:
        return self._prev_point is not None

    def reset(self):
        self._prev_point = None
        self._prev_time_ms = None
