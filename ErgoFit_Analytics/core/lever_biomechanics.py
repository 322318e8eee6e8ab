"""
Lever Biomechanics Module
Shoulder and low-back moment proxies from shoulder, hip and wrist midpoints.

Distances are measured in normalized frame units because limb length and
camera calibration are unknown; the indices are unitless leverage proxies,
not torques.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

from ..config.ergo_thresholds import ERGO_THRESHOLDS, LeverThresholds
from ..landmarks.pose_landmarks import LandmarkFrame, LandmarkPoint
from .geometry import GeometryEngine, GeometryResult, distance
from .posture_scorer import RiskLevel

logger = logging.getLogger(__name__)


def _point_dict(p: Optional[LandmarkPoint]) -> Optional[Dict[str, float]]:
    return {'x': p.x, 'y': p.y} if p is not None else None


@dataclass
class LeverMetrics:
    """Lever/moment indices and coarse strain tier."""
    shoulder_moment_index: float
    low_back_moment_index: float
    strain_index: float
    strain_level: RiskLevel
    shoulder_mid: LandmarkPoint
    hip_mid: LandmarkPoint
    wrist_mid: Optional[LandmarkPoint] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'shoulderMomentIndex': self.shoulder_moment_index,
            'lowBackMomentIndex': self.low_back_moment_index,
            'strainIndex': self.strain_index,
            'strainLevel': self.strain_level.value,
            'points': {
                'shoulderMid': _point_dict(self.shoulder_mid),
                'hipMid': _point_dict(self.hip_mid),
                'wristMid': _point_dict(self.wrist_mid),
            }
        }


class LeverBiomechanicsEngine:
    """
    Reach (wrist-mid to shoulder-mid) and lean (shoulder-mid to hip-mid)
    distances scaled into moment indices.
    """

    def __init__(self, thresholds: Optional[LeverThresholds] = None,
                 geometry: Optional[GeometryEngine] = None):
        self.thresholds = thresholds or ERGO_THRESHOLDS['lever']
        self.geometry = geometry or GeometryEngine()

    def analyze(self, frame: Optional[LandmarkFrame]) -> Optional[LeverMetrics]:
        """Recompute midpoints from the frame. None when shoulders/hips are missing."""
        return self.from_geometry(self.geometry.analyze(frame))

    def from_geometry(self, geometry: Optional[GeometryResult]) -> Optional[LeverMetrics]:
        if geometry is None:
            return None
        return self.compute(geometry.shoulder_mid, geometry.hip_mid, geometry.wrist_mid)

    def compute(self, shoulder_mid: LandmarkPoint, hip_mid: LandmarkPoint,
                wrist_mid: Optional[LandmarkPoint]) -> LeverMetrics:
        t = self.thresholds
        if wrist_mid is None:
            logger.debug("Wrists unresolvable, shoulder reach taken as 0")
            reach = 0.0
        else:
            reach = distance(wrist_mid, shoulder_mid)
        lean = distance(shoulder_mid, hip_mid)

        if reach + lean > t.HIGH_STRAIN_DISTANCE:
            level = RiskLevel.HIGH
        elif reach > t.MEDIUM_STRAIN_REACH:
            level = RiskLevel.MEDIUM
        else:
            level = RiskLevel.LOW

        return LeverMetrics(
            shoulder_moment_index=reach * t.SHOULDER_MOMENT_GAIN,
            low_back_moment_index=lean * t.LOW_BACK_MOMENT_GAIN,
            strain_index=min(t.STRAIN_MAX, (reach + lean) * t.STRAIN_GAIN),
            strain_level=level,
            shoulder_mid=shoulder_mid,
            hip_mid=hip_mid,
            wrist_mid=wrist_mid
        )
