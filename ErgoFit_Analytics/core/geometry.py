"""
Geometry Module
Front-view joint geometry from a landmark frame: vertex angles for elbows
and knees, trunk lean from vertical, and offset-based neck flexion and
shoulder tilt proxies. Pure functions, no state.
"""

import logging
import math
import numpy as np
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from ..config.ergo_thresholds import ERGO_THRESHOLDS, GeometryThresholds
from ..landmarks.pose_landmarks import LandmarkFrame, LandmarkPoint, PoseIndex

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Angle keys
# -----------------------------------------------------------------------------

NECK_FLEXION = "neckFlexionDeg"
TRUNK_LEAN = "trunkLeanDeg"
SHOULDER_TILT = "shoulderTiltDeg"
LEFT_ELBOW = "leftElbowDeg"
RIGHT_ELBOW = "rightElbowDeg"
LEFT_KNEE = "leftKneeDeg"
RIGHT_KNEE = "rightKneeDeg"

# (key, proximal, vertex, distal)
_LIMB_TRIPLETS = (
    (LEFT_ELBOW, PoseIndex.LEFT_SHOULDER, PoseIndex.LEFT_ELBOW, PoseIndex.LEFT_WRIST),
    (RIGHT_ELBOW, PoseIndex.RIGHT_SHOULDER, PoseIndex.RIGHT_ELBOW, PoseIndex.RIGHT_WRIST),
    (LEFT_KNEE, PoseIndex.LEFT_HIP, PoseIndex.LEFT_KNEE, PoseIndex.LEFT_ANKLE),
    (RIGHT_KNEE, PoseIndex.RIGHT_HIP, PoseIndex.RIGHT_KNEE, PoseIndex.RIGHT_ANKLE),
)


# -----------------------------------------------------------------------------
# Primitives
# -----------------------------------------------------------------------------

def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def midpoint(a: LandmarkPoint, b: LandmarkPoint) -> LandmarkPoint:
    return LandmarkPoint(x=(a.x + b.x) / 2, y=(a.y + b.y) / 2)


def distance(a: LandmarkPoint, b: LandmarkPoint) -> float:
    """Planar distance in normalized units."""
    return float(np.hypot(a.x - b.x, a.y - b.y))


def angle_at_vertex(a: LandmarkPoint, b: LandmarkPoint, c: LandmarkPoint,
                    eps: float = 1e-9) -> float:
    """Angle ABC at vertex B in degrees [0, 180]. Degenerate arms give 0."""
    ba = np.array([a.x - b.x, a.y - b.y])
    bc = np.array([c.x - b.x, c.y - b.y])
    mag = np.linalg.norm(ba) * np.linalg.norm(bc)
    if mag < eps:
        return 0.0
    cos_angle = np.clip(np.dot(ba, bc) / mag, -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))


def trunk_lean_deg(shoulder_mid: LandmarkPoint, hip_mid: LandmarkPoint,
                   eps: float = 1e-9) -> float:
    """Angle between vertical-up and the hip->shoulder vector. 0 = upright."""
    trunk = np.array([shoulder_mid.x - hip_mid.x, shoulder_mid.y - hip_mid.y])
    length = np.linalg.norm(trunk)
    if length < eps:
        return 0.0
    # Image y grows downward, so "up" is (0, -1)
    cos_angle = np.clip(np.dot(trunk, (0.0, -1.0)) / length, -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))


def neck_flexion_deg(ear_mid: LandmarkPoint, shoulder_mid: LandmarkPoint,
                     thresholds: GeometryThresholds) -> float:
    """Horizontal ear/shoulder offset scaled to a bounded degree proxy."""
    offset = abs(ear_mid.x - shoulder_mid.x)
    return float(np.clip(offset * thresholds.NECK_GAIN, 0.0, thresholds.NECK_MAX_DEG))


def shoulder_tilt_deg(left_shoulder: LandmarkPoint, right_shoulder: LandmarkPoint,
                      thresholds: GeometryThresholds) -> float:
    drop = abs(left_shoulder.y - right_shoulder.y)
    return float(np.clip(drop * thresholds.SHOULDER_TILT_GAIN, 0.0, thresholds.SHOULDER_TILT_MAX_DEG))


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------

@dataclass
class GeometryResult:
    """Joint angles plus the midpoints downstream stages share."""
    angles: Dict[str, float]
    shoulder_mid: LandmarkPoint
    hip_mid: LandmarkPoint
    wrist_mid: Optional[LandmarkPoint] = None
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'angles': dict(self.angles),
            'shoulderMid': {'x': self.shoulder_mid.x, 'y': self.shoulder_mid.y},
            'hipMid': {'x': self.hip_mid.x, 'y': self.hip_mid.y},
            'wristMid': {'x': self.wrist_mid.x, 'y': self.wrist_mid.y} if self.wrist_mid else None,
        }


class GeometryEngine:
    """
    Landmark frame -> JointAngleSet + midpoints.

    Both shoulders and both hips are mandatory; without them analyze()
    returns None. Every other joint is optional: a limb angle whose three
    points do not resolve is left out of the angle set, and neck flexion
    falls back to 0 when either ear is missing.
    """

    def __init__(self, thresholds: Optional[GeometryThresholds] = None):
        self.thresholds = thresholds or ERGO_THRESHOLDS['geometry']

    def _point(self, frame: LandmarkFrame, index: int) -> Optional[LandmarkPoint]:
        return frame.resolve(index, self.thresholds.MIN_VISIBILITY)

    def analyze(self, frame: Optional[LandmarkFrame]) -> Optional[GeometryResult]:
        if frame is None or len(frame) == 0:
            return None

        t = self.thresholds
        ls = self._point(frame, PoseIndex.LEFT_SHOULDER)
        rs = self._point(frame, PoseIndex.RIGHT_SHOULDER)
        lh = self._point(frame, PoseIndex.LEFT_HIP)
        rh = self._point(frame, PoseIndex.RIGHT_HIP)
        if ls is None or rs is None or lh is None or rh is None:
            logger.debug("Shoulders/hips unresolvable, no geometry for frame")
            return None

        shoulder_mid = midpoint(ls, rs)
        hip_mid = midpoint(lh, rh)
        angles: Dict[str, float] = {}
        missing: List[str] = []

        lear = self._point(frame, PoseIndex.LEFT_EAR)
        rear = self._point(frame, PoseIndex.RIGHT_EAR)
        if lear is not None and rear is not None:
            angles[NECK_FLEXION] = neck_flexion_deg(midpoint(lear, rear), shoulder_mid, t)
        else:
            angles[NECK_FLEXION] = 0.0
            missing.append(NECK_FLEXION)

        angles[TRUNK_LEAN] = trunk_lean_deg(shoulder_mid, hip_mid, t.EPSILON)
        angles[SHOULDER_TILT] = shoulder_tilt_deg(ls, rs, t)

        for key, i_a, i_b, i_c in _LIMB_TRIPLETS:
            a, b, c = self._point(frame, i_a), self._point(frame, i_b), self._point(frame, i_c)
            if a is None or b is None or c is None:
                missing.append(key)
                continue
            angles[key] = angle_at_vertex(a, b, c, t.EPSILON)

        lw = self._point(frame, PoseIndex.LEFT_WRIST)
        rw = self._point(frame, PoseIndex.RIGHT_WRIST)
        wrist_mid = midpoint(lw, rw) if lw is not None and rw is not None else None

        return GeometryResult(
            angles=angles,
            shoulder_mid=shoulder_mid,
            hip_mid=hip_mid,
            wrist_mid=wrist_mid,
            missing=missing
        )


def compute_geometry(frame: Optional[LandmarkFrame],
                     thresholds: Optional[GeometryThresholds] = None) -> Optional[GeometryResult]:
    return GeometryEngine(thresholds).analyze(frame)
