"""
Pose Landmarks Module
Typed landmark frames produced by an upstream pose model (MediaPipe Pose
numbering). The analytics core only reads them; it never runs inference.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class LandmarkPoint:
    """Normalized landmark: x/y in [0, 1], optional depth proxy and visibility."""
    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = None

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_dict(self) -> Dict[str, float]:
        out = {'x': self.x, 'y': self.y}
        if self.z is not None:
            out['z'] = self.z
        if self.visibility is not None:
            out['visibility'] = self.visibility
        return out


class PoseIndex:
    """Landmark indices (MediaPipe Pose Landmarker, 33 points)."""
    NOSE = 0
    LEFT_EAR = 7
    RIGHT_EAR = 8
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28

    NUM_LANDMARKS = 33


def to_landmark_point(value: Any) -> Optional[LandmarkPoint]:
    """
    Convert a landmark-like value to a LandmarkPoint.

    Accepts LandmarkPoint, (x, y[, z[, visibility]]) tuples, dicts with
    'x'/'y' keys, or objects exposing x/y attributes (pose-model landmarks).
    None passes through as a missing landmark.
    """
    if value is None or isinstance(value, LandmarkPoint):
        return value
    if isinstance(value, dict):
        if 'x' not in value or 'y' not in value:
            raise TypeError(f"landmark dict needs 'x' and 'y' keys, got {value!r}")
        return LandmarkPoint(
            x=float(value['x']), y=float(value['y']),
            z=_opt_float(value.get('z')), visibility=_opt_float(value.get('visibility'))
        )
    if isinstance(value, (tuple, list)):
        if len(value) < 2:
            raise TypeError(f"landmark tuple needs at least x and y, got {value!r}")
        z = value[2] if len(value) > 2 else None
        vis = value[3] if len(value) > 3 else None
        return LandmarkPoint(float(value[0]), float(value[1]), _opt_float(z), _opt_float(vis))
    if hasattr(value, 'x') and hasattr(value, 'y'):
        return LandmarkPoint(
            x=float(value.x), y=float(value.y),
            z=_opt_float(getattr(value, 'z', None)),
            visibility=_opt_float(getattr(value, 'visibility', None))
        )
    raise TypeError(f"not a landmark: {value!r}")


def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


class LandmarkFrame:
    """
    Fixed-index landmark sequence for one person in one frame.

    The sequence may be shorter than NUM_LANDMARKS and individual entries may
    be None; both read as a missing joint.
    """

    def __init__(self, points: Sequence[Optional[LandmarkPoint]]):
        self._points: Tuple[Optional[LandmarkPoint], ...] = tuple(points)

    @classmethod
    def from_sequence(cls, values: Iterable[Any]) -> "LandmarkFrame":
        return cls([to_landmark_point(v) for v in values])

    @classmethod
    def from_mapping(cls, values: Dict[int, Any]) -> "LandmarkFrame":
        """Build a frame from {index: landmark}; unlisted indices are missing."""
        size = max(values) + 1 if values else 0
        return cls([to_landmark_point(values.get(i)) for i in range(size)])

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def get(self, index: int) -> Optional[LandmarkPoint]:
        if 0 <= index < len(self._points):
            return self._points[index]
        return None

    def resolve(self, index: int, min_visibility: float = 0.0) -> Optional[LandmarkPoint]:
        """Return the landmark if present, finite and visible enough."""
        point = self.get(index)
        if point is None or not point.is_finite:
            return None
        if min_visibility > 0 and point.visibility is not None and point.visibility < min_visibility:
            return None
        return point

    @property
    def is_empty(self) -> bool:
        return all(p is None for p in self._points)

    def to_list(self) -> list:
        return [p.to_dict() if p is not None else None for p in self._points]


def frame_from_pose_result(result: Any) -> Optional[LandmarkFrame]:
    """
    Convert a pose-model result to a LandmarkFrame (first person only).

    Accepts objects exposing `pose_landmarks` (MediaPipe Tasks Python API) or
    `landmarks` (Tasks JS shape), each a list of per-person landmark lists.
    Returns None when no person was detected.
    """
    if result is None:
        return None
    people = getattr(result, 'pose_landmarks', None)
    if people is None:
        people = getattr(result, 'landmarks', None)
    if not people:
        return None

    landmarks = people[0]
    if not landmarks:
        return None
    return LandmarkFrame.from_sequence(landmarks)
