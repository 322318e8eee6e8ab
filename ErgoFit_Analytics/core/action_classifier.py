"""
Action Classifier Module

Scores candidate body actions from one landmark frame. Every candidate is an
independent scoring function returning (label, score, notes); the highest
score wins unless it falls under a low-confidence floor, in which case the
result is Holding / Static.

Two variants:
- StaticActionClassifier: single image, no history.
- TemporalActionClassifier: video/live. Adds hip-velocity based lifting and
  an event-based clap detector, and smooths the output with a hysteresis
  stabilizer so single noisy frames cannot flip the label.

Timestamps are injected by the caller (ms, non-decreasing within a session).
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Dict, Any, List, Sequence, Tuple

from ..config.ergo_thresholds import ERGO_THRESHOLDS, ActionThresholds
from ..landmarks.pose_landmarks import LandmarkFrame, PoseIndex
from ..utils.event_window import EventWindow
from .geometry import distance, midpoint

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Enums & Data Classes
# -----------------------------------------------------------------------------

class ActionLabel(Enum):
    """Closed set of action labels."""
    NO_PERSON = "No person"
    HOLDING_STATIC = "Holding / Static"
    REACHING = "Reaching"
    OVERHEAD_REACH = "Overhead reach"
    BENDING = "Bending"
    TWISTING = "Twisting"
    LIFTING_MOTION = "Lifting motion"
    CLAPPING = "Clapping"


@dataclass(frozen=True)
class ActionResult:
    label: ActionLabel
    confidence: float
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {'label': self.label.value, 'confidence': self.confidence}
        if self.notes is not None:
            out['notes'] = self.notes
        return out


@dataclass(frozen=True)
class ActionCandidate:
    label: ActionLabel
    score: float
    notes: str


@dataclass(frozen=True)
class PoseFeatures:
    """Shoulder-width normalized pose measurements for one frame."""
    reach_norm: float
    trunk_lean_norm: float
    overhead: bool
    twist_norm: float
    hands_dist_norm: float
    hip_mid_y: float


@dataclass(frozen=True)
class MotionFeatures:
    """Frame-to-frame measurements; zero in static mode."""
    hip_velocity: float = 0.0    # upward, normalized units per second
    clap_score: float = 0.0


NO_PERSON = ActionResult(ActionLabel.NO_PERSON, 0.0)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def ramp(value: float, start_width: Tuple[float, float]) -> float:
    """Linear 0..1 ramp starting at `start` over `width`."""
    start, width = start_width
    return clamp01((value - start) / width)


def extract_pose_features(frame: LandmarkFrame,
                          thresholds: Optional[ActionThresholds] = None,
                          min_visibility: float = 0.0) -> Optional[PoseFeatures]:
    """None when shoulders, hips or wrists are unresolvable."""
    t = thresholds or ERGO_THRESHOLDS['action']

    def get(i):
        return frame.resolve(i, min_visibility)

    ls, rs = get(PoseIndex.LEFT_SHOULDER), get(PoseIndex.RIGHT_SHOULDER)
    lh, rh = get(PoseIndex.LEFT_HIP), get(PoseIndex.RIGHT_HIP)
    lw, rw = get(PoseIndex.LEFT_WRIST), get(PoseIndex.RIGHT_WRIST)
    if None in (ls, rs, lh, rh, lw, rw):
        return None

    shoulder_width = max(abs(rs.x - ls.x), t.MIN_WIDTH)
    hip_width = max(abs(rh.x - lh.x), t.MIN_WIDTH)
    shoulder_mid = midpoint(ls, rs)
    hip_mid = midpoint(lh, rh)
    wrist_mid = midpoint(lw, rw)

    return PoseFeatures(
        reach_norm=distance(wrist_mid, shoulder_mid) / shoulder_width,
        trunk_lean_norm=distance(shoulder_mid, hip_mid) / shoulder_width,
        overhead=wrist_mid.y < shoulder_mid.y - t.OVERHEAD_MARGIN,
        twist_norm=abs(shoulder_width - hip_width) / shoulder_width,
        hands_dist_norm=distance(lw, rw) / shoulder_width,
        hip_mid_y=hip_mid.y
    )


# -----------------------------------------------------------------------------
# Candidate scorers
# -----------------------------------------------------------------------------

CandidateScorer = Callable[[PoseFeatures, MotionFeatures, ActionThresholds], ActionCandidate]


def score_overhead(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    score = ramp(pose.reach_norm, t.OVERHEAD_RAMP) if pose.overhead else 0.0
    return ActionCandidate(ActionLabel.OVERHEAD_REACH, score, "Hands above shoulders + reach")


def score_bending(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    return ActionCandidate(ActionLabel.BENDING, ramp(pose.trunk_lean_norm, t.BEND_RAMP), "Trunk lean high")


def score_twisting(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    return ActionCandidate(ActionLabel.TWISTING, ramp(pose.twist_norm, t.TWIST_RAMP), "Shoulder/hip mismatch")


def score_reaching(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    return ActionCandidate(ActionLabel.REACHING, ramp(pose.reach_norm, t.REACH_RAMP), "Arms extended")


def score_static_posture(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    """Residual stillness score for single images."""
    reach = ramp(pose.reach_norm, t.REACH_RAMP)
    return ActionCandidate(ActionLabel.HOLDING_STATIC, clamp01(0.7 * (1 - reach) + 0.3), "Static posture")


def score_low_movement(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    """Residual stillness score blending short reach and a still hip."""
    reach = ramp(pose.reach_norm, t.REACH_RAMP)
    still = clamp01(1 - abs(motion.hip_velocity) / t.STILL_HIP_VELOCITY)
    return ActionCandidate(ActionLabel.HOLDING_STATIC, clamp01(0.55 * (1 - reach) + 0.45 * still), "Low movement")


def score_lifting(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    # Only high when rising while bent
    score = ramp(motion.hip_velocity, t.LIFT_VELOCITY_RAMP) * ramp(pose.trunk_lean_norm, t.LIFT_LEAN_RAMP)
    return ActionCandidate(ActionLabel.LIFTING_MOTION, score, "Rising movement while bent")


def score_clapping(pose: PoseFeatures, motion: MotionFeatures, t: ActionThresholds) -> ActionCandidate:
    return ActionCandidate(ActionLabel.CLAPPING, motion.clap_score, "Hands approach + contact pattern")


STATIC_SCORERS: Tuple[CandidateScorer, ...] = (
    score_overhead, score_bending, score_twisting, score_reaching, score_static_posture,
)

TEMPORAL_SCORERS: Tuple[CandidateScorer, ...] = (
    score_clapping, score_overhead, score_bending, score_twisting,
    score_lifting, score_reaching, score_low_movement,
)


def rank_candidates(candidates: Sequence[ActionCandidate]) -> List[ActionCandidate]:
    """Highest score first; ties keep scorer order."""
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def pick_action(candidates: Sequence[ActionCandidate], t: ActionThresholds) -> ActionResult:
    best = rank_candidates(candidates)[0]
    if best.score < t.MIN_SCORE:
        return ActionResult(ActionLabel.HOLDING_STATIC, t.FLOOR_CONFIDENCE, best.notes)
    return ActionResult(best.label, best.score, best.notes)


# -----------------------------------------------------------------------------
# Clap detection
# -----------------------------------------------------------------------------

class ClapDetector:
    """
    Event-based clap detection.

    A contact event is logged when the hands are closer than CLAP_CONTACT
    shoulder widths, closing faster than CLAP_APPROACH_VELOCITY, and at least
    CLAP_DEBOUNCE_MS after the previous event. Two or more events inside the
    trailing CLAP_WINDOW_MS give a clap confidence.
    """

    def __init__(self, thresholds: Optional[ActionThresholds] = None):
        self.thresholds = thresholds or ERGO_THRESHOLDS['action']
        self.events = EventWindow(self.thresholds.CLAP_WINDOW_MS)
        self._prev_hands_dist: Optional[float] = None

    def update(self, hands_dist_norm: float, dt: float, now: float) -> float:
        t = self.thresholds
        if self._prev_hands_dist is None:
            closing_velocity = 0.0
        else:
            closing_velocity = (self._prev_hands_dist - hands_dist_norm) / dt
        self._prev_hands_dist = hands_dist_norm

        contact = hands_dist_norm < t.CLAP_CONTACT
        fast_approach = closing_velocity > t.CLAP_APPROACH_VELOCITY
        debounced = self.events.last is None or now - self.events.last >= t.CLAP_DEBOUNCE_MS
        if contact and fast_approach and debounced:
            self.events.add(now)
            logger.debug("Clap contact event at %.0f ms (closing %.2f/s)", now, closing_velocity)
        self.events.prune(now)
        return self.confidence

    @property
    def confidence(self) -> float:
        t = self.thresholds
        count = self.events.count
        if count < t.CLAP_MIN_EVENTS:
            return 0.0
        return clamp01(t.CLAP_BASE_CONFIDENCE + (count - t.CLAP_MIN_EVENTS) * t.CLAP_STEP_CONFIDENCE)

    def reset(self):
        self.events.reset()
        self._prev_hands_dist = None


# -----------------------------------------------------------------------------
# Stabilizer
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class StabilizerState:
    label: ActionLabel = ActionLabel.HOLDING_STATIC
    score: float = 0.0
    last_change_ms: Optional[float] = None


def advance_stabilizer(state: StabilizerState, raw: ActionResult, now: float,
                       t: ActionThresholds) -> Tuple[StabilizerState, ActionResult]:
    """
    Hysteresis transition: (state, raw observation, now) -> (state', emitted).

    Inside HOLD_MS of the last label change the held label only yields to a
    competitor that beats the held score by more than SWITCH_MARGIN; a repeat
    of the held label blends its score. Past the window any raw result is
    accepted.
    """
    accept = StabilizerState(raw.label, raw.confidence, now)
    if state.last_change_ms is None or now - state.last_change_ms >= t.HOLD_MS:
        return accept, raw

    if raw.label == state.label:
        smoothed = t.SMOOTHING * state.score + (1 - t.SMOOTHING) * raw.confidence
        return replace(state, score=smoothed), replace(raw, confidence=max(raw.confidence, smoothed))

    if raw.confidence > state.score + t.SWITCH_MARGIN:
        return accept, raw

    return state, ActionResult(state.label, state.score, "Stabilized")


class ActionStabilizer:
    """Owns a StabilizerState and advances it per raw classification."""

    def __init__(self, thresholds: Optional[ActionThresholds] = None):
        self.thresholds = thresholds or ERGO_THRESHOLDS['action']
        self.state = StabilizerState()

    def update(self, raw: ActionResult, now: float) -> ActionResult:
        previous = self.state.label
        self.state, emitted = advance_stabilizer(self.state, raw, now, self.thresholds)
        if self.state.label != previous:
            logger.debug("Action label %s -> %s (%.2f)", previous.value, self.state.label.value, self.state.score)
        return emitted

    def reset(self):
        self.state = StabilizerState()


# -----------------------------------------------------------------------------
# Classifiers
# -----------------------------------------------------------------------------

class ActionClassifier:
    """Base: scores the configured candidate set for one frame."""
    scorers: Tuple[CandidateScorer, ...] = ()

    def __init__(self, thresholds: Optional[ActionThresholds] = None, min_visibility: float = 0.0):
        self.thresholds = thresholds or ERGO_THRESHOLDS['action']
        self.min_visibility = min_visibility

    def score_candidates(self, pose: PoseFeatures, motion: MotionFeatures) -> List[ActionCandidate]:
        return rank_candidates([s(pose, motion, self.thresholds) for s in self.scorers])

    def _incomplete(self) -> ActionResult:
        return ActionResult(ActionLabel.HOLDING_STATIC, self.thresholds.INCOMPLETE_CONFIDENCE, "Landmarks incomplete")

    def reset(self):
        pass


class StaticActionClassifier(ActionClassifier):
    """Single-image classification, no history."""
    scorers = STATIC_SCORERS

    def classify(self, frame: Optional[LandmarkFrame], timestamp_ms: Optional[float] = None) -> ActionResult:
        if frame is None or frame.is_empty:
            return NO_PERSON
        pose = extract_pose_features(frame, self.thresholds, self.min_visibility)
        if pose is None:
            return self._incomplete()
        return pick_action(self.score_candidates(pose, MotionFeatures()), self.thresholds)


class TemporalActionClassifier(ActionClassifier):
    """
    Video/live classification with lifting and clapping candidates and a
    hysteresis stabilizer. One instance per session; call reset() when the
    input source changes.
    """
    scorers = TEMPORAL_SCORERS

    def __init__(self, thresholds: Optional[ActionThresholds] = None, min_visibility: float = 0.0):
        super().__init__(thresholds, min_visibility)
        self.clap_detector = ClapDetector(self.thresholds)
        self.stabilizer = ActionStabilizer(self.thresholds)
        self._prev_time_ms: Optional[float] = None
        self._prev_hip_y: Optional[float] = None

    def classify(self, frame: Optional[LandmarkFrame], timestamp_ms: float) -> ActionResult:
        if frame is None or frame.is_empty:
            self.reset()
            return NO_PERSON

        pose = extract_pose_features(frame, self.thresholds, self.min_visibility)
        if pose is None:
            return self.stabilizer.update(self._incomplete(), timestamp_ms)

        motion = self._motion(pose, timestamp_ms)
        raw = pick_action(self.score_candidates(pose, motion), self.thresholds)
        return self.stabilizer.update(raw, timestamp_ms)

    def _motion(self, pose: PoseFeatures, now: float) -> MotionFeatures:
        t = self.thresholds
        if self._prev_time_ms is None:
            dt = t.MIN_DT_SEC
        else:
            dt = max((now - self._prev_time_ms) / 1000, t.MIN_DT_SEC)

        # Image y grows downward: a positive velocity means the hips rose
        hip_velocity = 0.0 if self._prev_hip_y is None else (self._prev_hip_y - pose.hip_mid_y) / dt
        self._prev_hip_y = pose.hip_mid_y
        self._prev_time_ms = now

        clap_score = self.clap_detector.update(pose.hands_dist_norm, dt, now)
        return MotionFeatures(hip_velocity=hip_velocity, clap_score=clap_score)

    def reset(self):
        """Clear hip/time history, clap buffer and held label."""
        self._prev_time_ms = None
        self._prev_hip_y = None
        self.clap_detector.reset()
        self.stabilizer.reset()
