"""
Ergonomic Thresholds & Reference Values
Fixed constants for posture scoring, leverage proxies, action classification
and force estimation.

All coordinates are normalized image units (x, y in [0, 1], y pointing down).
Angles derived from them are 2D projection heuristics, not calibrated
goniometry.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class GeometryThresholds:
    """
    Joint Angle Heuristics

    Neck flexion and shoulder tilt are front-view proxies: a horizontal or
    vertical offset in normalized units scaled by a fixed gain and clamped.
    They track the direction of change, not the clinical angle.
    """
    NECK_GAIN: float = 120.0        # ear/shoulder horizontal offset -> degrees
    NECK_MAX_DEG: float = 60.0
    SHOULDER_TILT_GAIN: float = 180.0
    SHOULDER_TILT_MAX_DEG: float = 30.0
    EPSILON: float = 1e-9           # zero-length vector guard
    MIN_VISIBILITY: float = 0.0     # 0 = every present landmark resolves

    CLINICAL_NOTES: str = """
    neckFlexionDeg and trunkLeanDeg are derived from 2D normalized projections.
    Camera pitch, subject distance and lens distortion all shift them; they are
    suitable for relative feedback within a session, not for diagnosis.
    """


@dataclass(frozen=True)
class PostureThresholds:
    """
    Posture Issue Rule Table

    One issue per angle family; HIGH is checked before MILD.
    """
    NECK_MILD: float = 20.0
    NECK_HIGH: float = 35.0
    TRUNK_MILD: float = 10.0
    TRUNK_HIGH: float = 20.0
    SHOULDER_MILD: float = 12.0
    SHOULDER_HIGH: float = 18.0
    ELBOW_RANGE: Tuple[float, float] = (75.0, 135.0)  # outside = MILD

    # Score penalties
    HIGH_PENALTY: int = 18
    MILD_PENALTY: int = 9

    # Risk tier boundaries (score >= LOW_RISK_MIN -> Low, >= MEDIUM_RISK_MIN -> Medium)
    LOW_RISK_MIN: float = 80.0
    MEDIUM_RISK_MIN: float = 55.0


@dataclass(frozen=True)
class LeverThresholds:
    """
    Lever / Moment Index Proxies

    Distances are in normalized frame units, so indices are unitless.
    """
    SHOULDER_MOMENT_GAIN: float = 10.0
    LOW_BACK_MOMENT_GAIN: float = 12.0
    STRAIN_GAIN: float = 60.0
    STRAIN_MAX: float = 100.0
    HIGH_STRAIN_DISTANCE: float = 1.0    # reach + lean
    MEDIUM_STRAIN_REACH: float = 0.4


@dataclass(frozen=True)
class ActionThresholds:
    """
    Action Classification

    Each ramp is (start, width): score = clamp01((value - start) / width).
    Widths are normalized by shoulder width.
    """
    MIN_WIDTH: float = 1e-4
    OVERHEAD_MARGIN: float = 0.05

    OVERHEAD_RAMP: Tuple[float, float] = (1.3, 1.2)
    BEND_RAMP: Tuple[float, float] = (2.2, 1.0)
    TWIST_RAMP: Tuple[float, float] = (0.12, 0.20)
    REACH_RAMP: Tuple[float, float] = (1.6, 1.2)
    LIFT_VELOCITY_RAMP: Tuple[float, float] = (0.25, 0.6)
    LIFT_LEAN_RAMP: Tuple[float, float] = (1.7, 1.2)
    STILL_HIP_VELOCITY: float = 0.35

    # Low-confidence floor
    MIN_SCORE: float = 0.35
    FLOOR_CONFIDENCE: float = 0.6
    INCOMPLETE_CONFIDENCE: float = 0.35

    MIN_DT_SEC: float = 0.016

    # Clap detection
    CLAP_CONTACT: float = 0.65          # hands distance / shoulder width
    CLAP_APPROACH_VELOCITY: float = 1.8  # units per second
    CLAP_DEBOUNCE_MS: float = 180.0
    CLAP_WINDOW_MS: float = 1200.0
    CLAP_MIN_EVENTS: int = 2
    CLAP_BASE_CONFIDENCE: float = 0.65
    CLAP_STEP_CONFIDENCE: float = 0.15

    # Stabilizer
    HOLD_MS: float = 300.0
    SWITCH_MARGIN: float = 0.12
    SMOOTHING: float = 0.7              # weight of held score


@dataclass(frozen=True)
class ForceThresholds:
    """Dynamic force estimate from tracked-point speed and lever index."""
    MIN_DT_SEC: float = 0.016
    SPEED_GAIN: float = 0.6
    LEVER_SCALE: float = 2.0            # lever index expected ~0-2
    BASELINE_GAIN: float = 10.0
    HIGH: float = 70.0
    MEDIUM: float = 35.0


# Aggregate all thresholds
ERGO_THRESHOLDS = {
    'geometry': GeometryThresholds(),
    'posture': PostureThresholds(),
    'lever': LeverThresholds(),
    'action': ActionThresholds(),
    'force': ForceThresholds(),
}


def get_risk_level(score: float, thresholds: Optional[PostureThresholds] = None) -> str:
    """
    Map an ErgoScore to its risk tier.

    Args:
        score: Posture score (0-100)
        thresholds: Rule table to read the tier boundaries from

    Returns:
        "Low", "Medium" or "High"
    """
    thresholds = thresholds or ERGO_THRESHOLDS['posture']
    if score >= thresholds.LOW_RISK_MIN:
        return "Low"
    elif score >= thresholds.MEDIUM_RISK_MIN:
        return "Medium"
    return "High"
