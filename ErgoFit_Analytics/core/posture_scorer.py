"""
Posture Scorer Module

Rule-table scoring of a joint angle set. Each angle family (neck, trunk,
shoulder, elbow) yields at most one issue; issues subtract a fixed penalty
from 100 and the final score maps to a Low/Medium/High risk tier.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple

from ..config.ergo_thresholds import ERGO_THRESHOLDS, PostureThresholds, get_risk_level
from .geometry import NECK_FLEXION, TRUNK_LEAN, SHOULDER_TILT, LEFT_ELBOW, RIGHT_ELBOW, round_half_up


# -----------------------------------------------------------------------------
# Enums & Data Classes
# -----------------------------------------------------------------------------

class Severity(Enum):
    """Issue severity."""
    OK = "OK"
    MILD = "MILD"
    HIGH = "HIGH"


class RiskLevel(Enum):
    """Risk tier shared by posture risk, strain level and force level."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class PostureIssue:
    """One detected posture problem with remediation text."""
    id: str
    title: str
    severity: Severity
    measured: str
    why_it_matters: str
    fix: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'id': self.id,
            'title': self.title,
            'severity': self.severity.value,
            'measured': self.measured,
            'whyItMatters': self.why_it_matters,
            'fix': self.fix
        }


@dataclass
class PostureReport:
    """Posture score, risk tier, pass-through angles and ordered issues."""
    score: float
    risk: RiskLevel
    angles: Dict[str, float]
    issues: List[PostureIssue]

    @property
    def needs_correction(self) -> bool:
        return any(i.severity != Severity.OK for i in self.issues)

    def count(self, severity: Severity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'risk': self.risk.value,
            'angles': dict(self.angles),
            'issues': [i.to_dict() for i in self.issues]
        }


# -----------------------------------------------------------------------------
# Issue text
# -----------------------------------------------------------------------------

_NECK_TEXT = (
    "neck-flexion",
    "Neck bent / forward head posture",
    "Increases load on the cervical spine and can cause neck and shoulder pain.",
    "Bring the screen to eye level, tuck the chin slightly, keep ears over shoulders."
)
_TRUNK_TEXT = (
    "trunk-lean",
    "Trunk leaning away from upright",
    "A leaning trunk lengthens the lever on the lower back and raises disc load.",
    "Sit back against lumbar support, bring work closer, keep the chest over the hips."
)
_SHOULDER_TEXT = (
    "shoulder-tilt",
    "Uneven shoulders",
    "Asymmetry may increase strain on the neck and upper back.",
    "Relax the shoulders, adjust chair and armrest height, center your posture."
)
_ELBOW_TEXT = (
    "elbow-angle",
    "Elbow angle outside neutral range",
    "Very bent or very straight elbows load the forearm and shoulder muscles.",
    "Adjust desk or keyboard height so elbows rest near 90 degrees, close to the body."
)


def _issue(text: Tuple[str, str, str, str], severity: Severity, measured: str) -> PostureIssue:
    issue_id, title, why, fix = text
    return PostureIssue(id=issue_id, title=title, severity=severity,
                        measured=measured, why_it_matters=why, fix=fix)


def _grade(value: float, mild: float, high: float) -> Optional[Severity]:
    if value >= high:
        return Severity.HIGH
    if value >= mild:
        return Severity.MILD
    return None


# -----------------------------------------------------------------------------
# Scorer
# -----------------------------------------------------------------------------

class PostureScorer:
    """Deterministic rule table: angles -> issues -> score -> risk."""

    def __init__(self, thresholds: Optional[PostureThresholds] = None):
        self.thresholds = thresholds or ERGO_THRESHOLDS['posture']

    def find_issues(self, angles: Dict[str, float]) -> List[PostureIssue]:
        """Evaluate families in fixed order: neck, trunk, shoulder, elbow."""
        t = self.thresholds
        issues: List[PostureIssue] = []

        neck = angles.get(NECK_FLEXION)
        if neck is not None:
            severity = _grade(neck, t.NECK_MILD, t.NECK_HIGH)
            if severity:
                issues.append(_issue(_NECK_TEXT, severity, f"Neck flexion ~ {round_half_up(neck)}°"))

        trunk = angles.get(TRUNK_LEAN)
        if trunk is not None:
            severity = _grade(trunk, t.TRUNK_MILD, t.TRUNK_HIGH)
            if severity:
                issues.append(_issue(_TRUNK_TEXT, severity, f"Trunk lean ~ {round_half_up(trunk)}°"))

        tilt = angles.get(SHOULDER_TILT)
        if tilt is not None:
            severity = _grade(tilt, t.SHOULDER_MILD, t.SHOULDER_HIGH)
            if severity:
                issues.append(_issue(_SHOULDER_TEXT, severity, f"Shoulder tilt ~ {tilt:.1f}°"))

        low, high = t.ELBOW_RANGE
        out_of_range = []
        for key, side in ((LEFT_ELBOW, "Left"), (RIGHT_ELBOW, "Right")):
            value = angles.get(key)
            if value is not None and not (low <= value <= high):
                out_of_range.append(f"{side} elbow ~ {round_half_up(value)}°")
        if out_of_range:
            issues.append(_issue(_ELBOW_TEXT, Severity.MILD, ", ".join(out_of_range)))

        return issues

    def score_issues(self, issues: List[PostureIssue]) -> float:
        t = self.thresholds
        score = 100
        for issue in issues:
            if issue.severity == Severity.HIGH:
                score -= t.HIGH_PENALTY
            elif issue.severity == Severity.MILD:
                score -= t.MILD_PENALTY
        return max(0, min(100, score))

    def risk_for(self, score: float) -> RiskLevel:
        return RiskLevel(get_risk_level(score, self.thresholds))

    def score(self, angles: Dict[str, float]) -> PostureReport:
        issues = self.find_issues(angles)
        score = self.score_issues(issues)
        return PostureReport(
            score=score,
            risk=self.risk_for(score),
            angles=dict(angles),
            issues=issues
        )
