"""
Report Assembler Module
Merges posture, lever, force and action results into the per-frame report
handed to presentation/export consumers. No computation beyond composition.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any

from .action_classifier import ActionLabel, ActionResult
from .force_estimator import ForceEstimate
from .lever_biomechanics import LeverMetrics
from .posture_scorer import PostureReport, RiskLevel

_LOAD_EXPLANATIONS = {
    ActionLabel.CLAPPING: "Rapid hand movement without external resistance; minimal joint load.",
    ActionLabel.BENDING: "Forward trunk flexion increases the lever arm acting on the lower back.",
    ActionLabel.OVERHEAD_REACH: "Arms above shoulder height increase shoulder joint moment.",
    ActionLabel.REACHING: "Extended arms create longer leverage, increasing joint strain.",
    ActionLabel.HOLDING_STATIC: "Posture remains mostly neutral with minimal leverage.",
}


def explain_load(action: Optional[ActionResult], lever: Optional[LeverMetrics]) -> str:
    """Plain-language note on joint load for the classified action."""
    if action is None or lever is None or action.label == ActionLabel.NO_PERSON:
        return "Insufficient data"
    return _LOAD_EXPLANATIONS.get(action.label, "Load determined by posture and joint leverage.")


@dataclass
class FrameReport:
    """One frame's full analysis. Field order of to_dict() is fixed."""
    posture: PostureReport
    lever: Optional[LeverMetrics] = None
    force: Optional[ForceEstimate] = None
    action: Optional[ActionResult] = None
    load_explanation: Optional[str] = None

    @property
    def score(self) -> float:
        return self.posture.score

    @property
    def risk(self) -> RiskLevel:
        return self.posture.risk

    def to_dict(self) -> Dict[str, Any]:
        out = self.posture.to_dict()
        if self.lever is not None:
            lever = self.lever.to_dict()
            if self.force is not None:
                lever['force'] = self.force.to_dict()
            if self.action is not None:
                lever['action'] = self.action.to_dict()
            out['lever'] = lever
        if self.action is not None:
            out['action'] = self.action.to_dict()
        if self.load_explanation is not None:
            out['loadExplanation'] = self.load_explanation
        return out


def assemble_report(posture: Optional[PostureReport],
                    lever: Optional[LeverMetrics] = None,
                    force: Optional[ForceEstimate] = None,
                    action: Optional[ActionResult] = None) -> Optional[FrameReport]:
    """None when there is no posture report (no usable pose)."""
    if posture is None:
        return None
    return FrameReport(
        posture=posture,
        lever=lever,
        force=force,
        action=action,
        load_explanation=explain_load(action, lever) if action is not None else None
    )
