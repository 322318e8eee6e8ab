"""Core analysis algorithms."""
from .geometry import GeometryEngine, GeometryResult, angle_at_vertex, compute_geometry
from .posture_scorer import PostureIssue, PostureReport, PostureScorer, RiskLevel, Severity
from .lever_biomechanics import LeverBiomechanicsEngine, LeverMetrics
from .action_classifier import (
    ActionLabel, ActionResult, ActionStabilizer, ClapDetector, StabilizerState,
    StaticActionClassifier, TemporalActionClassifier, advance_stabilizer,
)
from .force_estimator import ForceEstimate, ForceEstimator
from .report_assembler import FrameReport, assemble_report, explain_load
from .analysis_session import AnalysisMode, AnalysisSession
