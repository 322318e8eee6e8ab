"""
ErgoFit Analytics
Ergonomic risk analysis from pose landmark frames: joint angles, posture
score, lever indices, action classification and force estimation.
"""

from .core.analysis_session import AnalysisMode, AnalysisSession
from .core.action_classifier import ActionLabel, StaticActionClassifier, TemporalActionClassifier
from .core.force_estimator import ForceEstimator
from .core.geometry import GeometryEngine
from .core.lever_biomechanics import LeverBiomechanicsEngine
from .core.posture_scorer import PostureScorer
from .core.report_assembler import FrameReport, assemble_report
from .landmarks.pose_landmarks import LandmarkFrame, LandmarkPoint, PoseIndex, frame_from_pose_result
