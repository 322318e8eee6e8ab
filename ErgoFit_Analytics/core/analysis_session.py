"""
Analysis Session Module
Per-session pipeline the host loop calls once per admitted frame:
geometry -> posture -> lever -> action -> force -> report.

A session owns its temporal action classifier and force estimator. Analyze
unrelated streams with separate sessions and call reset() whenever the
camera, video or photo source changes.
"""

import logging
from enum import Enum
from typing import Optional

from ..config.ergo_thresholds import ERGO_THRESHOLDS
from ..landmarks.pose_landmarks import LandmarkFrame
from .action_classifier import StaticActionClassifier, TemporalActionClassifier
from .force_estimator import ForceEstimator
from .geometry import GeometryEngine
from .lever_biomechanics import LeverBiomechanicsEngine
from .posture_scorer import PostureScorer
from .report_assembler import FrameReport, assemble_report

logger = logging.getLogger(__name__)


class AnalysisMode(Enum):
    IMAGE = "image"
    VIDEO = "video"


class AnalysisSession:
    """Stateful frame-by-frame ergonomic analysis for one input source."""

    def __init__(self, mode: AnalysisMode = AnalysisMode.VIDEO, thresholds: Optional[dict] = None):
        th = {**ERGO_THRESHOLDS, **(thresholds or {})}
        self.mode = mode
        self.geometry = GeometryEngine(th['geometry'])
        self.scorer = PostureScorer(th['posture'])
        self.lever_engine = LeverBiomechanicsEngine(th['lever'], self.geometry)
        min_vis = th['geometry'].MIN_VISIBILITY
        self.static_classifier = StaticActionClassifier(th['action'], min_vis)
        self.temporal_classifier = TemporalActionClassifier(th['action'], min_vis)
        self.force_estimator = ForceEstimator(th['force'])
        self._force_thresholds = th['force']
        self._frames_analyzed = 0

    def analyze(self, frame: Optional[LandmarkFrame], timestamp_ms: float) -> Optional[FrameReport]:
        """
        Analyze one frame. Returns None when no usable pose is present; the
        action classifier and force estimator still see the frame so their
        hidden state follows the person leaving the scene. In IMAGE mode every
        frame is treated as an independent photo (see analyze_image).
        """
        self._frames_analyzed += 1
        if self.mode == AnalysisMode.IMAGE:
            return self.analyze_image(frame)

        action = self.temporal_classifier.classify(frame, timestamp_ms)
        geometry = self.geometry.analyze(frame)
        if geometry is None:
            self.force_estimator.estimate(None, 0.0, timestamp_ms)
            return None

        posture = self.scorer.score(geometry.angles)
        lever = self.lever_engine.from_geometry(geometry)
        force = self.force_estimator.estimate(lever.wrist_mid, lever.low_back_moment_index, timestamp_ms)
        return assemble_report(posture, lever, force, action)

    def analyze_image(self, frame: Optional[LandmarkFrame]) -> Optional[FrameReport]:
        """Single photo: static classifier and a fresh force estimator."""
        geometry = self.geometry.analyze(frame)
        action = self.static_classifier.classify(frame)
        if geometry is None:
            return None
        posture = self.scorer.score(geometry.angles)
        lever = self.lever_engine.from_geometry(geometry)
        force = ForceEstimator(self._force_thresholds).estimate(lever.wrist_mid, lever.low_back_moment_index, 0.0)
        return assemble_report(posture, lever, force, action)

    def reset(self):
        """Start a new session: clear classifier and force estimator state."""
        logger.debug("Resetting analysis session after %d frames", self._frames_analyzed)
        self.temporal_classifier.reset()
        self.force_estimator.reset()
        self._frames_analyzed = 0

    @property
    def frames_analyzed(self) -> int:
        return self._frames_analyzed
