"""
Sprint Analyzer Service

High-level service that combines the biomechanics engine with a
recommendation policy to produce complete sprint analyses.

This is the main entry point for analyzing sprint form.
"""

import logging
from collections import Counter
from typing import Iterable, List, Optional

from ..domain.analysis import SessionSummary, SprintAnalysis
from ..domain.pose import PoseFrame
from .biomechanics_engine import BiomechanicsEngine
from .recommendations import DefaultRecommendationPolicy, RecommendationPolicy

logger = logging.getLogger(__name__)


class SprintAnalyzer:
    """
    Analyzes sprint form from pose frames.

    This service:
    1. Computes metrics with BiomechanicsEngine
    2. Classifies each metric against its thresholds
    3. Derives recommendations and priority from the policy

    Usage:
        analyzer = SprintAnalyzer()

        # Single frame pair
        result = analyzer.analyze(current, previous)
        print(f"Overall score: {result.metrics.overall_score:.0f}")

        # Whole recording
        results = analyzer.analyze_sequence(frames)
        summary = analyzer.summarize(results)
    """

    def __init__(
        self,
        engine: Optional[BiomechanicsEngine] = None,
        policy: Optional[RecommendationPolicy] = None,
    ):
        self.engine = engine or BiomechanicsEngine()
        self.policy = policy or DefaultRecommendationPolicy()

    # -------------------------------------------------------------------------
    # Main Analysis Methods
    # -------------------------------------------------------------------------

    def analyze(
        self,
        current: PoseFrame,
        previous: Optional[PoseFrame] = None,
    ) -> SprintAnalysis:
        """
        Analyze one frame, using the previous frame for hip velocity.

        Args:
            current: Frame to analyze
            previous: Last successfully analyzed frame, if any

        Returns:
            SprintAnalysis with metrics, recommendations and priority
        """
        metrics = self.engine.analyze(current, previous)
        recommendations, priority = self.policy.recommend(metrics, metrics.feedback)

        return SprintAnalysis(
            metrics=metrics,
            recommendations=tuple(recommendations),
            priority=priority,
        )

    def analyze_sequence(
        self,
        frames: Iterable[PoseFrame],
        min_confidence: Optional[float] = None,
    ) -> List[SprintAnalysis]:
        """
        Analyze frames in capture order.

        Args:
            frames: Frames sorted by timestamp
            min_confidence: Skip frames whose overall confidence is below this.
                            None analyzes every frame that has keypoints.

        Returns:
            One SprintAnalysis per accepted frame
        """
        threshold = 0.0 if min_confidence is None else min_confidence
        results = []
        previous = None

        for frame in frames:
            if not frame.is_valid(threshold):
                logger.debug("Skipping low-confidence frame at %d", frame.timestamp)
                continue

            if previous is not None and frame.timestamp < previous.timestamp:
                logger.warning(
                    "Skipping out-of-order frame at %d (previous %d)",
                    frame.timestamp, previous.timestamp,
                )
                continue

            results.append(self.analyze(frame, previous))
            previous = frame

        return results

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def summarize(self, analyses: List[SprintAnalysis]) -> SessionSummary:
        """
        Aggregate a run of analyses into session-level numbers.

        Raises:
            ValueError: If there is nothing to summarize
        """
        if not analyses:
            raise ValueError("No analyses to summarize")

        scores = [a.metrics.overall_score for a in analyses]
        knee_angles = [
            a.metrics.knee_angle for a in analyses if a.metrics.knee_angle_measured
        ]
        velocities = [a.metrics.hip_velocity for a in analyses]
        symmetries = [
            a.metrics.arm_symmetry for a in analyses if a.metrics.arm_symmetry_measured
        ]

        return SessionSummary(
            frame_count=len(analyses),
            average_score=sum(scores) / len(scores),
            best_score=max(scores),
            average_knee_angle=sum(knee_angles) / len(knee_angles) if knee_angles else None,
            peak_hip_velocity=max(velocities),
            average_arm_symmetry=sum(symmetries) / len(symmetries) if symmetries else None,
            priorities=dict(Counter(a.priority for a in analyses)),
        )
