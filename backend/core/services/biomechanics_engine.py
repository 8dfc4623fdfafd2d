"""
Biomechanics Engine

Turns one pose frame (and optionally the frame before it) into
sprint form metrics: knee angle, hip velocity, arm symmetry and an
overall 0-100 score.

The engine is stateless. Callers keep the previous frame themselves,
so the same instance can be shared across sessions and threads.
"""

import logging
from typing import Optional

from ..domain.analysis import (
    ARM_SYMMETRY_UNMEASURABLE,
    SprintMetrics,
    overall_score,
)
from ..domain.geometry import distance
from ..domain.pose import PoseFrame
from .angle_calculator import AngleCalculator, LEFT, RIGHT

logger = logging.getLogger(__name__)


class BiomechanicsEngine:
    """
    Computes sprint metrics from pose frames.

    Partial keypoint data never raises; each metric has a fallback:
    - knee angle: 0.0 when neither leg is fully visible
    - hip velocity: 0.0 without a previous frame, hips, or a positive time delta
    - arm symmetry: ARM_SYMMETRY_UNMEASURABLE when either arm is missing

    Usage:
        engine = BiomechanicsEngine()

        previous = None
        for frame in frames:
            metrics = engine.analyze(frame, previous)
            previous = frame
    """

    def __init__(self, angle_calculator: Optional[AngleCalculator] = None):
        self.angle_calculator = angle_calculator or AngleCalculator()

    def analyze(
        self,
        current: PoseFrame,
        previous: Optional[PoseFrame] = None,
    ) -> SprintMetrics:
        """
        Analyze a sprint pose and calculate metrics.

        Args:
            current: Frame to analyze
            previous: Frame captured before `current`, used for hip velocity

        Returns:
            SprintMetrics stamped with the current frame's capture time
        """
        knee_angle = self.calculate_knee_angle(current)
        hip_velocity = self.calculate_hip_velocity(current, previous)
        arm_symmetry = self.calculate_arm_symmetry(current)

        return SprintMetrics(
            knee_angle=knee_angle,
            hip_velocity=hip_velocity,
            arm_symmetry=arm_symmetry,
            overall_score=overall_score(knee_angle, hip_velocity, arm_symmetry),
            timestamp=current.timestamp,
        )

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def calculate_knee_angle(self, frame: PoseFrame) -> float:
        """Average hip-knee-ankle angle over the legs that are fully visible."""
        left = self.angle_calculator.calculate_knee_angle(frame, LEFT)
        right = self.angle_calculator.calculate_knee_angle(frame, RIGHT)

        if left is not None and right is not None:
            return (left + right) / 2.0
        if left is not None:
            return left
        if right is not None:
            return right

        logger.debug("No leg fully visible at %d, knee angle set to 0", frame.timestamp)
        return 0.0

    def calculate_hip_velocity(
        self,
        current: PoseFrame,
        previous: Optional[PoseFrame],
    ) -> float:
        """
        Speed of the hip midpoint between two frames.

        Returns:
            Distance units per second, never negative or infinite
        """
        if previous is None:
            return 0.0

        current_hip = self.angle_calculator.calculate_hip_midpoint(current)
        previous_hip = self.angle_calculator.calculate_hip_midpoint(previous)

        if current_hip is None or previous_hip is None:
            logger.debug("Hips missing, hip velocity set to 0")
            return 0.0

        time_delta = (current.timestamp - previous.timestamp) / 1000.0
        if time_delta <= 0:
            logger.debug(
                "Non-positive time delta (%d -> %d), hip velocity set to 0",
                previous.timestamp, current.timestamp,
            )
            return 0.0

        return distance(current_hip, previous_hip) / time_delta

    def calculate_arm_symmetry(self, frame: PoseFrame) -> float:
        """Absolute difference between left and right elbow angles."""
        left = self.angle_calculator.calculate_elbow_angle(frame, LEFT)
        right = self.angle_calculator.calculate_elbow_angle(frame, RIGHT)

        if left is None or right is None:
            logger.debug("Arm not fully visible at %d, symmetry unmeasurable", frame.timestamp)
            return ARM_SYMMETRY_UNMEASURABLE

        return abs(left - right)
