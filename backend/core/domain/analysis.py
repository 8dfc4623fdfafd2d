"""
Sprint Analysis Domain Models

Data structures for sprint form metrics, their threshold-based
feedback levels, and the analysis result handed to the presentation layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# =============================================================================
# Thresholds
# =============================================================================

# Knee angle (degrees)
KNEE_ANGLE_MIN = 110.0
KNEE_ANGLE_MAX = 130.0
KNEE_ANGLE_OPTIMAL = 120.0
KNEE_ANGLE_OPTIMAL_LOW = 118.0
KNEE_ANGLE_OPTIMAL_HIGH = 122.0

# Hip velocity (distance units per second)
HIP_VELOCITY_MIN = 2.0
HIP_VELOCITY_TARGET = 3.5

# Arm symmetry (degrees of deviation between left and right elbow angles)
ARM_SYMMETRY_EXCELLENT = 5.0
ARM_SYMMETRY_GOOD = 10.0
ARM_SYMMETRY_ACCEPTABLE = 15.0

# Reported as arm symmetry when either arm can't be measured.
# Finite so it stays safe in arithmetic, far above every threshold
# so it always classifies as TOO_HIGH and scores 0.
ARM_SYMMETRY_UNMEASURABLE = 1.0e9

# Overall score weights
KNEE_WEIGHT = 0.4
VELOCITY_WEIGHT = 0.4
SYMMETRY_WEIGHT = 0.2


class Metric(Enum):
    """The three sprint form metrics."""
    KNEE_ANGLE = "knee_angle"
    HIP_VELOCITY = "hip_velocity"
    ARM_SYMMETRY = "arm_symmetry"


class MetricFeedback(Enum):
    """Feedback level for a single metric value."""
    OPTIMAL = "optimal"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"


class AnalysisPriority(Enum):
    """How urgently the athlete should act on the recommendations."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# =============================================================================
# Classification
# =============================================================================

def knee_angle_feedback(angle: float) -> MetricFeedback:
    if angle < KNEE_ANGLE_MIN:
        return MetricFeedback.TOO_LOW
    if angle > KNEE_ANGLE_MAX:
        return MetricFeedback.TOO_HIGH
    if KNEE_ANGLE_OPTIMAL_LOW <= angle <= KNEE_ANGLE_OPTIMAL_HIGH:
        return MetricFeedback.OPTIMAL
    return MetricFeedback.GOOD


def hip_velocity_feedback(velocity: float) -> MetricFeedback:
    if velocity < HIP_VELOCITY_MIN:
        return MetricFeedback.TOO_LOW
    if velocity >= HIP_VELOCITY_TARGET:
        return MetricFeedback.OPTIMAL
    return MetricFeedback.GOOD


def arm_symmetry_feedback(asymmetry: float) -> MetricFeedback:
    if asymmetry <= ARM_SYMMETRY_EXCELLENT:
        return MetricFeedback.OPTIMAL
    if asymmetry <= ARM_SYMMETRY_GOOD:
        return MetricFeedback.GOOD
    if asymmetry <= ARM_SYMMETRY_ACCEPTABLE:
        return MetricFeedback.ACCEPTABLE
    return MetricFeedback.TOO_HIGH


_CLASSIFIERS = {
    Metric.KNEE_ANGLE: knee_angle_feedback,
    Metric.HIP_VELOCITY: hip_velocity_feedback,
    Metric.ARM_SYMMETRY: arm_symmetry_feedback,
}


def feedback_for(metric: Metric, value: float) -> MetricFeedback:
    """
    Classify a metric value against its fixed thresholds.

    Args:
        metric: Which metric the value belongs to
        value: Measured value (degrees or distance units/second)

    Returns:
        Feedback level for the value
    """
    return _CLASSIFIERS[metric](value)


# =============================================================================
# Sub-scores (0-100) used for the overall score
# =============================================================================

def knee_angle_score(angle: float) -> float:
    if KNEE_ANGLE_OPTIMAL_LOW <= angle <= KNEE_ANGLE_OPTIMAL_HIGH:
        return 100.0
    if KNEE_ANGLE_MIN <= angle <= KNEE_ANGLE_MAX:
        return 80.0
    # Lose 2 points per degree away from optimal
    return max(0.0, 100.0 - abs(angle - KNEE_ANGLE_OPTIMAL) * 2)


def hip_velocity_score(velocity: float) -> float:
    if velocity >= HIP_VELOCITY_TARGET:
        return 100.0
    if velocity >= HIP_VELOCITY_MIN:
        return velocity / HIP_VELOCITY_TARGET * 100.0
    return 0.0


def arm_symmetry_score(asymmetry: float) -> float:
    if asymmetry <= ARM_SYMMETRY_EXCELLENT:
        return 100.0
    if asymmetry <= ARM_SYMMETRY_GOOD:
        return 80.0
    if asymmetry <= ARM_SYMMETRY_ACCEPTABLE:
        return 60.0
    return max(0.0, 60.0 - (asymmetry - ARM_SYMMETRY_ACCEPTABLE) * 2)


def overall_score(knee_angle: float, hip_velocity: float, arm_symmetry: float) -> float:
    """
    Weighted sum of the three sub-scores.

    Not re-clamped: each sub-score is already within 0-100.
    """
    return (
        knee_angle_score(knee_angle) * KNEE_WEIGHT +
        hip_velocity_score(hip_velocity) * VELOCITY_WEIGHT +
        arm_symmetry_score(arm_symmetry) * SYMMETRY_WEIGHT
    )


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class SprintMetrics:
    """
    Sprint form metrics for one frame (or frame pair).

    Attributes:
        knee_angle: Hip-knee-ankle angle in degrees, 0.0 if no leg was resolvable
        hip_velocity: Hip midpoint speed in distance units per second
        arm_symmetry: Absolute difference between elbow angles in degrees,
                      ARM_SYMMETRY_UNMEASURABLE if either arm was missing
        overall_score: Weighted 0-100 score
        timestamp: Capture time of the frame the metrics describe (ms)
    """
    knee_angle: float
    hip_velocity: float
    arm_symmetry: float
    overall_score: float
    timestamp: int

    @property
    def knee_angle_feedback(self) -> MetricFeedback:
        return knee_angle_feedback(self.knee_angle)

    @property
    def hip_velocity_feedback(self) -> MetricFeedback:
        return hip_velocity_feedback(self.hip_velocity)

    @property
    def arm_symmetry_feedback(self) -> MetricFeedback:
        return arm_symmetry_feedback(self.arm_symmetry)

    @property
    def knee_angle_measured(self) -> bool:
        """False when no leg was visible and knee angle fell back to 0."""
        return self.knee_angle > 0.0

    @property
    def arm_symmetry_measured(self) -> bool:
        """False when arm symmetry holds the unmeasurable sentinel."""
        return self.arm_symmetry < ARM_SYMMETRY_UNMEASURABLE

    @property
    def feedback(self) -> dict[Metric, MetricFeedback]:
        """Feedback level for every metric."""
        return {
            Metric.KNEE_ANGLE: self.knee_angle_feedback,
            Metric.HIP_VELOCITY: self.hip_velocity_feedback,
            Metric.ARM_SYMMETRY: self.arm_symmetry_feedback,
        }


@dataclass(frozen=True)
class SprintAnalysis:
    """
    Metrics for one frame plus the advice derived from them.

    This is the main result object handed to the presentation layer.
    """
    metrics: SprintMetrics
    recommendations: tuple[str, ...] = ()
    priority: AnalysisPriority = AnalysisPriority.LOW


@dataclass
class SessionSummary:
    """Aggregate view over a run of analysed frames."""
    frame_count: int
    average_score: float
    best_score: float
    average_knee_angle: Optional[float]
    peak_hip_velocity: float
    average_arm_symmetry: Optional[float] = None
    priorities: dict[AnalysisPriority, int] = field(default_factory=dict)
