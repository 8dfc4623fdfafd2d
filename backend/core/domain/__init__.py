"""
Domain Models

Pure data structures representing sprint form analysis concepts.
No external dependencies beyond numpy - just dataclasses, enums and math.
"""

from .geometry import Point3D, angle_between, distance, midpoint
from .pose import Keypoint, KeypointType, PoseFrame
from .analysis import (
    ARM_SYMMETRY_UNMEASURABLE,
    AnalysisPriority,
    Metric,
    MetricFeedback,
    SessionSummary,
    SprintAnalysis,
    SprintMetrics,
    feedback_for,
)

__all__ = [
    "Point3D",
    "angle_between",
    "distance",
    "midpoint",
    "Keypoint",
    "KeypointType",
    "PoseFrame",
    "ARM_SYMMETRY_UNMEASURABLE",
    "AnalysisPriority",
    "Metric",
    "MetricFeedback",
    "SessionSummary",
    "SprintAnalysis",
    "SprintMetrics",
    "feedback_for",
]
