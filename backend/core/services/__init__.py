"""
Services Layer

Business logic services for sprint form analysis.
These services orchestrate domain models and external dependencies.
"""

from .angle_calculator import AngleCalculator
from .biomechanics_engine import BiomechanicsEngine
from .recommendations import DefaultRecommendationPolicy, RecommendationPolicy
from .sprint_analyzer import SprintAnalyzer
from .pose_detector import (
    MediaPipePoseDetector,
    PoseDetectionError,
    PoseDetector,
    StaticPoseDetector,
    create_pose_detector,
)

__all__ = [
    "AngleCalculator",
    "BiomechanicsEngine",
    "DefaultRecommendationPolicy",
    "RecommendationPolicy",
    "SprintAnalyzer",
    "MediaPipePoseDetector",
    "PoseDetectionError",
    "PoseDetector",
    "StaticPoseDetector",
    "create_pose_detector",
]
