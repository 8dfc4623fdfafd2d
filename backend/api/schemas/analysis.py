"""
Analysis API Schemas

Pydantic models for sprint analysis API requests and responses.
"""

from pydantic import BaseModel, Field
from typing import Optional, List

from core.domain.analysis import (
    AnalysisPriority,
    MetricFeedback,
    SessionSummary,
    SprintAnalysis,
    SprintMetrics,
)
from .pose import PoseFrameSchema


class SprintMetricsSchema(BaseModel):
    """
    Sprint form metrics for one frame, with feedback per metric.
    """
    knee_angle: float = Field(..., description="Hip-knee-ankle angle (degrees), 0 if not visible")
    hip_velocity: float = Field(..., ge=0.0, description="Hip midpoint speed (units/second)")
    arm_symmetry: float = Field(..., ge=0.0, description="Elbow angle difference (degrees)")
    arm_symmetry_measured: bool = Field(..., description="False if an arm wasn't fully visible")
    overall_score: float = Field(..., description="Weighted score out of 100")
    timestamp: int = Field(..., description="Capture time of the analysed frame (ms)")

    knee_angle_feedback: MetricFeedback
    hip_velocity_feedback: MetricFeedback
    arm_symmetry_feedback: MetricFeedback

    class Config:
        json_schema_extra = {
            "example": {
                "knee_angle": 121.5,
                "hip_velocity": 3.8,
                "arm_symmetry": 4.2,
                "arm_symmetry_measured": True,
                "overall_score": 100.0,
                "timestamp": 1704067200000,
                "knee_angle_feedback": "optimal",
                "hip_velocity_feedback": "optimal",
                "arm_symmetry_feedback": "optimal"
            }
        }

    @classmethod
    def from_domain(cls, metrics: SprintMetrics) -> "SprintMetricsSchema":
        return cls(
            knee_angle=metrics.knee_angle,
            hip_velocity=metrics.hip_velocity,
            arm_symmetry=metrics.arm_symmetry,
            arm_symmetry_measured=metrics.arm_symmetry_measured,
            overall_score=metrics.overall_score,
            timestamp=metrics.timestamp,
            knee_angle_feedback=metrics.knee_angle_feedback,
            hip_velocity_feedback=metrics.hip_velocity_feedback,
            arm_symmetry_feedback=metrics.arm_symmetry_feedback,
        )


class SprintAnalysisResponse(BaseModel):
    """
    Complete analysis of one frame.

    This is the main response from the analysis endpoints.
    """
    metrics: SprintMetricsSchema
    recommendations: List[str] = Field(default_factory=list, description="Coaching hints")
    priority: AnalysisPriority = Field(..., description="How urgently to act on the hints")

    @classmethod
    def from_domain(cls, analysis: SprintAnalysis) -> "SprintAnalysisResponse":
        return cls(
            metrics=SprintMetricsSchema.from_domain(analysis.metrics),
            recommendations=list(analysis.recommendations),
            priority=analysis.priority,
        )


class SessionSummarySchema(BaseModel):
    """
    Aggregates over an analysed sequence.
    """
    frame_count: int
    average_score: float
    best_score: float
    average_knee_angle: Optional[float] = Field(None, description="Null if no leg was ever visible")
    peak_hip_velocity: float
    average_arm_symmetry: Optional[float] = Field(None, description="Null if arms were never measured")
    priorities: dict[AnalysisPriority, int] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, summary: SessionSummary) -> "SessionSummarySchema":
        return cls(
            frame_count=summary.frame_count,
            average_score=summary.average_score,
            best_score=summary.best_score,
            average_knee_angle=summary.average_knee_angle,
            peak_hip_velocity=summary.peak_hip_velocity,
            average_arm_symmetry=summary.average_arm_symmetry,
            priorities=summary.priorities,
        )


class SequenceAnalysisResponse(BaseModel):
    """
    Per-frame analyses for a recording plus its summary.
    """
    analyses: List[SprintAnalysisResponse]
    summary: SessionSummarySchema


class AnalyzeFrameRequest(BaseModel):
    """
    Request to analyze a frame, optionally against the frame before it.
    """
    current: PoseFrameSchema = Field(..., description="Frame to analyze")
    previous: Optional[PoseFrameSchema] = Field(None, description="Earlier frame for hip velocity")


class AnalyzeSequenceRequest(BaseModel):
    """
    Request to analyze pre-detected pose frames in capture order.

    Used when the frontend has already done pose detection.
    """
    frames: List[PoseFrameSchema] = Field(..., description="Frames sorted by timestamp")
    min_confidence: Optional[float] = Field(
        None, ge=0.0, le=1.0, allow_inf_nan=False, description="Skip frames below this confidence"
    )


class HealthResponse(BaseModel):
    """
    Health check response.
    """
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    detector_backend: str = Field(..., description="Configured pose detector")
    detector_available: bool = Field(..., description="Whether the pose detector is working")
