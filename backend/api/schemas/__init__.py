"""
API Schemas

Pydantic models for request/response validation.
"""

from .pose import (
    KeypointSchema,
    PoseFrameSchema,
    PoseDetectionRequest,
    PoseDetectionResponse,
    WebSocketMessageType,
    WebSocketMessage,
    FrameMessage,
)

from .analysis import (
    SprintMetricsSchema,
    SprintAnalysisResponse,
    SessionSummarySchema,
    SequenceAnalysisResponse,
    AnalyzeFrameRequest,
    AnalyzeSequenceRequest,
    HealthResponse,
)

__all__ = [
    # Pose schemas
    "KeypointSchema",
    "PoseFrameSchema",
    "PoseDetectionRequest",
    "PoseDetectionResponse",
    "WebSocketMessageType",
    "WebSocketMessage",
    "FrameMessage",
    # Analysis schemas
    "SprintMetricsSchema",
    "SprintAnalysisResponse",
    "SessionSummarySchema",
    "SequenceAnalysisResponse",
    "AnalyzeFrameRequest",
    "AnalyzeSequenceRequest",
    "HealthResponse",
]
