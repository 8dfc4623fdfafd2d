"""
REST API Routes

FastAPI routes for sprint form analysis.
Handles HTTP requests for pose detection and sprint analysis.
"""

import base64
import binascii
import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from .schemas import (
    PoseDetectionRequest,
    PoseDetectionResponse,
    PoseFrameSchema,
    AnalyzeFrameRequest,
    AnalyzeSequenceRequest,
    SprintAnalysisResponse,
    SequenceAnalysisResponse,
    SessionSummarySchema,
    HealthResponse,
)
from core.config import settings
from core.services import PoseDetectionError, PoseDetector, SprintAnalyzer

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# Stateless, shared by every request
analyzer = SprintAnalyzer()


def get_pose_detector(request: Request) -> Optional[PoseDetector]:
    """Pose detector created at startup, None if it failed to load."""
    return getattr(request.app.state, "pose_detector", None)


# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check(
    detector: Optional[PoseDetector] = Depends(get_pose_detector),
) -> HealthResponse:
    """
    Check if the API is running and the pose detector is available.

    Returns:
        Health status and version information
    """
    return HealthResponse(
        status="healthy",
        version=settings.VERSION,
        detector_backend=settings.DETECTOR_BACKEND,
        detector_available=detector is not None,
    )


# =============================================================================
# Pose Detection
# =============================================================================

@router.post(
    "/pose/detect",
    response_model=PoseDetectionResponse,
    tags=["Pose Detection"],
    summary="Detect pose in a single image"
)
async def detect_pose(
    request: PoseDetectionRequest,
    detector: Optional[PoseDetector] = Depends(get_pose_detector),
) -> PoseDetectionResponse:
    """
    Detect human pose in a base64-encoded image.

    For real-time analysis, use the WebSocket endpoint instead.

    Args:
        request: Image data, dimensions and model choice

    Returns:
        Detected pose, or error if detection failed
    """
    start_time = time.time()

    if detector is None:
        raise HTTPException(status_code=503, detail="Pose detector not available")

    try:
        image_bytes = base64.b64decode(request.image_base64, validate=True)
        pose_frame = await detector.detect_pose(
            image_bytes,
            request.width,
            request.height,
            use_accurate_model=request.use_accurate_model,
            timestamp_ms=request.timestamp_ms,
        )
    except (PoseDetectionError, binascii.Error) as e:
        logger.warning(f"Pose detection failed: {e}")
        return PoseDetectionResponse(
            success=False,
            pose=None,
            error=str(e),
            processing_time_ms=(time.time() - start_time) * 1000
        )

    return PoseDetectionResponse(
        success=True,
        pose=PoseFrameSchema.from_domain(pose_frame),
        error=None,
        processing_time_ms=(time.time() - start_time) * 1000
    )


# =============================================================================
# Sprint Analysis
# =============================================================================

@router.post(
    "/analysis/frame",
    response_model=SprintAnalysisResponse,
    tags=["Sprint Analysis"],
    summary="Analyze one pose frame"
)
async def analyze_frame(request: AnalyzeFrameRequest) -> SprintAnalysisResponse:
    """
    Analyze a single pose frame.

    Pass the previous frame as well to get hip velocity; without it
    hip velocity is 0.
    """
    current = request.current.to_domain()
    previous = request.previous.to_domain() if request.previous else None

    result = analyzer.analyze(current, previous)
    return SprintAnalysisResponse.from_domain(result)


@router.post(
    "/analysis/sequence",
    response_model=SequenceAnalysisResponse,
    tags=["Sprint Analysis"],
    summary="Analyze a sequence of pose frames"
)
async def analyze_sequence(request: AnalyzeSequenceRequest) -> SequenceAnalysisResponse:
    """
    Analyze pre-detected frames in capture order and summarize the run.

    Frames below `min_confidence` or out of timestamp order are skipped.
    """
    frames = [frame.to_domain() for frame in request.frames]
    results = analyzer.analyze_sequence(frames, min_confidence=request.min_confidence)

    if not results:
        raise HTTPException(status_code=400, detail="No analysable frames in request")

    return SequenceAnalysisResponse(
        analyses=[SprintAnalysisResponse.from_domain(r) for r in results],
        summary=SessionSummarySchema.from_domain(analyzer.summarize(results)),
    )
