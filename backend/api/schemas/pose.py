"""
Pose API Schemas

Pydantic models for pose-related API requests and responses.
These define the JSON structure for communication with frontend.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from core.domain.geometry import Point3D
from core.domain.pose import Keypoint, KeypointType, PoseFrame


class KeypointSchema(BaseModel):
    """
    Single body keypoint.

    Coordinates are in detector units (pixels for the MediaPipe detector).
    """
    x: float = Field(..., allow_inf_nan=False, description="Horizontal position")
    y: float = Field(..., allow_inf_nan=False, description="Vertical position (grows downward)")
    z: float = Field(0.0, allow_inf_nan=False, description="Depth, 0 for 2D detectors")
    confidence: float = Field(..., ge=0.0, le=1.0, allow_inf_nan=False, description="Detection confidence")
    type: KeypointType = Field(..., description="Landmark name (e.g., 'left_knee')")

    class Config:
        json_schema_extra = {
            "example": {
                "x": 80.0,
                "y": 280.0,
                "z": 0.0,
                "confidence": 0.9,
                "type": "left_knee"
            }
        }

    @classmethod
    def from_domain(cls, keypoint: Keypoint) -> "KeypointSchema":
        return cls(
            x=keypoint.position.x,
            y=keypoint.position.y,
            z=keypoint.position.z,
            confidence=keypoint.confidence,
            type=keypoint.type,
        )

    def to_domain(self) -> Keypoint:
        return Keypoint(
            position=Point3D(self.x, self.y, self.z),
            confidence=self.confidence,
            type=self.type,
        )


class PoseFrameSchema(BaseModel):
    """
    Complete pose detection result for one frame.
    """
    keypoints: List[KeypointSchema] = Field(..., description="Detected keypoints")
    confidence: float = Field(..., ge=0.0, le=1.0, allow_inf_nan=False, description="Overall detection confidence")
    timestamp: int = Field(..., ge=0, description="Capture time in milliseconds since epoch")

    class Config:
        json_schema_extra = {
            "example": {
                "keypoints": [
                    {"x": 100.0, "y": 50.0, "z": 0.0, "confidence": 0.9, "type": "nose"}
                ],
                "confidence": 0.8,
                "timestamp": 1704067200000
            }
        }

    @classmethod
    def from_domain(cls, frame: PoseFrame) -> "PoseFrameSchema":
        return cls(
            keypoints=[KeypointSchema.from_domain(kp) for kp in frame.keypoints],
            confidence=frame.confidence,
            timestamp=frame.timestamp,
        )

    def to_domain(self) -> PoseFrame:
        return PoseFrame(
            keypoints=tuple(kp.to_domain() for kp in self.keypoints),
            confidence=self.confidence,
            timestamp=self.timestamp,
        )


class PoseDetectionRequest(BaseModel):
    """
    Request to detect pose in a base64-encoded image.

    The image is either raw RGBA pixels (width * height * 4 bytes)
    or an encoded JPEG/PNG.
    """
    image_base64: str = Field(..., description="Base64 encoded image")
    width: int = Field(..., gt=0, description="Image width in pixels")
    height: int = Field(..., gt=0, description="Image height in pixels")
    use_accurate_model: bool = Field(False, description="Use the slower, more accurate model")
    timestamp_ms: Optional[int] = Field(None, ge=0, description="Capture time, defaults to now")

    class Config:
        json_schema_extra = {
            "example": {
                "image_base64": "/9j/4AAQSkZJRg...",
                "width": 640,
                "height": 480,
                "use_accurate_model": False
            }
        }


class PoseDetectionResponse(BaseModel):
    """
    Response from pose detection.
    """
    success: bool = Field(..., description="Whether detection succeeded")
    pose: Optional[PoseFrameSchema] = Field(None, description="Detected pose (null if failed)")
    error: Optional[str] = Field(None, description="Error message if failed")
    processing_time_ms: float = Field(..., description="Time taken to process in milliseconds")


# =============================================================================
# WebSocket Message Schemas
# =============================================================================

class WebSocketMessageType(str, Enum):
    """Types of WebSocket messages."""
    # Client -> Server
    FRAME = "frame"                    # Send camera frame for detection + analysis
    POSE = "pose"                      # Send already-detected pose for analysis
    RESET = "reset"                    # Forget the previous frame
    END_SESSION = "end_session"        # End analysis session

    # Server -> Client
    ANALYSIS_RESULT = "analysis_result"
    ERROR = "error"
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"


class WebSocketMessage(BaseModel):
    """
    Base WebSocket message structure.

    All WebSocket communication uses this format. For camera frames the
    timestamp is the capture time of the frame.
    """
    type: WebSocketMessageType = Field(..., description="Message type")
    data: dict = Field(default_factory=dict, description="Message payload")
    timestamp: int = Field(..., ge=0, description="Unix timestamp in milliseconds")

    class Config:
        json_schema_extra = {
            "example": {
                "type": "frame",
                "data": {"image_base64": "...", "width": 640, "height": 480},
                "timestamp": 1704067200000
            }
        }


class FrameMessage(BaseModel):
    """
    WebSocket payload containing a camera frame.

    Sent from frontend to backend for real-time analysis.
    """
    image_base64: str = Field(..., description="Base64 encoded frame")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    use_accurate_model: bool = Field(False)
