"""
WebSocket Handler

Real-time sprint analysis via WebSocket connection.
The frontend streams camera frames (or already-detected poses) and
receives metrics and coaching hints for each one.
"""

import base64
import binascii
import json
import time
import logging
from typing import Optional
from fastapi import WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from .schemas import (
    FrameMessage,
    PoseFrameSchema,
    SprintAnalysisResponse,
    WebSocketMessage,
    WebSocketMessageType,
)
from .routes import analyzer
from core.config import settings
from core.domain.pose import PoseFrame
from core.services import PoseDetectionError, PoseDetector, create_pose_detector

# Configure logging
logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _first_error(error: ValidationError) -> str:
    detail = error.errors()[0]
    location = ".".join(str(part) for part in detail["loc"])
    return f"{location}: {detail['msg']}" if location else detail["msg"]


class ConnectionManager:
    """
    Manages WebSocket connections.

    Each connection gets its own streaming pose detector, since tracking
    state must not mix frames from different cameras. The last analysed
    frame is kept too, so the next frame can be compared against it for
    hip velocity.
    """

    def __init__(self):
        self.active_connections: list[WebSocket] = []
        self.pose_detectors: dict[WebSocket, Optional[PoseDetector]] = {}
        self.previous_frames: dict[WebSocket, PoseFrame] = {}

    async def connect(self, websocket: WebSocket) -> None:
        """Accept new WebSocket connection."""
        await websocket.accept()
        self.active_connections.append(websocket)

        # Create dedicated pose detector for this connection
        try:
            self.pose_detectors[websocket] = create_pose_detector(
                settings.DETECTOR_BACKEND, streaming=True
            )
        except Exception as e:
            logger.warning(f"Pose detector unavailable for connection: {e}")
            self.pose_detectors[websocket] = None

        logger.info(f"New WebSocket connection. Total: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket) -> None:
        """Handle WebSocket disconnection."""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

        detector = self.pose_detectors.pop(websocket, None)
        if detector is not None:
            detector.close()

        self.previous_frames.pop(websocket, None)
        logger.info(f"WebSocket disconnected. Remaining: {len(self.active_connections)}")

    def get_detector(self, websocket: WebSocket) -> Optional[PoseDetector]:
        return self.pose_detectors.get(websocket)

    def get_previous(self, websocket: WebSocket) -> Optional[PoseFrame]:
        return self.previous_frames.get(websocket)

    def set_previous(self, websocket: WebSocket, frame: PoseFrame) -> None:
        self.previous_frames[websocket] = frame

    def reset(self, websocket: WebSocket) -> None:
        self.previous_frames.pop(websocket, None)

    async def send_json(self, websocket: WebSocket, data: dict) -> None:
        """Send JSON data to a specific connection."""
        try:
            await websocket.send_json(data)
        except Exception as e:
            logger.error(f"Failed to send WebSocket message: {e}")

    async def send_message(
        self,
        websocket: WebSocket,
        msg_type: WebSocketMessageType,
        data: dict,
    ) -> None:
        await self.send_json(websocket, {
            "type": msg_type.value,
            "data": data,
            "timestamp": _now_ms(),
        })

    async def send_error(self, websocket: WebSocket, error: str) -> None:
        await self.send_message(websocket, WebSocketMessageType.ERROR, {"error": error})

    async def close(self, websocket: WebSocket, code: int) -> None:
        """Close a connection the server can no longer serve."""
        try:
            await websocket.close(code=code)
        except Exception as e:
            logger.error(f"Failed to close WebSocket: {e}")


# Global connection manager
manager = ConnectionManager()


async def websocket_endpoint(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for real-time sprint analysis.

    Protocol:
    1. Client connects
    2. Client sends frames (base64 images) or detected poses
    3. Server responds with metrics and recommendations
    4. Client sends end_session or disconnects when done

    Malformed messages get an error reply and the session carries on.
    An unexpected server failure closes the socket with code 1011.

    Message format (client -> server):
    {
        "type": "frame",
        "data": {
            "image_base64": "...",
            "width": 640,
            "height": 480
        },
        "timestamp": 1704067200000
    }

    Message format (server -> client):
    {
        "type": "analysis_result",
        "data": {
            "pose": { ... },
            "analysis": { ... },
            "processing_time_ms": 25.5
        },
        "timestamp": 1704067200025
    }
    """
    await manager.connect(websocket)

    try:
        # Send session started message
        await manager.send_message(websocket, WebSocketMessageType.SESSION_STARTED, {
            "message": "Connected to sprint analysis",
        })

        # Main message loop
        while True:
            try:
                # Receive message from client
                data = await websocket.receive_json()
            except json.JSONDecodeError:
                await manager.send_error(websocket, "Invalid JSON")
                continue

            try:
                message = WebSocketMessage.model_validate(data)
            except ValidationError as e:
                await manager.send_error(websocket, f"Invalid message: {_first_error(e)}")
                continue

            # Process based on message type
            if message.type == WebSocketMessageType.FRAME:
                await handle_frame(websocket, message)

            elif message.type == WebSocketMessageType.POSE:
                await handle_pose(websocket, message)

            elif message.type == WebSocketMessageType.RESET:
                manager.reset(websocket)

            elif message.type == WebSocketMessageType.END_SESSION:
                await manager.send_message(websocket, WebSocketMessageType.SESSION_ENDED, {
                    "message": "Session ended",
                })
                break

            else:
                await manager.send_error(websocket, f"Unknown message type: {message.type.value}")

    except WebSocketDisconnect:
        logger.info("Client disconnected")
    except Exception as e:
        logger.exception(f"WebSocket error: {e}")
        await manager.close(websocket, code=status.WS_1011_INTERNAL_ERROR)
    finally:
        manager.disconnect(websocket)


async def handle_frame(websocket: WebSocket, message: WebSocketMessage) -> None:
    """
    Detect the pose in a camera frame, then analyse it.

    A failed detection leaves the previous frame untouched, so the next
    successful frame is still compared against the last good one.
    """
    start_time = time.time()

    detector = manager.get_detector(websocket)
    if detector is None:
        await manager.send_error(websocket, "Pose detector not available")
        return

    try:
        frame = FrameMessage(**message.data)
        image_bytes = base64.b64decode(frame.image_base64, validate=True)
        pose_frame = await detector.detect_pose(
            image_bytes,
            frame.width,
            frame.height,
            use_accurate_model=frame.use_accurate_model or settings.USE_ACCURATE_MODEL,
            timestamp_ms=message.timestamp,
        )
    except ValidationError as e:
        await manager.send_error(websocket, f"Invalid frame: {_first_error(e)}")
        return
    except (PoseDetectionError, binascii.Error) as e:
        logger.warning(f"Frame detection failed: {e}")
        await manager.send_error(websocket, str(e))
        return

    await _analyze_and_send(websocket, pose_frame, start_time)


async def handle_pose(websocket: WebSocket, message: WebSocketMessage) -> None:
    """Analyse a pose the client already detected."""
    start_time = time.time()

    try:
        pose_frame = PoseFrameSchema(**message.data).to_domain()
    except ValidationError as e:
        await manager.send_error(websocket, f"Invalid pose: {_first_error(e)}")
        return

    await _analyze_and_send(websocket, pose_frame, start_time)


async def _analyze_and_send(
    websocket: WebSocket,
    pose_frame: PoseFrame,
    start_time: float,
) -> None:
    if not pose_frame.is_valid(settings.MIN_POSE_CONFIDENCE):
        await manager.send_error(websocket, "Pose confidence too low")
        return

    previous = manager.get_previous(websocket)
    if previous is not None and pose_frame.timestamp < previous.timestamp:
        await manager.send_error(websocket, "Frame is older than the previous frame")
        return

    result = analyzer.analyze(pose_frame, previous)
    manager.set_previous(websocket, pose_frame)

    await manager.send_message(websocket, WebSocketMessageType.ANALYSIS_RESULT, {
        "pose": PoseFrameSchema.from_domain(pose_frame).model_dump(mode="json"),
        "analysis": SprintAnalysisResponse.from_domain(result).model_dump(mode="json"),
        "processing_time_ms": (time.time() - start_time) * 1000,
    })
