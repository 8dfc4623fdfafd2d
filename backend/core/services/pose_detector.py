"""
Pose Detector Service

Capability interface for platform pose detection, plus the
implementations a host can choose from at startup:

- MediaPipePoseDetector: MediaPipe Pose, runs inference in a worker thread
- StaticPoseDetector: fixed standing skeleton, for hosts without a camera model

Note: MediaPipe's type stubs are incomplete, so we use type: ignore comments
for mp.solutions access. This is a known issue with the mediapipe package.
"""

import asyncio
import logging
import threading
import time
from typing import Any, List, Optional, Protocol

import cv2
import numpy as np

from ..domain.geometry import Point3D
from ..domain.pose import Keypoint, KeypointType, PoseFrame

logger = logging.getLogger(__name__)


class PoseDetectionError(Exception):
    """Raised when a frame can't be turned into a pose."""


class PoseDetector(Protocol):
    """
    What the analysis pipeline needs from a pose detector.

    detect_pose is a coroutine so hosts can cancel it mid-flight;
    a cancelled call delivers no result.
    """

    async def detect_pose(
        self,
        image_bytes: bytes,
        width: int,
        height: int,
        use_accurate_model: bool = False,
        timestamp_ms: Optional[int] = None,
    ) -> PoseFrame:
        ...

    def close(self) -> None:
        ...


def _now_ms() -> int:
    return int(time.time() * 1000)


# MediaPipe Pose landmark index -> our keypoint type.
# Inner/outer eye corners (1, 3, 4, 6) have no counterpart and are dropped.
MEDIAPIPE_KEYPOINTS = {
    0: KeypointType.NOSE,
    2: KeypointType.LEFT_EYE,
    5: KeypointType.RIGHT_EYE,
    7: KeypointType.LEFT_EAR,
    8: KeypointType.RIGHT_EAR,
    9: KeypointType.MOUTH_LEFT,
    10: KeypointType.MOUTH_RIGHT,
    11: KeypointType.LEFT_SHOULDER,
    12: KeypointType.RIGHT_SHOULDER,
    13: KeypointType.LEFT_ELBOW,
    14: KeypointType.RIGHT_ELBOW,
    15: KeypointType.LEFT_WRIST,
    16: KeypointType.RIGHT_WRIST,
    17: KeypointType.LEFT_PINKY,
    18: KeypointType.RIGHT_PINKY,
    19: KeypointType.LEFT_INDEX,
    20: KeypointType.RIGHT_INDEX,
    21: KeypointType.LEFT_THUMB,
    22: KeypointType.RIGHT_THUMB,
    23: KeypointType.LEFT_HIP,
    24: KeypointType.RIGHT_HIP,
    25: KeypointType.LEFT_KNEE,
    26: KeypointType.RIGHT_KNEE,
    27: KeypointType.LEFT_ANKLE,
    28: KeypointType.RIGHT_ANKLE,
    29: KeypointType.LEFT_HEEL,
    30: KeypointType.RIGHT_HEEL,
    31: KeypointType.LEFT_FOOT_INDEX,
    32: KeypointType.RIGHT_FOOT_INDEX,
}


class MediaPipePoseDetector:
    """
    Detects human body pose using MediaPipe Pose.

    Two models are created lazily: a fast one (model complexity 0) for
    live streams and an accurate one (model complexity 2) for
    single-shot analysis.

    A streaming detector tracks the person across consecutive frames and
    smooths landmarks, so it must only ever see frames from one video
    stream. A non-streaming detector treats every image as unrelated.

    Usage:
        detector = MediaPipePoseDetector()
        frame = await detector.detect_pose(image_bytes, 640, 480)
        detector.close()

    Or use as context manager:
        with MediaPipePoseDetector() as detector:
            frame = await detector.detect_pose(image_bytes, 640, 480)
    """

    FAST_MODEL_COMPLEXITY = 0
    ACCURATE_MODEL_COMPLEXITY = 2

    # MediaPipe solutions (type stubs are incomplete, so we store as Any)
    _mp_pose: Any

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        streaming: bool = False,
    ):
        """
        Initialize the pose detector.

        Args:
            min_detection_confidence: Minimum confidence for person detection.
            min_tracking_confidence: Minimum confidence for landmark tracking.
            streaming: Track across frames of a single video stream.
        """
        import mediapipe as mp

        # MediaPipe's type stubs don't include solutions, but it exists at runtime
        self._mp_pose = mp.solutions.pose  # type: ignore[attr-defined]
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self.streaming = streaming

        self._models: dict[int, Any] = {}
        # MediaPipe graphs aren't safe to run from two threads at once
        self._lock = threading.Lock()

    def __enter__(self) -> "MediaPipePoseDetector":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any]
    ) -> None:
        """Context manager exit - cleanup resources."""
        self.close()

    def close(self) -> None:
        """Release MediaPipe resources."""
        with self._lock:
            for model in self._models.values():
                model.close()
            self._models.clear()

    # -------------------------------------------------------------------------
    # Core Detection Methods
    # -------------------------------------------------------------------------

    async def detect_pose(
        self,
        image_bytes: bytes,
        width: int,
        height: int,
        use_accurate_model: bool = False,
        timestamp_ms: Optional[int] = None,
    ) -> PoseFrame:
        """
        Detect pose in a single image.

        Args:
            image_bytes: Raw RGBA pixels (width * height * 4 bytes)
                         or an encoded JPEG/PNG image
            width: Image width in pixels
            height: Image height in pixels
            use_accurate_model: Use the slower, more accurate model
            timestamp_ms: Capture time, defaults to now

        Returns:
            PoseFrame with keypoints in pixel coordinates

        Raises:
            PoseDetectionError: If the image can't be decoded or no person is found
        """
        if timestamp_ms is None:
            timestamp_ms = _now_ms()

        # Decoding and inference both block, keep them off the event loop
        return await asyncio.to_thread(
            self._detect, image_bytes, width, height, use_accurate_model, timestamp_ms
        )

    def _detect(
        self,
        image_bytes: bytes,
        width: int,
        height: int,
        use_accurate_model: bool,
        timestamp_ms: int,
    ) -> PoseFrame:
        image_rgb = self._decode_image(image_bytes, width, height)
        height, width = image_rgb.shape[:2]

        try:
            with self._lock:
                model = self._get_model(use_accurate_model)
                results = model.process(image_rgb)
        except Exception as e:
            raise PoseDetectionError(f"MediaPipe failed: {e}") from e

        # Check if pose was detected
        if not results.pose_landmarks:
            raise PoseDetectionError("No person detected in image")

        keypoints = self._convert_landmarks(results.pose_landmarks.landmark, width, height)

        return PoseFrame(
            keypoints=keypoints,
            confidence=min((kp.confidence for kp in keypoints), default=0.0),
            timestamp=timestamp_ms,
        )

    # -------------------------------------------------------------------------
    # Private Helper Methods
    # -------------------------------------------------------------------------

    def _get_model(self, accurate: bool) -> Any:
        complexity = self.ACCURATE_MODEL_COMPLEXITY if accurate else self.FAST_MODEL_COMPLEXITY
        if complexity not in self._models:
            logger.info(f"Loading MediaPipe pose model (complexity {complexity})")
            self._models[complexity] = self._mp_pose.Pose(
                static_image_mode=not self.streaming,
                model_complexity=complexity,
                smooth_landmarks=self.streaming,
                enable_segmentation=False,
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence,
            )
        return self._models[complexity]

    @staticmethod
    def _decode_image(image_bytes: bytes, width: int, height: int) -> np.ndarray:
        """Decode raw RGBA or encoded image bytes to an RGB array."""
        if width <= 0 or height <= 0:
            raise PoseDetectionError(f"Invalid image size {width}x{height}")

        if len(image_bytes) == width * height * 4:
            rgba = np.frombuffer(image_bytes, np.uint8).reshape((height, width, 4))
            return cv2.cvtColor(rgba, cv2.COLOR_RGBA2RGB)

        nparr = np.frombuffer(image_bytes, np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
        if image is None:
            raise PoseDetectionError("Could not decode image bytes")

        # MediaPipe expects RGB, OpenCV decodes to BGR
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    @staticmethod
    def _convert_landmarks(
        mp_landmarks: Any,
        width: int,
        height: int,
    ) -> List[Keypoint]:
        """Convert MediaPipe landmarks to keypoints in pixel units."""
        keypoints = []

        for i, mp_lm in enumerate(mp_landmarks):
            keypoint_type = MEDIAPIPE_KEYPOINTS.get(i)
            if keypoint_type is None:
                continue

            # MediaPipe z uses roughly the same scale as x
            keypoints.append(Keypoint(
                position=Point3D(mp_lm.x * width, mp_lm.y * height, mp_lm.z * width),
                confidence=mp_lm.visibility,
                type=keypoint_type,
            ))

        return keypoints


class StaticPoseDetector:
    """
    Returns the same standing skeleton for every image.

    Useful for hosts with no pose model available and for exercising
    the pipeline end to end without a camera.
    """

    SKELETON = (
        (KeypointType.NOSE, 100.0, 50.0, 0.9),
        (KeypointType.LEFT_SHOULDER, 80.0, 80.0, 0.8),
        (KeypointType.RIGHT_SHOULDER, 120.0, 80.0, 0.8),
        (KeypointType.LEFT_ELBOW, 70.0, 120.0, 0.7),
        (KeypointType.RIGHT_ELBOW, 130.0, 120.0, 0.7),
        (KeypointType.LEFT_WRIST, 60.0, 160.0, 0.6),
        (KeypointType.RIGHT_WRIST, 140.0, 160.0, 0.6),
        (KeypointType.LEFT_HIP, 85.0, 200.0, 0.8),
        (KeypointType.RIGHT_HIP, 115.0, 200.0, 0.8),
        (KeypointType.LEFT_KNEE, 80.0, 280.0, 0.7),
        (KeypointType.RIGHT_KNEE, 120.0, 280.0, 0.7),
        (KeypointType.LEFT_ANKLE, 75.0, 360.0, 0.6),
        (KeypointType.RIGHT_ANKLE, 125.0, 360.0, 0.6),
    )
    CONFIDENCE = 0.8

    async def detect_pose(
        self,
        image_bytes: bytes,
        width: int,
        height: int,
        use_accurate_model: bool = False,
        timestamp_ms: Optional[int] = None,
    ) -> PoseFrame:
        keypoints = [
            Keypoint(Point3D(x, y), confidence, keypoint_type)
            for keypoint_type, x, y, confidence in self.SKELETON
        ]
        return PoseFrame(
            keypoints=keypoints,
            confidence=self.CONFIDENCE,
            timestamp=_now_ms() if timestamp_ms is None else timestamp_ms,
        )

    def close(self) -> None:
        pass


def create_pose_detector(backend: str, streaming: bool = False) -> PoseDetector:
    """
    Build the detector implementation named by `backend`.

    Args:
        backend: "mediapipe" or "static"
        streaming: The detector will see consecutive frames of one stream
    """
    if backend == "mediapipe":
        return MediaPipePoseDetector(streaming=streaming)
    if backend == "static":
        return StaticPoseDetector()
    raise ValueError(f"Unknown pose detector backend: {backend}")
