"""
Pose Domain Models

Data structures for representing body keypoints detected in a single
camera frame. Produced by a PoseDetector, consumed by the BiomechanicsEngine.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .geometry import Point3D


class KeypointType(Enum):
    """
    Anatomical landmarks a pose detector can report.

    Fixed set of 29 points covering face, arms, hands, legs and feet.
    """
    # Face
    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    MOUTH_LEFT = "mouth_left"
    MOUTH_RIGHT = "mouth_right"

    # Upper body
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"

    # Hands
    LEFT_PINKY = "left_pinky"
    RIGHT_PINKY = "right_pinky"
    LEFT_INDEX = "left_index"
    RIGHT_INDEX = "right_index"
    LEFT_THUMB = "left_thumb"
    RIGHT_THUMB = "right_thumb"

    # Lower body
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"

    # Feet
    LEFT_HEEL = "left_heel"
    RIGHT_HEEL = "right_heel"
    LEFT_FOOT_INDEX = "left_foot_index"
    RIGHT_FOOT_INDEX = "right_foot_index"


LEFT_ARM_TYPES = frozenset({
    KeypointType.LEFT_SHOULDER,
    KeypointType.LEFT_ELBOW,
    KeypointType.LEFT_WRIST,
})
RIGHT_ARM_TYPES = frozenset({
    KeypointType.RIGHT_SHOULDER,
    KeypointType.RIGHT_ELBOW,
    KeypointType.RIGHT_WRIST,
})
LEFT_LEG_TYPES = frozenset({
    KeypointType.LEFT_HIP,
    KeypointType.LEFT_KNEE,
    KeypointType.LEFT_ANKLE,
})
RIGHT_LEG_TYPES = frozenset({
    KeypointType.RIGHT_HIP,
    KeypointType.RIGHT_KNEE,
    KeypointType.RIGHT_ANKLE,
})


@dataclass(frozen=True)
class Keypoint:
    """
    A single detected landmark.

    Attributes:
        position: 3D position in detector units
        confidence: Detection likelihood (0.0 to 1.0)
        type: Which landmark this is
    """
    position: Point3D
    confidence: float
    type: KeypointType

    def is_visible(self, threshold: float = 0.5) -> bool:
        """Check if keypoint confidence is above threshold."""
        return self.confidence >= threshold


@dataclass(frozen=True)
class PoseFrame:
    """
    All keypoints detected in one capture instant.

    Attributes:
        keypoints: Detected keypoints. Types should be unique; if not,
                   lookups return the first match.
        confidence: Overall detection confidence
        timestamp: Capture time in milliseconds since epoch
    """
    keypoints: tuple[Keypoint, ...]
    confidence: float
    timestamp: int

    def __post_init__(self) -> None:
        # Accept any iterable but store a tuple so the frame stays immutable
        if not isinstance(self.keypoints, tuple):
            object.__setattr__(self, "keypoints", tuple(self.keypoints))

    def get_keypoint(self, keypoint_type: KeypointType) -> Optional[Keypoint]:
        """Get the first keypoint of the given type, or None if not detected."""
        for keypoint in self.keypoints:
            if keypoint.type == keypoint_type:
                return keypoint
        return None

    def get_position(self, keypoint_type: KeypointType) -> Optional[Point3D]:
        keypoint = self.get_keypoint(keypoint_type)
        return keypoint.position if keypoint is not None else None

    def is_valid(self, threshold: float = 0.5) -> bool:
        """Check if the frame is confident enough and has any keypoints."""
        return self.confidence >= threshold and len(self.keypoints) > 0

    def get_visible_keypoints(self, threshold: float = 0.5) -> list[Keypoint]:
        """Get all keypoints above confidence threshold."""
        return [kp for kp in self.keypoints if kp.is_visible(threshold)]

    # -------------------------------------------------------------------------
    # Convenience methods for common keypoint groups
    # -------------------------------------------------------------------------

    def _select(self, types: Iterable[KeypointType]) -> list[Keypoint]:
        wanted = set(types)
        return [kp for kp in self.keypoints if kp.type in wanted]

    @property
    def left_arm(self) -> list[Keypoint]:
        """Get left arm keypoints (shoulder, elbow, wrist) that were detected."""
        return self._select(LEFT_ARM_TYPES)

    @property
    def right_arm(self) -> list[Keypoint]:
        """Get right arm keypoints (shoulder, elbow, wrist) that were detected."""
        return self._select(RIGHT_ARM_TYPES)

    @property
    def left_leg(self) -> list[Keypoint]:
        """Get left leg keypoints (hip, knee, ankle) that were detected."""
        return self._select(LEFT_LEG_TYPES)

    @property
    def right_leg(self) -> list[Keypoint]:
        """Get right leg keypoints (hip, knee, ankle) that were detected."""
        return self._select(RIGHT_LEG_TYPES)
