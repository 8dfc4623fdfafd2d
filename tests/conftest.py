from __future__ import annotations

import math
from typing import Iterable

import pytest

from core.domain.geometry import Point3D
from core.domain.pose import Keypoint, KeypointType, PoseFrame

BASE_TIMESTAMP = 123456789


def kp(keypoint_type: KeypointType, x: float, y: float, z: float = 0.0, confidence: float = 0.8) -> Keypoint:
    return Keypoint(Point3D(x, y, z), confidence, keypoint_type)


def make_frame(
    keypoints: Iterable[Keypoint],
    timestamp: int = BASE_TIMESTAMP,
    confidence: float = 0.8,
) -> PoseFrame:
    return PoseFrame(keypoints=tuple(keypoints), confidence=confidence, timestamp=timestamp)


def joint(
    vertex: tuple[float, float],
    angle_degrees: float,
    length: float = 100.0,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Proximal point straight above `vertex`, distal point `angle_degrees` away from it."""
    vx, vy = vertex
    proximal = (vx, vy - length)
    theta = math.radians(angle_degrees)
    distal = (vx + length * math.sin(theta), vy - length * math.cos(theta))
    return proximal, distal


def sprint_keypoints(
    knee_angle: float = 120.0,
    left_elbow: float = 90.0,
    right_elbow: float = 90.0,
    hip_shift: float = 0.0,
) -> list[Keypoint]:
    """Full-body keypoints with the requested joint angles."""
    left_hip, left_ankle = joint((85.0, 300.0), knee_angle)
    right_hip, right_ankle = joint((115.0, 300.0), knee_angle)
    left_shoulder, left_wrist = joint((70.0, 180.0), left_elbow)
    right_shoulder, right_wrist = joint((130.0, 180.0), right_elbow)

    return [
        kp(KeypointType.NOSE, 100.0, 20.0),
        kp(KeypointType.LEFT_SHOULDER, *left_shoulder),
        kp(KeypointType.RIGHT_SHOULDER, *right_shoulder),
        kp(KeypointType.LEFT_ELBOW, 70.0, 180.0),
        kp(KeypointType.RIGHT_ELBOW, 130.0, 180.0),
        kp(KeypointType.LEFT_WRIST, *left_wrist),
        kp(KeypointType.RIGHT_WRIST, *right_wrist),
        kp(KeypointType.LEFT_HIP, left_hip[0] + hip_shift, left_hip[1]),
        kp(KeypointType.RIGHT_HIP, right_hip[0] + hip_shift, right_hip[1]),
        kp(KeypointType.LEFT_KNEE, 85.0, 300.0),
        kp(KeypointType.RIGHT_KNEE, 115.0, 300.0),
        kp(KeypointType.LEFT_ANKLE, *left_ankle),
        kp(KeypointType.RIGHT_ANKLE, *right_ankle),
    ]


@pytest.fixture
def standing_frame() -> PoseFrame:
    """Straight legs and straight arms, as a static detector would report."""
    return make_frame([
        kp(KeypointType.NOSE, 100, 50, confidence=0.9),
        kp(KeypointType.LEFT_SHOULDER, 80, 80),
        kp(KeypointType.RIGHT_SHOULDER, 120, 80),
        kp(KeypointType.LEFT_ELBOW, 70, 120, confidence=0.7),
        kp(KeypointType.RIGHT_ELBOW, 130, 120, confidence=0.7),
        kp(KeypointType.LEFT_WRIST, 60, 160, confidence=0.6),
        kp(KeypointType.RIGHT_WRIST, 140, 160, confidence=0.6),
        kp(KeypointType.LEFT_HIP, 85, 200),
        kp(KeypointType.RIGHT_HIP, 115, 200),
        kp(KeypointType.LEFT_KNEE, 80, 280, confidence=0.7),
        kp(KeypointType.RIGHT_KNEE, 120, 280, confidence=0.7),
        kp(KeypointType.LEFT_ANKLE, 75, 360, confidence=0.6),
        kp(KeypointType.RIGHT_ANKLE, 125, 360, confidence=0.6),
    ])


@pytest.fixture
def head_and_shoulders_frame() -> PoseFrame:
    return make_frame([
        kp(KeypointType.NOSE, 100, 50),
        kp(KeypointType.LEFT_SHOULDER, 80, 80),
        kp(KeypointType.RIGHT_SHOULDER, 120, 80),
    ])
