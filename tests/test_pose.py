from __future__ import annotations

import pytest

from conftest import kp, make_frame
from core.domain.pose import KeypointType, PoseFrame


def _partial_frame() -> PoseFrame:
    return make_frame([
        kp(KeypointType.NOSE, 100, 50, confidence=0.9),
        kp(KeypointType.LEFT_SHOULDER, 80, 80),
        kp(KeypointType.RIGHT_SHOULDER, 120, 80),
        kp(KeypointType.LEFT_ELBOW, 70, 120, confidence=0.7),
        kp(KeypointType.LEFT_WRIST, 60, 160, confidence=0.6),
        kp(KeypointType.LEFT_HIP, 85, 200),
        kp(KeypointType.LEFT_KNEE, 80, 280, confidence=0.7),
        kp(KeypointType.LEFT_ANKLE, 75, 360, confidence=0.6),
    ])


def test_keypoint_type_has_29_members() -> None:
    assert len(KeypointType) == 29


def test_get_keypoint() -> None:
    frame = _partial_frame()

    nose = frame.get_keypoint(KeypointType.NOSE)
    assert nose is not None
    assert nose.type == KeypointType.NOSE
    assert nose.position.x == 100

    assert frame.get_keypoint(KeypointType.RIGHT_WRIST) is None
    assert frame.get_position(KeypointType.RIGHT_WRIST) is None


def test_get_keypoint_returns_first_duplicate() -> None:
    frame = make_frame([
        kp(KeypointType.NOSE, 1, 1),
        kp(KeypointType.NOSE, 2, 2),
    ])

    assert frame.get_position(KeypointType.NOSE).x == 1


def test_is_valid() -> None:
    frame = _partial_frame()
    assert frame.is_valid()
    assert frame.is_valid(0.5)
    assert frame.is_valid(0.8)
    assert not frame.is_valid(0.9)

    assert not make_frame([], confidence=0.3).is_valid()
    assert not make_frame([], confidence=1.0).is_valid()


def test_limb_accessors_keep_order_and_skip_missing() -> None:
    frame = _partial_frame()

    assert [k.type for k in frame.left_arm] == [
        KeypointType.LEFT_SHOULDER,
        KeypointType.LEFT_ELBOW,
        KeypointType.LEFT_WRIST,
    ]
    assert [k.type for k in frame.left_leg] == [
        KeypointType.LEFT_HIP,
        KeypointType.LEFT_KNEE,
        KeypointType.LEFT_ANKLE,
    ]
    # Only RIGHT_SHOULDER exists on the right side
    assert [k.type for k in frame.right_arm] == [KeypointType.RIGHT_SHOULDER]
    assert frame.right_leg == []


def test_limb_accessor_preserves_frame_order() -> None:
    frame = make_frame([
        kp(KeypointType.LEFT_WRIST, 0, 0),
        kp(KeypointType.NOSE, 0, 0),
        kp(KeypointType.LEFT_SHOULDER, 0, 0),
    ])

    assert [k.type for k in frame.left_arm] == [KeypointType.LEFT_WRIST, KeypointType.LEFT_SHOULDER]


def test_frame_stores_keypoints_as_tuple() -> None:
    frame = PoseFrame(keypoints=[kp(KeypointType.NOSE, 0, 0)], confidence=0.5, timestamp=1)

    assert isinstance(frame.keypoints, tuple)
    with pytest.raises(AttributeError):
        frame.timestamp = 2  # type: ignore[misc]


def test_visible_keypoints() -> None:
    frame = _partial_frame()
    visible = frame.get_visible_keypoints(0.75)

    assert {k.type for k in visible} == {
        KeypointType.NOSE,
        KeypointType.LEFT_SHOULDER,
        KeypointType.RIGHT_SHOULDER,
        KeypointType.LEFT_HIP,
    }
