from __future__ import annotations

import pytest

from conftest import BASE_TIMESTAMP, kp, make_frame, sprint_keypoints
from core.domain.analysis import ARM_SYMMETRY_UNMEASURABLE, overall_score
from core.domain.pose import KeypointType, PoseFrame
from core.services.biomechanics_engine import BiomechanicsEngine


@pytest.fixture
def engine() -> BiomechanicsEngine:
    return BiomechanicsEngine()


def _without(frame_keypoints, *types: KeypointType):
    return [k for k in frame_keypoints if k.type not in types]


def test_analyze_without_previous_frame(engine: BiomechanicsEngine, standing_frame: PoseFrame) -> None:
    metrics = engine.analyze(standing_frame)

    assert metrics.knee_angle == pytest.approx(180.0)
    assert metrics.hip_velocity == 0.0
    assert metrics.arm_symmetry == pytest.approx(0.0, abs=1e-6)
    assert 0.0 <= metrics.overall_score <= 100.0


def test_timestamp_comes_from_current_frame(engine: BiomechanicsEngine) -> None:
    previous = make_frame(sprint_keypoints(), timestamp=1000)
    current = make_frame(sprint_keypoints(), timestamp=1500)

    assert engine.analyze(current, previous).timestamp == 1500


def test_knee_angle_averages_both_legs(engine: BiomechanicsEngine) -> None:
    keypoints = sprint_keypoints(knee_angle=120.0)
    # Straighten only the right leg: ankle directly below the knee
    keypoints = _without(keypoints, KeypointType.RIGHT_ANKLE) + [
        kp(KeypointType.RIGHT_ANKLE, 115.0, 400.0),
    ]

    metrics = engine.analyze(make_frame(keypoints))
    assert metrics.knee_angle == pytest.approx((120.0 + 180.0) / 2)


def test_knee_angle_uses_single_visible_leg(engine: BiomechanicsEngine) -> None:
    keypoints = _without(sprint_keypoints(knee_angle=125.0), KeypointType.LEFT_ANKLE)

    assert engine.analyze(make_frame(keypoints)).knee_angle == pytest.approx(125.0)


def test_knee_angle_zero_without_legs(engine: BiomechanicsEngine, head_and_shoulders_frame: PoseFrame) -> None:
    assert engine.analyze(head_and_shoulders_frame).knee_angle == 0.0


def test_hip_velocity_from_moved_hips(engine: BiomechanicsEngine) -> None:
    previous = make_frame(sprint_keypoints(), timestamp=BASE_TIMESTAMP)
    current = make_frame(sprint_keypoints(hip_shift=10.0), timestamp=BASE_TIMESTAMP + 100)

    metrics = engine.analyze(current, previous)
    assert metrics.hip_velocity == pytest.approx(100.0)


def test_hip_velocity_with_literal_coordinates(engine: BiomechanicsEngine) -> None:
    previous = make_frame([
        kp(KeypointType.LEFT_HIP, 85, 200),
        kp(KeypointType.RIGHT_HIP, 115, 200),
    ], timestamp=123456789)
    current = make_frame([
        kp(KeypointType.LEFT_HIP, 95, 200),
        kp(KeypointType.RIGHT_HIP, 125, 200),
    ], timestamp=123456889)

    assert engine.analyze(current, previous).hip_velocity == pytest.approx(100.0)


def test_hip_velocity_falls_back_to_single_hip(engine: BiomechanicsEngine) -> None:
    previous = make_frame([kp(KeypointType.RIGHT_HIP, 0, 0)], timestamp=0)
    current = make_frame([kp(KeypointType.RIGHT_HIP, 3, 4)], timestamp=500)

    assert engine.analyze(current, previous).hip_velocity == pytest.approx(10.0)


def test_hip_velocity_zero_when_hips_missing(engine: BiomechanicsEngine, head_and_shoulders_frame: PoseFrame) -> None:
    current = make_frame(sprint_keypoints(), timestamp=BASE_TIMESTAMP + 100)

    assert engine.analyze(current, head_and_shoulders_frame).hip_velocity == 0.0


def test_hip_velocity_zero_for_identical_midpoints(engine: BiomechanicsEngine) -> None:
    previous = make_frame(sprint_keypoints(), timestamp=0)
    for delta in (1, 100, 10_000):
        current = make_frame(sprint_keypoints(), timestamp=delta)
        assert engine.analyze(current, previous).hip_velocity == 0.0


@pytest.mark.parametrize("delta", [0, -100])
def test_hip_velocity_zero_for_non_positive_time_delta(engine: BiomechanicsEngine, delta: int) -> None:
    previous = make_frame(sprint_keypoints(), timestamp=BASE_TIMESTAMP)
    current = make_frame(sprint_keypoints(hip_shift=10.0), timestamp=BASE_TIMESTAMP + delta)

    assert engine.analyze(current, previous).hip_velocity == 0.0


def test_symmetric_arms(engine: BiomechanicsEngine) -> None:
    metrics = engine.analyze(make_frame(sprint_keypoints(left_elbow=90.0, right_elbow=90.0)))

    assert metrics.arm_symmetry == pytest.approx(0.0, abs=1e-6)
    assert metrics.arm_symmetry_measured


def test_asymmetric_arms(engine: BiomechanicsEngine) -> None:
    metrics = engine.analyze(make_frame(sprint_keypoints(left_elbow=80.0, right_elbow=110.0)))

    assert metrics.arm_symmetry == pytest.approx(30.0)


@pytest.mark.parametrize(
    "missing",
    [KeypointType.LEFT_WRIST, KeypointType.RIGHT_ELBOW, KeypointType.RIGHT_SHOULDER],
)
def test_missing_arm_keypoint_gives_sentinel(engine: BiomechanicsEngine, missing: KeypointType) -> None:
    keypoints = _without(sprint_keypoints(), missing)

    assert engine.analyze(make_frame(keypoints)).arm_symmetry == ARM_SYMMETRY_UNMEASURABLE


def test_good_form_scores_full_marks(engine: BiomechanicsEngine) -> None:
    previous = make_frame(sprint_keypoints(), timestamp=0)
    current = make_frame(sprint_keypoints(hip_shift=0.5), timestamp=100)

    metrics = engine.analyze(current, previous)

    assert metrics.knee_angle == pytest.approx(120.0)
    assert metrics.hip_velocity == pytest.approx(5.0)
    assert metrics.overall_score == pytest.approx(100.0)


def test_head_and_shoulders_only(engine: BiomechanicsEngine, head_and_shoulders_frame: PoseFrame) -> None:
    metrics = engine.analyze(head_and_shoulders_frame)

    assert metrics.knee_angle == 0.0
    assert metrics.arm_symmetry == ARM_SYMMETRY_UNMEASURABLE
    assert metrics.hip_velocity == 0.0
    assert metrics.overall_score == 0.0


def test_overall_score_matches_components(engine: BiomechanicsEngine) -> None:
    previous = make_frame(sprint_keypoints(knee_angle=112.0), timestamp=0)
    current = make_frame(sprint_keypoints(knee_angle=112.0, left_elbow=85.0, hip_shift=0.25), timestamp=100)

    first = engine.analyze(current, previous)
    second = engine.analyze(current, previous)

    assert first == second
    assert first.overall_score == overall_score(first.knee_angle, first.hip_velocity, first.arm_symmetry)


def test_engine_keeps_no_state_between_calls(engine: BiomechanicsEngine) -> None:
    previous = make_frame(sprint_keypoints(), timestamp=0)
    current = make_frame(sprint_keypoints(hip_shift=10.0), timestamp=100)

    engine.analyze(current, previous)
    assert engine.analyze(current).hip_velocity == 0.0
