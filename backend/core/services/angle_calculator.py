"""
Angle Calculator Service

Joint-level measurements taken from a single pose frame:
knee flex, elbow bend and the hip midpoint.

Missing keypoints are the normal case (occlusion, edge of frame),
so every method returns None instead of raising.
"""

from typing import Optional

from ..domain.geometry import Point3D, angle_between, midpoint
from ..domain.pose import PoseFrame, KeypointType


LEFT = "left"
RIGHT = "right"

_LEG_TYPES = {
    LEFT: (KeypointType.LEFT_HIP, KeypointType.LEFT_KNEE, KeypointType.LEFT_ANKLE),
    RIGHT: (KeypointType.RIGHT_HIP, KeypointType.RIGHT_KNEE, KeypointType.RIGHT_ANKLE),
}

_ARM_TYPES = {
    LEFT: (KeypointType.LEFT_SHOULDER, KeypointType.LEFT_ELBOW, KeypointType.LEFT_WRIST),
    RIGHT: (KeypointType.RIGHT_SHOULDER, KeypointType.RIGHT_ELBOW, KeypointType.RIGHT_WRIST),
}


class AngleCalculator:
    """
    Calculates biomechanical angles from pose keypoints.

    Sprint-relevant measurements:
    - Knee angle (hip-knee-ankle)
    - Elbow angle (shoulder-elbow-wrist)
    - Hip midpoint (for velocity between frames)

    All methods are static - no state needed.
    """

    # -------------------------------------------------------------------------
    # Core Angle Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_joint_angle(
        frame: PoseFrame,
        first: KeypointType,
        vertex: KeypointType,
        third: KeypointType,
    ) -> Optional[float]:
        """
        Calculate angle at `vertex` formed by first-vertex-third.

        Returns:
            Angle in degrees (0-180), or None if any of the three
            keypoints is missing from the frame
        """
        p1 = frame.get_position(first)
        p2 = frame.get_position(vertex)
        p3 = frame.get_position(third)

        if p1 is None or p2 is None or p3 is None:
            return None

        return angle_between(p1, p2, p3)

    # -------------------------------------------------------------------------
    # Sprint-Specific Angle Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_knee_angle(
        frame: PoseFrame,
        side: str = LEFT
    ) -> Optional[float]:
        """
        Calculate knee flex angle.

        Args:
            frame: Pose frame with keypoints
            side: "left" or "right"

        Returns:
            Knee angle in degrees (180 = straight leg), None if the leg
            isn't fully visible
        """
        return AngleCalculator.calculate_joint_angle(frame, *_LEG_TYPES[side])

    @staticmethod
    def calculate_elbow_angle(
        frame: PoseFrame,
        side: str = LEFT
    ) -> Optional[float]:
        """
        Calculate elbow bend angle.

        Args:
            frame: Pose frame with keypoints
            side: "left" or "right"

        Returns:
            Elbow angle in degrees (180 = straight arm, 90 = right angle),
            None if the arm isn't fully visible
        """
        return AngleCalculator.calculate_joint_angle(frame, *_ARM_TYPES[side])

    @staticmethod
    def calculate_hip_midpoint(frame: PoseFrame) -> Optional[Point3D]:
        """
        Midpoint between left and right hip.

        Falls back to whichever single hip was detected.
        """
        left_hip = frame.get_position(KeypointType.LEFT_HIP)
        right_hip = frame.get_position(KeypointType.RIGHT_HIP)

        if left_hip is not None and right_hip is not None:
            return midpoint(left_hip, right_hip)
        if left_hip is not None:
            return left_hip
        return right_hip
