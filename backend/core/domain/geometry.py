"""
Geometry Primitives

3D point math used by the biomechanics engine.
Coordinates are in whatever units the pose detector reports
(pixels for most mobile detectors, normalized units for MediaPipe).
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Point3D:
    """
    A point in 3D space.

    Attributes:
        x: Horizontal position
        y: Vertical position (grows downward in image coordinates)
        z: Depth, 0.0 when the detector only reports 2D positions
    """
    x: float
    y: float
    z: float = 0.0

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


def angle_between(p1: Point3D, vertex: Point3D, p3: Point3D) -> float:
    """
    Calculate angle at vertex formed by p1-vertex-p3.

    Uses the dot product of the vectors vertex->p1 and vertex->p3.

    Args:
        p1: First point
        vertex: Vertex point (where angle is measured)
        p3: Third point

    Returns:
        Angle in degrees (0-180). 0.0 when either vector has zero length.

    Example:
        For knee angle: hip -> knee -> ankle
        angle = angle_between(hip, knee, ankle)
    """
    v1 = p1.as_array() - vertex.as_array()
    v2 = p3.as_array() - vertex.as_array()

    magnitude1 = np.linalg.norm(v1)
    magnitude2 = np.linalg.norm(v2)
    if magnitude1 == 0.0 or magnitude2 == 0.0:
        return 0.0

    cos_angle = np.dot(v1, v2) / (magnitude1 * magnitude2)

    # Clamp to valid range (handles floating point errors)
    cos_angle = np.clip(cos_angle, -1.0, 1.0)

    return float(np.degrees(np.arccos(cos_angle)))


def distance(p1: Point3D, p2: Point3D) -> float:
    """Euclidean distance between two points."""
    return math.sqrt(
        (p1.x - p2.x) ** 2 +
        (p1.y - p2.y) ** 2 +
        (p1.z - p2.z) ** 2
    )


def midpoint(p1: Point3D, p2: Point3D) -> Point3D:
    """Point halfway between p1 and p2."""
    return Point3D(
        (p1.x + p2.x) / 2,
        (p1.y + p2.y) / 2,
        (p1.z + p2.z) / 2,
    )
