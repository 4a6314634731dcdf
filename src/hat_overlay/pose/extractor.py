"""Head pose approximation from a handful of facial landmarks."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .landmarks import FaceRole, Landmark, LandmarkSet, Vec3

# Fraction of the forehead-to-chin span extrapolated above the forehead.
HEAD_TOP_EXTRAPOLATION = 0.3


@dataclass(frozen=True, slots=True)
class HeadRotation:
    """Euler angles in radians, straight from ``atan2`` (no unwrapping)."""

    pitch: float
    yaw: float
    roll: float


@dataclass(frozen=True, slots=True)
class RawPose:
    """Unsmoothed pose derived from a single frame."""

    center: Vec3
    head_top: Vec3
    forehead: Vec3
    face_width: float
    rotation: HeadRotation


def midpoint(a: Landmark, b: Landmark) -> Vec3:
    return Vec3((a.x + b.x) / 2, (a.y + b.y) / 2, (a.z + b.z) / 2)


def distance_3d(a: Landmark, b: Landmark) -> float:
    dx = b.x - a.x
    dy = b.y - a.y
    dz = b.z - a.z
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def calculate_head_rotation(landmarks: LandmarkSet) -> HeadRotation:
    """Estimate pitch, yaw and roll from nose, eye, forehead and chin positions."""
    nose_tip = landmarks[FaceRole.NOSE_TIP]
    forehead = landmarks[FaceRole.FOREHEAD_TOP]
    chin = landmarks[FaceRole.CHIN]
    left_eye = landmarks[FaceRole.LEFT_EYE]
    right_eye = landmarks[FaceRole.RIGHT_EYE]

    # Nose tip swings around the eye line as the head turns; facing the camera is 0.
    eye_center_x = (left_eye.x + right_eye.x) / 2
    eye_center_z = (left_eye.z + right_eye.z) / 2
    yaw = math.atan2(nose_tip.z - eye_center_z, nose_tip.x - eye_center_x) - math.pi / 2

    face_vertical = chin.y - forehead.y
    face_depth = nose_tip.z - (forehead.z + chin.z) / 2
    pitch = math.atan2(face_depth, face_vertical)

    roll = math.atan2(right_eye.y - left_eye.y, right_eye.x - left_eye.x)

    return HeadRotation(pitch=pitch, yaw=yaw, roll=roll)


def extract_head_pose(landmarks: LandmarkSet) -> RawPose:
    """Derive position, rotation and face width from one landmark set.

    Raises ``MissingLandmark`` when a required role is absent.
    """
    forehead = landmarks[FaceRole.FOREHEAD_TOP]
    chin = landmarks[FaceRole.CHIN]
    left_eye = landmarks[FaceRole.LEFT_EYE]
    right_eye = landmarks[FaceRole.RIGHT_EYE]
    left_temple = landmarks[FaceRole.LEFT_TEMPLE]
    right_temple = landmarks[FaceRole.RIGHT_TEMPLE]

    head_top = Vec3(
        forehead.x,
        forehead.y - (chin.y - forehead.y) * HEAD_TOP_EXTRAPOLATION,
        forehead.z,
    )

    return RawPose(
        center=midpoint(left_eye, right_eye),
        head_top=head_top,
        forehead=forehead.to_vec3(),
        face_width=distance_3d(left_temple, right_temple),
        rotation=calculate_head_rotation(landmarks),
    )


__all__ = [
    "HEAD_TOP_EXTRAPOLATION",
    "HeadRotation",
    "RawPose",
    "calculate_head_rotation",
    "distance_3d",
    "extract_head_pose",
    "midpoint",
]
