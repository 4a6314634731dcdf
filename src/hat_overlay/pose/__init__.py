"""Landmark tracking and head pose extraction."""

from .extractor import HeadRotation, RawPose, calculate_head_rotation, extract_head_pose
from .filters import smooth_scalar, smooth_vec3
from .landmarks import (
    FACE_MESH_ROLE_INDICES,
    FaceRole,
    Landmark,
    LandmarkSet,
    LandmarkTopologyError,
    MissingLandmark,
    Vec3,
)
from .tracker import FaceMeshTracker, TrackerResult

__all__ = [
    "FACE_MESH_ROLE_INDICES",
    "FaceMeshTracker",
    "FaceRole",
    "HeadRotation",
    "Landmark",
    "LandmarkSet",
    "LandmarkTopologyError",
    "MissingLandmark",
    "RawPose",
    "TrackerResult",
    "Vec3",
    "calculate_head_rotation",
    "extract_head_pose",
    "smooth_scalar",
    "smooth_vec3",
]
