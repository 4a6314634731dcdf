"""Landmark containers addressed by anatomical role."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class Vec3:
    """Plain 3-component vector."""

    x: float
    y: float
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class Landmark:
    """Normalized landmark coordinates (x, y in [0, 1], z relative depth)."""

    x: float
    y: float
    z: float

    def to_vec3(self) -> Vec3:
        return Vec3(self.x, self.y, self.z)


class FaceRole(str, Enum):
    NOSE_TIP = "nose_tip"
    FOREHEAD_TOP = "forehead_top"
    CHIN = "chin"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    LEFT_TEMPLE = "left_temple"
    RIGHT_TEMPLE = "right_temple"


# MediaPipe Face Mesh topology (468 points, 478 with refined irises).
FACE_MESH_ROLE_INDICES: Mapping[FaceRole, int] = MappingProxyType(
    {
        FaceRole.NOSE_TIP: 1,
        FaceRole.FOREHEAD_TOP: 10,
        FaceRole.CHIN: 152,
        FaceRole.LEFT_EYE: 33,
        FaceRole.RIGHT_EYE: 263,
        FaceRole.LEFT_EAR: 234,
        FaceRole.RIGHT_EAR: 454,
        FaceRole.LEFT_TEMPLE: 127,
        FaceRole.RIGHT_TEMPLE: 356,
    }
)

REQUIRED_ROLES: Tuple[FaceRole, ...] = (
    FaceRole.NOSE_TIP,
    FaceRole.FOREHEAD_TOP,
    FaceRole.CHIN,
    FaceRole.LEFT_EYE,
    FaceRole.RIGHT_EYE,
    FaceRole.LEFT_TEMPLE,
    FaceRole.RIGHT_TEMPLE,
)


class MissingLandmark(LookupError):
    """A required anatomical role is absent from a detected landmark set."""

    def __init__(self, role: FaceRole) -> None:
        super().__init__(f"Landmark for role '{role.value}' is missing.")
        self.role = role


class LandmarkTopologyError(ValueError):
    """The tracker's landmark layout does not cover the required roles."""


def validate_topology(
    landmark_count: int,
    role_indices: Mapping[FaceRole, int] = FACE_MESH_ROLE_INDICES,
    required: Iterable[FaceRole] = REQUIRED_ROLES,
) -> None:
    """Raise ``LandmarkTopologyError`` unless every required role maps inside ``landmark_count``."""
    uncovered = [
        role.value
        for role in required
        if role not in role_indices or not 0 <= role_indices[role] < landmark_count
    ]
    if uncovered:
        raise LandmarkTopologyError(
            f"Tracker yields {landmark_count} landmarks; roles not covered: {', '.join(uncovered)}"
        )


@dataclass(frozen=True, slots=True)
class LandmarkSet:
    """Landmarks of one detected face, read by role rather than raw index."""

    points: Tuple[Landmark, ...]
    role_indices: Mapping[FaceRole, int] = field(default_factory=lambda: FACE_MESH_ROLE_INDICES)

    @classmethod
    def from_points(
        cls,
        points: Sequence[Landmark],
        role_indices: Mapping[FaceRole, int] = FACE_MESH_ROLE_INDICES,
    ) -> "LandmarkSet":
        return cls(points=tuple(points), role_indices=role_indices)

    @classmethod
    def from_roles(cls, coords: Mapping[FaceRole, Sequence[float]]) -> "LandmarkSet":
        """Build a compact set holding only the given roles, in enumeration order."""
        roles = [role for role in FaceRole if role in coords]
        points = tuple(Landmark(*(float(v) for v in coords[role][:3])) for role in roles)
        indices = MappingProxyType({role: idx for idx, role in enumerate(roles)})
        return cls(points=points, role_indices=indices)

    def __len__(self) -> int:
        return len(self.points)

    def __contains__(self, role: object) -> bool:
        if not isinstance(role, FaceRole):
            return False
        idx = self.role_indices.get(role)
        return idx is not None and 0 <= idx < len(self.points)

    def __getitem__(self, role: FaceRole) -> Landmark:
        if role not in self:
            raise MissingLandmark(role)
        return self.points[self.role_indices[role]]

    def get(self, role: FaceRole) -> Optional[Landmark]:
        return self[role] if role in self else None


__all__ = [
    "FACE_MESH_ROLE_INDICES",
    "FaceRole",
    "Landmark",
    "LandmarkSet",
    "LandmarkTopologyError",
    "MissingLandmark",
    "REQUIRED_ROLES",
    "Vec3",
    "validate_topology",
]
