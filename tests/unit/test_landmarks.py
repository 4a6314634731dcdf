from __future__ import annotations

import pytest

from hat_overlay.pose.landmarks import (
    FACE_MESH_ROLE_INDICES,
    FaceRole,
    Landmark,
    LandmarkSet,
    LandmarkTopologyError,
    MissingLandmark,
    validate_topology,
)


def test_from_roles_reads_by_role():
    landmarks = LandmarkSet.from_roles(
        {
            FaceRole.CHIN: (0.5, 0.6, 0.0),
            FaceRole.NOSE_TIP: (0.5, 0.45, 0.05),
        }
    )
    assert len(landmarks) == 2
    assert landmarks[FaceRole.NOSE_TIP] == Landmark(0.5, 0.45, 0.05)
    assert landmarks[FaceRole.CHIN] == Landmark(0.5, 0.6, 0.0)
    assert FaceRole.LEFT_EAR not in landmarks
    assert landmarks.get(FaceRole.LEFT_EAR) is None


def test_missing_role_raises_missing_landmark():
    landmarks = LandmarkSet.from_roles({FaceRole.CHIN: (0.5, 0.6, 0.0)})
    with pytest.raises(MissingLandmark) as excinfo:
        landmarks[FaceRole.LEFT_TEMPLE]
    assert excinfo.value.role is FaceRole.LEFT_TEMPLE
    assert "left_temple" in str(excinfo.value)


def test_face_mesh_indices_resolve_into_full_topology():
    points = [Landmark(float(idx), 0.0, 0.0) for idx in range(468)]
    landmarks = LandmarkSet.from_points(points)
    assert landmarks[FaceRole.NOSE_TIP].x == 1.0
    assert landmarks[FaceRole.CHIN].x == 152.0
    assert landmarks[FaceRole.RIGHT_TEMPLE].x == 356.0


def test_truncated_point_list_reports_missing_role():
    points = [Landmark(0.0, 0.0, 0.0)] * 100
    landmarks = LandmarkSet.from_points(points)
    assert FaceRole.FOREHEAD_TOP in landmarks
    with pytest.raises(MissingLandmark):
        landmarks[FaceRole.CHIN]


def test_validate_topology():
    validate_topology(468, FACE_MESH_ROLE_INDICES)
    validate_topology(478, FACE_MESH_ROLE_INDICES)
    with pytest.raises(LandmarkTopologyError, match="chin"):
        validate_topology(150, FACE_MESH_ROLE_INDICES)


def test_validate_topology_ignores_optional_ears():
    indices = {role: idx for role, idx in FACE_MESH_ROLE_INDICES.items()}
    indices[FaceRole.RIGHT_EAR] = 10_000
    validate_topology(468, indices)
