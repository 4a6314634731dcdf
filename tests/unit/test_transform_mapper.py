from __future__ import annotations

import dataclasses
import math

import pytest

from hat_overlay.overlay.mapper import (
    FACE_WIDTH_TO_MODEL_SCALE,
    SmoothedState,
    TransformMapper,
    to_scene_position,
)
from hat_overlay.overlay.settings import OverlaySettings
from hat_overlay.pose.extractor import extract_head_pose
from hat_overlay.pose.filters import smooth_scalar, smooth_vec3
from hat_overlay.pose.landmarks import FaceRole, LandmarkSet, Vec3

SCENARIO_FACE = {
    FaceRole.LEFT_EYE: (0.4, 0.4, 0.0),
    FaceRole.RIGHT_EYE: (0.6, 0.4, 0.0),
    FaceRole.LEFT_TEMPLE: (0.3, 0.4, 0.0),
    FaceRole.RIGHT_TEMPLE: (0.7, 0.4, 0.0),
    FaceRole.FOREHEAD_TOP: (0.5, 0.3, 0.0),
    FaceRole.CHIN: (0.5, 0.6, 0.0),
    FaceRole.NOSE_TIP: (0.5, 0.45, 0.05),
}


def _pose(**overrides):
    coords = dict(SCENARIO_FACE)
    for name, value in overrides.items():
        coords[FaceRole[name.upper()]] = value
    return extract_head_pose(LandmarkSet.from_roles(coords))


def test_initial_state_is_absent():
    mapper = TransformMapper()
    assert mapper.state == SmoothedState(position=None, rotation=None, scale=1.0)
    assert mapper.tracking is False


def test_scene_position_mirrors_and_recenters():
    assert to_scene_position(Vec3(0.5, 0.5, 0.0)).as_tuple() == (0.0, 0.0, 0.0)
    corner = to_scene_position(Vec3(0.0, 0.0, 0.1))
    assert corner.x == pytest.approx(1.0)
    assert corner.y == pytest.approx(1.0)
    assert corner.z == pytest.approx(0.2)


def test_scenario_first_frame_snaps_to_raw_pose():
    mapper = TransformMapper()
    raw = _pose()
    settings = OverlaySettings(scale=1.0, y_offset=0.0, z_offset=0.0, smoothing=0.0)

    transform = mapper.update(raw, settings)

    base_scale = raw.face_width * FACE_WIDTH_TO_MODEL_SCALE * settings.scale
    assert raw.face_width == pytest.approx(0.4)
    assert raw.rotation.roll == 0.0
    assert transform.visible is True
    assert transform.scale == base_scale
    assert transform.position.x == pytest.approx(0.0)
    assert transform.position.y == pytest.approx(0.4)
    assert transform.position.z == pytest.approx(0.0)
    assert transform.rotation.x == pytest.approx(raw.rotation.pitch * 0.5)
    assert transform.rotation.y == pytest.approx(-raw.rotation.yaw * 0.8)
    assert transform.rotation.z == 0.0


def test_first_frame_snaps_even_with_heavy_smoothing():
    mapper = TransformMapper()
    raw = _pose()
    transform = mapper.update(raw, OverlaySettings(smoothing=0.9))
    assert transform.scale == raw.face_width * FACE_WIDTH_TO_MODEL_SCALE
    assert transform.position == to_scene_position(raw.forehead)


def test_scenario_second_frame_blends_scale():
    mapper = TransformMapper()
    settings = OverlaySettings(smoothing=0.5)
    first = mapper.update(_pose(), settings)

    wider = _pose(left_temple=(0.1, 0.4, 0.0), right_temple=(0.9, 0.4, 0.0))
    assert wider.face_width == pytest.approx(0.8)
    second = mapper.update(wider, settings)

    new_base = wider.face_width * FACE_WIDTH_TO_MODEL_SCALE
    assert second.scale == smooth_scalar(new_base, first.scale, 0.5)
    assert second.scale == pytest.approx((1.2 + 2.4) / 2)
    assert first.scale < second.scale < new_base


def test_offsets_are_applied_in_hundredths():
    mapper = TransformMapper()
    transform = mapper.update(_pose(), OverlaySettings(y_offset=25, z_offset=-50, smoothing=0.0))
    assert transform.position.y == pytest.approx(0.4 + 0.25)
    assert transform.position.z == pytest.approx(-0.5)


def test_user_scale_multiplies_base_scale():
    mapper = TransformMapper()
    transform = mapper.update(_pose(), OverlaySettings(scale=2.0, smoothing=0.0))
    assert transform.scale == pytest.approx(0.4 * 3 * 2.0)


def test_undetected_frame_hides_and_keeps_state():
    mapper = TransformMapper()
    settings = OverlaySettings(smoothing=0.5)
    mapper.update(_pose(), settings)
    before = dataclasses.replace(mapper.state)

    hidden = mapper.update(None, settings)

    assert hidden.visible is False
    assert mapper.state == before
    assert mapper.tracking is False


def test_resumption_smooths_from_preserved_state():
    mapper = TransformMapper()
    settings = OverlaySettings(smoothing=0.5)
    mapper.update(_pose(), settings)
    mapper.update(None, settings)
    before = dataclasses.replace(mapper.state)

    moved = _pose(forehead_top=(0.3, 0.2, 0.0))
    resumed = mapper.update(moved, settings)

    target = to_scene_position(moved.forehead)
    assert resumed.visible is True
    assert resumed.position == smooth_vec3(target, before.position, 0.5)
    assert resumed.position != target


def test_hidden_before_any_detection_then_snap():
    mapper = TransformMapper()
    hidden = mapper.update(None, OverlaySettings())
    assert hidden.visible is False
    assert hidden.position is None
    assert hidden.scale == 1.0

    raw = _pose()
    shown = mapper.update(raw, OverlaySettings(smoothing=0.7))
    assert shown.position == to_scene_position(raw.forehead)


def test_reset_forgets_smoothed_pose():
    mapper = TransformMapper()
    settings = OverlaySettings(smoothing=0.5)
    mapper.update(_pose(), settings)
    mapper.reset()
    assert mapper.state == SmoothedState()

    moved = _pose(forehead_top=(0.3, 0.2, 0.0))
    transform = mapper.update(moved, settings)
    assert transform.position == to_scene_position(moved.forehead)


def test_smoothing_reads_latest_settings_each_frame():
    mapper = TransformMapper()
    mapper.update(_pose(), OverlaySettings(smoothing=0.9))
    moved = _pose(forehead_top=(0.3, 0.2, 0.0))
    transform = mapper.update(moved, OverlaySettings(smoothing=0.0))
    assert transform.position == to_scene_position(moved.forehead)


def test_nan_landmarks_propagate_through_smoothing():
    mapper = TransformMapper()
    settings = OverlaySettings(smoothing=0.5)
    mapper.update(_pose(), settings)
    transform = mapper.update(_pose(left_temple=(float("nan"), 0.4, 0.0)), settings)
    assert math.isnan(transform.scale)
