"""Map raw head poses to smoothed overlay transforms."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from hat_overlay.pose.extractor import RawPose
from hat_overlay.pose.filters import smooth_scalar, smooth_vec3
from hat_overlay.pose.landmarks import Vec3

from .settings import OverlaySettings

LOGGER = logging.getLogger(__name__)

# Tracker space [0, 1] maps onto a centered scene span of 2 units.
SCENE_SPAN = 2.0
DEPTH_SCALE = 2.0
# Offsets are expressed in UI units; 100 UI units == 1 scene unit.
OFFSET_UNITS = 100.0
PITCH_GAIN = 0.5
YAW_GAIN = 0.8
# Normalized face width -> native model scale.
FACE_WIDTH_TO_MODEL_SCALE = 3.0


@dataclass(slots=True)
class SmoothedState:
    """Smoothed values carried across frames; ``None`` means never tracked."""

    position: Optional[Vec3] = None
    rotation: Optional[Vec3] = None
    scale: float = 1.0

    @property
    def has_pose(self) -> bool:
        return self.position is not None


@dataclass(frozen=True, slots=True)
class OverlayTransform:
    """Transform handed to the render engine (Euler XYZ radians, uniform scale)."""

    visible: bool
    position: Optional[Vec3]
    rotation: Optional[Vec3]
    scale: float


def to_scene_position(point: Vec3) -> Vec3:
    """Convert a tracker-space point to mirrored, centered scene coordinates."""
    return Vec3(
        x=-(point.x - 0.5) * SCENE_SPAN,
        y=-(point.y - 0.5) * SCENE_SPAN,
        z=point.z * DEPTH_SCALE,
    )


class TransformMapper:
    """Owns the smoothing state and turns per-frame poses into render transforms."""

    def __init__(self) -> None:
        self.state = SmoothedState()
        self._tracking = False

    @property
    def tracking(self) -> bool:
        return self._tracking

    def reset(self) -> None:
        """Forget the smoothed pose, e.g. after the overlay model changes."""
        self.state = SmoothedState()
        self._tracking = False

    def hidden(self) -> OverlayTransform:
        if self._tracking:
            LOGGER.info("Face lost; hiding overlay")
        self._tracking = False
        return OverlayTransform(
            visible=False,
            position=self.state.position,
            rotation=self.state.rotation,
            scale=self.state.scale,
        )

    def update(self, raw_pose: Optional[RawPose], settings: OverlaySettings) -> OverlayTransform:
        """Advance one frame. ``raw_pose`` of ``None`` means no face was detected."""
        if raw_pose is None:
            return self.hidden()

        if not self._tracking:
            LOGGER.info("Face detected; showing overlay")
        self._tracking = True

        smoothing = settings.smoothing
        state = self.state

        scene = to_scene_position(raw_pose.forehead)
        target_position = Vec3(
            x=scene.x,
            y=scene.y + settings.y_offset / OFFSET_UNITS,
            z=scene.z + settings.z_offset / OFFSET_UNITS,
        )
        position = smooth_vec3(target_position, state.position, smoothing)

        rotation = raw_pose.rotation
        target_rotation = Vec3(
            x=rotation.pitch * PITCH_GAIN,
            y=-rotation.yaw * YAW_GAIN,
            z=rotation.roll,
        )
        smoothed_rotation = smooth_vec3(target_rotation, state.rotation, smoothing)

        base_scale = raw_pose.face_width * FACE_WIDTH_TO_MODEL_SCALE * settings.scale
        # The initial 1.0 is a placeholder until the first detection snaps it.
        previous_scale = state.scale if state.has_pose else None
        scale = smooth_scalar(base_scale, previous_scale, smoothing)

        state.position = position
        state.rotation = smoothed_rotation
        state.scale = scale

        return OverlayTransform(visible=True, position=position, rotation=smoothed_rotation, scale=scale)


__all__ = [
    "FACE_WIDTH_TO_MODEL_SCALE",
    "OverlayTransform",
    "SmoothedState",
    "TransformMapper",
    "to_scene_position",
]
