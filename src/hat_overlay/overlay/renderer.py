"""OpenCV rendering of a procedural hat driven by overlay transforms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import cv2
import numpy as np

from .mapper import OverlayTransform

# Orthographic frustum height in scene units.
FRUSTUM_SIZE = 2.0
RING_SEGMENTS = 32


@dataclass(frozen=True, slots=True)
class CylinderPart:
    """Cylinder of the hat model (model units, y up)."""

    name: str
    radius_top: float
    radius_bottom: float
    height: float
    center_y: float
    color_bgr: Tuple[int, int, int]


HAT_COLOR_BGR = (0x2E, 0x1A, 0x1A)
RIBBON_COLOR_BGR = (0xD5, 0xFF, 0x00)

FALLBACK_HAT: Tuple[CylinderPart, ...] = (
    CylinderPart("brim", 0.5, 0.5, 0.05, 0.0, HAT_COLOR_BGR),
    CylinderPart("crown", 0.3, 0.35, 0.5, 0.275, HAT_COLOR_BGR),
    CylinderPart("ribbon", 0.352, 0.352, 0.08, 0.08, RIBBON_COLOR_BGR),
)


def euler_xyz_matrix(x: float, y: float, z: float) -> np.ndarray:
    """Rotation matrix for intrinsic XYZ Euler angles (radians)."""
    cx, sx = np.cos(x), np.sin(x)
    cy, sy = np.cos(y), np.sin(y)
    cz, sz = np.cos(z), np.sin(z)
    rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return rx @ ry @ rz


def _ring(radius: float, y: float, segments: int = RING_SEGMENTS) -> np.ndarray:
    angles = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    return np.stack([radius * np.cos(angles), np.full(segments, y), radius * np.sin(angles)], axis=1)


def cylinder_vertices(part: CylinderPart) -> np.ndarray:
    half = part.height / 2.0
    return np.vstack(
        [
            _ring(part.radius_bottom, part.center_y - half),
            _ring(part.radius_top, part.center_y + half),
        ]
    )


class HatRenderer:
    """Draw the fallback hat onto camera frames.

    The anchor follows the frame's full width and height (scene x and y in
    [-1, 1]); the model itself is drawn with a uniform pixels-per-unit derived
    from the frustum height so the hat keeps its proportions. Scene x follows
    the mirrored (selfie) view; with ``mirror=False`` the anchor and the
    model x axis are flipped back onto the unmirrored frame.
    """

    def __init__(self, *, parts: Sequence[CylinderPart] = FALLBACK_HAT, mirror: bool = True) -> None:
        self.parts = tuple(parts)
        self.mirror = bool(mirror)

    def project(self, transform: OverlayTransform, width: int, height: int) -> List[np.ndarray]:
        """Return one pixel-space polygon per model part, in draw order."""
        if transform.position is None or transform.rotation is None:
            return []
        rotation = euler_xyz_matrix(*transform.rotation.as_tuple())
        pixels_per_unit = height / FRUSTUM_SIZE
        # Scene x is mirrored; on an unflipped frame the anchor and model x flip back.
        x_sign = 1.0 if self.mirror else -1.0
        anchor_x = (x_sign * transform.position.x + 1.0) / 2.0 * width
        anchor_y = (1.0 - transform.position.y) / 2.0 * height

        polygons: list[np.ndarray] = []
        for part in self.parts:
            world = (cylinder_vertices(part) * transform.scale) @ rotation.T
            px = anchor_x + x_sign * world[:, 0] * pixels_per_unit
            py = anchor_y - world[:, 1] * pixels_per_unit
            points = np.stack([px, py], axis=1).astype(np.float32)
            hull = cv2.convexHull(points)
            polygons.append(np.round(hull).astype(np.int32))
        return polygons

    def render(self, frame: np.ndarray, transform: OverlayTransform) -> np.ndarray:
        """Return a composited copy of ``frame``."""
        canvas = cv2.flip(frame, 1) if self.mirror else frame.copy()
        if not transform.visible:
            return canvas

        height, width = canvas.shape[:2]
        for part, polygon in zip(self.parts, self.project(transform, width, height)):
            cv2.fillPoly(canvas, [polygon], part.color_bgr, lineType=cv2.LINE_AA)
        return canvas


__all__ = ["CylinderPart", "FALLBACK_HAT", "HatRenderer", "cylinder_vertices", "euler_xyz_matrix"]
