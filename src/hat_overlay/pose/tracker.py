"""Face landmark tracking via MediaPipe Face Mesh or injected backends."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

import cv2
import numpy as np

from .landmarks import (
    FACE_MESH_ROLE_INDICES,
    FaceRole,
    Landmark,
    LandmarkSet,
    validate_topology,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackerResult:
    """Per-frame tracker output: either undetected or one face's landmarks."""

    detected: bool
    landmarks: Optional[LandmarkSet] = None

    @classmethod
    def undetected(cls) -> "TrackerResult":
        return cls(detected=False)


class FaceMeshTracker:
    """Yield landmark sets for the first face visible in each frame."""

    def __init__(
        self,
        *,
        engine_factory: Callable[[], object] | None = None,
        max_num_faces: int = 1,
        refine_landmarks: bool = True,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        role_indices: Mapping[FaceRole, int] = FACE_MESH_ROLE_INDICES,
    ) -> None:
        self._engine_factory = engine_factory
        self.max_num_faces = int(max_num_faces)
        self.refine_landmarks = bool(refine_landmarks)
        self.min_detection_confidence = float(min_detection_confidence)
        self.min_tracking_confidence = float(min_tracking_confidence)
        self.role_indices = role_indices
        self._engine: Optional[object] = None
        self._topology_confirmed = False

    # --------------------------------------------------------------------- #
    # Engine lifecycle
    # --------------------------------------------------------------------- #
    def _create_mediapipe_engine(self) -> object:
        try:
            import mediapipe as mp
        except ModuleNotFoundError as exc:  # pragma: no cover - requires optional dependency
            raise ModuleNotFoundError(
                "mediapipe is required for FaceMeshTracker. Install it with `pip install mediapipe` "
                "or inject a custom engine via `engine_factory`."
            ) from exc

        return mp.solutions.face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=self.max_num_faces,
            refine_landmarks=self.refine_landmarks,
            min_detection_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
        )

    @property
    def is_ready(self) -> bool:
        return self._engine is not None

    def load(self) -> None:
        """Initialise the underlying face mesh engine."""
        if self._engine is not None:
            return
        factory = self._engine_factory or self._create_mediapipe_engine
        self._engine = factory()
        LOGGER.info("Face tracker ready (max_num_faces=%d)", self.max_num_faces)

    def close(self) -> None:
        """Release engine resources."""
        if self._engine is None:
            return
        close_fn = getattr(self._engine, "close", None)
        if callable(close_fn):
            close_fn()
        self._engine = None
        LOGGER.info("Face tracker closed")

    # --------------------------------------------------------------------- #
    # Inference helpers
    # --------------------------------------------------------------------- #
    def _landmarks_from_result(self, result) -> Optional[LandmarkSet]:
        faces = getattr(result, "multi_face_landmarks", None)
        if not faces:
            return None
        raw = getattr(faces[0], "landmark", None)
        if not raw:
            return None

        if not self._topology_confirmed:
            validate_topology(len(raw), self.role_indices)
            self._topology_confirmed = True
            LOGGER.info("Landmark topology confirmed: %d points per face", len(raw))

        points = [Landmark(x=float(lm.x), y=float(lm.y), z=float(lm.z)) for lm in raw]
        return LandmarkSet.from_points(points, self.role_indices)

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def process(self, frame_bgr: np.ndarray) -> TrackerResult:
        """Run face mesh inference on a BGR frame."""
        if self._engine is None:
            raise RuntimeError("Face tracker is not loaded; call load() first.")

        process_fn = getattr(self._engine, "process", None)
        if not callable(process_fn):
            raise AttributeError("Face mesh engine does not expose a callable `process` method.")

        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        landmarks = self._landmarks_from_result(process_fn(rgb))
        if landmarks is None:
            return TrackerResult.undetected()
        return TrackerResult(detected=True, landmarks=landmarks)


__all__ = ["FaceMeshTracker", "TrackerResult"]
