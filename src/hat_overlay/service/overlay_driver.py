"""Per-frame orchestration: tracker -> pose extractor -> transform mapper -> renderer."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

import numpy as np

from hat_overlay.overlay.mapper import OverlayTransform, TransformMapper
from hat_overlay.overlay.renderer import HatRenderer
from hat_overlay.overlay.settings import OverlaySettings
from hat_overlay.pose.extractor import RawPose, extract_head_pose
from hat_overlay.pose.landmarks import LandmarkTopologyError, MissingLandmark
from hat_overlay.pose.tracker import FaceMeshTracker

from .fps import FpsCounter

LOGGER = logging.getLogger(__name__)


class TrackerNotReady(RuntimeError):
    """The landmark tracker could not be initialised."""


class OverlayDriver:
    """Run one pose computation per frame and hand the result to the renderer.

    Single-threaded: the tracker call blocks until the frame's landmarks are
    available, so the extraction and rendering of consecutive frames never
    overlap. Settings can be replaced between frames and are read once at the
    start of each frame's computation.
    """

    def __init__(
        self,
        *,
        tracker: Optional[FaceMeshTracker] = None,
        renderer: Optional[HatRenderer] = None,
        mapper: Optional[TransformMapper] = None,
        settings: Optional[OverlaySettings] = None,
        fps_counter: Optional[FpsCounter] = None,
    ) -> None:
        self.tracker = tracker or FaceMeshTracker()
        self.renderer = renderer or HatRenderer()
        self.mapper = mapper or TransformMapper()
        self.settings = settings or OverlaySettings()
        self.fps_counter = fps_counter or FpsCounter()
        self.last_transform: Optional[OverlayTransform] = None
        self._running = False

    # --------------------------------------------------------------------- #
    # Lifecycle
    # --------------------------------------------------------------------- #
    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Load the tracker; raise ``TrackerNotReady`` if it cannot be used."""
        try:
            self.tracker.load()
        except Exception as exc:
            LOGGER.error("Tracker failed to initialise: %s", exc)
            raise TrackerNotReady(f"Landmark tracker failed to initialise: {exc}") from exc
        if not self.tracker.is_ready:
            raise TrackerNotReady("Landmark tracker did not report ready.")
        self._running = True
        LOGGER.info("Overlay driver started")

    def stop(self) -> None:
        """Stop scheduling frames; an in-flight tracker result is discarded."""
        if self._running:
            LOGGER.info("Overlay driver stopped")
        self._running = False

    def close(self) -> None:
        self.stop()
        self.tracker.close()

    def __enter__(self) -> "OverlayDriver":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------------------------------------------------------------- #
    # Settings
    # --------------------------------------------------------------------- #
    def update_settings(self, **changes: float) -> OverlaySettings:
        self.settings = self.settings.updated(**changes)
        LOGGER.debug("Overlay settings updated: %s", self.settings)
        return self.settings

    def reset_overlay(self) -> None:
        """Drop the smoothed pose, e.g. when the overlay model is swapped."""
        self.mapper.reset()
        self.last_transform = None

    # --------------------------------------------------------------------- #
    # Frame processing
    # --------------------------------------------------------------------- #
    def _raw_pose(self, result) -> Optional[RawPose]:
        if not result.detected or result.landmarks is None:
            return None
        try:
            return extract_head_pose(result.landmarks)
        except MissingLandmark as exc:
            LOGGER.warning("Dropping malformed frame: %s", exc)
            return None

    def compute_transform(self, frame: np.ndarray) -> Optional[OverlayTransform]:
        """Track, extract and map one frame; ``None`` if the driver stopped meanwhile."""
        if not self._running:
            raise RuntimeError("Overlay driver is not running; call start() first.")

        try:
            result = self.tracker.process(frame)
        except LandmarkTopologyError as exc:
            LOGGER.error("Tracker landmark layout is unusable: %s", exc)
            self.stop()
            raise
        if not self._running:
            return None

        settings = self.settings
        transform = self.mapper.update(self._raw_pose(result), settings)
        self.last_transform = transform
        return transform

    def process_frame(self, frame: np.ndarray) -> Optional[np.ndarray]:
        """Return the composited frame, or ``None`` if the loop was stopped mid-frame."""
        transform = self.compute_transform(frame)
        if transform is None:
            return None
        rendered = self.renderer.render(frame, transform)
        if self.fps_counter.tick():
            LOGGER.debug("Overlay loop at %.1f fps", self.fps_counter.fps)
        return rendered

    def run(self, frames: Iterable[np.ndarray]) -> Iterator[np.ndarray]:
        """Yield composited frames until ``frames`` is exhausted or ``stop()`` is called."""
        for frame in frames:
            if not self._running:
                break
            rendered = self.process_frame(frame)
            if rendered is None:
                break
            yield rendered

    @property
    def fps(self) -> float:
        return self.fps_counter.fps


__all__ = ["OverlayDriver", "TrackerNotReady"]
