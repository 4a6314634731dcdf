"""Open video sources and stream their frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple

import cv2
import numpy as np

LOGGER = logging.getLogger(__name__)

VIDEO_EXTENSIONS: tuple[str, ...] = (".mp4", ".mov", ".mkv", ".avi")
DEFAULT_FPS = 30.0


@dataclass(slots=True)
class VideoInfo:
    """Basic properties of an opened video file."""

    path: Path
    fps: float
    width: int
    height: int
    total_frames: int

    @property
    def frame_size(self) -> Tuple[int, int]:
        return (self.width, self.height)


def ensure_directory(path: Path | str) -> Path:
    """Create a directory if it does not exist."""
    target = Path(path)
    target.mkdir(parents=True, exist_ok=True)
    return target


def _open_capture(video_path: Path | str) -> tuple[Path, "cv2.VideoCapture"]:
    source_path = Path(video_path).expanduser().resolve()
    if not source_path.exists():
        raise FileNotFoundError(f"Video file not found: {source_path}")
    if source_path.suffix.lower() not in VIDEO_EXTENSIONS:
        LOGGER.warning("Unrecognised video extension for %s", source_path)

    capture = cv2.VideoCapture(str(source_path))
    if not capture.isOpened():
        raise RuntimeError(f"CV2 failed to open video file: {source_path}")
    return source_path, capture


def probe_video(video_path: Path | str) -> VideoInfo:
    source_path, capture = _open_capture(video_path)
    try:
        return VideoInfo(
            path=source_path,
            fps=capture.get(cv2.CAP_PROP_FPS) or DEFAULT_FPS,
            width=int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            total_frames=int(capture.get(cv2.CAP_PROP_FRAME_COUNT)),
        )
    finally:
        capture.release()


def iter_video_frames(video_path: Path | str) -> Iterator[np.ndarray]:
    """Yield BGR frames from ``video_path`` in order."""
    source_path, capture = _open_capture(video_path)
    frame_idx = 0
    try:
        while True:
            success, frame = capture.read()
            if not success:
                break
            frame_idx += 1
            yield frame
    finally:
        capture.release()
        LOGGER.debug("Read %d frames from %s", frame_idx, source_path)


__all__ = ["DEFAULT_FPS", "VIDEO_EXTENSIONS", "VideoInfo", "ensure_directory", "iter_video_frames", "probe_video"]
