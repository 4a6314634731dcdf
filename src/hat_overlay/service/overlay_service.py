"""High-level helpers for compositing the hat overlay onto video files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import cv2

from hat_overlay.data.video_loader import ensure_directory, iter_video_frames, probe_video
from hat_overlay.overlay.mapper import OverlayTransform
from hat_overlay.overlay.settings import OverlaySettings, settings_to_dict

from .overlay_driver import OverlayDriver

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class OverlayRunResult:
    """Summary of one video processed by :func:`render_overlay_video`."""

    video_path: Path
    output_path: Path
    json_path: Optional[Path]
    fps: float
    processed_frames: int
    visible_frames: int
    transforms: list[OverlayTransform]


def _vec_payload(vec) -> Optional[dict[str, float]]:
    if vec is None:
        return None
    return {"x": vec.x, "y": vec.y, "z": vec.z}


def _serialize_transforms(transforms: Sequence[OverlayTransform]) -> list[dict[str, object]]:
    return [
        {
            "frame_index": idx,
            "visible": transform.visible,
            "position": _vec_payload(transform.position),
            "rotation": _vec_payload(transform.rotation),
            "scale": transform.scale,
        }
        for idx, transform in enumerate(transforms)
    ]


def render_overlay_video(
    video_path: Path | str,
    output_path: Path | str | None = None,
    *,
    driver: Optional[OverlayDriver] = None,
    settings: Optional[OverlaySettings] = None,
    save_json: bool = True,
    json_path: Path | None = None,
    driver_kwargs: Optional[dict] = None,
) -> OverlayRunResult:
    """Composite the overlay onto every frame of ``video_path``.

    The rendered video defaults to ``<stem>_overlay.mp4`` next to the source,
    the transform log to ``overlay_transforms.json`` in the same directory.
    """
    info = probe_video(video_path)
    output_file = Path(output_path) if output_path else info.path.with_name(f"{info.path.stem}_overlay.mp4")
    ensure_directory(output_file.parent)

    close_after = driver is None
    driver = driver or OverlayDriver(**(driver_kwargs or {}))
    if settings is not None:
        driver.settings = settings

    writer = cv2.VideoWriter(str(output_file), cv2.VideoWriter_fourcc(*"mp4v"), info.fps, info.frame_size)
    if not writer.isOpened():
        raise RuntimeError(f"CV2 failed to open video writer: {output_file}")

    LOGGER.info(
        "Starting overlay render: video=%s, fps=%.2f, size=%dx%d",
        info.path,
        info.fps,
        info.width,
        info.height,
    )

    transforms: list[OverlayTransform] = []
    try:
        if not driver.running:
            driver.start()
        for frame in iter_video_frames(info.path):
            rendered = driver.process_frame(frame)
            if rendered is None:
                break
            writer.write(rendered)
            transforms.append(driver.last_transform)
    finally:
        writer.release()
        if close_after:
            driver.close()

    visible_frames = sum(1 for transform in transforms if transform.visible)
    LOGGER.info(
        "Rendered %d frames (%d with overlay) to %s",
        len(transforms),
        visible_frames,
        output_file,
    )

    saved_json: Optional[Path] = None
    if save_json:
        saved_json = Path(json_path) if json_path else output_file.parent / "overlay_transforms.json"
        payload = {
            "video": str(info.path),
            "output": str(output_file),
            "fps": info.fps,
            "settings": settings_to_dict(driver.settings),
            "frame_count": len(transforms),
            "frames": _serialize_transforms(transforms),
        }
        saved_json.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    return OverlayRunResult(
        video_path=info.path,
        output_path=output_file,
        json_path=saved_json,
        fps=info.fps,
        processed_frames=len(transforms),
        visible_frames=visible_frames,
        transforms=transforms,
    )


__all__ = ["OverlayRunResult", "render_overlay_video"]
