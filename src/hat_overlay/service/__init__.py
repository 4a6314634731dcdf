"""Service-layer helpers orchestrating tracking, pose mapping and rendering."""

from .fps import FpsCounter
from .overlay_driver import OverlayDriver, TrackerNotReady
from .overlay_service import OverlayRunResult, render_overlay_video

__all__ = [
    "FpsCounter",
    "OverlayDriver",
    "OverlayRunResult",
    "TrackerNotReady",
    "render_overlay_video",
]
