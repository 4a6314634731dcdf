"""Overlay transform mapping, settings and rendering."""

from .mapper import OverlayTransform, SmoothedState, TransformMapper
from .renderer import HatRenderer
from .settings import OverlaySettings, load_settings

__all__ = [
    "HatRenderer",
    "OverlaySettings",
    "OverlayTransform",
    "SmoothedState",
    "TransformMapper",
    "load_settings",
]
