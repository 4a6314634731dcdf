"""User-adjustable overlay settings."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Dict, Tuple

# Slider ranges; values are clamped into these before reaching the mapper.
SETTING_LIMITS: Dict[str, Tuple[float, float]] = {
    "scale": (0.1, 5.0),
    "y_offset": (-100.0, 100.0),
    "z_offset": (-100.0, 100.0),
    "smoothing": (0.0, 1.0),
}


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


@dataclass(frozen=True, slots=True)
class OverlaySettings:
    """Scale multiplier, offsets in whole UI units, and smoothing strength."""

    scale: float = 1.0
    y_offset: float = 0.0
    z_offset: float = 0.0
    smoothing: float = 0.5

    def __post_init__(self) -> None:
        for name, (lower, upper) in SETTING_LIMITS.items():
            object.__setattr__(self, name, clamp(float(getattr(self, name)), lower, upper))

    def updated(self, **changes: float) -> "OverlaySettings":
        """Return a copy with ``changes`` applied and clamped to ``SETTING_LIMITS``."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown overlay settings: {', '.join(unknown)}")
        return replace(self, **changes)


def settings_to_dict(settings: OverlaySettings) -> dict[str, float]:
    return asdict(settings)


def load_settings(path: Path | str, *, base: OverlaySettings | None = None) -> OverlaySettings:
    """Read settings from a JSON object, layering them over ``base``."""
    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")
    payload = json.loads(settings_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Settings file must contain a JSON object: {settings_path}")
    return (base or OverlaySettings()).updated(**payload)


__all__ = ["OverlaySettings", "SETTING_LIMITS", "clamp", "load_settings", "settings_to_dict"]
