"""Exponential smoothing for per-frame head pose signals."""

from __future__ import annotations

from typing import Optional

from .landmarks import Vec3


def smooth_scalar(current: float, previous: Optional[float], factor: float) -> float:
    """Blend ``previous`` towards ``current``; higher ``factor`` means heavier damping.

    ``previous`` of ``None`` returns ``current`` unchanged. ``factor`` is not
    clamped here.
    """
    if previous is None:
        return current
    return previous * factor + current * (1.0 - factor)


def smooth_vec3(current: Vec3, previous: Optional[Vec3], factor: float) -> Vec3:
    """Apply :func:`smooth_scalar` independently per axis."""
    if previous is None:
        return current
    return Vec3(
        x=smooth_scalar(current.x, previous.x, factor),
        y=smooth_scalar(current.y, previous.y, factor),
        z=smooth_scalar(current.z, previous.z, factor),
    )


__all__ = ["smooth_scalar", "smooth_vec3"]
