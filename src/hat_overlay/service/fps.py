"""Frame rate counter for the overlay loop."""

from __future__ import annotations

import time
from typing import Callable


class FpsCounter:
    """Count frames and refresh the FPS estimate every ``update_interval`` seconds."""

    def __init__(self, update_interval: float = 0.5, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self.update_interval = float(update_interval)
        self._clock = clock
        self._frames = 0
        self._last_time = clock()
        self.fps = 0.0

    def tick(self) -> bool:
        """Record one frame; return ``True`` when ``fps`` was refreshed."""
        self._frames += 1
        now = self._clock()
        delta = now - self._last_time
        if delta < self.update_interval:
            return False
        self.fps = self._frames / delta
        self._frames = 0
        self._last_time = now
        return True


__all__ = ["FpsCounter"]
