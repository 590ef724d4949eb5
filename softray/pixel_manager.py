"""
Pixel scheduler for multi-threaded rendering.

Worker threads pull pixels one at a time until the image is exhausted.
A single lock guards the counters.
"""

from __future__ import annotations
import logging
import threading
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)


class Pixel(NamedTuple):
    """Image coordinate handed to a worker."""
    row: int
    col: int


class PixelManager:
    """Hands out every pixel of a rows x cols image exactly once."""

    def __init__(self, rows: int, cols: int, progress_interval: float = 0.0):
        """Create a pixel manager.

        Args:
            rows: Number of image rows
            cols: Number of image columns
            progress_interval: Log progress every this many percent (0 = never)
        """
        if rows <= 0 or cols <= 0:
            raise ValueError(f"image dimensions must be positive, got {rows}x{cols}")
        if progress_interval < 0:
            raise ValueError(f"progress_interval must be non-negative, got {progress_interval}")
        self.rows = rows
        self.cols = cols
        self.total = rows * cols
        self.progress_interval = progress_interval
        self._next_index = 0
        self._done = 0
        self._last_reported = 0.0
        self._lock = threading.Lock()

    def next_pixel(self) -> Optional[Pixel]:
        """Claim the next unprocessed pixel, or None when all are taken."""
        with self._lock:
            if self._next_index >= self.total:
                return None
            index = self._next_index
            self._next_index += 1
        return Pixel(*divmod(index, self.cols))

    def pixel_done(self) -> None:
        """Record a finished pixel and log progress at the configured interval."""
        with self._lock:
            self._done += 1
            if self.progress_interval <= 0:
                return
            percent = 100.0 * self._done / self.total
            finished = self._done == self.total and self._last_reported < 100.0
            if percent - self._last_reported >= self.progress_interval or finished:
                self._last_reported = percent
                logger.info("Render progress: %.1f%%", percent)

    @property
    def done(self) -> int:
        return self._done

    def progress(self) -> float:
        """Percentage of pixels finished so far."""
        return 100.0 * self._done / self.total
