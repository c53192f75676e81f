"""
Chess clock: a countdown per color, decremented by a background worker.

Only the remaining times and the active color are shared with the worker, and these are guarded by a single lock.
The stop signal is a threading.Event, so the worker observes it without taking the lock.
"""

import logging
import threading
from typing import Optional

from src.core.config import ClockConfig
from src.core.shared_types import Color

logger = logging.getLogger(__name__)


class Clock:
    """Dual countdown clock tracking remaining seconds for both players."""

    def __init__(self, config: Optional[ClockConfig] = None) -> None:
        self.config = config or ClockConfig()
        self._lock = threading.Lock()
        self._remaining: dict[Color, float] = {
            color: self.config.initial_seconds for color in Color
        }
        self._active_color = Color.WHITE
        self._flag_reported: set[Color] = set()
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._worker: Optional[threading.Thread] = None

    # -- LIFECYCLE --
    @property
    def is_running(self) -> bool:
        return not self._stop_event.is_set()

    def start(self) -> None:
        """Start ticking for the active color. Calling it on a running clock does nothing."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._worker = threading.Thread(
            target=self._run, name="chess-clock", daemon=True
        )
        self._worker.start()
        logger.info("Clock started, %s to move", self.active_color)

    def stop(self) -> None:
        """
        Stop the worker and wait for it to finish.
        Once this returns, no decrement can happen anymore. Safe to call more than once.
        """
        self._stop_event.set()
        worker, self._worker = self._worker, None
        if worker is not None and worker is not threading.current_thread():
            worker.join()
            logger.info(
                "Clock stopped (white: %.1fs, black: %.1fs)",
                self.remaining(Color.WHITE),
                self.remaining(Color.BLACK),
            )

    def reset(self) -> None:
        """Back to the initial time control, white to move, not running."""
        self.stop()
        with self._lock:
            for color in Color:
                self._remaining[color] = self.config.initial_seconds
            self._active_color = Color.WHITE
            self._flag_reported.clear()

    def _run(self) -> None:
        # wait() returns True as soon as the stop event gets set
        while not self._stop_event.wait(self.config.tick_seconds):
            self.tick()

    # -- SHARED STATE --
    def tick(self) -> None:
        """One period elapsed: remove `tick_seconds` from the active player's time. Never goes below zero."""
        with self._lock:
            color = self._active_color
            self._remaining[color] = max(
                0.0, self._remaining[color] - self.config.tick_seconds
            )
            flag_fell = self._remaining[color] == 0.0 and color not in self._flag_reported
            if flag_fell:
                self._flag_reported.add(color)
        if flag_fell:
            logger.warning("Flag fell for %s", color)

    def switch_player(self) -> None:
        """The other color's time starts running. Does not stop the worker."""
        with self._lock:
            self._active_color = self._active_color.opposite

    def set_active(self, color: Color) -> None:
        with self._lock:
            self._active_color = color

    @property
    def active_color(self) -> Color:
        with self._lock:
            return self._active_color

    def remaining(self, color: Color) -> float:
        with self._lock:
            return self._remaining[color]

    def is_flag_fallen(self, color: Color) -> bool:
        with self._lock:
            return self._remaining[color] <= 0.0
