"""Pause-aware countdown timer driven by a monotonic clock."""

from __future__ import annotations

import time
from typing import Callable, Optional


Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class CountdownTimer:
    """Measures elapsed play time as a clock delta, excluding paused intervals.

    The timer never accumulates ticks; every reading is derived from the
    clock, so tick frequency has no effect on accuracy. A stopped timer keeps
    reporting the elapsed time it had when stopped.
    """

    def __init__(self, time_limit_ms: int, clock: Optional[Clock] = None) -> None:
        self.time_limit_ms = time_limit_ms
        self.clock = clock or monotonic_ms
        self._started_at: Optional[float] = None
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0
        self._frozen_elapsed: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._started_at is not None and self._paused_at is None and self._frozen_elapsed is None

    @property
    def is_paused(self) -> bool:
        return self._paused_at is not None and self._frozen_elapsed is None

    def start(self) -> None:
        self._started_at = self.clock()
        self._paused_at = None
        self._paused_total = 0.0
        self._frozen_elapsed = None

    def pause(self) -> None:
        if self.is_running:
            self._paused_at = self.clock()

    def resume(self) -> None:
        if self.is_paused:
            self._paused_total += self.clock() - self._paused_at
            self._paused_at = None

    def stop(self) -> None:
        if self._started_at is not None and self._frozen_elapsed is None:
            self._frozen_elapsed = self._measure()

    def _measure(self) -> float:
        if self._started_at is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else self.clock()
        return max(0.0, now - self._started_at - self._paused_total)

    def elapsed_ms(self) -> int:
        if self._frozen_elapsed is not None:
            return int(self._frozen_elapsed)
        return int(self._measure())

    def remaining_ms(self) -> int:
        return max(0, self.time_limit_ms - self.elapsed_ms())

    def expired(self) -> bool:
        return self.elapsed_ms() >= self.time_limit_ms
