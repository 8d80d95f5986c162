"""Elapsed-time tracking for a game in progress."""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]
TickCallback = Callable[[int], None]

DEFAULT_TICK_INTERVAL_MS = 120
BEST_TIME_SENTINEL = "--:--"


def wall_clock_ms() -> float:
    return time.time() * 1000


def format_time(ms: float) -> str:
    """Format *ms* as ``mm:ss`` (whole seconds, rounded down)."""
    total_seconds = max(0, int(ms // 1000))
    m, s = divmod(total_seconds, 60)
    return f"{m:02d}:{s:02d}"


class RecurringTask:
    """A cancellable callback that fires every *interval_ms* when polled.

    The owner drives it from its own loop by calling ``poll``; nothing runs
    in the background.
    """

    def __init__(self, interval_ms: int, callback: Callable[[], None], clock: Clock) -> None:
        self.interval_ms = interval_ms
        self._callback = callback
        self._clock = clock
        self._next_due = clock() + interval_ms
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def poll(self) -> bool:
        """Fire the callback if it is due.  Returns True if it fired."""
        if self._cancelled:
            return False
        now = self._clock()
        if now < self._next_due:
            return False
        self._next_due = now + self.interval_ms
        self._callback()
        return True

    def cancel(self) -> None:
        self._cancelled = True


class TimerController:
    """Accumulates active play time across pause, resume and reload."""

    def __init__(
        self,
        clock: Clock | None = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        on_tick: TickCallback | None = None,
    ) -> None:
        self._clock = clock or wall_clock_ms
        self.tick_interval_ms = tick_interval_ms
        self.on_tick = on_tick
        self._base_ms: float = 0.0
        self._start_ms: float | None = None
        self._task: RecurringTask | None = None

    # -- time tracking --------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._start_ms is not None

    def get_elapsed(self) -> int:
        if self._start_ms is None:
            return int(self._base_ms)
        return int(self._base_ms + (self._clock() - self._start_ms))

    def start(self) -> None:
        if self.running:
            return
        self._start_ms = self._clock()
        self._schedule()

    def resume(self) -> None:
        """Continue counting from the accumulated base (session restore)."""
        self.start()

    def stop(self, reset_display: bool = False) -> int:
        """Stop counting and return the accumulated time.

        With *reset_display* the accumulated time is discarded and 0 returned.
        """
        if self._start_ms is not None:
            self._base_ms += self._clock() - self._start_ms
            self._start_ms = None
        self._cancel()
        if reset_display:
            self._base_ms = 0.0
        elapsed = int(self._base_ms)
        self._emit(elapsed)
        return elapsed

    def set_base(self, ms: float) -> None:
        """Load a previously accumulated duration into a stopped timer."""
        if self.running:
            raise RuntimeError("Cannot set the base of a running timer.")
        self._base_ms = max(0.0, float(ms))

    # -- periodic display -----------------------------------------------------

    def poll(self) -> bool:
        if self._task is None:
            return False
        return self._task.poll()

    def _schedule(self) -> None:
        self._cancel()
        self._task = RecurringTask(
            self.tick_interval_ms,
            lambda: self._emit(self.get_elapsed()),
            self._clock,
        )

    def _cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _emit(self, ms: int) -> None:
        if self.on_tick is not None:
            self.on_tick(ms)
