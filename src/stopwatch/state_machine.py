"""Stopwatch state machine.

Tracks IDLE / READY / RUNNING / STOPPED and the elapsed duration.
Every transition is a total function of (state, event): events that make
no sense in the current state are ignored, never raised.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable

from core.scheduler import AsyncioScheduler

log = logging.getLogger("cubetimer.stopwatch.state_machine")

DEFAULT_TICK_MS = 10


class TimerState(enum.Enum):
    IDLE = "idle"
    READY = "ready"
    RUNNING = "running"
    STOPPED = "stopped"


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TimerStateMachine:
    """One timing session.

    ``clock`` returns epoch milliseconds; ``scheduler`` must provide
    ``call_every(interval_s, callback)`` returning a handle with
    ``cancel()``. ``on_tick`` receives the elapsed milliseconds after
    each periodic refresh while running.
    """

    def __init__(self, clock: Callable[[], int] = wall_clock_ms,
                 scheduler=None, tick_ms: int = DEFAULT_TICK_MS,
                 on_tick: Callable[[int], None] | None = None):
        self._clock = clock
        self._scheduler = scheduler or AsyncioScheduler()
        self._tick_ms = tick_ms
        self.on_tick = on_tick

        self.state = TimerState.IDLE
        self.elapsed_ms = 0
        self.start_epoch_ms = 0
        self._tick_task = None

    @property
    def running(self) -> bool:
        return self.state is TimerState.RUNNING

    def _now(self) -> int:
        return int(self._clock())

    def _cancel_tick(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
        self._tick_task = None

    # --- Transitions ---

    def start(self) -> bool:
        """Enter RUNNING, resuming from the current elapsed time."""
        if self.state is TimerState.RUNNING:
            return False
        self.start_epoch_ms = self._now() - self.elapsed_ms
        self.state = TimerState.RUNNING
        self._cancel_tick()
        self._tick_task = self._scheduler.call_every(self._tick_ms / 1000.0, self.tick)
        log.debug("Timer started (resume from %d ms)", self.elapsed_ms)
        return True

    def tick(self) -> None:
        if self.state is not TimerState.RUNNING:
            return
        self.elapsed_ms = max(0, self._now() - self.start_epoch_ms)
        if self.on_tick is not None:
            self.on_tick(self.elapsed_ms)

    def stop(self) -> bool:
        """Freeze the elapsed time. No-op unless RUNNING."""
        if self.state is not TimerState.RUNNING:
            return False
        self._cancel_tick()
        self.elapsed_ms = max(0, self._now() - self.start_epoch_ms)
        self.state = TimerState.STOPPED
        log.debug("Timer stopped at %d ms", self.elapsed_ms)
        return True

    def reset(self) -> bool:
        """Back to IDLE with zero elapsed, from any state."""
        self._cancel_tick()
        changed = self.state is not TimerState.IDLE or self.elapsed_ms != 0
        self.state = TimerState.IDLE
        self.elapsed_ms = 0
        self.start_epoch_ms = 0
        return changed

    def ready(self) -> bool:
        """Arm for a hold-to-start gesture."""
        if self.state is not TimerState.IDLE or self.elapsed_ms != 0:
            return False
        self.state = TimerState.READY
        return True

    def release(self) -> bool:
        """End of the hold gesture: READY starts the timer."""
        if self.state is not TimerState.READY:
            return False
        return self.start()
