"""Cancellable periodic callbacks on the asyncio event loop.

The stopwatch refreshes its display on a fixed period while running.
Callbacks are synchronous, so one run always returns before the next
is armed and a task can never overlap itself.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

log = logging.getLogger("cubetimer.core.scheduler")


class RepeatingTask:
    """Handle for a callback re-armed every ``interval`` seconds."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float,
                 callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception:
            log.exception("Error in periodic callback")
        # The callback itself may have cancelled us (stop from a tick)
        if not self._cancelled:
            self._arm()

    def cancel(self) -> None:
        """Stop the task. Safe to call more than once."""
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Creates RepeatingTasks on the running (or a given) event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> RepeatingTask:
        loop = self._loop or asyncio.get_running_loop()
        task = RepeatingTask(loop, interval, callback)
        task._arm()
        return task
