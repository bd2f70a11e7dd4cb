"""Session controller.

Turns user input (primary action, hold gesture, save, delete, reset,
new scramble) into timer transitions and store mutations, then pushes
the results to the display sink.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from core.event_bus import EventBus
from session.confirm import always_confirm
from session.tips import TIPS, Tip, random_tip
from solves import stats
from solves.store import Solve, SolveStore
from stopwatch.formatter import format_time
from stopwatch.scramble import generate_scramble
from stopwatch.state_machine import TimerState, TimerStateMachine
from ui.sink import DisplaySink

log = logging.getLogger("cubetimer.session.controller")


class SessionController:
    """Owns one timing session: a timer, a solve store and a display sink."""

    def __init__(
        self,
        timer: TimerStateMachine,
        store: SolveStore,
        sink: DisplaySink | None = None,
        confirm: Callable[[str], bool] = always_confirm,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        tips: tuple[Tip, ...] = TIPS,
        history_limit: int = stats.HISTORY_LIMIT,
    ):
        self.timer = timer
        self.store = store
        self.sink = sink or DisplaySink()
        self.confirm = confirm
        self.event_bus = event_bus
        self._rng = rng or random.Random()
        self._tips = tips
        self.history_limit = history_limit

        self.scramble = ""
        self.tip: Tip | None = None

        self.timer.on_tick = self._on_tick

    # --- Lifecycle ---

    def start_session(self) -> None:
        """Initial display: a tip, the loaded history and a first scramble."""
        self.show_random_tip()
        self.refresh()
        self.new_scramble()
        self._show_timer()

    # --- Input ---

    def primary_action(self) -> None:
        """Click-style toggle: stop if running, otherwise restart from zero."""
        if self.timer.running:
            self.timer.stop()
        else:
            self.timer.reset()
            self.timer.start()
        self._timer_changed()

    def press(self) -> None:
        """Start of a hold gesture."""
        if self.timer.running:
            self.timer.stop()
        elif self.timer.state is TimerState.IDLE:
            self.timer.ready()
        elif self.timer.state is TimerState.STOPPED:
            self.timer.reset()
            self.timer.ready()
        else:
            return
        self._timer_changed()

    def release(self) -> None:
        """End of a hold gesture; a READY timer starts now."""
        if self.timer.release():
            self._timer_changed()

    def reset(self) -> None:
        if self.timer.reset():
            self._timer_changed()

    def save(self) -> Solve | None:
        """Record the stopped time as a solve."""
        if self.timer.state is not TimerState.STOPPED or self.timer.elapsed_ms <= 0:
            log.debug("Save ignored (state=%s, elapsed=%d)",
                      self.timer.state.value, self.timer.elapsed_ms)
            return None
        solve = self.store.append(self.timer.elapsed_ms, self.scramble)
        self.timer.reset()
        self._timer_changed()
        self.show_random_tip()
        self.refresh()
        self.new_scramble()
        self._publish("solve_saved", solve)
        return solve

    def delete(self, solve_id: int) -> bool:
        """Remove a solve after confirmation. Unknown ids are ignored."""
        solve = self.store.get(solve_id)
        if solve is None:
            log.debug("Delete ignored, no solve %s", solve_id)
            return False
        # Prompt names the solve; one armed delete never confirms another
        if not self.confirm(f"Delete time {format_time(solve.duration_ms)} (#{solve_id})?"):
            return False
        removed = self.store.remove(solve_id)
        self.refresh()
        if removed:
            self._publish("solve_deleted", solve_id)
        return removed

    def clear_history(self) -> bool:
        if not self.confirm("Delete all times?"):
            return False
        self.store.clear()
        self.refresh()
        return True

    def new_scramble(self) -> str:
        self.scramble = generate_scramble(self._rng)
        self.sink.show_scramble(self.scramble)
        return self.scramble

    def show_random_tip(self) -> Tip:
        self.tip = random_tip(self._rng, self._tips)
        self.sink.show_tip(self.tip)
        return self.tip

    # --- Display ---

    def refresh(self) -> None:
        """Recompute statistics from the store and push them out."""
        history = self.store.all()
        self.sink.show_history(stats.history_rows(history, self.history_limit))
        self.sink.show_stats(stats.summary(history))
        self.sink.show_chart(stats.chart_points(history))

    def _show_timer(self) -> None:
        self.sink.show_state(self.timer.state)
        self.sink.show_time(format_time(self.timer.elapsed_ms))

    def _on_tick(self, elapsed_ms: int) -> None:
        self.sink.show_time(format_time(elapsed_ms))

    def _timer_changed(self) -> None:
        self._show_timer()
        self._publish("timer_state_changed", {
            "state": self.timer.state,
            "elapsed_ms": self.timer.elapsed_ms,
        })
        log.debug("Timer → %s (%d ms)", self.timer.state.value, self.timer.elapsed_ms)

    def _publish(self, event_type: str, data) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, data)
