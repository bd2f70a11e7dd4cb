"""Display sink interface.

The session controller pushes everything the user sees through a sink:
the live time, timer state, history rows, statistics, chart points,
the current scramble and the current tip.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from session.tips import Tip
    from solves.stats import HistoryRow, StatsSummary
    from stopwatch.state_machine import TimerState

log = logging.getLogger("cubetimer.ui.sink")


class DisplaySink:
    """Base class for display sinks. Every method defaults to a no-op."""

    def show_time(self, text: str) -> None:
        """Live timer text, MM:SS.mmm."""

    def show_state(self, state: TimerState) -> None:
        """Timer state, for ready/running/stopped styling."""

    def show_history(self, rows: Sequence[HistoryRow]) -> None:
        """Recent solves, newest first."""

    def show_stats(self, stats: StatsSummary) -> None:
        """Count, personal best and average of 5."""

    def show_chart(self, points: Sequence[tuple[int, float]]) -> None:
        """Progress chart as (index, seconds), oldest first."""

    def show_scramble(self, scramble: str) -> None:
        """Scramble to apply before the next solve."""

    def show_tip(self, tip: Tip) -> None:
        """Practice tip."""


class SinkGroup(DisplaySink):
    """Forwards every update to several sinks.

    A failing sink is logged and skipped so the others still update.
    """

    def __init__(self, sinks: Sequence[DisplaySink] = ()):
        self.sinks = list(sinks)

    def _each(self, method: str, *args) -> None:
        for sink in self.sinks:
            try:
                getattr(sink, method)(*args)
            except Exception:
                log.exception("Display sink %s failed in %s",
                              type(sink).__name__, method)

    def show_time(self, text):
        self._each("show_time", text)

    def show_state(self, state):
        self._each("show_state", state)

    def show_history(self, rows):
        self._each("show_history", rows)

    def show_stats(self, stats):
        self._each("show_stats", stats)

    def show_chart(self, points):
        self._each("show_chart", points)

    def show_scramble(self, scramble):
        self._each("show_scramble", scramble)

    def show_tip(self, tip):
        self._each("show_tip", tip)
