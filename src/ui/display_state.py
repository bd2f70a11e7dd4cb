"""Latest display values, cached for the frame renderer.

The controller writes through the DisplaySink methods; the render loop
polls consume_dirty() and redraws only when something changed.
"""

from session.tips import Tip
from solves.stats import HistoryRow, StatsSummary
from stopwatch.formatter import PLACEHOLDER, format_time
from stopwatch.state_machine import TimerState
from ui.sink import DisplaySink


class DisplayState(DisplaySink):
    """Cache of what the screen should show. Lives on the loop thread."""

    def __init__(self):
        self.time_text = format_time(0)
        self.timer_state = TimerState.IDLE
        self.history: list[HistoryRow] = []
        self.stats = StatsSummary(count=0, pb_text=PLACEHOLDER, ao5_text=PLACEHOLDER)
        self.chart: list[tuple[int, float]] = []
        self.scramble = ""
        self.tip: Tip | None = None
        self._dirty = True

    def _update(self, **kwargs) -> None:
        for key, value in kwargs.items():
            setattr(self, key, value)
        self._dirty = True

    def show_time(self, text):
        self._update(time_text=text)

    def show_state(self, state):
        self._update(timer_state=state)

    def show_history(self, rows):
        self._update(history=list(rows))

    def show_stats(self, stats):
        self._update(stats=stats)

    def show_chart(self, points):
        self._update(chart=list(points))

    def show_scramble(self, scramble):
        self._update(scramble=scramble)

    def show_tip(self, tip):
        self._update(tip=tip)

    def consume_dirty(self) -> bool:
        """Check and clear dirty flag. Returns True if state changed."""
        was_dirty = self._dirty
        self._dirty = False
        return was_dirty
