"""OSC display client.

Mirrors the timer display to a remote OSC receiver (a stage display,
a TouchOSC layout, a stream overlay).
"""

import logging
import time
from typing import Callable

from pythonosc.udp_client import SimpleUDPClient

from ui.sink import DisplaySink

log = logging.getLogger("cubetimer.remote.osc_client")

# Rows sent on each history update
HISTORY_ROWS = 5


class OscDisplayClient(DisplaySink):
    """Sends display updates as OSC messages."""

    def __init__(self, ip: str = "127.0.0.1", port: int = 9101,
                 min_interval_s: float = 1.0 / 30,
                 clock: Callable[[], float] = time.monotonic):
        self.ip = ip
        self.port = port
        self.min_interval_s = min_interval_s
        self._clock = clock
        self._client: SimpleUDPClient | None = None
        self._last_time_sent: float | None = None

    def connect(self) -> None:
        self._client = SimpleUDPClient(self.ip, self.port)
        log.info("OSC display client ready → %s:%d", self.ip, self.port)

    def _send(self, address: str, *args) -> None:
        if self._client is None:
            log.warning("OSC display client not connected, ignoring: %s", address)
            return
        value = list(args) if args else []
        log.debug("OSC SEND: %s %s", address, value)
        self._client.send_message(address, value)

    def show_time(self, text):
        # Running ticks arrive every few ms; send at most one per display frame
        now = self._clock()
        if (self._last_time_sent is not None
                and now - self._last_time_sent < self.min_interval_s):
            return
        self._last_time_sent = now
        self._send("/display/time", text)

    def show_state(self, state):
        # The controller shows the state before the time, so the final
        # stopped or reset time is never dropped
        self._last_time_sent = None
        self._send("/display/state", state.value)

    def show_history(self, rows):
        for i, row in enumerate(rows[:HISTORY_ROWS]):
            self._send(f"/display/history/{i + 1}", row.number, row.time_text,
                       row.date_text, int(row.is_pb))

    def show_stats(self, stats):
        self._send("/display/count", stats.count)
        self._send("/display/pb", stats.pb_text)
        self._send("/display/ao5", stats.ao5_text)

    def show_chart(self, points):
        # Flattened seconds only; receivers index them by position
        self._send("/display/chart", *[float(seconds) for _, seconds in points[-50:]])

    def show_scramble(self, scramble):
        self._send("/display/scramble", scramble)

    def show_tip(self, tip):
        self._send("/display/tip", tip.title, tip.text)
