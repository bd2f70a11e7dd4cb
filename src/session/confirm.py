"""Yes/no gates consulted before destructive actions."""

import logging
import time
from typing import Callable

log = logging.getLogger("cubetimer.session.confirm")


def always_confirm(prompt: str) -> bool:
    return True


class ArmedConfirm:
    """Two-step confirmation for remote inputs.

    The first request for a prompt arms it and answers no; the same
    prompt asked again within ``window_s`` seconds answers yes.
    """

    def __init__(self, window_s: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.window_s = window_s
        self._clock = clock
        self._armed: tuple[str, float] | None = None

    def __call__(self, prompt: str) -> bool:
        now = self._clock()
        if self._armed is not None:
            armed_prompt, armed_at = self._armed
            if armed_prompt == prompt and now - armed_at <= self.window_s:
                self._armed = None
                return True
        self._armed = (prompt, now)
        log.info("%s Send again within %.0fs to confirm.", prompt, self.window_s)
        return False
