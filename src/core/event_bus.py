"""In-process event routing.

OSC input, the session controller and the daemon's observers all run on
the asyncio loop thread, so handlers are called synchronously and in
subscription order.
"""

import logging
from collections import defaultdict
from typing import Any, Callable

log = logging.getLogger("cubetimer.event_bus")

Handler = Callable[[Any], None]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """Routes named events (``input_save``, ``solve_deleted`` ...) to handlers."""

    def __init__(self):
        self._handlers: defaultdict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: Handler) -> Callable[[], None]:
        """Register a handler; returns a callable that removes it again."""
        self._handlers[event_type].append(handler)
        log.debug("'%s' → %s", event_type, _handler_name(handler))
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, ()))

    def publish(self, event_type: str, data: Any = None) -> int:
        """Deliver to every handler. A failing handler is logged and skipped.

        Returns how many handlers completed.
        """
        # Copy: a handler may unsubscribe itself while we iterate
        handlers = list(self._handlers.get(event_type, ()))
        if not handlers:
            log.debug("No handlers for '%s'", event_type)
            return 0
        delivered = 0
        for handler in handlers:
            try:
                handler(data)
            except Exception:
                log.exception("Handler %s failed on '%s'", _handler_name(handler), event_type)
            else:
                delivered += 1
        return delivered
