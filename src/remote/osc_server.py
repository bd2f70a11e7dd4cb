"""OSC input for the timer.

Listens for OSC messages (from a StackMat bridge, a TouchOSC layout,
a foot pedal script...) and publishes them as input events on the
event bus. The server runs on the asyncio loop, so handlers execute
on the same thread as the rest of the session.

NOTE: python-osc's Dispatcher.map() passes extra args as a list in the
second callback parameter: callback(address, [extra_args], *osc_values).
All handlers must account for this.
"""

import asyncio
import logging

from pythonosc.dispatcher import Dispatcher
from pythonosc.osc_server import AsyncIOOSCUDPServer

from core.event_bus import EventBus

log = logging.getLogger("cubetimer.remote.osc_server")

# OSC address → input event with no argument
ACTIONS = {
    "/timer/primary": "input_primary",
    "/timer/press": "input_press",
    "/timer/release": "input_release",
    "/timer/save": "input_save",
    "/timer/reset": "input_reset",
    "/timer/scramble": "input_scramble",
    "/timer/clear": "input_clear",
}


class TimerOSCServer:
    """Receives timer input over OSC/UDP."""

    def __init__(self, event_bus: EventBus, host: str = "0.0.0.0", port: int = 9100):
        self.event_bus = event_bus
        self.host = host
        self.port = port
        self.dispatcher = Dispatcher()
        self._transport: asyncio.DatagramTransport | None = None
        self._msg_count = 0
        self._setup_handlers(self.dispatcher)

    async def start(self) -> None:
        loop = asyncio.get_running_loop()
        server = AsyncIOOSCUDPServer((self.host, self.port), self.dispatcher, loop)
        self._transport, _ = await server.create_serve_endpoint()
        log.info("OSC input listening on %s:%d", self.host, self.port)

    def stop(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None
            log.info("OSC input stopped (%d messages handled)", self._msg_count)

    def _setup_handlers(self, d: Dispatcher) -> None:
        for address, event in ACTIONS.items():
            d.map(address, self._on_action, event)
        d.map("/timer/delete", self._on_delete)
        d.set_default_handler(self._on_unknown)

    def _on_action(self, address: str, args: list, *values) -> None:
        self._msg_count += 1
        event = args[0]
        # Buttons on control surfaces send 1 on press and 0 on release;
        # only the press counts for the discrete actions
        if values and event not in ("input_press", "input_release") and not values[0]:
            return
        log.debug("OSC %s → %s", address, event)
        self.event_bus.publish(event)

    def _on_delete(self, address: str, *values) -> None:
        self._msg_count += 1
        if not values:
            log.warning("OSC %s without a solve id, ignored", address)
            return
        try:
            solve_id = int(values[0])
        except (TypeError, ValueError):
            log.warning("OSC %s with bad solve id %r, ignored", address, values[0])
            return
        self.event_bus.publish("input_delete", solve_id)

    def _on_unknown(self, address: str, *values) -> None:
        log.debug("Unhandled OSC message: %s %s", address, values)
