#!/usr/bin/env python3
"""Cube timer, main entry point.

Runs an asyncio event loop that:
  1. Loads the solve history from the local store
  2. Starts the OSC input server (timer buttons, hold gesture, save...)
  3. Routes input events to the session controller
  4. Redraws the timer frame whenever the display changes
"""

import asyncio
import signal
import sys
import os
import logging

# Add src/ to path so imports work when running directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import load_config
from core.logging_config import setup_logging
from core.event_bus import EventBus
from core.scheduler import AsyncioScheduler
from remote.osc_client import OscDisplayClient
from remote.osc_server import TimerOSCServer
from session.confirm import ArmedConfirm
from session.controller import SessionController
from solves.kv_store import JsonFileStore
from solves.store import SolveStore
from stopwatch.formatter import format_time
from stopwatch.state_machine import TimerStateMachine
from ui.display_state import DisplayState
from ui.frame_writer import FrameWriter
from ui.screens import TimerScreen
from ui.sink import SinkGroup

log = logging.getLogger("cubetimer.main")


class CubeTimerDaemon:
    """Main application daemon."""

    def __init__(self, config: dict):
        self.config = config
        self.event_bus = EventBus()
        self._running = False
        self._fps = config.get("display", {}).get("fps", 30)

        # Solve history
        storage_cfg = config.get("storage", {})
        self.store = SolveStore(
            JsonFileStore(storage_cfg.get("path", "solves.json")),
            key=storage_cfg.get("key", "rubiksSolves"),
        )

        # Display sinks
        display_cfg = config.get("display", {})
        self.display = DisplayState()
        self.screen = TimerScreen()
        frame_path = display_cfg.get("frame_path")
        self.frame_writer = FrameWriter(frame_path) if frame_path else None

        osc_cfg = config.get("osc", {})
        sinks = [self.display]
        self.osc_display = None
        if osc_cfg.get("display_ip"):
            self.osc_display = OscDisplayClient(
                ip=osc_cfg["display_ip"],
                port=osc_cfg.get("display_port", 9101),
                min_interval_s=1.0 / self._fps,
            )
            sinks.append(self.osc_display)

        # Timer + controller
        self.timer = TimerStateMachine(
            scheduler=AsyncioScheduler(),
            tick_ms=config.get("timer", {}).get("tick_ms", 10),
        )
        self.controller = SessionController(
            timer=self.timer,
            store=self.store,
            sink=SinkGroup(sinks),
            confirm=ArmedConfirm(config.get("confirm", {}).get("window_s", 3.0)),
            event_bus=self.event_bus,
            history_limit=display_cfg.get("history_limit", 50),
        )

        # OSC input
        self.osc_server = TimerOSCServer(
            self.event_bus,
            host=osc_cfg.get("listen_host", "0.0.0.0"),
            port=osc_cfg.get("listen_port", 9100),
        )

        self._setup_event_handlers()

    def _setup_event_handlers(self) -> None:
        """Wire input events to the controller."""
        self.event_bus.subscribe("input_primary", lambda _: self.controller.primary_action())
        self.event_bus.subscribe("input_press", lambda _: self.controller.press())
        self.event_bus.subscribe("input_release", lambda _: self.controller.release())
        self.event_bus.subscribe("input_save", lambda _: self.controller.save())
        self.event_bus.subscribe("input_reset", lambda _: self.controller.reset())
        self.event_bus.subscribe("input_scramble", lambda _: self.controller.new_scramble())
        self.event_bus.subscribe("input_clear", lambda _: self.controller.clear_history())
        self.event_bus.subscribe("input_delete", self.controller.delete)
        self.event_bus.subscribe("solve_saved", self._on_solve_saved)
        self.event_bus.subscribe("solve_deleted", self._on_solve_deleted)

    def _on_solve_saved(self, solve) -> None:
        log.info("Solve #%d: %s  [%s]", len(self.store), format_time(solve.duration_ms),
                 solve.scramble)
        if not self.store.persist_ok:
            log.warning("History is not being saved to disk; solves will be lost on exit")

    def _on_solve_deleted(self, solve_id) -> None:
        log.info("Deleted solve %d", solve_id)

    # --- Main loop ---

    async def run(self) -> None:
        """Main event loop."""
        self.store.load()
        if self.osc_display:
            self.osc_display.connect()
        self.controller.start_session()

        try:
            await self.osc_server.start()
        except OSError:
            log.error("Could not listen for OSC on port %d. Is another timer running?",
                      self.osc_server.port)
            return

        self._running = True
        frame_interval = 1.0 / self._fps
        log.info("Ready! %d solves loaded, scramble: %s",
                 len(self.store), self.controller.scramble)

        try:
            while self._running:
                if self.frame_writer and self.display.consume_dirty():
                    try:
                        frame = self.screen.render(self.display)
                        self.frame_writer.send_frame(frame)
                    except Exception:
                        log.exception("Display frame error")
                await asyncio.sleep(frame_interval)
        except asyncio.CancelledError:
            log.info("Display loop cancelled")
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Clean shutdown."""
        self._running = False
        log.info("Shutting down...")
        self.timer.reset()
        self.osc_server.stop()
        log.info("Shutdown complete")


def main() -> None:
    setup_logging()
    log.info("=== Cube Timer ===")

    config = load_config()
    daemon = CubeTimerDaemon(config)

    loop = asyncio.new_event_loop()

    def signal_handler():
        log.info("Signal received, stopping...")
        daemon._running = False

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        loop.run_until_complete(daemon.run())
    finally:
        loop.close()


if __name__ == "__main__":
    main()
