"""Tests for OSC input routing, the OSC display client and the daemon wiring."""

import asyncio

import pytest
from pythonosc.osc_message_builder import OscMessageBuilder

from core.event_bus import EventBus
from main import CubeTimerDaemon
from remote.osc_client import OscDisplayClient
from remote.osc_server import TimerOSCServer
from session.confirm import ArmedConfirm
from solves.stats import StatsSummary
from stopwatch.state_machine import TimerState


def send(server: TimerOSCServer, address: str, *args) -> None:
    builder = OscMessageBuilder(address=address)
    for arg in args:
        builder.add_arg(arg)
    message = builder.build()
    for handler in server.dispatcher.handlers_for_address(message.address):
        handler.invoke(("127.0.0.1", 50000), message)


def recorder(bus, *events):
    seen = []
    for event in events:
        bus.subscribe(event, lambda data, event=event: seen.append((event, data)))
    return seen


def test_actions_published():
    bus = EventBus()
    server = TimerOSCServer(bus)
    seen = recorder(bus, "input_primary", "input_save", "input_scramble")
    send(server, "/timer/primary")
    send(server, "/timer/save")
    send(server, "/timer/scramble")
    assert [e for e, _ in seen] == ["input_primary", "input_save", "input_scramble"]


def test_button_release_value_ignored_for_discrete_actions():
    bus = EventBus()
    server = TimerOSCServer(bus)
    seen = recorder(bus, "input_primary", "input_press", "input_release")
    send(server, "/timer/primary", 1.0)
    send(server, "/timer/primary", 0.0)
    send(server, "/timer/press", 1)
    send(server, "/timer/release", 0)
    assert [e for e, _ in seen] == ["input_primary", "input_press", "input_release"]


def test_delete_parses_id():
    bus = EventBus()
    server = TimerOSCServer(bus)
    seen = recorder(bus, "input_delete")
    send(server, "/timer/delete", 4242)
    # Solve ids are epoch milliseconds, too large for OSC int32; strings work
    send(server, "/timer/delete", "1700000000000")
    send(server, "/timer/delete", "oops")
    send(server, "/timer/delete")
    assert seen == [("input_delete", 4242), ("input_delete", 1700000000000)]


def test_unknown_address_is_ignored():
    bus = EventBus()
    server = TimerOSCServer(bus)
    send(server, "/mixer/volume", 0.5)


def test_event_bus_isolates_failing_handlers():
    bus = EventBus()
    seen = []

    def broken(_):
        raise RuntimeError("boom")

    bus.subscribe("x", broken)
    bus.subscribe("x", seen.append)
    bus.publish("x", 1)
    bus.unsubscribe("x", broken)
    bus.publish("x", 2)
    assert seen == [1, 2]


def test_event_bus_reports_delivery_and_unsubscribes():
    bus = EventBus()
    seen = []
    remove = bus.subscribe("x", seen.append)
    bus.subscribe("x", lambda _: 1 / 0)
    assert bus.subscriber_count("x") == 2
    assert bus.publish("x", "a") == 1

    remove()
    assert bus.subscriber_count("x") == 1
    assert bus.publish("x", "b") == 0
    assert bus.publish("nobody-listens") == 0
    assert seen == ["a"]


class FakeUDPClient:
    def __init__(self):
        self.sent = []

    def send_message(self, address, value):
        self.sent.append((address, value))


def test_osc_display_client_messages():
    client = OscDisplayClient()
    fake = FakeUDPClient()
    client._client = fake
    client.show_time("00:01.000")
    client.show_state(TimerState.RUNNING)
    client.show_stats(StatsSummary(count=3, pb_text="00:09.000", ao5_text="--:--.---"))
    client.show_chart([(1, 9.0), (2, 11.5)])
    assert ("/display/time", ["00:01.000"]) in fake.sent
    assert ("/display/state", ["running"]) in fake.sent
    assert ("/display/pb", ["00:09.000"]) in fake.sent
    assert ("/display/chart", [9.0, 11.5]) in fake.sent


def test_osc_display_client_not_connected_drops_messages():
    OscDisplayClient().show_time("00:00.000")


def test_osc_display_client_throttles_running_time():
    now = [0.0]
    client = OscDisplayClient(min_interval_s=0.25, clock=lambda: now[0])
    fake = FakeUDPClient()
    client._client = fake

    # Ticks every 62.5 ms for 1.25 s
    for tick in range(20):
        now[0] = tick * 0.0625
        client.show_time(f"tick {tick}")
    times = [value[0] for address, value in fake.sent if address == "/display/time"]
    assert times == ["tick 0", "tick 4", "tick 8", "tick 12", "tick 16"]

    # A stop inside the interval still delivers the final time
    now[0] = 1.125
    client.show_state(TimerState.STOPPED)
    client.show_time("00:01.125")
    assert fake.sent[-1] == ("/display/time", ["00:01.125"])


def daemon_config(tmp_path):
    return {
        "timer": {"tick_ms": 5},
        "storage": {"path": str(tmp_path / "solves.json"), "key": "rubiksSolves"},
        "display": {"fps": 20, "frame_path": str(tmp_path / "frame.png"), "history_limit": 50},
        "osc": {"listen_host": "127.0.0.1", "listen_port": 0,
                "display_ip": None, "display_port": 9101},
        "confirm": {"window_s": 3.0},
    }


def test_daemon_routes_input_to_controller(tmp_path):
    daemon = CubeTimerDaemon(daemon_config(tmp_path))
    assert isinstance(daemon.controller.confirm, ArmedConfirm)

    async def scenario():
        daemon.store.load()
        daemon.controller.start_session()
        daemon.event_bus.publish("input_press")
        assert daemon.timer.state is TimerState.READY
        daemon.event_bus.publish("input_release")
        await asyncio.sleep(0.03)
        daemon.event_bus.publish("input_primary")
        assert daemon.timer.state is TimerState.STOPPED
        daemon.event_bus.publish("input_save")

    asyncio.run(scenario())
    assert len(daemon.store) == 1
    solve = daemon.store.all()[0]
    assert solve.duration_ms > 0
    assert daemon.display.stats.count == 1

    # Remote deletes need the same request twice
    daemon.event_bus.publish("input_delete", solve.id)
    assert len(daemon.store) == 1
    daemon.event_bus.publish("input_delete", solve.id)
    assert len(daemon.store) == 0


def test_daemon_run_renders_frame_and_stops(tmp_path):
    daemon = CubeTimerDaemon(daemon_config(tmp_path))

    async def scenario():
        runner = asyncio.create_task(daemon.run())
        await asyncio.sleep(0.2)
        daemon._running = False
        await asyncio.wait_for(runner, timeout=2)

    asyncio.run(scenario())
    assert (tmp_path / "frame.png").exists()
    assert daemon.frame_writer.frames_written >= 1


def test_daemon_throttles_osc_time_to_display_fps(tmp_path):
    config = daemon_config(tmp_path)
    config["osc"]["display_ip"] = "127.0.0.1"
    daemon = CubeTimerDaemon(config)
    assert daemon.osc_display.min_interval_s == pytest.approx(1 / 20)
