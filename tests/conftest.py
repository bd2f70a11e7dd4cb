"""Pytest configuration and shared fixtures."""

import random

import pytest

from session.controller import SessionController
from solves.kv_store import MemoryStore
from solves.store import SolveStore
from stopwatch.state_machine import TimerStateMachine
from ui.sink import DisplaySink

START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millisecond clock advanced by hand."""

    def __init__(self, now_ms: int = START_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class ManualTask:
    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose periodic tasks run only when fire() is called."""

    def __init__(self):
        self.tasks: list[ManualTask] = []

    def call_every(self, interval, callback):
        task = ManualTask(interval, callback)
        self.tasks.append(task)
        return task

    @property
    def live(self) -> list[ManualTask]:
        return [t for t in self.tasks if not t.cancelled]

    def fire(self) -> None:
        for task in self.live:
            task.callback()


class RecordingSink(DisplaySink):
    """Keeps every update pushed to it."""

    def __init__(self):
        self.calls: list[tuple[str, object]] = []

    def _record(self, name, value):
        self.calls.append((name, value))

    def last(self, name):
        for call, value in reversed(self.calls):
            if call == name:
                return value
        return None

    def show_time(self, text):
        self._record("time", text)

    def show_state(self, state):
        self._record("state", state)

    def show_history(self, rows):
        self._record("history", list(rows))

    def show_stats(self, stats):
        self._record("stats", stats)

    def show_chart(self, points):
        self._record("chart", list(points))

    def show_scramble(self, scramble):
        self._record("scramble", scramble)

    def show_tip(self, tip):
        self._record("tip", tip)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def timer(clock, scheduler):
    return TimerStateMachine(clock=clock, scheduler=scheduler, tick_ms=10)


@pytest.fixture
def kv():
    return MemoryStore()


@pytest.fixture
def store(kv, clock):
    s = SolveStore(kv, clock=clock)
    s.load()
    return s


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def controller(timer, store, sink):
    c = SessionController(timer=timer, store=store, sink=sink, rng=random.Random(42))
    c.start_session()
    return c
