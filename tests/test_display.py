"""Tests for display sinks, chart and frame rendering."""

import numpy as np
from PIL import Image

from session.tips import TIPS
from solves.stats import HistoryRow, StatsSummary
from stopwatch.state_machine import TimerState
from ui.chart import ChartRenderer
from ui.display_state import DisplayState
from ui.frame_writer import FrameWriter
from ui.screens import HEIGHT, WIDTH, TimerScreen
from ui.sink import DisplaySink, SinkGroup

from conftest import RecordingSink


def test_display_state_dirty_flag():
    display = DisplayState()
    assert display.consume_dirty()
    assert not display.consume_dirty()
    display.show_time("00:01.000")
    assert display.time_text == "00:01.000"
    assert display.consume_dirty()
    assert not display.consume_dirty()


def test_sink_group_fans_out_and_isolates_failures():
    class Broken(DisplaySink):
        def show_time(self, text):
            raise RuntimeError("gone")

    a, b = RecordingSink(), RecordingSink()
    group = SinkGroup([a, Broken(), b])
    group.show_time("00:02.000")
    group.show_state(TimerState.RUNNING)
    assert a.last("time") == b.last("time") == "00:02.000"
    assert b.last("state") is TimerState.RUNNING


def test_chart_pixels_span_plot_box():
    chart = ChartRenderer(400, 200)
    left, top, right, bottom = chart.plot_box
    px = chart.to_pixels([(1, 20.0), (2, 10.0), (3, 15.0)])
    assert px[0][0] == left and px[-1][0] == right
    # Slowest solve sits highest on screen (smallest y)
    assert px[0][1] < px[2][1] < px[1][1]
    assert all(top <= y <= bottom for y in px[:, 1])


def test_chart_y_axis_does_not_start_at_zero():
    lo, hi = ChartRenderer().y_range(np.array([28.0, 30.0, 32.0]))
    assert 0 < lo < 30 < hi


def test_chart_renders_edge_cases():
    chart = ChartRenderer(300, 150)
    for points in ([], [(1, 12.3)], [(1, 10.0), (2, 10.0)], [(i, 10 + i % 3) for i in range(1, 200)]):
        img = chart.render(points)
        assert img.size == (300, 150)


def test_timer_screen_renders_full_display():
    display = DisplayState()
    display.show_time("00:12.345")
    display.show_state(TimerState.STOPPED)
    display.show_scramble("R U R' U' F2")
    display.show_tip(TIPS[0])
    display.show_stats(StatsSummary(count=2, pb_text="00:10.000", ao5_text="--:--.---"))
    display.show_history([
        HistoryRow(number=2, solve_id=2, time_text="00:12.345", date_text="9/3 14:05", is_pb=False),
        HistoryRow(number=1, solve_id=1, time_text="00:10.000", date_text="9/3 14:01", is_pb=True),
    ])
    display.show_chart([(1, 10.0), (2, 12.345)])

    img = TimerScreen().render(display)
    assert img.size == (WIDTH, HEIGHT)
    assert len(img.getcolors(maxcolors=WIDTH * HEIGHT)) > 2


def test_frame_writer(tmp_path):
    path = tmp_path / "frames" / "timer.png"
    writer = FrameWriter(path)
    writer.send_frame(TimerScreen().render(DisplayState()))
    writer.send_frame(TimerScreen().render(DisplayState()))
    assert writer.frames_written == 2
    with Image.open(path) as img:
        assert img.size == (WIDTH, HEIGHT)
    assert sorted(p.name for p in path.parent.iterdir()) == ["timer.png"]
