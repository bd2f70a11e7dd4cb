"""Tests for personal best, average of 5 and the display views."""

from datetime import datetime, timezone

import pytest

from solves import stats
from solves.store import Solve
from stopwatch.formatter import PLACEHOLDER


def make_history(*durations):
    """Newest-first solves with the given durations."""
    total = len(durations)
    return [
        Solve(
            id=1_000 + total - i,
            duration_ms=d,
            created_at=datetime(2024, 3, 9, 14, 5, tzinfo=timezone.utc),
            scramble="R U",
        )
        for i, d in enumerate(durations)
    ]


def test_personal_best():
    assert stats.personal_best([]) is None
    assert stats.personal_best(make_history(500, 300, 900)) == 300


@pytest.mark.parametrize("count", [0, 1, 4])
def test_average_of_5_needs_five_solves(count):
    assert stats.average_of_5(make_history(*[1000] * count)) is None


def test_average_of_5_drops_best_and_worst():
    assert stats.average_of_5(make_history(500, 400, 300, 1000, 200)) == 400


def test_average_of_5_uses_most_recent_five():
    history = make_history(500, 400, 300, 1000, 200, 1, 99_999)
    assert stats.average_of_5(history) == 400


def test_average_of_5_drops_one_instance_of_tied_extremes():
    assert stats.average_of_5(make_history(200, 200, 500, 900, 900)) == pytest.approx(1600 / 3)
    assert stats.average_of_5(make_history(700, 700, 700, 700, 700)) == 700


def test_average_can_be_fractional():
    assert stats.average_of_5(make_history(1000, 1000, 1001, 1001, 5000)) == pytest.approx(3002 / 3)


def test_chronological_series_is_oldest_first():
    history = make_history(300, 200, 100)
    series = stats.chronological_series(history)
    assert [p.index for p in series] == [1, 2, 3]
    assert [p.solve.duration_ms for p in series] == [100, 200, 300]
    assert stats.chronological_series([]) == []


def test_chart_points_in_seconds():
    assert stats.chart_points(make_history(12_500, 9_000)) == [(1, 9.0), (2, 12.5)]


def test_history_rows():
    history = make_history(12_000, 9_000, 15_000)
    rows = stats.history_rows(history)
    assert [r.number for r in rows] == [3, 2, 1]
    assert [r.time_text for r in rows] == ["00:12.000", "00:09.000", "00:15.000"]
    assert [r.is_pb for r in rows] == [False, True, False]
    assert rows[0].solve_id == history[0].id
    local = history[0].created_at.astimezone()
    assert rows[0].date_text == f"{local.day}/{local.month} {local.hour}:{local.minute:02d}"


def test_history_rows_limit():
    history = make_history(*range(1_000, 1_060))
    rows = stats.history_rows(history)
    assert len(rows) == 50
    assert rows[0].number == 60
    assert rows[-1].number == 11
    assert len(stats.history_rows(history, limit=5)) == 5


def test_summary():
    empty = stats.summary([])
    assert (empty.count, empty.pb_text, empty.ao5_text) == (0, PLACEHOLDER, PLACEHOLDER)

    full = stats.summary(make_history(500, 400, 300, 1000, 200))
    assert full.count == 5
    assert full.pb_text == "00:00.200"
    assert full.ao5_text == "00:00.400"
