"""Statistics derived from a newest-first solve history.

Everything here is pure and recomputed from scratch; histories are
small enough that caching buys nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence

from solves.store import Solve
from stopwatch.formatter import format_optional, format_time

AO5_WINDOW = 5
HISTORY_LIMIT = 50


class SeriesPoint(NamedTuple):
    index: int  # 1-based, oldest solve first
    solve: Solve


@dataclass(frozen=True)
class HistoryRow:
    number: int
    solve_id: int
    time_text: str
    date_text: str
    is_pb: bool


@dataclass(frozen=True)
class StatsSummary:
    count: int
    pb_text: str
    ao5_text: str


def personal_best(history: Sequence[Solve]) -> int | None:
    if not history:
        return None
    return min(s.duration_ms for s in history)


def average_of_5(history: Sequence[Solve]) -> float | None:
    """Mean of the 5 most recent solves without the single best and worst."""
    if len(history) < AO5_WINDOW:
        return None
    durations = sorted(s.duration_ms for s in history[:AO5_WINDOW])
    middle = durations[1:-1]
    return sum(middle) / len(middle)


def chronological_series(history: Sequence[Solve]) -> list[SeriesPoint]:
    return [SeriesPoint(i, solve) for i, solve in enumerate(reversed(history), start=1)]


def chart_points(history: Sequence[Solve]) -> list[tuple[int, float]]:
    """(index, seconds) pairs for the progress chart."""
    return [(p.index, p.solve.duration_ms / 1000) for p in chronological_series(history)]


def _short_date(solve: Solve) -> str:
    local = solve.created_at.astimezone()
    return f"{local.day}/{local.month} {local.hour}:{local.minute:02d}"


def history_rows(history: Sequence[Solve], limit: int = HISTORY_LIMIT) -> list[HistoryRow]:
    """Display rows for the most recent ``limit`` solves.

    Rows are numbered from the oldest solve, so the newest row carries
    the total count.
    """
    pb = personal_best(history)
    total = len(history)
    return [
        HistoryRow(
            number=total - i,
            solve_id=solve.id,
            time_text=format_time(solve.duration_ms),
            date_text=_short_date(solve),
            is_pb=solve.duration_ms == pb,
        )
        for i, solve in enumerate(history[:limit])
    ]


def summary(history: Sequence[Solve]) -> StatsSummary:
    return StatsSummary(
        count=len(history),
        pb_text=format_optional(personal_best(history)),
        ao5_text=format_optional(average_of_5(history)),
    )
