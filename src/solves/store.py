"""Solve history backed by a key-value store.

The whole history is serialized as one JSON array under a single key,
newest solve first. The in-memory list is authoritative for the running
session; persistence is attempted after every mutation.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from stopwatch.state_machine import wall_clock_ms

log = logging.getLogger("cubetimer.solves.store")

DEFAULT_KEY = "rubiksSolves"


@dataclass(frozen=True)
class Solve:
    id: int
    duration_ms: int
    created_at: datetime
    scramble: str

    def to_dict(self) -> dict:
        stamp = self.created_at.astimezone(timezone.utc)
        return {
            "id": self.id,
            "time": self.duration_ms,
            "date": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "scramble": self.scramble,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> Solve:
        """Build a Solve from its stored form. Raises ValueError if malformed."""
        if not isinstance(raw, dict):
            raise ValueError(f"Solve entry is not an object: {raw!r}")
        solve_id = raw.get("id")
        duration = raw.get("time")
        for name, value in (("id", solve_id), ("time", duration)):
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Solve {name} is not a number: {value!r}")
            # json.loads turns 1e400 and Infinity into inf
            if not math.isfinite(value):
                raise ValueError(f"Solve {name} is not finite: {value!r}")
        if solve_id != int(solve_id):
            raise ValueError(f"Solve id is not an integer: {solve_id!r}")
        if duration < 0:
            raise ValueError(f"Negative solve time: {duration!r}")
        date = raw.get("date")
        if not isinstance(date, str):
            raise ValueError(f"Solve date is not a string: {date!r}")
        created_at = datetime.fromisoformat(date.replace("Z", "+00:00"))
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        scramble = raw.get("scramble", "")
        if not isinstance(scramble, str):
            raise ValueError(f"Solve scramble is not a string: {scramble!r}")
        return cls(
            id=int(solve_id),
            duration_ms=int(duration),
            created_at=created_at,
            scramble=scramble,
        )


class SolveStore:
    """Ordered, persisted collection of solves (newest first)."""

    def __init__(self, kv, key: str = DEFAULT_KEY,
                 clock: Callable[[], int] = wall_clock_ms):
        self._kv = kv
        self.key = key
        self._clock = clock
        self._solves: list[Solve] = []
        self.persist_ok = True

    def __len__(self) -> int:
        return len(self._solves)

    def load(self) -> list[Solve]:
        """Read the persisted history; absent or malformed content is empty."""
        self._solves = self._read()
        log.info("Loaded %d solves from '%s'", len(self._solves), self.key)
        return list(self._solves)

    def _read(self) -> list[Solve]:
        raw = self._kv.get(self.key)
        if raw is None:
            return []
        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError("history is not a list")
            solves = [Solve.from_dict(entry) for entry in entries]
        except ValueError as e:
            log.warning("Stored history under '%s' is malformed (%s), starting empty",
                        self.key, e)
            return []
        if len({s.id for s in solves}) != len(solves):
            log.warning("Stored history under '%s' has duplicate ids, starting empty",
                        self.key)
            return []
        return solves

    def _persist(self) -> None:
        payload = json.dumps([s.to_dict() for s in self._solves])
        try:
            self._kv.set(self.key, payload)
        except OSError as e:
            self.persist_ok = False
            log.warning("Could not persist %d solves (%s); keeping them for this session only",
                        len(self._solves), e)
            return
        self.persist_ok = True

    def _next_id(self, now_ms: int) -> int:
        if not self._solves:
            return now_ms
        newest = max(s.id for s in self._solves)
        return max(now_ms, newest + 1)

    def append(self, duration_ms: int, scramble: str) -> Solve:
        now_ms = int(self._clock())
        solve = Solve(
            id=self._next_id(now_ms),
            duration_ms=int(duration_ms),
            created_at=datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc),
            scramble=scramble,
        )
        self._solves.insert(0, solve)
        self._persist()
        log.info("Saved solve %d (%d ms), %d total", solve.id, solve.duration_ms,
                 len(self._solves))
        return solve

    def remove(self, solve_id: int) -> bool:
        """Delete a solve by id. Unknown ids are ignored."""
        kept = [s for s in self._solves if s.id != solve_id]
        if len(kept) == len(self._solves):
            log.debug("No solve with id %s to remove", solve_id)
            return False
        self._solves = kept
        self._persist()
        log.info("Removed solve %d, %d left", solve_id, len(self._solves))
        return True

    def clear(self) -> None:
        self._solves = []
        self._persist()
        log.info("Cleared solve history")

    def get(self, solve_id: int) -> Solve | None:
        for solve in self._solves:
            if solve.id == solve_id:
                return solve
        return None

    def all(self) -> list[Solve]:
        return list(self._solves)
