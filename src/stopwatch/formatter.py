"""Millisecond durations as ``MM:SS.mmm`` strings."""

import re

PLACEHOLDER = "--:--.---"

_TIME_RE = re.compile(r"^(\d{2,}):([0-5]\d)\.(\d{3})$")


def format_time(ms) -> str:
    """Format a non-negative duration in milliseconds.

    Minutes are zero-padded to two digits but not capped, so 100 minutes
    and above render with three or more digits. Fractional input (an
    average) is truncated to whole milliseconds.
    """
    ms = int(ms)
    minutes, rest = divmod(ms, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{minutes:02d}:{seconds:02d}.{millis:03d}"


def format_optional(ms) -> str:
    """Like format_time, with the placeholder for a missing value."""
    if ms is None:
        return PLACEHOLDER
    return format_time(ms)


def parse_time(text: str) -> int:
    """Inverse of format_time. Raises ValueError on malformed input."""
    match = _TIME_RE.match(text.strip())
    if match is None:
        raise ValueError(f"Not a MM:SS.mmm time: {text!r}")
    minutes, seconds, millis = (int(g) for g in match.groups())
    return minutes * 60_000 + seconds * 1000 + millis
