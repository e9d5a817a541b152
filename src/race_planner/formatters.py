"""Formatting and parsing of times and paces for display."""

import re

_CLOCK_RE = re.compile(r"^\s*(\d+):([0-5]\d)\s*$")


def format_time(total_minutes: float) -> str:
    """Format minutes as Xh YYm string (Ym under one hour)."""
    rounded = int(round(total_minutes))
    hours, minutes = divmod(rounded, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def format_pace(pace: float) -> str:
    """Format min/km as M:SS min/km string."""
    minutes, seconds = divmod(int(round(pace * 60)), 60)
    return f"{minutes}:{seconds:02d} min/km"


def format_split_time(minutes: float) -> str:
    """Format a split as Xh YYm from one hour up, M:SS below."""
    if minutes >= 60:
        return format_time(minutes)
    mins, secs = divmod(int(round(minutes * 60)), 60)
    return f"{mins}:{secs:02d}"


def _parse_clock(value: str, what: str) -> tuple[int, int]:
    match = _CLOCK_RE.match(value)
    if not match:
        raise ValueError(f"Invalid {what} {value!r}")
    return int(match.group(1)), int(match.group(2))


def parse_target_time(value: str) -> float:
    """Parse an H:MM target time into minutes."""
    hours, minutes = _parse_clock(value, "target time (expected H:MM)")
    return hours * 60 + minutes


def parse_pace(value: str) -> float:
    """Parse an M:SS pace into minutes per km."""
    minutes, seconds = _parse_clock(value, "pace (expected M:SS)")
    return minutes + seconds / 60
