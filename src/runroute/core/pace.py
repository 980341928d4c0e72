"""Pace / time conversion and display formatting.

Pace is minutes per kilometre. Stored values stay unrounded; every
formatter floors its remainders, so parsing a formatted string back is
lossy below one second.
"""
from __future__ import annotations

import math


def pace_from_time(time_seconds: float, distance_km: float) -> float:
    """Pace in min/km for an elapsed time. 0 when there is no distance."""
    if distance_km <= 0:
        return 0.0
    return time_seconds / 60 / distance_km


def time_from_pace(pace_min_per_km: float, distance_km: float) -> float:
    """Elapsed seconds for a pace held over ``distance_km``."""
    return pace_min_per_km * 60 * distance_km


def format_time(seconds: float) -> str:
    """``HH:MM:SS``; hours are not wrapped into days."""
    hours = math.floor(seconds / 3600)
    minutes = math.floor((seconds % 3600) / 60)
    secs = math.floor(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_pace(pace_min_per_km: float) -> str:
    """``M:SS/km`` with unpadded minutes."""
    minutes = math.floor(pace_min_per_km)
    seconds = math.floor((pace_min_per_km - minutes) * 60)
    return f"{minutes}:{seconds:02d}/km"


def parse_time(text: str) -> float:
    """
    Parse ``HH:MM:SS``, ``MM:SS`` or plain seconds into seconds.

    Raises ValueError for anything else.
    """
    parts = [p.strip() for p in text.strip().split(":")]
    if not parts or len(parts) > 3 or any(p == "" for p in parts):
        raise ValueError(f"Unrecognised time: {text!r}")

    total = 0.0
    for p in parts:
        value = float(p)
        if value < 0:
            raise ValueError(f"Negative time component in {text!r}")
        total = total * 60 + value
    return total


def parse_pace(text: str) -> float:
    """Parse ``M:SS`` (optionally suffixed ``/km``) or decimal minutes into min/km."""
    t = text.strip().lower()
    if t.endswith("/km"):
        t = t[: -len("/km")].strip()

    if ":" not in t:
        value = float(t)
        if value < 0:
            raise ValueError(f"Negative pace: {text!r}")
        return value

    minutes_s, seconds_s = t.split(":", 1)
    minutes = int(minutes_s)
    seconds = float(seconds_s)
    if minutes < 0 or not 0 <= seconds < 60:
        raise ValueError(f"Unrecognised pace: {text!r}")
    return minutes + seconds / 60
