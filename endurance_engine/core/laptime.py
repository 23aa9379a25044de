"""Lap-time parsing and formatting helpers.

Lap times arrive as free text (``"2:01.350"``) from whoever configures a
race.  Parsing never fails: text that cannot be understood is treated as a
two-minute lap so that a half-edited value never blocks a simulation.
"""

from __future__ import annotations

import math
import re

DEFAULT_LAP_TIME_SECS: float = 120.0

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_float(text: str) -> float:
    """Read the leading number of *text*, ignoring anything after it.

    ``"05abc"`` reads as 5.0.  Text without a leading number, or whose
    number is not finite, reads as 0.0.
    """
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return 0.0
    value = float(match.group())
    return value if math.isfinite(value) else 0.0


def parse_lap_time(text: str | None) -> float:
    """Convert ``"M:SS"`` or ``"M:SS.mmm"`` text into seconds.

    Args:
        text: Lap-time text.  Plain seconds (``"95.2"``) are accepted too.

    Returns:
        Lap time in seconds.  Empty or unparseable text yields
        :data:`DEFAULT_LAP_TIME_SECS`.  When a colon is present, an
        unparseable minute or second part counts as zero.  Trailing
        characters after a number are ignored, so ``"2:05abc"`` is 125 s.
    """
    if not text:
        return DEFAULT_LAP_TIME_SECS
    parts = str(text).split(":")
    if len(parts) == 2:
        minutes = _parse_float(parts[0])
        seconds = _parse_float(parts[1])
        return minutes * 60 + seconds
    return _parse_float(str(text)) or DEFAULT_LAP_TIME_SECS


def average_lap_time(start_secs: float, mid_secs: float, end_secs: float) -> float:
    """Weighted representative lap time over a tyre's life.

    The mid-life sample counts twice: ``(start + 2 * mid + end) / 4``.
    """
    return (start_secs + 2 * mid_secs + end_secs) / 4


def format_lap_time(total_seconds: float) -> str:
    """Format seconds as ``M:SS.mmm``."""
    minutes = math.floor(total_seconds / 60)
    seconds = total_seconds - minutes * 60
    return f"{minutes}:{seconds:06.3f}"


def format_race_time(total_seconds: float) -> str:
    """Format seconds as ``H:MM:SS``, truncating fractions.

    Non-finite or negative input renders as ``"0:00:00"``.
    """
    if not math.isfinite(total_seconds) or total_seconds < 0:
        return "0:00:00"
    hours = math.floor(total_seconds / 3600)
    minutes = math.floor((total_seconds % 3600) / 60)
    seconds = math.floor(total_seconds % 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"
