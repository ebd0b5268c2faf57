"""
modules/planning/clock.py
-------------------------
"HH:MM" <-> minutes-from-midnight helpers shared by the scheduler, the edit
operations and the feasibility checker.

Unlike a ``datetime.time`` these strings are allowed to run past midnight
("24:15"): an evening activity extended beyond 24:00 keeps a comparable value
instead of wrapping to "00:15".
"""

from __future__ import annotations

import math


def hhmm_to_minutes(value: str) -> int:
    """Convert "HH:MM" to integer minutes-from-midnight.  Raises ValueError on junk."""
    hours, _, mins = value.strip().partition(":")
    if not hours.isdigit() or not mins.isdigit():
        raise ValueError(f"Invalid time string {value!r} (expected 'HH:MM')")
    return int(hours) * 60 + int(mins)


def minutes_to_hhmm(minutes: int) -> str:
    """Inverse of hhmm_to_minutes; hours are not wrapped at 24."""
    minutes = max(0, int(minutes))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(value: str, minutes: int) -> str:
    return minutes_to_hhmm(hhmm_to_minutes(value) + minutes)


def round_half_up(x: float) -> int:
    # round() would do banker's rounding: 0.5 -> 0, 2.5 -> 2
    return int(math.floor(x + 0.5))
