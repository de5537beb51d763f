"""Duration and date formatting shared by reports and timer displays."""

from __future__ import annotations

from datetime import date, datetime


def format_duration(minutes: int | None) -> str:
    """``125`` → ``"2h 5m"``, ``45`` → ``"45m"``."""
    minutes = int(minutes or 0)
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def format_elapsed(seconds: int) -> str:
    """``125`` → ``"2:05"``, ``3725`` → ``"1:02:05"``."""
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_date(value: date | datetime) -> str:
    """``Jan 6, 2025``"""
    return f"{value:%b} {value.day}, {value.year}"
