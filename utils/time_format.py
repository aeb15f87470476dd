"""
Duration formatting helpers for stopwatch displays and reports.
"""

from __future__ import annotations

from datetime import timedelta


def _whole_seconds(elapsed: float | timedelta) -> int:
    if isinstance(elapsed, timedelta):
        elapsed = elapsed.total_seconds()
    return max(int(elapsed), 0)


def format_hms(elapsed: float | timedelta) -> str:
    """Zero-padded HH:MM:SS; hours are not wrapped at 24."""
    total = _whole_seconds(elapsed)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_compact(elapsed: float | timedelta) -> str:
    """Only the nonzero units, e.g. "1h 5m", "45s". Zero renders as ""."""
    total = _whole_seconds(elapsed)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0:
        parts.append(f"{seconds}s")
    return " ".join(parts).strip()
