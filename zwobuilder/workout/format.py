"""Display helpers for durations, powers and export file names."""

from __future__ import annotations

import re

from zwobuilder.core.constants import ZWO_EXTENSION

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def _trimmed(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return f"{value:.1f}"


def format_duration(seconds: int | float) -> str:
    """Human readable duration.

    >>> format_duration(15)
    '15 s'
    >>> format_duration(300)
    '5 min'
    >>> format_duration(5400)
    '1.5 hr'
    """
    if seconds < 60:
        return f"{seconds} s"
    if seconds < 3600:
        return f"{_trimmed(seconds / 60)} min"
    return f"{_trimmed(seconds / 3600)} hr"


def seconds_to_clock(seconds: int) -> str:
    """Editor label: ``m:ss`` under ten minutes, up to ``hh:mm:ss``."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    text = f"{hours % 100:02d}:{minutes:02d}:{secs:02d}"
    if seconds < 36000:
        text = text[1:]
    if seconds < 3600:
        text = text[2:]
    if seconds < 600:
        text = text[1:]
    return text


def absolute_watts(power_fraction: float, ftp_watts: int | float) -> int:
    return int(round(power_fraction * ftp_watts))


def export_filename(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name or "workout") + ZWO_EXTENSION
