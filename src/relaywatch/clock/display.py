"""Text rendering of clock values."""

from __future__ import annotations

from datetime import timedelta

_TENTHS_BELOW = timedelta(seconds=10)
_HUNDREDTHS_BELOW = timedelta(seconds=1)


def format_clock(time_left: timedelta, *, active: bool, pad_left: bool = False) -> str:
    """Format *time_left* as ``h:mm:ss`` or ``m:ss``.

    Tenths are shown under ten seconds; a stopped clock under one second
    also shows hundredths. Negative values render as zero.
    """
    if time_left < timedelta(0):
        time_left = timedelta(0)
    total_ms = time_left // timedelta(milliseconds=1)
    hours, rem_ms = divmod(total_ms, 3_600_000)
    mins, rem_ms = divmod(rem_ms, 60_000)
    secs, millis = divmod(rem_ms, 1000)

    if hours > 0:
        hours_text = f"{hours:02d}" if pad_left else str(hours)
        text = f"{hours_text}:{mins:02d}:{secs:02d}"
    else:
        mins_text = f"{mins:02d}" if pad_left else str(mins)
        text = f"{mins_text}:{secs:02d}"

    if time_left < _TENTHS_BELOW:
        text += f".{millis // 100}"
    if not active and time_left < _HUNDREDTHS_BELOW:
        text += str(millis // 10 % 10)
    return text


def is_emergency(time_left: timedelta, threshold: timedelta | None) -> bool:
    return threshold is not None and time_left <= threshold
