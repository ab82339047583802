"""Countdown clock primitive and clock text formatting."""

from relaywatch.clock.countdown import CountdownEvents, CountdownTimer
from relaywatch.clock.display import format_clock, is_emergency

__all__ = [
    "CountdownEvents",
    "CountdownTimer",
    "format_clock",
    "is_emergency",
]
