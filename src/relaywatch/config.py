"""Tunable settings for broadcast tracking and countdown clocks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class BroadcastSettings:
    """All tunable timings and protocol markers."""

    # Broadcast round
    tick_interval_ms: int = 1000
    live_relay_path: str = "!"

    # Countdown clock
    countdown_period_ms: int = 100
    emergency_cooldown: timedelta = timedelta(seconds=20)
    emergency_rearm_factor: float = 1.5

    @property
    def tick_step(self) -> timedelta:
        """Think time added to each playing game per ticker firing."""
        return timedelta(milliseconds=self.tick_interval_ms)


DEFAULT_SETTINGS = BroadcastSettings()
