"""Single countdown clock with flag and low-time (emergency) notifications."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

from relaywatch.clock.display import is_emergency
from relaywatch.config import DEFAULT_SETTINGS, BroadcastSettings
from relaywatch.scheduling import QtTickScheduler, TickScheduler

_ZERO = timedelta(0)

FlagCallback = Callable[[], None]
TimeCallback = Callable[[timedelta], None]  # time left


@dataclass
class CountdownEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_flag: list[FlagCallback] = field(default_factory=list)
    on_stop: list[TimeCallback] = field(default_factory=list)
    on_emergency: list[TimeCallback] = field(default_factory=list)
    on_tick: list[TimeCallback] = field(default_factory=list)


class CountdownTimer:
    """Counts a single time budget down to zero.

    Each tick subtracts the time actually elapsed since the previous one
    (measured with *now*, a monotonic clock in seconds), so a late timer
    never makes the clock drift. Reaching zero fires ``on_flag`` once and
    stops the clock; :meth:`start` afterwards resumes from whatever
    :attr:`time_left` holds, so a fresh countdown needs :meth:`set_duration`.

    If *emergency_threshold* is set, ``on_emergency`` fires when the time
    left drops to the threshold, at most once per cooldown window, and is
    re-armed only after the time left climbs back above
    ``threshold * emergency_rearm_factor``.
    """

    __slots__ = (
        "_time_left",
        "_emergency_threshold",
        "_scheduler",
        "_now",
        "_settings",
        "_active",
        "_last_tick",
        "_emergency_armed",
        "_next_emergency",
        "events",
    )

    def __init__(
        self,
        duration: timedelta,
        *,
        emergency_threshold: timedelta | None = None,
        scheduler: TickScheduler | None = None,
        now: Callable[[], float] = time.monotonic,
        settings: BroadcastSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._time_left = duration
        self._emergency_threshold = emergency_threshold
        self._scheduler = scheduler if scheduler is not None else QtTickScheduler()
        self._now = now
        self._settings = settings
        self._active = False
        self._last_tick = 0.0
        self._emergency_armed = True
        self._next_emergency: float | None = None
        self.events = CountdownEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def time_left(self) -> timedelta:
        return self._time_left

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def emergency_threshold(self) -> timedelta | None:
        return self._emergency_threshold

    @property
    def is_emergency(self) -> bool:
        return is_emergency(self._time_left, self._emergency_threshold)

    # ── Control ──────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start counting down. Restarting only resets the elapsed base."""
        self._last_tick = self._now()
        self._active = True
        self._scheduler.start(self._settings.countdown_period_ms, self.tick)

    def stop(self) -> timedelta:
        """Stop counting down and return the (non-negative) time left."""
        if not self._active:
            return self._time_left
        self._consume_elapsed()
        if self._time_left < _ZERO:
            self._time_left = _ZERO
        self._active = False
        self._scheduler.stop()
        for cb in self.events.on_stop:
            cb(self._time_left)
        return self._time_left

    def set_duration(self, duration: timedelta) -> None:
        """Replace the time left, e.g. after a server clock update."""
        self._time_left = duration
        if self._active:
            self._last_tick = self._now()

    def tick(self) -> None:
        """Consume elapsed time; called by the scheduler every period."""
        if not self._active:
            return
        self._consume_elapsed()
        self._check_emergency()
        if self._time_left <= _ZERO:
            self._time_left = _ZERO
            for cb in self.events.on_flag:
                cb()
            self.stop()
            return
        for cb in self.events.on_tick:
            cb(self._time_left)

    # ── Internal ─────────────────────────────────────────────────────────

    def _consume_elapsed(self) -> None:
        now = self._now()
        self._time_left -= timedelta(seconds=now - self._last_tick)
        self._last_tick = now

    def _check_emergency(self) -> None:
        threshold = self._emergency_threshold
        if threshold is None:
            return
        now = self._now()
        if (
            self._time_left <= threshold
            and self._emergency_armed
            and (self._next_emergency is None or self._next_emergency < now)
        ):
            self._emergency_armed = False
            self._next_emergency = now + self._settings.emergency_cooldown.total_seconds()
            for cb in self.events.on_emergency:
                cb(self._time_left)
        elif self._time_left > threshold * self._settings.emergency_rearm_factor:
            self._emergency_armed = True
