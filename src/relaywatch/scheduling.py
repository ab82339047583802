"""Periodic tick scheduling on the Qt event loop."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from PyQt6.QtCore import QObject, QTimer


class TickScheduler(Protocol):
    """Minimal periodic scheduler used by the ticker and countdown clocks."""

    @property
    def is_active(self) -> bool: ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """Call *callback* every *interval_ms*, replacing any previous schedule."""

    def stop(self) -> None:
        """Cancel the schedule. Safe to call repeatedly."""


class QtTickScheduler:
    """:class:`TickScheduler` backed by a :class:`QTimer`.

    Timeouts are delivered on the thread owning the timer, so ticks are
    serialized with every other slot running on that event loop.
    """

    __slots__ = ("_timer", "_callback", "__weakref__")

    def __init__(self, parent: QObject | None = None) -> None:
        self._timer = QTimer(parent)
        self._timer.timeout.connect(self._on_timeout)
        self._callback: Callable[[], None] | None = None

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(interval_ms)

    def stop(self) -> None:
        self._timer.stop()
        self._callback = None

    def _on_timeout(self) -> None:
        if self._callback is not None:
            self._callback()
