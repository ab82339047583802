"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator

import pytest

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


class FakeScheduler:
    """In-memory TickScheduler; tests fire ticks by hand."""

    def __init__(self) -> None:
        self.interval_ms: int | None = None
        self.callback: Callable[[], None] | None = None
        self.stop_calls = 0

    @property
    def is_active(self) -> bool:
        return self.callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self.callback = callback

    def stop(self) -> None:
        self.stop_calls += 1
        self.callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


class FakeMonotonic:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for Qt-backed tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def spin_event_loop(qapp: object) -> Callable[[int], None]:
    """Run the Qt event loop for *ms* milliseconds so real timers fire."""
    from PyQt6.QtCore import QEventLoop, QTimer

    def spin(ms: int) -> None:
        loop = QEventLoop()
        QTimer.singleShot(ms, loop.quit)
        loop.exec()

    return spin
