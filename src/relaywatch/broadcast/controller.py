"""BroadcastRoundController: live state of every game in a broadcast round.

Wires the socket feed, the initial round loader and the 1 Hz think-time
ticker to a :class:`GameStateStore`, and re-emits each published snapshot
as a Qt signal.

Thread-safety: socket events and ticker timeouts must be delivered on the
thread owning the controller. Qt's queued signal delivery makes this the
default, so each read-reconcile-replace cycle runs to completion before the
next event or tick is processed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from relaywatch.broadcast.events import SocketEvent, decode_event
from relaywatch.broadcast.models import RoundGames
from relaywatch.broadcast.reconciler import reconcile
from relaywatch.broadcast.store import GameStateStore
from relaywatch.broadcast.ticker import advance_think_time
from relaywatch.config import DEFAULT_SETTINGS, BroadcastSettings
from relaywatch.errors import MalformedEvent, NotInitialized
from relaywatch.scheduling import QtTickScheduler, TickScheduler

_LOGGER = logging.getLogger(__name__)

RoundLoader = Callable[[str], RoundGames]


def broadcast_socket_uri(round_id: str) -> str:
    """Socket path serving live events for *round_id*."""
    return f"study/{round_id}/socket/v6"


class EventSignal(Protocol):
    """Minimal signal interface used by :class:`BroadcastRoundController`."""

    def connect(self, slot: Callable[..., object]) -> object: ...

    def disconnect(self, slot: Callable[..., object]) -> object: ...


class SocketClient(Protocol):
    """Transport delivering :class:`SocketEvent` objects in order."""

    @property
    def event_received(self) -> EventSignal: ...


class BroadcastRoundController(QObject):
    """Keeps the games of one broadcast round in sync with the relay."""

    games_changed = pyqtSignal(object)
    load_failed = pyqtSignal(str)

    def __init__(
        self,
        round_id: str,
        *,
        socket_client: SocketClient,
        load_round: RoundLoader,
        scheduler: TickScheduler | None = None,
        settings: BroadcastSettings = DEFAULT_SETTINGS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._round_id = round_id
        self._socket_client = socket_client
        self._load_round = load_round
        self._settings = settings
        self._scheduler = scheduler if scheduler is not None else QtTickScheduler(self)
        self._store = GameStateStore()
        self._store.events.on_replace.append(self.games_changed.emit)
        self._is_open = False
        self._is_closed = False

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def round_id(self) -> str:
        return self._round_id

    @property
    def socket_uri(self) -> str:
        return broadcast_socket_uri(self._round_id)

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def is_ready(self) -> bool:
        return self._store.is_initialized

    @property
    def games(self) -> RoundGames:
        """Latest snapshot. Raises :class:`NotInitialized` until loaded."""
        return self._store.current()

    # ── Lifecycle ────────────────────────────────────────────────────────

    def open(self) -> None:
        """Subscribe to the socket, load the round and start the ticker.

        Events that arrive before the initial load settles are dropped. A
        closed controller cannot be reopened.
        """
        if self._is_open or self._is_closed:
            return
        self._is_open = True
        self._socket_client.event_received.connect(self.handle_socket_event)
        _LOGGER.info("Opening broadcast round %s at %s", self._round_id, self.socket_uri)

        try:
            games = self._load_round(self._round_id)
        except Exception as exc:
            _LOGGER.warning("Failed to load broadcast round %s: %s", self._round_id, exc)
            self.load_failed.emit(str(exc))
            return

        if not self._is_open:
            return
        self._store.replace(games)
        self._scheduler.start(self._settings.tick_interval_ms, self._on_tick)

    def close(self) -> None:
        """Stop the ticker and unsubscribe from the socket.

        Idempotent. The last snapshot stays readable through :attr:`games`.
        """
        if not self._is_open:
            self._is_closed = True
            return
        self._is_open = False
        self._is_closed = True
        self._scheduler.stop()
        self._socket_client.event_received.disconnect(self.handle_socket_event)
        _LOGGER.info("Closed broadcast round %s", self._round_id)

    # ── Event handling ───────────────────────────────────────────────────

    def handle_socket_event(self, event: SocketEvent) -> None:
        """Apply one socket event to the round snapshot."""
        if not self._is_open:
            return
        try:
            current = self._store.current()
        except NotInitialized:
            _LOGGER.debug(
                "Round %s not ready, dropping %r event", self._round_id, event.topic
            )
            return

        try:
            decoded = decode_event(event)
        except MalformedEvent as exc:
            _LOGGER.warning("Dropping event for round %s: %s", self._round_id, exc)
            return
        if decoded is None:
            return

        self._store.replace(
            reconcile(current, decoded, live_relay_path=self._settings.live_relay_path)
        )

    def _on_tick(self) -> None:
        if not self._is_open or not self._store.is_initialized:
            return
        self._store.replace(
            advance_think_time(self._store.current(), self._settings.tick_step)
        )
