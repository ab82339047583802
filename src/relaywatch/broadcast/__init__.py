"""Broadcast round layer: snapshot store, socket events and reconciliation.

Quick start::

    from relaywatch.broadcast import BroadcastRoundController

    ctrl = BroadcastRoundController(
        round_id,
        socket_client=socket,
        load_round=fetch_round_games,
    )
    ctrl.games_changed.connect(render)
    ctrl.open()
"""

from relaywatch.broadcast.controller import (
    BroadcastRoundController,
    RoundLoader,
    SocketClient,
    broadcast_socket_uri,
)
from relaywatch.broadcast.events import (
    ChaptersEvent,
    ClockEvent,
    MoveAddedEvent,
    RoundEvent,
    SocketEvent,
    centis_to_duration,
    decode_chapters,
    decode_event,
    games_from_chapters,
)
from relaywatch.broadcast.models import (
    GameId,
    GameState,
    PlayerState,
    RoundGames,
    round_games,
)
from relaywatch.broadcast.reconciler import (
    handle_chapters_snapshot,
    handle_clock_update,
    handle_move_added,
    reconcile,
)
from relaywatch.broadcast.store import GameStateStore, StoreEvents
from relaywatch.broadcast.ticker import advance_think_time

__all__ = [
    # Models
    "GameId",
    "GameState",
    "PlayerState",
    "RoundGames",
    "round_games",
    # Events
    "ChaptersEvent",
    "ClockEvent",
    "MoveAddedEvent",
    "RoundEvent",
    "SocketEvent",
    "centis_to_duration",
    "decode_chapters",
    "decode_event",
    "games_from_chapters",
    # Reconciliation
    "advance_think_time",
    "handle_chapters_snapshot",
    "handle_clock_update",
    "handle_move_added",
    "reconcile",
    # Runtime
    "BroadcastRoundController",
    "GameStateStore",
    "RoundLoader",
    "SocketClient",
    "StoreEvents",
    "broadcast_socket_uri",
]
