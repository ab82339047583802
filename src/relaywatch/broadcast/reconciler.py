"""Pure merge functions applying one socket event to a round snapshot.

Every handler takes the current snapshot and an event and returns the next
snapshot. A handler that has nothing to change returns *current* itself, so
callers can detect no-ops with an identity check. Each event kind only
writes the fields it owns: clock events never touch positions, and move
events never touch the side-to-move's clock.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import assert_never

import chess

from relaywatch.broadcast.events import (
    ChaptersEvent,
    ClockEvent,
    MoveAddedEvent,
    RoundEvent,
)
from relaywatch.broadcast.models import GameId, GameState, RoundGames, round_games
from relaywatch.config import DEFAULT_SETTINGS
from relaywatch.core.enums import Side

_LOGGER = logging.getLogger(__name__)

LIVE_RELAY_PATH = DEFAULT_SETTINGS.live_relay_path


def handle_move_added(
    current: RoundGames,
    event: MoveAddedEvent,
    *,
    live_relay_path: str = LIVE_RELAY_PATH,
) -> RoundGames:
    """Apply a move that reached the live tip of a game.

    Moves whose relay path is not the live marker are replays of older
    nodes and leave the snapshot untouched.
    """
    if event.relay_path != live_relay_path:
        return current

    def _apply(game: GameState) -> GameState:
        playing_side = Side.from_fen_turn(chess.Board(event.fen).turn)
        mover = playing_side.opposite
        return game.replace(
            players={
                playing_side: game.player(playing_side),
                mover: game.player(mover).with_clock(event.clock),
            },
            fen=event.fen,
            last_move=event.move,
            think_time=timedelta(0),
        )

    return _update(current, event.game_id, _apply)


def handle_chapters_snapshot(current: RoundGames, event: ChaptersEvent) -> RoundGames:
    """Replace the whole round with the games listed in *event*, in order."""
    return round_games(event.games)


def handle_clock_update(current: RoundGames, event: ClockEvent) -> RoundGames:
    """Set both clocks of one game; everything else passes through."""
    return _update(
        current,
        event.game_id,
        lambda game: game.with_clocks(event.white_clock, event.black_clock),
    )


def reconcile(
    current: RoundGames,
    event: RoundEvent,
    *,
    live_relay_path: str = LIVE_RELAY_PATH,
) -> RoundGames:
    """Dispatch *event* to the handler for its kind."""
    if isinstance(event, MoveAddedEvent):
        return handle_move_added(current, event, live_relay_path=live_relay_path)
    if isinstance(event, ChaptersEvent):
        return handle_chapters_snapshot(current, event)
    if isinstance(event, ClockEvent):
        return handle_clock_update(current, event)
    assert_never(event)


# ── Internal ─────────────────────────────────────────────────────────────────


def _update(
    current: RoundGames,
    game_id: GameId,
    apply: Callable[[GameState], GameState],
) -> RoundGames:
    game = current.get(game_id)
    if game is None:
        _LOGGER.debug("Ignoring event for unknown game %s", game_id)
        return current
    return round_games(
        (gid, apply(g) if gid == game_id else g) for gid, g in current.items()
    )
