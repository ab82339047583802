"""Immutable snapshot types for a broadcast round."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType
from typing import Any

import chess

from relaywatch.core.enums import Side

GameId = str
RoundGames = Mapping[GameId, "GameState"]

STARTING_FEN = chess.STARTING_FEN
ONGOING_STATUS = "*"


@dataclass(frozen=True, slots=True)
class PlayerState:
    """One side of a relayed game.

    ``clock`` stays ``None`` until the relay has reported it.
    """

    name: str | None = None
    title: str | None = None
    rating: int | None = None
    federation: str | None = None
    clock: timedelta | None = None

    def with_clock(self, clock: timedelta | None) -> PlayerState:
        return dataclasses.replace(self, clock=clock)


@dataclass(frozen=True, slots=True)
class GameState:
    """Snapshot of one relayed game."""

    players: Mapping[Side, PlayerState]
    fen: str = STARTING_FEN
    last_move: str | None = None
    think_time: timedelta = timedelta(0)
    status: str = ONGOING_STATUS
    name: str = ""

    def __post_init__(self) -> None:
        missing = [side for side in Side if side not in self.players]
        if missing:
            names = ", ".join(str(side) for side in missing)
            raise ValueError(f"GameState is missing player state for: {names}")
        # Freeze a private copy so callers can't mutate the snapshot.
        object.__setattr__(
            self,
            "players",
            MappingProxyType({side: self.players[side] for side in Side}),
        )

    @property
    def is_playing(self) -> bool:
        return self.status == ONGOING_STATUS

    @property
    def side_to_move(self) -> Side:
        return Side.from_fen_turn(chess.Board(self.fen).turn)

    def player(self, side: Side) -> PlayerState:
        return self.players[side]

    def replace(self, **changes: Any) -> GameState:
        return dataclasses.replace(self, **changes)

    def with_clocks(
        self, white: timedelta | None, black: timedelta | None
    ) -> GameState:
        return self.replace(
            players={
                Side.WHITE: self.players[Side.WHITE].with_clock(white),
                Side.BLACK: self.players[Side.BLACK].with_clock(black),
            }
        )


def round_games(items: Iterable[tuple[GameId, GameState]]) -> RoundGames:
    """Build a read-only round snapshot, preserving *items* order."""
    return MappingProxyType(dict(items))
