"""Socket events for a broadcast round and their payload decoding.

The relay socket sends JSON messages tagged with a ``topic``. Three topics
affect the round snapshot:

* ``addNode``: a move was appended to a game's move tree.
* ``chapters``: the full list of games in the round.
* ``clock``: both clocks of one game were updated.

:func:`decode_event` turns a raw :class:`SocketEvent` into one of the typed
events below, or ``None`` for topics the round does not track.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import chess

from relaywatch.broadcast.models import (
    ONGOING_STATUS,
    GameId,
    GameState,
    PlayerState,
    RoundGames,
    round_games,
)
from relaywatch.core.enums import Side
from relaywatch.errors import MalformedEvent

TOPIC_ADD_NODE = "addNode"
TOPIC_CHAPTERS = "chapters"
TOPIC_CLOCK = "clock"


@dataclass(frozen=True, slots=True)
class SocketEvent:
    """Raw message delivered by the socket transport."""

    topic: str
    data: Any = None


# ── Typed events ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MoveAddedEvent:
    relay_path: str
    game_id: GameId
    fen: str
    clock: timedelta | None
    move: str


@dataclass(frozen=True, slots=True)
class ChaptersEvent:
    games: tuple[tuple[GameId, GameState], ...]


@dataclass(frozen=True, slots=True)
class ClockEvent:
    game_id: GameId
    white_clock: timedelta | None
    black_clock: timedelta | None


RoundEvent = MoveAddedEvent | ChaptersEvent | ClockEvent


# ── Decoding ─────────────────────────────────────────────────────────────────


def centis_to_duration(value: Any) -> timedelta | None:
    """Decode a centisecond clock value; ``None`` means no update."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid centisecond value: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Non-finite centisecond value: {value!r}")
    try:
        return timedelta(milliseconds=value * 10)
    except OverflowError:
        raise ValueError(f"Centisecond value out of range: {value!r}") from None


def decode_event(event: SocketEvent) -> RoundEvent | None:
    """Decode *event* or return ``None`` if its topic is not tracked.

    Raises:
        MalformedEvent: a required field is missing or invalid.
    """
    decoder = _DECODERS.get(event.topic)
    if decoder is None:
        return None
    return decoder(event.data)


def decode_chapters(data: Any) -> ChaptersEvent:
    if not isinstance(data, Sequence) or isinstance(data, (str, bytes)):
        raise MalformedEvent(TOPIC_CHAPTERS, "expected a list of chapters")
    return ChaptersEvent(
        games=tuple(_decode_chapter(chapter) for chapter in data)
    )


def games_from_chapters(data: Any) -> RoundGames:
    """Build a round snapshot from a chapter list payload."""
    return round_games(decode_chapters(data).games)


def _decode_add_node(data: Any) -> MoveAddedEvent:
    topic = TOPIC_ADD_NODE
    relay_path = _require_str(topic, data, "relayPath", allow_empty=True)
    game_id = _require_str(topic, _require_mapping(topic, data, "p"), "chapterId")
    node = _require_mapping(topic, data, "n")
    fen = _require_fen(topic, _require_str(topic, node, "fen"))
    move = _require_uci(topic, _require_str(topic, node, "uci"))
    return MoveAddedEvent(
        relay_path=relay_path,
        game_id=game_id,
        fen=fen,
        clock=_optional_clock(topic, node.get("clock")),
        move=move,
    )


def _decode_clock(data: Any) -> ClockEvent:
    topic = TOPIC_CLOCK
    position = _require_mapping(topic, data, "p")
    game_id = _require_str(topic, position, "chapterId")
    clocks = position.get("relayClocks")
    if clocks is None:
        clocks = ()
    elif not isinstance(clocks, Sequence) or isinstance(clocks, (str, bytes)):
        raise MalformedEvent(topic, "relayClocks must be a list")
    white = clocks[0] if len(clocks) > 0 else None
    black = clocks[1] if len(clocks) > 1 else None
    return ClockEvent(
        game_id=game_id,
        white_clock=_optional_clock(topic, white),
        black_clock=_optional_clock(topic, black),
    )


def _decode_chapter(chapter: Any) -> tuple[GameId, GameState]:
    topic = TOPIC_CHAPTERS
    if not isinstance(chapter, Mapping):
        raise MalformedEvent(topic, "chapter must be an object")
    game_id = _require_str(topic, chapter, "id")
    fen = _require_fen(topic, _require_str(topic, chapter, "fen"))

    players = chapter.get("players")
    if (
        not isinstance(players, Sequence)
        or isinstance(players, str)
        or len(players) != 2
    ):
        raise MalformedEvent(topic, f"chapter {game_id!r} needs two players")

    last_move = chapter.get("lastMove")
    if last_move is not None:
        if not isinstance(last_move, str):
            raise MalformedEvent(topic, f"invalid lastMove {last_move!r}")
        last_move = _require_uci(topic, last_move)

    think_time = chapter.get("thinkTime")
    try:
        seconds = float(think_time) if think_time is not None else 0.0
        elapsed = timedelta(seconds=max(0.0, seconds))
    except (TypeError, ValueError, OverflowError):
        raise MalformedEvent(topic, f"invalid thinkTime {think_time!r}") from None

    game = GameState(
        players={
            Side.WHITE: _decode_player(players[0]),
            Side.BLACK: _decode_player(players[1]),
        },
        fen=fen,
        last_move=last_move,
        think_time=elapsed,
        status=str(chapter.get("status") or ONGOING_STATUS),
        name=str(chapter.get("name") or ""),
    )
    return game_id, game


def _decode_player(data: Any) -> PlayerState:
    topic = TOPIC_CHAPTERS
    if not isinstance(data, Mapping):
        raise MalformedEvent(topic, "player must be an object")
    rating = data.get("rating")
    if rating is not None and (isinstance(rating, bool) or not isinstance(rating, int)):
        raise MalformedEvent(topic, f"invalid rating {rating!r}")
    return PlayerState(
        name=data.get("name"),
        title=data.get("title"),
        rating=rating,
        federation=data.get("fed"),
        clock=_optional_clock(topic, data.get("clock")),
    )


# ── Field helpers ────────────────────────────────────────────────────────────


def _require_mapping(topic: str, data: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise MalformedEvent(topic, "payload must be an object")
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise MalformedEvent(topic, f"missing object {key!r}")
    return value


def _require_str(
    topic: str, data: Any, key: str, *, allow_empty: bool = False
) -> str:
    if not isinstance(data, Mapping):
        raise MalformedEvent(topic, "payload must be an object")
    value = data.get(key)
    if not isinstance(value, str) or not (value or allow_empty):
        raise MalformedEvent(topic, f"missing string {key!r}")
    return value


def _require_fen(topic: str, fen: str) -> str:
    try:
        chess.Board(fen)
    except ValueError as exc:
        raise MalformedEvent(topic, f"invalid FEN {fen!r}: {exc}") from None
    return fen


def _require_uci(topic: str, uci: str) -> str:
    try:
        chess.Move.from_uci(uci)
    except ValueError:
        raise MalformedEvent(topic, f"invalid UCI move {uci!r}") from None
    return uci


def _optional_clock(topic: str, value: Any) -> timedelta | None:
    try:
        return centis_to_duration(value)
    except (ValueError, OverflowError) as exc:
        raise MalformedEvent(topic, str(exc)) from None


_DECODERS = {
    TOPIC_ADD_NODE: _decode_add_node,
    TOPIC_CHAPTERS: decode_chapters,
    TOPIC_CLOCK: _decode_clock,
}
