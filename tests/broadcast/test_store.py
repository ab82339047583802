"""Tests for GameStateStore."""

from __future__ import annotations

import pytest

from relaywatch.broadcast.models import GameState, PlayerState, RoundGames, round_games
from relaywatch.broadcast.store import GameStateStore
from relaywatch.core.enums import Side
from relaywatch.errors import NotInitialized


def _snapshot(*ids: str) -> RoundGames:
    game = GameState(players={Side.WHITE: PlayerState(), Side.BLACK: PlayerState()})
    return round_games((game_id, game) for game_id in ids)


class TestGameStateStore:
    def test_read_before_init_raises(self) -> None:
        store = GameStateStore()
        assert not store.is_initialized
        with pytest.raises(NotInitialized):
            store.current()

    def test_replace_publishes(self) -> None:
        store = GameStateStore()
        seen: list[RoundGames] = []
        store.events.on_replace.append(seen.append)

        first = _snapshot("a")
        second = _snapshot("a", "b")
        store.replace(first)
        store.replace(second)

        assert store.current() is second
        assert seen == [first, second]

    def test_same_snapshot_not_republished(self) -> None:
        store = GameStateStore()
        seen: list[RoundGames] = []
        store.events.on_replace.append(seen.append)
        snapshot = _snapshot("a")
        store.replace(snapshot)
        store.replace(snapshot)
        assert len(seen) == 1
