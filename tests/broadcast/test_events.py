"""Tests for socket event decoding."""

from __future__ import annotations

from datetime import timedelta

import pytest

from relaywatch.broadcast.events import (
    ChaptersEvent,
    ClockEvent,
    MoveAddedEvent,
    SocketEvent,
    centis_to_duration,
    decode_event,
    games_from_chapters,
)
from relaywatch.broadcast.models import STARTING_FEN
from relaywatch.core.enums import Side
from relaywatch.errors import MalformedEvent

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def _chapter(chapter_id: str, **overrides: object) -> dict[str, object]:
    chapter: dict[str, object] = {
        "id": chapter_id,
        "name": f"Board {chapter_id}",
        "fen": STARTING_FEN,
        "players": [
            {"name": "Carlsen", "title": "GM", "rating": 2830, "fed": "NOR", "clock": 540000},
            {"name": "Nakamura", "title": "GM", "rating": 2790, "fed": "USA"},
        ],
        "status": "*",
    }
    chapter.update(overrides)
    return chapter


class TestCentisToDuration:
    def test_none_means_no_update(self) -> None:
        assert centis_to_duration(None) is None

    def test_centiseconds(self) -> None:
        assert centis_to_duration(60000) == timedelta(seconds=600)
        assert centis_to_duration(5) == timedelta(milliseconds=50)

    def test_rejects_non_numbers(self) -> None:
        with pytest.raises(ValueError):
            centis_to_duration("100")
        with pytest.raises(ValueError):
            centis_to_duration(True)

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), 10**20, 1e300])
    def test_rejects_out_of_range(self, value: float) -> None:
        with pytest.raises(ValueError):
            centis_to_duration(value)


class TestDecodeAddNode:
    def test_full_payload(self) -> None:
        event = decode_event(
            SocketEvent(
                "addNode",
                {
                    "relayPath": "!",
                    "p": {"chapterId": "g1", "path": ""},
                    "n": {"fen": AFTER_E4, "clock": 59800, "uci": "e2e4"},
                },
            )
        )
        assert event == MoveAddedEvent(
            relay_path="!",
            game_id="g1",
            fen=AFTER_E4,
            clock=timedelta(seconds=598),
            move="e2e4",
        )

    def test_missing_clock_is_none(self) -> None:
        event = decode_event(
            SocketEvent(
                "addNode",
                {
                    "relayPath": "",
                    "p": {"chapterId": "g1"},
                    "n": {"fen": AFTER_E4, "uci": "e2e4"},
                },
            )
        )
        assert isinstance(event, MoveAddedEvent)
        assert event.clock is None
        assert event.relay_path == ""

    def test_missing_chapter_id_is_malformed(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(
                SocketEvent(
                    "addNode",
                    {"relayPath": "!", "p": {}, "n": {"fen": AFTER_E4, "uci": "e2e4"}},
                )
            )

    def test_unparseable_fen_is_malformed(self) -> None:
        with pytest.raises(MalformedEvent) as excinfo:
            decode_event(
                SocketEvent(
                    "addNode",
                    {
                        "relayPath": "!",
                        "p": {"chapterId": "g1"},
                        "n": {"fen": "not a fen", "uci": "e2e4"},
                    },
                )
            )
        assert excinfo.value.topic == "addNode"

    def test_invalid_move_is_malformed(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(
                SocketEvent(
                    "addNode",
                    {
                        "relayPath": "!",
                        "p": {"chapterId": "g1"},
                        "n": {"fen": AFTER_E4, "uci": "zz"},
                    },
                )
            )

    def test_infinite_clock_is_malformed(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(
                SocketEvent(
                    "addNode",
                    {
                        "relayPath": "!",
                        "p": {"chapterId": "g1"},
                        "n": {"fen": AFTER_E4, "uci": "e2e4", "clock": float("inf")},
                    },
                )
            )

    def test_payload_not_an_object(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("addNode", ["nope"]))


class TestDecodeClock:
    def test_both_clocks(self) -> None:
        event = decode_event(
            SocketEvent("clock", {"p": {"chapterId": "g1", "relayClocks": [60000, 55000]}})
        )
        assert event == ClockEvent(
            game_id="g1",
            white_clock=timedelta(seconds=600),
            black_clock=timedelta(seconds=550),
        )

    def test_null_and_missing_clocks(self) -> None:
        event = decode_event(
            SocketEvent("clock", {"p": {"chapterId": "g1", "relayClocks": [None]}})
        )
        assert event == ClockEvent(game_id="g1", white_clock=None, black_clock=None)

    def test_huge_clock_is_malformed(self) -> None:
        with pytest.raises(MalformedEvent) as excinfo:
            decode_event(
                SocketEvent("clock", {"p": {"chapterId": "g1", "relayClocks": [10**20, 1]}})
            )
        assert excinfo.value.topic == "clock"

    def test_missing_position_is_malformed(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("clock", {"relayClocks": [1, 2]}))


class TestDecodeChapters:
    def test_order_and_fields(self) -> None:
        event = decode_event(
            SocketEvent(
                "chapters",
                [
                    _chapter("b", lastMove="e2e4", fen=AFTER_E4, thinkTime=12),
                    _chapter("a", status="1-0"),
                ],
            )
        )
        assert isinstance(event, ChaptersEvent)
        assert [game_id for game_id, _ in event.games] == ["b", "a"]

        game_b = event.games[0][1]
        assert game_b.last_move == "e2e4"
        assert game_b.think_time == timedelta(seconds=12)
        assert game_b.is_playing
        white = game_b.player(Side.WHITE)
        assert white.name == "Carlsen"
        assert white.rating == 2830
        assert white.federation == "NOR"
        assert white.clock == timedelta(seconds=5400)
        assert game_b.player(Side.BLACK).clock is None

        assert not event.games[1][1].is_playing

    def test_chapter_needs_two_players(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("chapters", [_chapter("a", players=[{}])]))

    @pytest.mark.parametrize("think_time", [1e300, float("inf"), "soon"])
    def test_invalid_think_time_is_malformed(self, think_time: object) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("chapters", [_chapter("a", thinkTime=think_time)]))

    def test_huge_player_clock_is_malformed(self) -> None:
        players = [{"name": "A", "clock": 10**20}, {"name": "B"}]
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("chapters", [_chapter("a", players=players)]))

    @pytest.mark.parametrize("last_move", [1234, ["e2e4"]])
    def test_non_string_last_move_is_malformed(self, last_move: object) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("chapters", [_chapter("a", lastMove=last_move)]))

    def test_not_a_list(self) -> None:
        with pytest.raises(MalformedEvent):
            decode_event(SocketEvent("chapters", {"id": "a"}))

    def test_games_from_chapters_builds_snapshot(self) -> None:
        games = games_from_chapters([_chapter("x"), _chapter("y")])
        assert list(games) == ["x", "y"]


class TestUnknownTopic:
    def test_ignored(self) -> None:
        assert decode_event(SocketEvent("crowd", {"nb": 10})) is None
