"""Local think-time ticker for live games."""

from __future__ import annotations

from datetime import timedelta

from relaywatch.broadcast.models import RoundGames, round_games

ONE_SECOND = timedelta(seconds=1)


def advance_think_time(games: RoundGames, step: timedelta = ONE_SECOND) -> RoundGames:
    """Add *step* to the think time of every game still being played.

    Returns *games* itself when no game is playing.
    """
    if not any(game.is_playing for game in games.values()):
        return games
    return round_games(
        (
            game_id,
            game.replace(think_time=game.think_time + step) if game.is_playing else game,
        )
        for game_id, game in games.items()
    )
