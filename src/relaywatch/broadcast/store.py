"""Owner of the current broadcast round snapshot."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from relaywatch.broadcast.models import RoundGames
from relaywatch.errors import NotInitialized

ReplaceCallback = Callable[[RoundGames], None]


@dataclass
class StoreEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_replace: list[ReplaceCallback] = field(default_factory=list)


class GameStateStore:
    """Holds the latest :data:`RoundGames` snapshot and publishes swaps.

    Snapshots are never mutated; :meth:`replace` swaps the whole value in one
    step, so observers only ever see complete transitions.
    """

    __slots__ = ("_games", "events")

    def __init__(self) -> None:
        self._games: RoundGames | None = None
        self.events = StoreEvents()

    @property
    def is_initialized(self) -> bool:
        return self._games is not None

    def current(self) -> RoundGames:
        if self._games is None:
            raise NotInitialized
        return self._games

    def replace(self, games: RoundGames) -> None:
        """Publish *games* as the new snapshot.

        Replacing a snapshot with the very same object is not re-published.
        """
        if games is self._games:
            return
        self._games = games
        for cb in self.events.on_replace:
            cb(games)
