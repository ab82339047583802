"""Core enumerations shared by the broadcast and clock layers."""

from __future__ import annotations

from enum import IntEnum


class Side(IntEnum):
    """Side of the board."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Side:
        return Side(1 - self.value)

    @classmethod
    def from_fen_turn(cls, turn: bool) -> Side:
        """Map a python-chess turn value (``chess.WHITE`` is ``True``)."""
        return cls.WHITE if turn else cls.BLACK

    def __str__(self) -> str:
        return self.name.lower()
