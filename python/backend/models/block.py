"""Block model and the enums describing a session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum


class GameMode(StrEnum):
    CLASSIC = "classic"
    TIME = "time"


class GameStatus(StrEnum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    GAMEOVER = "gameover"


@dataclass(frozen=True)
class Block:
    """A numbered tile.

    ``row`` 0 is the bottom of the stack; rows grow upwards as new rows are
    pushed in underneath.  ``id`` never changes once the block exists.
    """

    id: str
    value: int
    row: int
    col: int

    def shifted(self, rows: int = 1) -> Block:
        """Return this block moved *rows* rows up, same id and value."""
        return replace(self, row=self.row + rows)
