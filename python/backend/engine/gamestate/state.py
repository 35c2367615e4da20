"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

from dataclasses import dataclass, field

from backend.engine.selection import Selection, selection_sum
from backend.models.block import Block, GameMode, GameStatus


@dataclass
class GameState:
    """Everything a renderer needs to draw one frame of the game."""

    blocks: list[Block] = field(default_factory=list)
    target_sum: int = 0
    score: int = 0
    high_score: int = 0
    status: GameStatus = GameStatus.IDLE
    mode: GameMode = GameMode.CLASSIC
    time_left: float = 0.0
    selection: Selection = field(default_factory=Selection)
    # Set while an over-shooting selection is shown as wrong.
    is_wrong: bool = False

    # -- queries --------------------------------------------------------------

    @property
    def selected_ids(self) -> list[str]:
        return self.selection.ids

    @property
    def selected_sum(self) -> int:
        return selection_sum(self.selection.ids, self.blocks)

    @property
    def max_row_reached(self) -> int:
        """Highest occupied row, or -1 on an empty grid."""
        return max((b.row for b in self.blocks), default=-1)

    def block_at(self, row: int, col: int) -> Block | None:
        for b in self.blocks:
            if b.row == row and b.col == col:
                return b
        return None

    def get_block(self, block_id: str) -> Block | None:
        for b in self.blocks:
            if b.id == block_id:
                return b
        return None

    def copy(self) -> GameState:
        # Blocks are frozen, so a shallow list copy is a full copy.
        return GameState(
            blocks=list(self.blocks),
            target_sum=self.target_sum,
            score=self.score,
            high_score=self.high_score,
            status=self.status,
            mode=self.mode,
            time_left=self.time_left,
            selection=Selection(self.selection.ids),
            is_wrong=self.is_wrong,
        )
