"""Keyboard-driven play shared by the terminal frontends.

The terminal cannot be clicked, so a cursor walks the grid and Space/Enter
toggles the tile beneath it.  Rendering stays in each frontend.
"""

from __future__ import annotations

import time

from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.engine.selection import Evaluation
from backend.models.block import Block, GameStatus

_MOVES: dict[str, tuple[int, int]] = {
    # Row 0 is drawn at the bottom, so "up" means a higher row index.
    "up": (1, 0),
    "down": (-1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


class TerminalController:
    """Translates key actions into session calls and tracks the cursor."""

    def __init__(self, game: GamePlay) -> None:
        self.game = game
        self.cursor: tuple[int, int] = (0, 0)
        self.message = ""
        self._wrong_until: float | None = None

    # -- input ----------------------------------------------------------------

    def handle(self, key: str) -> bool:
        """Apply *key* to the running game.  Returns False to leave the game."""
        status = self.game.status
        self.message = ""

        if key == "quit":
            self.game.return_home()
            return False
        if status == GameStatus.GAMEOVER:
            if key in ("retry", "select"):
                self.game.retry()
                self.cursor = (0, 0)
            return True
        if key == "pause":
            self.game.toggle_pause()
        elif status != GameStatus.PLAYING:
            return True
        elif key in _MOVES:
            self._move(*_MOVES[key])
        elif key == "select":
            self._select()
        elif key == "clear":
            self.game.clear_selection()
            self._wrong_until = None
        return True

    def _move(self, dr: int, dc: int) -> None:
        cfg = self.game.config
        r, c = self.cursor
        self.cursor = (
            min(max(r + dr, 0), cfg.grid_rows_max - 1),
            min(max(c + dc, 0), cfg.grid_cols - 1),
        )

    def _select(self) -> None:
        block = self.game.snapshot().block_at(*self.cursor)
        if block is None:
            return
        result = self.game.toggle_block(block.id)
        if result == Evaluation.SUCCESS:
            self.message = "Nice!"
        elif result == Evaluation.OVERSHOOT:
            self.message = "Too much!"
            self._wrong_until = time.monotonic() + self.game.config.overshoot_flash

    # -- timers ---------------------------------------------------------------

    def poll(self) -> None:
        """Clear a wrong selection once its flash has been shown."""
        if self._wrong_until is not None and time.monotonic() >= self._wrong_until:
            self._wrong_until = None
            self.game.resolve_overshoot()

    # -- rendering helpers ----------------------------------------------------

    def cell(self, state: GameState, row: int, col: int) -> tuple[Block | None, str]:
        """Return the block at (row, col) and how it should be styled.

        Style is one of ``cursor``, ``wrong``, ``selected``, ``plain`` or
        ``empty``.
        """
        block = state.block_at(row, col)
        if block is not None and block.id in state.selection:
            style = "wrong" if state.is_wrong else "selected"
        elif (row, col) == self.cursor:
            style = "cursor"
        else:
            style = "plain" if block is not None else "empty"
        if (row, col) == self.cursor and style in ("selected", "wrong"):
            style += "-cursor"
        return block, style
