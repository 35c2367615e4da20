"""Cursor-driven play used by the terminal frontends."""

from __future__ import annotations

import random

from backend.config import GameConfig
from backend.engine.clock import ManualClock
from backend.engine.gameplay import GamePlay
from backend.models.block import GameMode, GameStatus
from frontend.cli.controller import TerminalController
from tests.helpers import make_blocks


def _controller(config: GameConfig | None = None) -> TerminalController:
    game = GamePlay(config or GameConfig(), clock=ManualClock(), rng=random.Random(2))
    game.start(GameMode.CLASSIC)
    game.state.blocks = make_blocks([3, 5, 2])
    game.state.target_sum = 5
    return TerminalController(game)


def test_cursor_moves_and_clamps() -> None:
    ctl = _controller()
    cfg = ctl.game.config

    ctl.handle("left")
    ctl.handle("down")
    assert ctl.cursor == (0, 0)

    ctl.handle("up")
    ctl.handle("right")
    assert ctl.cursor == (1, 1)

    for _ in range(cfg.grid_cols + cfg.grid_rows_max):
        ctl.handle("up")
        ctl.handle("right")
    assert ctl.cursor == (cfg.grid_rows_max - 1, cfg.grid_cols - 1)


def test_select_toggles_block_under_cursor() -> None:
    ctl = _controller()
    ctl.handle("select")
    assert ctl.game.state.selected_ids == ["b0"]

    ctl.handle("select")
    assert ctl.game.state.selected_ids == []


def test_select_on_empty_cell_does_nothing() -> None:
    ctl = _controller()
    ctl.handle("up")
    ctl.handle("select")
    assert ctl.game.state.selected_ids == []


def test_success_scores() -> None:
    ctl = _controller()
    ctl.handle("right")
    ctl.handle("select")

    assert ctl.game.state.score == 10
    assert ctl.message == "Nice!"


def test_overshoot_clears_after_flash() -> None:
    ctl = _controller(GameConfig(overshoot_flash=0))
    ctl.handle("select")
    ctl.handle("right")
    ctl.handle("select")
    assert ctl.game.state.is_wrong

    ctl.poll()

    assert not ctl.game.state.is_wrong
    assert ctl.game.state.selected_ids == []


def test_cell_styles() -> None:
    ctl = _controller()
    ctl.handle("select")
    state = ctl.game.snapshot()

    assert ctl.cell(state, 0, 0)[1] == "selected-cursor"
    assert ctl.cell(state, 0, 1)[1] == "plain"
    assert ctl.cell(state, 5, 5) == (None, "empty")


def test_pause_and_quit() -> None:
    ctl = _controller()
    ctl.handle("pause")
    assert ctl.game.status == GameStatus.PAUSED

    ctl.handle("select")
    assert ctl.game.state.selected_ids == []

    assert ctl.handle("quit") is False
    assert ctl.game.status == GameStatus.IDLE


def test_retry_after_game_over() -> None:
    ctl = _controller()
    ctl.game.state.status = GameStatus.GAMEOVER

    assert ctl.handle("retry") is True
    assert ctl.game.status == GameStatus.PLAYING
