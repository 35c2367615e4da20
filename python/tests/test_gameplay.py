"""Session state machine: scoring, row pushes, time mode and game over."""

from __future__ import annotations

import random

import pytest

from backend.config import GameConfig
from backend.engine.clock import ManualClock
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.engine.selection import Evaluation
from backend.models.block import Block, GameMode, GameStatus
from backend.models.highscore import HighScoreStore, MemoryHighScoreStore
from tests.helpers import make_blocks


def _setup(game: GamePlay, mode: GameMode, values: list[int], target: int) -> None:
    """Start *mode* and replace the random grid with a known one."""
    game.start(mode)
    game.state.blocks = make_blocks(values)
    game.state.target_sum = target


class _RecordingClock:
    """Keeps every callback it was started with, even after stop()."""

    def __init__(self) -> None:
        self.callbacks: list = []
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self, callback, interval: float) -> None:
        if not self._running:
            self.callbacks.append(callback)
            self._running = True

    def stop(self) -> None:
        self._running = False


# -- starting -----------------------------------------------------------------


def test_new_game_is_idle(game: GamePlay) -> None:
    assert game.status == GameStatus.IDLE
    assert game.state.blocks == []


def test_start_classic(game: GamePlay, config: GameConfig) -> None:
    game.start(GameMode.CLASSIC)
    state = game.snapshot()

    assert state.status == GameStatus.PLAYING
    assert state.mode == GameMode.CLASSIC
    assert len(state.blocks) == config.initial_rows * config.grid_cols
    assert config.target_sum_min <= state.target_sum <= config.target_sum_max
    assert state.score == 0
    assert state.selected_ids == []
    assert not game.clock.running


def test_start_time_runs_clock(game: GamePlay, config: GameConfig) -> None:
    game.start("time")

    assert game.state.mode == GameMode.TIME
    assert game.state.time_left == config.time_limit
    assert game.clock.running


def test_start_rejects_unknown_mode(game: GamePlay) -> None:
    with pytest.raises(ValueError):
        game.start("zen")


# -- selection ----------------------------------------------------------------


def test_single_block_success_classic(game: GamePlay, config: GameConfig) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)

    assert game.toggle_block("b1") == Evaluation.SUCCESS

    state = game.snapshot()
    assert state.score == 10
    assert len(state.blocks) == (3 - 1) + config.grid_cols
    survivors = {b.id: b for b in state.blocks if b.id in ("b0", "b2")}
    assert {b.row for b in survivors.values()} == {1}
    assert state.get_block("b1") is None
    assert state.selected_ids == []
    assert config.target_sum_min <= state.target_sum <= config.target_sum_max


def test_pair_success_classic(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)

    assert game.toggle_block("b0") == Evaluation.PENDING
    assert game.toggle_block("b2") == Evaluation.SUCCESS
    assert game.state.score == 20


def test_overshoot_flags_then_clears(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)

    game.toggle_block("b0")
    assert game.toggle_block("b1") == Evaluation.OVERSHOOT

    state = game.snapshot()
    assert state.is_wrong
    assert state.selected_ids == ["b0", "b1"]
    assert state.score == 0
    assert len(state.blocks) == 3

    game.resolve_overshoot()
    assert not game.state.is_wrong
    assert game.state.selected_ids == []


def test_deselecting_during_flash_drops_the_flag(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)
    game.toggle_block("b0")
    game.toggle_block("b1")

    assert game.toggle_block("b1") == Evaluation.PENDING
    assert not game.state.is_wrong
    assert game.state.selected_ids == ["b0"]


def test_resolve_without_overshoot_keeps_selection(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=9)
    game.toggle_block("b0")

    game.resolve_overshoot()

    assert game.state.selected_ids == ["b0"]


def test_deselect_to_empty(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)

    game.toggle_block("b0")
    assert game.toggle_block("b0") is None
    assert game.state.selected_ids == []


def test_clear_selection(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=20)
    game.toggle_block("b0")
    game.toggle_block("b2")

    game.clear_selection()

    assert game.state.selected_ids == []


def test_stale_id_contributes_nothing(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)

    assert game.toggle_block("ghost") == Evaluation.PENDING
    assert game.toggle_block("b1") == Evaluation.SUCCESS


def test_toggle_ignored_unless_playing(game: GamePlay) -> None:
    assert game.toggle_block("b0") is None

    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)
    game.toggle_pause()

    assert game.toggle_block("b1") is None
    assert game.state.selected_ids == []


# -- time mode ----------------------------------------------------------------


def test_time_success_adds_bonus_and_resets(game: GamePlay, config: GameConfig) -> None:
    _setup(game, GameMode.TIME, [3, 5, 2], target=5)
    game.state.time_left = 7.6

    assert game.toggle_block("b1") == Evaluation.SUCCESS

    state = game.snapshot()
    assert state.score == 10 + 7
    assert len(state.blocks) == 2
    assert state.time_left == config.time_limit


def test_time_bonus_floors_below_one(game: GamePlay) -> None:
    _setup(game, GameMode.TIME, [3, 5, 2], target=5)
    game.state.time_left = 0.95

    game.toggle_block("b1")

    assert game.state.score == 10


def test_ten_ticks_from_one_second_push_a_row(game: GamePlay, config: GameConfig) -> None:
    _setup(game, GameMode.TIME, [3, 5, 2], target=5)
    game.state.time_left = 1.0

    for _ in range(9):
        game.tick()
    assert game.state.time_left == pytest.approx(0.1)
    assert len(game.state.blocks) == 3

    game.tick()

    assert len(game.state.blocks) == 3 + config.grid_cols
    assert game.state.time_left == config.time_limit
    assert game.status == GameStatus.PLAYING


def test_manual_clock_drives_countdown(game: GamePlay, config: GameConfig) -> None:
    _setup(game, GameMode.TIME, [3, 5, 2], target=5)
    game.state.time_left = 1.0

    assert game.clock.advance(1.0) == 10

    assert len(game.state.blocks) == 3 + config.grid_cols
    assert game.state.time_left == config.time_limit


def test_tick_ignored_in_classic(game: GamePlay) -> None:
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)
    before = game.snapshot()

    game.tick()

    assert game.state.time_left == before.time_left
    assert game.state.blocks == before.blocks


def test_pause_stops_countdown(game: GamePlay) -> None:
    _setup(game, GameMode.TIME, [3, 5, 2], target=5)
    game.state.time_left = 5.0

    game.toggle_pause()
    assert game.status == GameStatus.PAUSED
    assert not game.clock.running
    game.tick()
    assert game.clock.advance(3.0) == 0
    assert game.state.time_left == 5.0

    game.toggle_pause()
    assert game.status == GameStatus.PLAYING
    assert game.clock.running
    game.tick()
    assert game.state.time_left == pytest.approx(4.9)


def test_pause_outside_play_is_noop(game: GamePlay) -> None:
    game.toggle_pause()
    assert game.status == GameStatus.IDLE


def test_stale_clock_callback_is_dropped(config: GameConfig) -> None:
    clock = _RecordingClock()
    game = GamePlay(config, clock=clock, rng=random.Random(3))
    _setup(game, GameMode.TIME, [3, 5, 2], target=5)
    game.state.time_left = 5.0

    game.toggle_pause()
    game.toggle_pause()
    first, second = clock.callbacks

    first()
    assert game.state.time_left == 5.0
    second()
    assert game.state.time_left == pytest.approx(4.9)


# -- game over ----------------------------------------------------------------


def test_classic_row_push_overflows(game: GamePlay, config: GameConfig) -> None:
    game.start(GameMode.CLASSIC)
    game.state.blocks = [
        Block(id="top", value=1, row=config.grid_rows_max - 1, col=0),
        Block(id="hit", value=5, row=0, col=1),
    ]
    game.state.target_sum = 5

    assert game.toggle_block("hit") == Evaluation.SUCCESS

    assert game.status == GameStatus.GAMEOVER
    assert game.state.score == 10
    assert game.toggle_block("top") is None


def test_classic_row_push_below_limit_keeps_playing(game: GamePlay, config: GameConfig) -> None:
    game.start(GameMode.CLASSIC)
    game.state.blocks = [
        Block(id="high", value=1, row=config.grid_rows_max - 2, col=0),
        Block(id="hit", value=5, row=0, col=1),
    ]
    game.state.target_sum = 5

    game.toggle_block("hit")

    assert game.status == GameStatus.PLAYING
    assert game.state.max_row_reached == config.grid_rows_max - 1


def test_timeout_overflow_ends_game(game: GamePlay, config: GameConfig) -> None:
    game.start(GameMode.TIME)
    game.state.blocks = [Block(id="top", value=1, row=config.grid_rows_max - 1, col=0)]
    game.state.time_left = 0.1

    game.tick()

    assert game.status == GameStatus.GAMEOVER
    assert not game.clock.running


def test_retry_keeps_mode(game: GamePlay, config: GameConfig) -> None:
    game.start(GameMode.TIME)
    game.state.blocks = [Block(id="top", value=1, row=config.grid_rows_max - 1, col=0)]
    game.state.time_left = 0.1
    game.tick()

    game.retry()

    assert game.status == GameStatus.PLAYING
    assert game.state.mode == GameMode.TIME
    assert game.state.score == 0
    assert game.clock.running


def test_return_home_discards_session(game: GamePlay) -> None:
    _setup(game, GameMode.TIME, [3, 5, 2], target=20)
    game.toggle_block("b0")

    game.return_home()

    assert game.status == GameStatus.IDLE
    assert game.state.blocks == []
    assert game.state.selected_ids == []
    assert not game.clock.running


def test_cleared_grid_refills(game: GamePlay, config: GameConfig) -> None:
    _setup(game, GameMode.TIME, [5], target=5)

    game.toggle_block("b0")

    assert len(game.state.blocks) == config.initial_rows * config.grid_cols
    assert game.status == GameStatus.PLAYING


# -- high score ---------------------------------------------------------------


def test_high_score_only_rises(config: GameConfig) -> None:
    store = MemoryHighScoreStore(15)
    game = GamePlay(config, high_scores=store, clock=ManualClock(), rng=random.Random(5))
    assert game.state.high_score == 15

    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)
    game.toggle_block("b1")
    assert game.state.high_score == 15
    assert store.score == 15

    game.state.target_sum = 5
    game.toggle_block("b0")
    game.toggle_block("b2")
    assert game.state.score == 30
    assert game.state.high_score == 30
    assert store.score == 30

    game.start(GameMode.CLASSIC)
    assert game.state.score == 0
    assert game.state.high_score == 30


def test_unwritable_store_still_tracks_score(config: GameConfig, tmp_path) -> None:
    # A directory cannot be read or written as a file.
    store = HighScoreStore(tmp_path)
    game = GamePlay(config, high_scores=store, clock=ManualClock(), rng=random.Random(5))
    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)

    game.toggle_block("b1")

    assert game.state.high_score == 10


# -- renderer plumbing --------------------------------------------------------


def test_listeners_get_snapshots(game: GamePlay) -> None:
    seen: list[GameState] = []
    game.add_listener(seen.append)

    _setup(game, GameMode.CLASSIC, [3, 5, 2], target=5)
    game.toggle_block("b0")

    assert seen[-1].selected_ids == ["b0"]
    seen[-1].selection.clear()
    assert game.state.selected_ids == ["b0"]

    game.remove_listener(seen.append)
    count = len(seen)
    game.clear_selection()
    assert len(seen) == count


def test_failing_listener_does_not_break_game(game: GamePlay) -> None:
    def boom(state: GameState) -> None:
        raise RuntimeError("renderer crashed")

    game.add_listener(boom)
    game.start(GameMode.CLASSIC)

    assert game.status == GameStatus.PLAYING


def test_snapshot_is_detached(game: GamePlay) -> None:
    game.start(GameMode.CLASSIC)
    snap = game.snapshot()
    snap.blocks.clear()
    snap.score = 999

    assert game.state.blocks
    assert game.state.score == 0
