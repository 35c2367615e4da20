"""Core gameplay logic: status transitions, scoring and time-mode ticks."""

from __future__ import annotations

import logging
import math
import random
import threading
from collections.abc import Callable

from backend.config import GameConfig
from backend.engine.clock import Clock, ManualClock
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamestate import GameState
from backend.engine.selection import Evaluation, evaluate
from backend.models.block import GameMode, GameStatus
from backend.models.highscore import HighScoreBackend, MemoryHighScoreStore

logger = logging.getLogger(__name__)

Listener = Callable[[GameState], None]

# Tick arithmetic is done on this many decimals so repeated subtraction of
# the tick interval lands exactly on zero.
_TIME_DECIMALS = 6


class GamePlay:
    """Orchestrates one player's sessions.

    Every public method takes the session lock, so a grid change, its
    overflow check and the resulting status change are seen together by
    any renderer calling :meth:`snapshot`.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        high_scores: HighScoreBackend | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.generator = GameGenerator(self.config, rng)
        self.high_scores = high_scores or MemoryHighScoreStore()
        self.clock = clock or ManualClock()
        self._lock = threading.RLock()
        # Bumped whenever the clock is stopped; ticks from an older run are dropped.
        self._clock_epoch = 0
        self._listeners: list[Listener] = []
        self.state = GameState(
            high_score=self.high_scores.load_high_score(),
            time_left=self.config.time_limit,
        )

    # -- renderer plumbing ----------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Call *listener* with a snapshot after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> GameState:
        with self._lock:
            return self.state.copy()

    def _notify(self) -> None:
        snap = self.state.copy()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("State listener %r failed", listener)

    # -- status transitions ---------------------------------------------------

    def start(self, mode: GameMode | str) -> None:
        """Begin a fresh session in *mode* (idle/gameover -> playing)."""
        mode = GameMode(mode)
        with self._lock:
            self._stop_clock()
            state = self.state
            state.blocks = self.generator.generate_initial_grid(self.config.initial_rows)
            state.target_sum = self.generator.generate_target()
            state.score = 0
            state.mode = mode
            state.time_left = self.config.time_limit
            state.selection.clear()
            state.is_wrong = False
            self._set_status(GameStatus.PLAYING)
            logger.debug("Started %s game, target %d", mode, state.target_sum)
            self._notify()

    def retry(self) -> None:
        """Start again in the mode of the previous session."""
        self.start(self.state.mode)

    def return_home(self) -> None:
        with self._lock:
            self._stop_clock()
            self.state.blocks = []
            self.state.selection.clear()
            self.state.is_wrong = False
            self._set_status(GameStatus.IDLE)
            self._notify()

    def toggle_pause(self) -> None:
        with self._lock:
            if self.state.status == GameStatus.PLAYING:
                self._set_status(GameStatus.PAUSED)
            elif self.state.status == GameStatus.PAUSED:
                self._set_status(GameStatus.PLAYING)
            else:
                return
            self._notify()

    def _set_status(self, status: GameStatus) -> None:
        if status != self.state.status:
            logger.debug("Status %s -> %s", self.state.status, status)
        self.state.status = status
        self._sync_clock()

    def _sync_clock(self) -> None:
        """Run the clock exactly while a time-mode game is being played."""
        wanted = (
            self.state.status == GameStatus.PLAYING
            and self.state.mode == GameMode.TIME
        )
        if not wanted:
            self._stop_clock()
        elif not self.clock.running:
            self._clock_epoch += 1
            epoch = self._clock_epoch
            self.clock.start(lambda: self._on_clock(epoch), self.config.tick_interval)

    def _stop_clock(self) -> None:
        self._clock_epoch += 1
        self.clock.stop()

    def _on_clock(self, epoch: int) -> None:
        with self._lock:
            if epoch == self._clock_epoch:
                self.tick()

    # -- selection ------------------------------------------------------------

    def toggle_block(self, block_id: str) -> Evaluation | None:
        """Select or deselect a block and evaluate the new selection.

        Returns None when nothing was evaluated (not playing, or the
        selection became empty).
        """
        with self._lock:
            state = self.state
            if state.status != GameStatus.PLAYING:
                return None
            state.selection.toggle(block_id)
            if not state.selection:
                state.is_wrong = False
                self._notify()
                return None

            result = evaluate(state.selection.ids, state.blocks, state.target_sum)
            state.is_wrong = result == Evaluation.OVERSHOOT
            if result == Evaluation.SUCCESS:
                self._apply_success()
            self._notify()
            return result

    def clear_selection(self) -> None:
        with self._lock:
            self.state.selection.clear()
            self.state.is_wrong = False
            self._notify()

    def resolve_overshoot(self) -> None:
        """Drop a selection flagged as wrong once its flash is over."""
        with self._lock:
            if not self.state.is_wrong:
                return
            self.state.is_wrong = False
            self.state.selection.clear()
            self._notify()

    def _apply_success(self) -> None:
        state = self.state
        selected = state.selection.ids
        points = len(selected) * self.config.points_per_block
        if state.mode == GameMode.TIME:
            points += math.floor(state.time_left)

        state.score += points
        if state.score > state.high_score:
            state.high_score = state.score
            self.high_scores.save_high_score(state.high_score)

        chosen = set(selected)
        remaining = [b for b in state.blocks if b.id not in chosen]
        if state.mode == GameMode.CLASSIC:
            self._push_row(remaining)
        else:
            state.blocks = remaining
            state.time_left = self.config.time_limit

        state.selection.clear()
        state.is_wrong = False
        state.target_sum = self.generator.generate_target()
        logger.debug(
            "Cleared %d blocks for %d points, next target %d",
            len(selected), points, state.target_sum,
        )
        self._heal_empty_grid()

    # -- grid -----------------------------------------------------------------

    def _push_row(self, blocks) -> None:
        """Add a row under *blocks* and end the game if the stack overflows."""
        self.state.blocks = self.generator.add_row(blocks)
        self.state.selection.discard_missing(self.state.blocks)
        if self.generator.is_overflowing(self.state.blocks, self.config.grid_rows_max):
            logger.debug("Stack overflowed at score %d", self.state.score)
            self._set_status(GameStatus.GAMEOVER)

    def _heal_empty_grid(self) -> None:
        if self.state.status == GameStatus.PLAYING and not self.state.blocks:
            logger.debug("Grid emptied; refilling %d rows", self.config.initial_rows)
            self.state.blocks = self.generator.generate_initial_grid(
                self.config.initial_rows
            )

    # -- time mode ------------------------------------------------------------

    def tick(self) -> None:
        """Advance the countdown by one tick interval."""
        with self._lock:
            state = self.state
            if state.status != GameStatus.PLAYING or state.mode != GameMode.TIME:
                return
            remaining = round(state.time_left - self.config.tick_interval, _TIME_DECIMALS)
            if remaining <= 0:
                state.time_left = self.config.time_limit
                self._push_row(state.blocks)
                self._heal_empty_grid()
            else:
                state.time_left = remaining
            self._notify()

    # -- queries --------------------------------------------------------------

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def is_over(self) -> bool:
        return self.state.status == GameStatus.GAMEOVER
