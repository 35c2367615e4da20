"""PyQt6 GUI frontend, fully self-contained.

Includes main menu, rules, gameplay and the game-over screen.
Time mode is driven by a ``QTimer`` on the GUI thread.
"""

from __future__ import annotations

import sys

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont, QKeyEvent
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from backend.engine.clock.clock import TickCallback
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.engine.selection import Evaluation
from backend.models.block import GameMode, GameStatus

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_SUBTEXT = "#a6adc8"
_BLUE = "#89b4fa"
_BLUE_H = "#a4c4fc"
_GREEN = "#a6e3a1"
_GREEN_H = "#b8ecb4"
_PINK = "#f5c2e7"
_YELLOW = "#f9e2af"
_YELLOW_H = "#fbecc8"
_RED = "#f38ba8"
_RED_H = "#f5a0b8"
_LAVENDER = "#b4befe"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""


class QtClock:
    """``Clock`` backed by a ``QTimer``; ticks run on the GUI thread."""

    def __init__(self) -> None:
        self._timer: QTimer | None = None

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def start(self, callback: TickCallback, interval: float) -> None:
        if self.running:
            return
        self.stop()
        self._timer = QTimer()
        self._timer.timeout.connect(callback)
        self._timer.start(max(1, round(interval * 1000)))

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 14,
    bold: bool = True,
    min_w: int = 0,
    min_h: int = 44,
    radius: int = 8,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold if bold else QFont.Weight.Normal))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:{radius}px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )
    return btn


def _label(text: str, size: int, colour: str = _TEXT, bold: bool = False) -> QLabel:
    lbl = QLabel(text)
    lbl.setFont(QFont("Helvetica", size, QFont.Weight.Bold if bold else QFont.Weight.Normal))
    lbl.setStyleSheet(f"color:{colour};")
    lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
    return lbl


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _MenuPage(QWidget):
    """Main menu with mode buttons, rules, quit and the best score."""

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(12)
        root.setContentsMargins(30, 30, 30, 30)

        root.addWidget(_label("SUM  STACK", 34, bold=True))
        root.addWidget(_label("Pick tiles that add up to the target", 15, _SUBTEXT))
        root.addSpacerItem(QSpacerItem(0, 16))
        self.best = _label("", 18, _YELLOW, bold=True)
        root.addWidget(self.best)
        root.addSpacerItem(QSpacerItem(0, 18))

        self.classic_btn = _styled_btn(
            "C L A S S I C", bg=_BLUE, hover=_LAVENDER, fg=_BASE,
            font_size=16, min_w=240, min_h=52,
        )
        root.addWidget(self.classic_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.time_btn = _styled_btn(
            "T I M E", bg=_YELLOW, hover=_YELLOW_H, fg=_BASE,
            font_size=16, min_w=240, min_h=52,
        )
        root.addWidget(self.time_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addSpacerItem(QSpacerItem(0, 6))

        self.help_btn = _styled_btn("HOW TO PLAY", min_w=240, font_size=13)
        root.addWidget(self.help_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.quit_btn = _styled_btn(
            "Q U I T", bg=_RED, hover=_RED_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.quit_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    def set_best(self, score: int) -> None:
        self.best.setText(f"Best: {score}")


class _HelpPage(QWidget):
    """Rules of both modes."""

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(10)
        root.setContentsMargins(30, 30, 30, 30)

        root.addWidget(_label("HOW TO PLAY", 26, bold=True))
        root.addSpacerItem(QSpacerItem(0, 12))
        for text, colour in [
            ("Click tiles whose numbers add up to the target.", _TEXT),
            ("Going over the target clears your selection.", _TEXT),
            ("Classic: a new row after every clear.", _BLUE),
            ("Time: a new row whenever the countdown ends;\n"
             "seconds left are added to each clear.", _YELLOW),
            ("The game ends when the stack hits the top.", _RED),
        ]:
            lbl = _label(text, 13, colour)
            lbl.setWordWrap(True)
            root.addWidget(lbl)
        root.addSpacerItem(QSpacerItem(0, 18))

        self.back_btn = _styled_btn("B A C K", min_w=200, font_size=13)
        root.addWidget(self.back_btn, alignment=Qt.AlignmentFlag.AlignCenter)


class _GamePage(QWidget):
    """The tile grid with live target, score and countdown."""

    def __init__(self, game: GamePlay) -> None:
        super().__init__()
        self.setObjectName("page")
        self.game = game
        cfg = game.config
        tile_px = max(32, min(60, 420 // max(cfg.grid_cols, cfg.grid_rows_max)))

        root = QVBoxLayout(self)
        root.setSpacing(6)
        root.setContentsMargins(16, 10, 16, 10)

        self._target = _label("", 30, _GREEN, bold=True)
        root.addWidget(self._target)

        self._stats = _label("", 13, _PINK)
        root.addWidget(self._stats)

        self._bar = QProgressBar()
        self._bar.setRange(0, 1000)
        self._bar.setTextVisible(False)
        self._bar.setFixedHeight(8)
        root.addWidget(self._bar)

        frame = QFrame()
        frame.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")
        grid = QGridLayout(frame)
        grid.setSpacing(4)
        grid.setContentsMargins(8, 8, 8, 8)
        root.addWidget(frame, alignment=Qt.AlignmentFlag.AlignCenter)

        # Row 0 of the game is the bottom row of the layout.
        self._cells: dict[tuple[int, int], QPushButton] = {}
        for r in range(cfg.grid_rows_max):
            for c in range(cfg.grid_cols):
                b = QPushButton()
                b.setFixedSize(tile_px, tile_px)
                b.setFont(QFont("Helvetica", max(11, tile_px // 3), QFont.Weight.Bold))
                b.setFocusPolicy(Qt.FocusPolicy.NoFocus)
                b.clicked.connect(lambda _, rr=r, cc=c: self._click(rr, cc))
                grid.addWidget(b, cfg.grid_rows_max - 1 - r, c)
                self._cells[(r, c)] = b

        self._message = _label("", 12, _OVERLAY0)
        root.addWidget(self._message)

        hbox = QHBoxLayout()
        hbox.setSpacing(10)
        self.pause_btn = _styled_btn("PAUSE", min_h=36, font_size=12)
        self.clear_btn = _styled_btn(
            "CLEAR", bg=_PINK, hover=_YELLOW_H, fg=_BASE, min_h=36, font_size=12
        )
        self.home_btn = _styled_btn("HOME", min_h=36, font_size=12)
        for btn in (self.pause_btn, self.clear_btn, self.home_btn):
            hbox.addWidget(btn)
        root.addLayout(hbox)

        self.pause_btn.clicked.connect(game.toggle_pause)
        self.clear_btn.clicked.connect(game.clear_selection)

    # -- helpers --

    def sync(self, state: GameState) -> None:
        cfg = self.game.config
        self._target.setText(str(state.target_sum))
        self._stats.setText(
            f"Selected {state.selected_sum}    Score {state.score}    "
            f"Best {state.high_score}"
        )
        self._stats.setStyleSheet(f"color:{_RED if state.is_wrong else _PINK};")

        timed = state.mode == GameMode.TIME
        self._bar.setVisible(timed)
        if timed:
            self._bar.setValue(round(1000 * state.time_left / cfg.time_limit))

        paused = state.status == GameStatus.PAUSED
        self.pause_btn.setText("RESUME" if paused else "PAUSE")
        self._message.setText("Paused" if paused else "")

        selected = set(state.selected_ids)
        occupied = {(b.row, b.col): b for b in state.blocks}
        for (r, c), btn in self._cells.items():
            block = occupied.get((r, c))
            if block is None:
                btn.setText("")
                btn.setEnabled(False)
                btn.setStyleSheet(
                    f"QPushButton{{background:{_MANTLE};border:none;border-radius:8px;}}"
                )
                continue
            if block.id in selected:
                bg = hv = _RED if state.is_wrong else _GREEN
            else:
                bg, hv = _BLUE, _BLUE_H
            btn.setText(str(block.value))
            btn.setEnabled(not paused)
            btn.setStyleSheet(
                f"QPushButton{{background:{bg};color:{_BASE};"
                f"border:none;border-radius:8px;font-weight:bold;}}"
                f"QPushButton:hover{{background:{hv};}}"
            )

    def _click(self, r: int, c: int) -> None:
        block = self.game.snapshot().block_at(r, c)
        if block is None:
            return
        if self.game.toggle_block(block.id) == Evaluation.OVERSHOOT:
            flash_ms = round(self.game.config.overshoot_flash * 1000)
            QTimer.singleShot(flash_ms, self.game.resolve_overshoot)


class _GameOverPage(QWidget):
    """Final score with retry and menu buttons."""

    def __init__(self) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(10)
        root.setContentsMargins(30, 30, 30, 30)

        root.addWidget(_label("G A M E   O V E R", 30, _RED, bold=True))
        root.addSpacerItem(QSpacerItem(0, 20))
        self._score = _label("", 20, _YELLOW, bold=True)
        self._best = _label("", 20, _YELLOW, bold=True)
        self._record = _label("", 16, _GREEN, bold=True)
        for lbl in (self._score, self._best, self._record):
            root.addWidget(lbl)
        root.addSpacerItem(QSpacerItem(0, 24))

        self.retry_btn = _styled_btn(
            "TRY AGAIN", bg=_GREEN, hover=_GREEN_H, fg=_BASE,
            font_size=16, min_w=240, min_h=50,
        )
        root.addWidget(self.retry_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.menu_btn = _styled_btn("M E N U", min_w=240, font_size=13)
        root.addWidget(self.menu_btn, alignment=Qt.AlignmentFlag.AlignCenter)

    def show_result(self, state: GameState) -> None:
        self._score.setText(f"Score:  {state.score}")
        self._best.setText(f"Best:   {state.high_score}")
        new_best = bool(state.score) and state.score >= state.high_score
        self._record.setText("★  New best!  ★" if new_best else "")


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_MENU = 0
_IDX_GAME = 1
_IDX_OVER = 2
_IDX_HELP = 3


class _MainWindow(QMainWindow):
    def __init__(self, game: GamePlay) -> None:
        super().__init__()
        self._game = game

        self.setWindowTitle("Sum Stack")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(440, 720)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._menu = _MenuPage()
        self._menu.classic_btn.clicked.connect(lambda: self._start(GameMode.CLASSIC))
        self._menu.time_btn.clicked.connect(lambda: self._start(GameMode.TIME))
        self._menu.help_btn.clicked.connect(lambda: self._stack.setCurrentIndex(_IDX_HELP))
        self._menu.quit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._menu)  # 0

        self._game_page = _GamePage(game)
        self._game_page.home_btn.clicked.connect(game.return_home)
        self._stack.addWidget(self._game_page)  # 1

        self._over = _GameOverPage()
        self._over.retry_btn.clicked.connect(game.retry)
        self._over.menu_btn.clicked.connect(game.return_home)
        self._stack.addWidget(self._over)  # 2

        self._help = _HelpPage()
        self._help.back_btn.clicked.connect(lambda: self._stack.setCurrentIndex(_IDX_MENU))
        self._stack.addWidget(self._help)  # 3

        game.add_listener(self._on_state)
        self._on_state(game.snapshot())

    # -- state ---

    def _start(self, mode: GameMode) -> None:
        self._game.start(mode)

    def _on_state(self, state: GameState) -> None:
        """Route every session change to the page that shows it."""
        if state.status == GameStatus.IDLE:
            self._menu.set_best(state.high_score)
            if self._stack.currentIndex() != _IDX_HELP:
                self._stack.setCurrentIndex(_IDX_MENU)
        elif state.status == GameStatus.GAMEOVER:
            self._over.show_result(state)
            self._stack.setCurrentIndex(_IDX_OVER)
        else:
            self._game_page.sync(state)
            self._stack.setCurrentIndex(_IDX_GAME)

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_MENU:
            if key in (Qt.Key.Key_1, Qt.Key.Key_Return):
                self._start(GameMode.CLASSIC)
            elif key == Qt.Key.Key_2:
                self._start(GameMode.TIME)
            elif key == Qt.Key.Key_H:
                self._stack.setCurrentIndex(_IDX_HELP)
            elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()

        elif idx == _IDX_GAME:
            if key in (Qt.Key.Key_P, Qt.Key.Key_Space):
                self._game.toggle_pause()
            elif key == Qt.Key.Key_C:
                self._game.clear_selection()
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._game.return_home()

        elif idx == _IDX_OVER:
            if key in (Qt.Key.Key_R, Qt.Key.Key_Return):
                self._game.retry()
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._game.return_home()

        elif idx == _IDX_HELP:
            self._stack.setCurrentIndex(_IDX_MENU)

        else:
            super().keyPressEvent(event)

    def closeEvent(self, ev) -> None:  # noqa: N802
        self._game.remove_listener(self._on_state)
        self._game.return_home()
        super().closeEvent(ev)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def make_clock() -> QtClock:
    return QtClock()


def run(game: GamePlay, mode: GameMode | None = None) -> None:
    """Launch the PyQt6 GUI (opens to the menu unless *mode* is given)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(game)
    window.show()
    if mode is not None:
        game.start(mode)
    qapp.exec()
