"""Vanilla terminal frontend with no third-party dependencies.

Uses only stdlib (print, ANSI codes, tty/termios) for rendering and input.
Includes a built-in menu for mode selection, rules and the best score.
"""

from __future__ import annotations

import sys

from backend.engine.clock import ThreadClock
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.models.block import GameMode, GameStatus
from frontend.cli.controller import TerminalController
from frontend.cli.input_handler import get_key, get_key_timeout


# -- ANSI helpers -------------------------------------------------------------

_G = "\033[32;1m"    # bold green
_Y = "\033[33;1m"    # bold yellow
_C = "\033[36;1m"    # bold cyan
_RED = "\033[31;1m"  # bold red
_DIM = "\033[2m"     # dim
_BOLD = "\033[1m"    # bold
_R = "\033[0m"       # reset

_CELL_STYLE = {
    "plain": "",
    "cursor": "\033[7m",             # reverse video
    "selected": "\033[42;30m",       # green bg, black fg
    "selected-cursor": "\033[42;30;4m",
    "wrong": "\033[41;37m",          # red bg, white fg
    "wrong-cursor": "\033[41;37;4m",
    "empty": _DIM,
}


def _clear() -> None:
    sys.stdout.write("\033[2J\033[H")
    sys.stdout.flush()


def _stats_line(state: GameState) -> str:
    """Return the score / time line (no newline)."""
    line = (
        f"  Score: {_Y}{state.score}{_R}  |  "
        f"Best: {_Y}{state.high_score}{_R}"
    )
    if state.mode == GameMode.TIME:
        line += f"  |  Time: {_Y}{state.time_left:4.1f}s{_R}"
    if state.status == GameStatus.PAUSED:
        line += f"  {_C}[PAUSED]{_R}"
    return line


def _layout_key(state: GameState) -> tuple:
    """Everything except the countdown; a change forces a full redraw."""
    return (
        tuple(state.blocks),
        tuple(state.selected_ids),
        state.is_wrong,
        state.status,
        state.score,
        state.target_sum,
    )


# -- board rendering ----------------------------------------------------------


def _render_board(ctl: TerminalController, state: GameState) -> str:
    """Return an ANSI-coloured grid, top row first."""
    cfg = ctl.game.config
    sep = "+" + ("----+" * cfg.grid_cols)
    lines: list[str] = [sep]
    for r in reversed(range(cfg.grid_rows_max)):
        cells: list[str] = []
        for c in range(cfg.grid_cols):
            block, style = ctl.cell(state, r, c)
            text = f"{block.value:>2}" if block is not None else " ·"
            cells.append(f"{_CELL_STYLE[style]} {text} {_R}")
        lines.append("|" + "|".join(cells) + "|")
    lines.append(sep)
    return "\n".join(lines)


# -- screens ------------------------------------------------------------------


def _show_menu(game: GamePlay) -> None:
    _clear()
    print()
    print(f"  {_BOLD}======================================{_R}")
    print(f"  {_BOLD}          S U M   S T A C K          {_R}")
    print(f"  {_BOLD}======================================{_R}")
    print()
    print(f"    Best score: {_Y}{game.state.high_score}{_R}")
    print()
    print(f"    {_C}1{_R}  Classic  {_DIM}(a new row after every clear){_R}")
    print(f"    {_Y}2{_R}  Time     {_DIM}(beat the countdown){_R}")
    print(f"    {_DIM}H{_R}  How to play")
    print(f"    {_DIM}Q{_R}  Quit")
    print()


def _show_help() -> None:
    _clear()
    print()
    print(f"  {_BOLD}=== HOW TO PLAY ==={_R}")
    print()
    print("  Pick tiles whose numbers add up to the target.")
    print("  Tiles do not need to touch.  Going over the target")
    print("  clears your selection.")
    print()
    print(f"  {_C}Classic:{_R} every clear pushes a new row in from the bottom.")
    print(f"  {_Y}Time:{_R}    a new row arrives whenever the countdown runs out;")
    print("           seconds left are added to your score.")
    print()
    print("  The game ends when the stack reaches the top.")
    print()
    print(
        f"  {_C}WASD{_R}/{_C}Arrows{_R}: move  |  {_C}Space{_R}: pick  |  "
        f"{_C}C{_R}: clear  |  {_C}P{_R}: pause  |  {_C}Q{_R}: home"
    )
    print(f"\n  {_DIM}Press any key to go back.{_R}")
    get_key()


def _show_game(ctl: TerminalController, state: GameState) -> None:
    """Draw the full game screen.

    The stats line is printed last, with no trailing newline, so
    ``_update_stats`` can overwrite it in-place using ``\\r\\033[K``.
    """
    _clear()
    title = "Classic" if state.mode == GameMode.CLASSIC else "Time Attack"
    print(f"  {_C}=== Sum Stack: {title} ==={_R}")
    print()
    print(
        f"  Target: {_G}{state.target_sum}{_R}    "
        f"Selected: {_Y}{state.selected_sum}{_R}"
    )
    print()
    print(_render_board(ctl, state))
    print()
    print(
        f"  {_C}WASD{_R}/{_C}Arrows{_R}: move  |  {_C}Space{_R}: pick  |  "
        f"{_C}C{_R}: clear  |  {_C}P{_R}: pause  |  {_C}Q{_R}: home"
    )
    if ctl.message:
        colour = _RED if state.is_wrong else _G
        print(f"  {colour}{ctl.message}{_R}")
    sys.stdout.write(f"\n{_stats_line(state)}")
    sys.stdout.flush()


def _update_stats(state: GameState) -> None:
    """Overwrite just the stats (last) line in-place."""
    sys.stdout.write(f"\r\033[K{_stats_line(state)}")
    sys.stdout.flush()


def _show_gameover(state: GameState) -> None:
    _clear()
    print()
    print(f"  {_RED}=== G A M E   O V E R ==={_R}")
    print()
    print(f"  Final score: {_Y}{state.score}{_R}")
    print(f"  Best score:  {_Y}{state.high_score}{_R}")
    if state.score and state.score >= state.high_score:
        print(f"\n  {_G}★ New best! ★{_R}")
    print(f"\n  Press {_C}R{_R} to try again, {_C}Q{_R} to go home.")


# -- game loop ----------------------------------------------------------------


def _play_game(game: GamePlay, mode: GameMode) -> None:
    game.start(mode)
    ctl = TerminalController(game)
    drawn: tuple | None = None
    message = ""

    while True:
        state = game.snapshot()
        if state.status == GameStatus.GAMEOVER:
            if drawn != ("gameover",):
                _show_gameover(state)
                drawn = ("gameover",)
        elif _layout_key(state) != drawn or ctl.message != message:
            _show_game(ctl, state)
            drawn = _layout_key(state)
            message = ctl.message
        else:
            _update_stats(state)

        key = get_key_timeout(0.1)
        ctl.poll()
        if key is None:
            continue
        if not ctl.handle(key):
            return
        # Cursor moves do not change the session, so always repaint.
        drawn = None


# -- menu loop ----------------------------------------------------------------


def _menu_loop(game: GamePlay) -> None:
    while True:
        _show_menu(game)
        key = get_key()

        if key == "quit":
            _clear()
            print("  Goodbye!\n")
            return
        elif key in ("1", "select"):
            _play_game(game, GameMode.CLASSIC)
        elif key == "2":
            _play_game(game, GameMode.TIME)
        elif key == "help":
            _show_help()


# -- public entry point -------------------------------------------------------


def make_clock() -> ThreadClock:
    return ThreadClock()


def run(game: GamePlay, mode: GameMode | None = None) -> None:
    """Launch the vanilla CLI; with *mode*, skip the menu for the first game."""
    try:
        if mode is not None:
            _play_game(game, mode)
        _menu_loop(game)
    finally:
        game.return_home()
