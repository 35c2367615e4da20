"""Rich terminal frontend built from tables and panels.

Uses the ``rich`` library for styled output while sharing the same
input handler, controller and backend as the vanilla CLI.
"""

from __future__ import annotations

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from backend.engine.clock import ThreadClock
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.models.block import GameMode, GameStatus
from frontend.cli.controller import TerminalController
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

_CELL_MARKUP = {
    "plain": "bold white",
    "cursor": "bold black on bright_white",
    "selected": "bold black on green",
    "selected-cursor": "bold black on bright_green underline",
    "wrong": "bold white on red",
    "wrong-cursor": "bold white on bright_red underline",
    "empty": "dim",
}


# -- board rendering ----------------------------------------------------------


def _render_board(ctl: TerminalController, state: GameState) -> Table:
    """Return a Rich Table of the grid, top row first."""
    cfg = ctl.game.config
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_red" if state.is_wrong else "bright_blue",
        padding=(0, 1),
    )
    for _ in range(cfg.grid_cols):
        table.add_column(width=2, justify="center")

    for r in reversed(range(cfg.grid_rows_max)):
        cells: list[Text] = []
        for c in range(cfg.grid_cols):
            block, style = ctl.cell(state, r, c)
            label = str(block.value) if block is not None else "·"
            cells.append(Text(label, style=_CELL_MARKUP[style]))
        table.add_row(*cells)

    return table


def _header(state: GameState) -> Text:
    head = Text()
    head.append("  Target ", style="dim")
    head.append(str(state.target_sum), style="bold green")
    head.append("    Selected ", style="dim")
    head.append(
        str(state.selected_sum),
        style="bold red" if state.is_wrong else "bold yellow",
    )
    head.append("    Score ", style="dim")
    head.append(str(state.score), style="bold yellow")
    head.append("    Best ", style="dim")
    head.append(str(state.high_score), style="bold yellow")
    return head


# -- screens ------------------------------------------------------------------


def _draw_menu(game: GamePlay) -> None:
    console.clear()

    best = Text()
    best.append("Best score  ", style="dim")
    best.append(str(game.state.high_score), style="bold yellow")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Classic    ")
    opts.append("2", style="bold yellow")
    opts.append("  Time    ")
    opts.append("H", style="dim bold")
    opts.append("  Rules    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(best),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]S U M   S T A C K[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


def _draw_help() -> None:
    console.clear()
    rules = Text.from_markup(
        "Pick tiles whose numbers add up to the [bold green]target[/bold green].\n"
        "Tiles do not need to touch.  Going over the target clears the selection.\n\n"
        "[bold cyan]Classic[/bold cyan]  every clear pushes a new row in from the bottom.\n"
        "[bold yellow]Time[/bold yellow]     a new row arrives when the countdown runs out;\n"
        "         the seconds left are added to each clear.\n\n"
        "The game ends when the stack reaches the top.\n\n"
        "[dim]Arrows/WASD move   Space pick   C clear   P pause   Q home[/dim]"
    )
    panel = Panel(
        rules,
        title="[bold]HOW  TO  PLAY[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


def _draw_game(ctl: TerminalController, state: GameState) -> None:
    console.clear()

    parts: list = [Align.center(_header(state)), Text("")]
    parts.append(Align.center(_render_board(ctl, state)))

    if state.mode == GameMode.TIME:
        cfg = ctl.game.config
        bar = ProgressBar(
            total=cfg.time_limit,
            completed=state.time_left,
            width=cfg.grid_cols * 5 + 1,
            complete_style="yellow" if state.time_left > 3 else "red",
        )
        parts.append(Align.center(bar))
        parts.append(Align.center(Text(f"{state.time_left:4.1f}s", style="bold yellow")))

    if state.status == GameStatus.PAUSED:
        parts.append(Align.center(Text("\nPAUSED  (P to resume)", style="bold cyan")))
    elif ctl.message:
        style = "bold red" if state.is_wrong else "bold green"
        parts.append(Align.center(Text(ctl.message, style=style)))

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("Space", style="bold cyan")
    controls.append("  pick   ", style="dim")
    controls.append("C", style="bold cyan")
    controls.append("  clear   ", style="dim")
    controls.append("P", style="bold cyan")
    controls.append("  pause   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  home", style="dim")

    title = "Classic" if state.mode == GameMode.CLASSIC else "Time Attack"
    panel = Panel(
        Group(*parts),
        title=f"[bold cyan]Sum Stack  {title}[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(controls))


def _draw_gameover(state: GameState) -> None:
    console.clear()

    stats = Text()
    stats.append("  Score: ", style="dim")
    stats.append(str(state.score), style="bold yellow")
    stats.append("    Best: ", style="dim")
    stats.append(str(state.high_score), style="bold yellow")

    parts = [Align.center(stats)]
    if state.score and state.score >= state.high_score:
        parts.append(Align.center(Text("\n★ New best! ★", style="bold green")))

    panel = Panel(
        Group(*parts),
        title="[bold red]G A M E   O V E R[/bold red]",
        border_style="bold red",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(
        Align.center(Text("\n  Press R to try again, Q to go home.\n", style="dim"))
    )


# -- game loop ----------------------------------------------------------------


def _play_game(game: GamePlay, mode: GameMode) -> None:
    game.start(mode)
    ctl = TerminalController(game)
    drawn: GameState | None = None

    while True:
        state = game.snapshot()
        if state != drawn:
            if state.status == GameStatus.GAMEOVER:
                _draw_gameover(state)
            else:
                _draw_game(ctl, state)
            drawn = state

        key = get_key_timeout(0.1)
        ctl.poll()
        if key is None:
            continue
        if not ctl.handle(key):
            return
        drawn = None


# -- menu loop ----------------------------------------------------------------


def _menu_loop(game: GamePlay) -> None:
    while True:
        _draw_menu(game)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(
                Align.center(Text("\nGoodbye!\n", style="bold cyan"))
            )
            return
        elif key in ("1", "select"):
            _play_game(game, GameMode.CLASSIC)
        elif key == "2":
            _play_game(game, GameMode.TIME)
        elif key == "help":
            _draw_help()


# -- public entry point -------------------------------------------------------


def make_clock() -> ThreadClock:
    return ThreadClock()


def run(game: GamePlay, mode: GameMode | None = None) -> None:
    """Launch the Rich CLI; with *mode*, skip the menu for the first game."""
    try:
        if mode is not None:
            _play_game(game, mode)
        _menu_loop(game)
    finally:
        game.return_home()
