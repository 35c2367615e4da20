#!/usr/bin/env python3
"""Sum Stack.

Usage::

    python main.py                    # interactive menu
    python main.py -f rich -m time    # Rich terminal, straight into time mode
    python main.py -f pygame          # Pygame GUI (has its own menu)
    python main.py --scores           # print the best score
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import load_config  # noqa: E402
from backend.engine.gameplay import GamePlay  # noqa: E402
from backend.models.block import GameMode  # noqa: E402
from backend.models.highscore import HighScoreStore, MemoryHighScoreStore  # noqa: E402


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    vanilla = "vanilla"
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


_RUNNERS = {
    Frontend.vanilla: "frontend.cli.vanilla.app",
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}


# -- helpers ------------------------------------------------------------------


def _store(no_save: bool):
    if no_save:
        return MemoryHighScoreStore()
    return HighScoreStore(DATA_DIR / "highscore.json")


def _launch(
    frontend: Frontend,
    mode: Optional[GameMode],
    config_path: Optional[Path],
    no_save: bool,
) -> None:
    mod = importlib.import_module(_RUNNERS[frontend])
    game = GamePlay(
        load_config(config_path),
        high_scores=_store(no_save),
        clock=mod.make_clock(),
    )
    mod.run(game, mode)


def _print_highscore(no_save: bool) -> None:
    print(f"\n  Best score: {_store(no_save).load_high_score()}\n")


def _menu_loop(config_path: Optional[Path], no_save: bool) -> None:
    choices = {
        "1": Frontend.vanilla,
        "2": Frontend.rich,
        "3": Frontend.pygame,
        "4": Frontend.pyqt,
    }
    while True:
        print()
        print("  ====================================")
        print("            S U M   S T A C K         ")
        print("  ====================================")
        print()
        print("  1.  Play  (Vanilla Terminal)")
        print("  2.  Play  (Rich Terminal)")
        print("  3.  Play  (Pygame GUI)")
        print("  4.  Play  (PyQt GUI)")
        print("  5.  View Best Score")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return
        if choice in choices:
            _launch(choices[choice], None, config_path, no_save)
        elif choice == "5":
            _print_highscore(no_save)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    mode: Optional[GameMode] = typer.Option(
        None, "-m", "--mode",
        help="Start a game in this mode right away.",
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config",
        help="JSON file overriding the game constants.",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show the best score and exit.",
    ),
    no_save: bool = typer.Option(
        False, "--no-save",
        help="Keep the best score in memory only.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log game events to stderr.",
    ),
) -> None:
    """Sum Stack: pick tiles that add up to the target."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if scores:
        _print_highscore(no_save)
        return

    if frontend is None:
        _menu_loop(config, no_save)
        return

    _launch(frontend, mode, config, no_save)


if __name__ == "__main__":
    app()
