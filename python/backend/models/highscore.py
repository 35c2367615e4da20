"""High score persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_KEY = "sum-stack-highscore"


class HighScoreBackend(Protocol):
    def load_high_score(self) -> int: ...

    def save_high_score(self, score: int) -> None: ...


class HighScoreStore:
    """Stores the best score under a fixed key in a JSON file.

    Read and write failures never reach the caller: a broken file reads as
    0 and a failed write is only logged.
    """

    def __init__(self, filepath: Path, key: str = DEFAULT_KEY) -> None:
        self.filepath = filepath
        self.key = key

    # -- persistence ----------------------------------------------------------

    def _read(self) -> dict:
        if not self.filepath.exists():
            return {}
        data = json.loads(self.filepath.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("high score file does not hold a JSON object")
        return data

    def load_high_score(self) -> int:
        try:
            value = self._read().get(self.key, 0)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read high score from %s: %s", self.filepath, exc)
            return 0
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning("Discarding invalid stored high score %r", value)
            return 0
        return value

    def save_high_score(self, score: int) -> None:
        try:
            try:
                data = self._read()
            except ValueError:
                data = {}
            data[self.key] = int(score)
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            self.filepath.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save high score to %s: %s", self.filepath, exc)


class MemoryHighScoreStore:
    """Keeps the best score for the lifetime of the process only."""

    def __init__(self, score: int = 0) -> None:
        self.score = score

    def load_high_score(self) -> int:
        return self.score

    def save_high_score(self, score: int) -> None:
        self.score = score
