"""Game constants, optionally overridden from a JSON file at startup."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Every tunable number of the game.  Read once, never mutated."""

    # Board shape.  Row 0 is the bottom row; a block at grid_rows_max overflows.
    grid_cols: int = 6
    grid_rows_max: int = 10
    initial_rows: int = 4
    # Tile values and targets (inclusive ranges).
    min_value: int = 1
    max_value: int = 9
    target_sum_min: int = 10
    target_sum_max: int = 20
    # Time mode, in seconds.
    time_limit: float = 10.0
    tick_interval: float = 0.1
    # How long a wrong selection stays flagged before it is cleared.
    overshoot_flash: float = 0.5
    points_per_block: int = 10

    def __post_init__(self) -> None:
        if self.grid_cols < 1:
            raise ValueError(f"grid_cols must be positive, got {self.grid_cols}.")
        if self.grid_rows_max < 1:
            raise ValueError(
                f"grid_rows_max must be positive, got {self.grid_rows_max}."
            )
        if not 0 < self.initial_rows < self.grid_rows_max:
            raise ValueError(
                f"initial_rows must be in 1..{self.grid_rows_max - 1}, "
                f"got {self.initial_rows}."
            )
        if self.min_value > self.max_value:
            raise ValueError(
                f"min_value ({self.min_value}) exceeds max_value ({self.max_value})."
            )
        if self.target_sum_min > self.target_sum_max:
            raise ValueError(
                f"target_sum_min ({self.target_sum_min}) exceeds "
                f"target_sum_max ({self.target_sum_max})."
            )
        if self.time_limit <= 0 or self.tick_interval <= 0:
            raise ValueError("time_limit and tick_interval must be positive.")
        if self.overshoot_flash < 0:
            raise ValueError("overshoot_flash must not be negative.")

    def to_dict(self) -> dict:
        return asdict(self)


def _coerce(value: object, kind: str) -> object:
    if kind == "int":
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(f"not an integer: {value!r}")
        return int(value)
    if kind == "float":
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(f"not a number: {value!r}")
        return float(value)
    return value


def load_config(path: Path | None = None) -> GameConfig:
    """Return the defaults, overridden by the JSON object at *path* if any.

    A missing file is not an error.  An unreadable or invalid file logs a
    warning and yields the defaults.
    """
    if path is None or not path.exists():
        return GameConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return GameConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not an object.", path)
        return GameConfig()

    kwargs: dict = {}
    for fld in fields(GameConfig):
        if fld.name not in raw:
            continue
        try:
            kwargs[fld.name] = _coerce(raw[fld.name], str(fld.type))
        except ValueError as exc:
            logger.warning("Ignoring config key %r: %s", fld.name, exc)

    unknown = sorted(set(raw) - {f.name for f in fields(GameConfig)})
    if unknown:
        logger.debug("Unknown config keys ignored: %s", ", ".join(unknown))

    try:
        return GameConfig(**kwargs)
    except ValueError as exc:
        logger.warning("Invalid config %s (%s); using defaults.", path, exc)
        return GameConfig()
