"""Generates blocks, rows and target sums."""

from __future__ import annotations

import random
import string
from collections.abc import Iterable

from backend.config import GameConfig
from backend.models.block import Block

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 7


class GameGenerator:
    """Creates random blocks and targets from a single RNG.

    Pass a seeded ``random.Random`` to make a whole session reproducible.
    """

    def __init__(self, config: GameConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self.rng = rng or random.Random()
        self._issued: set[str] = set()

    # -- blocks ---------------------------------------------------------------

    def new_id(self) -> str:
        """Return a short base-36 id never handed out by this generator."""
        while True:
            block_id = "".join(self.rng.choices(_ID_ALPHABET, k=_ID_LENGTH))
            if block_id not in self._issued:
                self._issued.add(block_id)
                return block_id

    def create_block(self, row: int, col: int) -> Block:
        value = self.rng.randint(self.config.min_value, self.config.max_value)
        return Block(id=self.new_id(), value=value, row=row, col=col)

    def generate_row(self, row: int = 0) -> list[Block]:
        return [self.create_block(row, c) for c in range(self.config.grid_cols)]

    def generate_initial_grid(self, rows: int) -> list[Block]:
        """Return ``rows`` full rows filling rows ``0..rows-1``."""
        blocks: list[Block] = []
        for r in range(rows):
            blocks.extend(self.generate_row(r))
        return blocks

    def add_row(self, blocks: Iterable[Block]) -> list[Block]:
        """Push every block up one row and insert a fresh row 0."""
        shifted = [b.shifted() for b in blocks]
        return shifted + self.generate_row(0)

    # -- targets --------------------------------------------------------------

    def generate_target(self) -> int:
        # Independent of the grid: the target may not be reachable yet.
        return self.rng.randint(self.config.target_sum_min, self.config.target_sum_max)

    # -- queries --------------------------------------------------------------

    @staticmethod
    def is_overflowing(blocks: Iterable[Block], max_rows: int) -> bool:
        return any(b.row >= max_rows for b in blocks)
