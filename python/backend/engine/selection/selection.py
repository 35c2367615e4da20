"""Tile selection and sum evaluation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import StrEnum

from backend.models.block import Block


class Evaluation(StrEnum):
    SUCCESS = "success"
    OVERSHOOT = "overshoot"
    PENDING = "pending"


def selection_sum(selected_ids: Iterable[str], blocks: Iterable[Block]) -> int:
    """Sum the values of the selected blocks.  Unknown ids count as 0."""
    values = {b.id: b.value for b in blocks}
    return sum(values.get(block_id, 0) for block_id in selected_ids)


def evaluate(
    selected_ids: Sequence[str], blocks: Iterable[Block], target_sum: int
) -> Evaluation:
    total = selection_sum(selected_ids, blocks)
    if total == target_sum:
        return Evaluation.SUCCESS
    if total > target_sum:
        return Evaluation.OVERSHOOT
    return Evaluation.PENDING


class Selection:
    """Ordered set of selected block ids."""

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: list[str] = []
        for block_id in ids:
            if block_id not in self._ids:
                self._ids.append(block_id)

    def toggle(self, block_id: str) -> bool:
        """Add *block_id*, or remove it if already selected.

        Returns True if the id is selected afterwards.
        """
        if block_id in self._ids:
            self._ids.remove(block_id)
            return False
        self._ids.append(block_id)
        return True

    def clear(self) -> None:
        self._ids.clear()

    def discard_missing(self, blocks: Iterable[Block]) -> None:
        """Drop ids that no longer refer to a block on the grid."""
        live = {b.id for b in blocks}
        self._ids = [i for i in self._ids if i in live]

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selection):
            return NotImplemented
        return self._ids == other._ids

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
