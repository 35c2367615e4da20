from __future__ import annotations

from backend.models.block import Block


def make_blocks(values: list[int], row: int = 0) -> list[Block]:
    """One block per value along *row*, ids ``b0``, ``b1``, ..."""
    return [Block(id=f"b{i}", value=v, row=row, col=i) for i, v in enumerate(values)]
