"""Selection toggling and sum evaluation."""

from __future__ import annotations

import itertools

import pytest

from backend.engine.selection import Evaluation, Selection, evaluate, selection_sum
from tests.helpers import make_blocks


def test_toggle_appends_in_order() -> None:
    sel = Selection()
    sel.toggle("a")
    sel.toggle("c")
    sel.toggle("b")
    assert sel.ids == ["a", "c", "b"]


def test_toggle_twice_removes() -> None:
    sel = Selection()
    assert sel.toggle("a") is True
    assert sel.toggle("b") is True
    assert sel.toggle("a") is False
    assert sel.ids == ["b"]


def test_clear() -> None:
    sel = Selection(["a", "b"])
    sel.clear()
    assert len(sel) == 0


def test_constructor_drops_duplicates() -> None:
    assert Selection(["a", "b", "a"]).ids == ["a", "b"]


def test_discard_missing() -> None:
    blocks = make_blocks([1, 2])
    sel = Selection(["b0", "gone", "b1"])
    sel.discard_missing(blocks)
    assert sel.ids == ["b0", "b1"]


def test_unknown_ids_count_as_zero() -> None:
    blocks = make_blocks([4, 6])
    assert selection_sum(["b0", "missing"], blocks) == 4


def test_example_grid() -> None:
    blocks = make_blocks([3, 5, 2])

    assert evaluate(["b1"], blocks, 5) == Evaluation.SUCCESS
    assert evaluate(["b0"], blocks, 5) == Evaluation.PENDING
    assert evaluate(["b0", "b2"], blocks, 5) == Evaluation.SUCCESS
    assert evaluate(["b0", "b1"], blocks, 5) == Evaluation.OVERSHOOT


@pytest.mark.parametrize("target", [1, 7, 10, 15])
def test_evaluation_matches_sum(target: int) -> None:
    blocks = make_blocks([3, 5, 2, 9])
    ids = [b.id for b in blocks]
    for n in range(1, len(ids) + 1):
        for combo in itertools.combinations(ids, n):
            total = selection_sum(combo, blocks)
            result = evaluate(list(combo), blocks, target)
            if total == target:
                assert result == Evaluation.SUCCESS
            elif total > target:
                assert result == Evaluation.OVERSHOOT
            else:
                assert result == Evaluation.PENDING
