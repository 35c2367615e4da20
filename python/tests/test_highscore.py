"""High score persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from backend.models.highscore import DEFAULT_KEY, HighScoreStore, MemoryHighScoreStore


def test_missing_file_reads_zero(tmp_path: Path) -> None:
    assert HighScoreStore(tmp_path / "none.json").load_high_score() == 0


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "highscore.json"
    HighScoreStore(path).save_high_score(120)

    assert HighScoreStore(path).load_high_score() == 120
    assert json.loads(path.read_text()) == {DEFAULT_KEY: 120}


def test_save_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({"other-game": 7}))

    HighScoreStore(path).save_high_score(30)

    assert json.loads(path.read_text()) == {"other-game": 7, DEFAULT_KEY: 30}


def test_separate_keys(tmp_path: Path) -> None:
    path = tmp_path / "scores.json"
    HighScoreStore(path, key="a").save_high_score(1)
    HighScoreStore(path, key="b").save_high_score(2)

    assert HighScoreStore(path, key="a").load_high_score() == 1
    assert HighScoreStore(path, key="b").load_high_score() == 2


def test_corrupt_file_reads_zero(tmp_path: Path, caplog) -> None:
    path = tmp_path / "highscore.json"
    path.write_text("{not json")

    with caplog.at_level(logging.WARNING):
        assert HighScoreStore(path).load_high_score() == 0
    assert "Could not read high score" in caplog.text


def test_invalid_value_reads_zero(tmp_path: Path) -> None:
    path = tmp_path / "highscore.json"
    path.write_text(json.dumps({DEFAULT_KEY: -4}))
    assert HighScoreStore(path).load_high_score() == 0

    path.write_text(json.dumps({DEFAULT_KEY: "lots"}))
    assert HighScoreStore(path).load_high_score() == 0


def test_corrupt_file_is_overwritten(tmp_path: Path) -> None:
    path = tmp_path / "highscore.json"
    path.write_text("[1, 2, 3]")

    HighScoreStore(path).save_high_score(40)

    assert HighScoreStore(path).load_high_score() == 40


def test_write_failure_is_logged(tmp_path: Path, caplog) -> None:
    store = HighScoreStore(tmp_path)

    with caplog.at_level(logging.WARNING):
        store.save_high_score(10)
    assert "Could not" in caplog.text


def test_memory_store() -> None:
    store = MemoryHighScoreStore()
    assert store.load_high_score() == 0
    store.save_high_score(9)
    assert store.load_high_score() == 9
