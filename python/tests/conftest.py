from __future__ import annotations

import random

import pytest

from backend.config import GameConfig
from backend.engine.clock import ManualClock
from backend.engine.gameplay import GamePlay
from backend.models.highscore import MemoryHighScoreStore


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def store() -> MemoryHighScoreStore:
    return MemoryHighScoreStore()


@pytest.fixture
def game(config: GameConfig, store: MemoryHighScoreStore) -> GamePlay:
    return GamePlay(config, high_scores=store, clock=ManualClock(), rng=random.Random(7))

