from backend.models.block import Block, GameMode, GameStatus
from backend.models.highscore import HighScoreStore, MemoryHighScoreStore

__all__ = ["Block", "GameMode", "GameStatus", "HighScoreStore", "MemoryHighScoreStore"]
