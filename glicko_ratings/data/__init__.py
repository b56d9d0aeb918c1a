"""Game results and the per-period game log."""

from .game_log import GameLog
from .types import Game, GameResult

__all__ = ["GameLog", "Game", "GameResult"]
