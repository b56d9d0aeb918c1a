"""Data types for game results."""

from dataclasses import dataclass
from enum import Enum
from typing import Hashable


class GameResult(Enum):
    """Outcome of a game, from player 1's point of view."""

    PLAYER1_WIN = 1.0
    DRAW = 0.5
    PLAYER2_WIN = 0.0

    @property
    def player1_score(self) -> float:
        return self.value

    @property
    def player2_score(self) -> float:
        return 1.0 - self.value

    def inverted(self) -> "GameResult":
        """The same outcome seen with the players swapped."""
        return GameResult(self.player2_score)

    @classmethod
    def from_score(cls, score: float) -> "GameResult":
        """Map player 1's score (1.0, 0.5 or 0.0) to a result."""
        try:
            return cls(float(score))
        except ValueError:
            raise ValueError(
                f"Score must be 1.0, 0.5 or 0.0, got {score!r}"
            ) from None


@dataclass(frozen=True)
class Game:
    """A single game within a rating period."""

    player1: Hashable
    player2: Hashable
    result: GameResult
