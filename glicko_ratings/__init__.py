"""
Glicko Ratings - Glicko-2 skill ratings over rating periods.

This package keeps a population of players, each with a rating, a rating
deviation and a volatility, and updates all of them from the games played
in a rating period. Per-player updates use Numba-compiled kernels.

Quick Start:
    from glicko_ratings import Glicko2, GameResult

    glicko2 = Glicko2(initial_volatility=0.06, tau=0.5)
    glicko2.create_player("alice")
    glicko2.create_player("bob", rating=1400, rd=30, volatility=0.06)

    # Collect the games of a period, then rate them together
    glicko2.add_game("alice", "bob", GameResult.PLAYER1_WIN)
    glicko2.compute_ratings()

    print(glicko2.get_rating("alice"), glicko2.get_deviation("alice"))

    # Queryable snapshot
    fitted = glicko2.get_fitted_ratings()
    print(fitted.top(10))
    print(fitted.predict("alice", "bob"))  # P(alice beats bob)
"""

from .exceptions import RatingSystemError, DuplicatePlayerError, PlayerNotFoundError
from .data import GameLog, Game, GameResult
from .base import Player, PlayerStore, RatingSystem
from .systems import Glicko2, Glicko2Config
from .results import FittedGlicko2Ratings

__version__ = "0.1.0"

__all__ = [
    # Errors
    "RatingSystemError",
    "DuplicatePlayerError",
    "PlayerNotFoundError",
    # Data
    "GameLog",
    "Game",
    "GameResult",
    # Base
    "Player",
    "PlayerStore",
    "RatingSystem",
    # Systems
    "Glicko2",
    "Glicko2Config",
    # Fitted ratings (queryable results)
    "FittedGlicko2Ratings",
]
