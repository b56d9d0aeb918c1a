"""Base classes for rating systems."""

from .player_ratings import Player
from .player_store import PlayerStore
from .rating_system import RatingSystem

__all__ = ["Player", "PlayerStore", "RatingSystem"]
