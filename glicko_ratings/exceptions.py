"""Exceptions raised by rating systems."""


class RatingSystemError(Exception):
    """Base class for errors raised by a rating system."""


class DuplicatePlayerError(RatingSystemError, ValueError):
    """A player with this ID is already registered."""

    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id!r} already exists.")


class PlayerNotFoundError(RatingSystemError, KeyError):
    """No player with this ID is registered."""

    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Player {player_id!r} does not exist.")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])
