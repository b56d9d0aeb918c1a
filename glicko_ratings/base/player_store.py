"""Keyed storage of player records."""

import logging
from typing import Dict, Generic, Hashable, Iterator, List, Optional, Tuple, TypeVar

from ..exceptions import DuplicatePlayerError, PlayerNotFoundError
from .player_ratings import Player

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class PlayerStore(Generic[K]):
    """
    Mapping from player ID to Player.

    IDs can be any hashable value. Each ID is registered at most once;
    adding an existing ID or touching a missing one raises before
    anything is changed.
    """

    def __init__(self):
        self._players: Dict[K, Player] = {}

    def add(self, player_id: K, player: Player) -> None:
        """Register a new player."""
        if player_id in self._players:
            raise DuplicatePlayerError(player_id)
        self._players[player_id] = player
        logger.debug("Created player %r", player_id)

    def remove(self, player_id: K) -> None:
        """Unregister a player."""
        if player_id not in self._players:
            raise PlayerNotFoundError(player_id)
        del self._players[player_id]
        logger.debug("Removed player %r", player_id)

    def __getitem__(self, player_id: K) -> Player:
        try:
            return self._players[player_id]
        except KeyError:
            raise PlayerNotFoundError(player_id) from None

    def get(self, player_id: K) -> Optional[Player]:
        """Return the player, or None if the ID is unknown."""
        return self._players.get(player_id)

    def players(self) -> Iterator[Tuple[K, Player]]:
        """Iterate over (player_id, player) pairs."""
        return iter(self._players.items())

    @property
    def player_ids(self) -> List[K]:
        return list(self._players)

    def __contains__(self, player_id) -> bool:
        return player_id in self._players

    def __iter__(self) -> Iterator[K]:
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def __repr__(self) -> str:
        return f"PlayerStore(players={len(self)})"
