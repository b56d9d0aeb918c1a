"""Abstract base class for period-based rating systems."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Hashable, List, Tuple, TypeVar

from ..data.game_log import GameLog
from ..data.types import Game, GameResult
from .player_ratings import Player
from .player_store import PlayerStore

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class RatingSystem(ABC, Generic[K]):
    """
    Abstract base class for rating systems that update once per period.

    Subclasses must implement:
    - _rate_player(): Compute a player's new values from its period results
    - predict_proba(): Predict win probability for player 1

    The base class provides:
    - add_game(): Record a game for the current period
    - remove_player(): Unregister a player
    - compute_ratings(): Rate every player and close the period

    Players are registered by subclasses (which know how to convert the
    caller's values) through self._players.
    """

    def __init__(self):
        self._players: PlayerStore[K] = PlayerStore()
        self._games = GameLog()
        self._periods_computed: int = 0

    @property
    def num_players(self) -> int:
        """Number of registered players."""
        return len(self._players)

    @property
    def num_pending_games(self) -> int:
        """Number of games waiting for the next compute_ratings() call."""
        return len(self._games)

    @property
    def periods_computed(self) -> int:
        """Number of rating periods closed so far."""
        return self._periods_computed

    @property
    def player_ids(self) -> List[K]:
        return self._players.player_ids

    def __contains__(self, player_id) -> bool:
        return player_id in self._players

    def remove_player(self, player_id: K) -> None:
        """
        Remove a player.

        Pending games against this player are kept; they are skipped when
        the period is computed.

        Raises:
            PlayerNotFoundError: if no player has this ID
        """
        self._players.remove(player_id)

    def add_game(self, player1: K, player2: K, result: GameResult) -> Game:
        """
        Record a game for the current rating period.

        The IDs are not checked here. A game whose opponent is unknown when
        compute_ratings() runs is left out of that player's update.

        Args:
            player1: ID of player 1
            player2: ID of player 2
            result: GameResult, or player 1's score (1.0, 0.5 or 0.0)

        Returns:
            The recorded Game
        """
        return self._games.add_game(player1, player2, result)

    @abstractmethod
    def _rate_player(
        self,
        player: Player,
        results: List[Tuple[Player, float]],
    ) -> Tuple[float, float, float]:
        """
        Compute a player's new values for the period.

        Must only read the current (pre-period) values of the players
        passed in.

        Args:
            player: The player being rated
            results: (opponent, score) for each of the player's games

        Returns:
            (rating, deviation, volatility) on the internal scale
        """
        pass

    @abstractmethod
    def predict_proba(self, player1: K, player2: K) -> float:
        """Predict probability that player1 beats player2."""
        pass

    def compute_ratings(self) -> None:
        """
        Rate every player on the pending games and close the period.

        Every player is rated from the state of the whole population
        before this call; new values are adopted only once all players
        have been rated. The game log is emptied afterwards.
        """
        games_by_player = self._games.games_by_player()
        dropped = 0

        for player_id, player in self._players.players():
            results = []
            for opponent_id, score in games_by_player.get(player_id, ()):
                opponent = self._players.get(opponent_id)
                if opponent is None:
                    dropped += 1
                    continue
                results.append((opponent, score))
            player.stage(*self._rate_player(player, results))

        for _, player in self._players.players():
            player.adopt_new_values()

        logger.debug(
            "Rating period %d: %d players, %d games, %d game results dropped",
            self._periods_computed,
            len(self._players),
            len(self._games),
            dropped,
        )
        self._games.clear()
        self._periods_computed += 1

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(players={self.num_players})"
