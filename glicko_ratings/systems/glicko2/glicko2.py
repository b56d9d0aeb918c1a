"""
Glicko-2 rating system - Numba-accelerated implementation.

Extension of Glicko that adds a volatility parameter to model
rating stability. Uses internal Glicko-2 scale for calculations.

Games are collected into a rating period and rated together: every
player's update depends only on the state of the population before the
period, so neither the order of games nor the order in which players are
processed affects the result.
"""

import math
from dataclasses import dataclass
from typing import Hashable, List, Optional, Tuple, TypeVar

import numpy as np

from ...base import Player, RatingSystem
from ...results.fitted_ratings import FittedGlicko2Ratings
from ...utils.scaling import (
    GLICKO2_SCALE,
    INITIAL_DEVIATION,
    INITIAL_RATING,
    from_glicko2_deviation,
    from_glicko2_rating,
    to_glicko2_deviation,
    to_glicko2_rating,
)
from ._numba_core import predict_single, update_player

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class Glicko2Config:
    """Configuration for Glicko-2 rating system."""

    initial_rating: float = INITIAL_RATING
    initial_rd: float = INITIAL_DEVIATION
    initial_volatility: float = 0.06
    tau: float = 0.5  # System constant (typically 0.3 to 1.2)
    epsilon: float = 0.000001  # Convergence tolerance
    scale: float = GLICKO2_SCALE  # Conversion factor from Glicko to Glicko-2 scale

    def __post_init__(self):
        if not math.isfinite(self.initial_rating):
            raise ValueError(f"initial_rating must be finite, got {self.initial_rating}")
        if not self.tau > 0:
            raise ValueError(f"tau must be positive, got {self.tau}")
        if not (0 < self.initial_volatility < math.inf):
            raise ValueError(
                f"initial_volatility must be positive and finite, got {self.initial_volatility}"
            )
        if not (0 < self.initial_rd < math.inf):
            raise ValueError(f"initial_rd must be positive and finite, got {self.initial_rd}")
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")


class Glicko2(RatingSystem[K]):
    """
    Glicko-2 rating system with Numba acceleration.

    Each player has a rating, a rating deviation (RD) and a volatility.
    Ratings and RDs are given and returned on the public scale (1500/350);
    volatility is the same on both scales.

    Parameters:
        initial_volatility: Volatility of players created with defaults (default: 0.06)
        tau: System constant controlling volatility change (default: 0.5)

    Example:
        >>> glicko2 = Glicko2(tau=0.5)
        >>> glicko2.create_player("alice")
        >>> glicko2.create_player("bob", rating=1700, rd=80, volatility=0.06)
        >>> glicko2.add_game("alice", "bob", GameResult.PLAYER1_WIN)
        >>> glicko2.compute_ratings()
        >>> glicko2.get_rating("alice")
    """

    def __init__(
        self,
        initial_volatility: float = 0.06,
        tau: float = 0.5,
    ):
        self.config = Glicko2Config(
            initial_volatility=initial_volatility,
            tau=tau,
        )
        super().__init__()

    @property
    def tau(self) -> float:
        return self.config.tau

    @property
    def initial_volatility(self) -> float:
        return self.config.initial_volatility

    def create_player(
        self,
        player_id: K,
        rating: Optional[float] = None,
        rd: Optional[float] = None,
        volatility: Optional[float] = None,
    ) -> None:
        """
        Register a new player.

        Without explicit values the player starts at rating 1500, RD 350
        and the system's initial volatility. Any value given overrides the
        corresponding default.

        Args:
            player_id: Hashable ID, unique within this system
            rating: Public-scale rating
            rd: Public-scale rating deviation (> 0)
            volatility: Volatility (> 0)

        Raises:
            DuplicatePlayerError: if the ID is already registered
            ValueError: if rd or volatility is not positive and finite,
                or rating is not finite
        """
        rating = self.config.initial_rating if rating is None else rating
        rd = self.config.initial_rd if rd is None else rd
        volatility = self.config.initial_volatility if volatility is None else volatility

        player = Player(
            rating=to_glicko2_rating(rating),
            deviation=to_glicko2_deviation(rd),
            volatility=volatility,
        )
        self._players.add(player_id, player)

    def get_rating(self, player_id: K) -> float:
        """Public-scale rating of a player."""
        return float(from_glicko2_rating(self._players[player_id].rating))

    def get_deviation(self, player_id: K) -> float:
        """Public-scale rating deviation of a player."""
        return float(from_glicko2_deviation(self._players[player_id].deviation))

    def get_volatility(self, player_id: K) -> float:
        """Volatility of a player."""
        return self._players[player_id].volatility

    def _rate_player(
        self,
        player: Player,
        results: List[Tuple[Player, float]],
    ) -> Tuple[float, float, float]:
        """Run the Glicko-2 update for one player over the period."""
        count = len(results)
        opp_mus = np.empty(count, dtype=np.float64)
        opp_phis = np.empty(count, dtype=np.float64)
        scores = np.empty(count, dtype=np.float64)

        for j, (opponent, score) in enumerate(results):
            opp_mus[j] = opponent.rating
            opp_phis[j] = opponent.deviation
            scores[j] = score

        return update_player(
            player.rating,
            player.deviation,
            player.volatility,
            opp_mus,
            opp_phis,
            scores,
            self.config.tau,
            self.config.epsilon,
        )

    def predict_proba(self, player1: K, player2: K) -> float:
        """
        Predict probability that player1 beats player2.

        Uses the current ratings; pending games are not taken into account.

        Raises:
            PlayerNotFoundError: if either player is unknown
        """
        p1 = self._players[player1]
        p2 = self._players[player2]
        return float(predict_single(p1.rating, p1.deviation, p2.rating, p2.deviation))

    def get_fitted_ratings(self) -> FittedGlicko2Ratings:
        """
        Get a queryable snapshot of the current ratings.

        Returns:
            FittedGlicko2Ratings on the public scale
        """
        player_ids = self._players.player_ids
        players = [self._players[pid] for pid in player_ids]

        mu = np.array([p.rating for p in players], dtype=np.float64)
        phi = np.array([p.deviation for p in players], dtype=np.float64)

        return FittedGlicko2Ratings(
            player_ids=player_ids,
            ratings=from_glicko2_rating(mu),
            rd=from_glicko2_deviation(phi),
            volatility=np.array([p.volatility for p in players], dtype=np.float64),
            scale=self.config.scale,
            initial_rating=self.config.initial_rating,
            initial_rd=self.config.initial_rd,
            initial_volatility=self.config.initial_volatility,
            tau=self.config.tau,
            periods_computed=self._periods_computed,
        )

    def __repr__(self) -> str:
        return (
            f"Glicko2(tau={self.config.tau}, "
            f"initial_volatility={self.config.initial_volatility}, "
            f"players={self.num_players}, pending_games={self.num_pending_games})"
        )
