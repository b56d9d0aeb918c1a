"""
Fitted ratings objects for querying without touching the live system.

These classes wrap a snapshot of a rating system and provide
query interfaces for analysis.
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

import numpy as np
import polars as pl

from ..exceptions import PlayerNotFoundError
from ..systems.glicko2._numba_core import (
    get_bottom_n_indices,
    get_top_n_indices,
    predict_proba_batch,
    predict_single,
)


def _compute_ranks(ratings: np.ndarray) -> np.ndarray:
    """
    Compute ranks for all players efficiently in O(n log n).

    Returns array where ranks[i] = rank of player i (1 = highest).
    """
    n = len(ratings)
    sorted_indices = np.argsort(-ratings, kind="mergesort")
    ranks = np.empty(n, dtype=np.int32)
    ranks[sorted_indices] = np.arange(1, n + 1)
    return ranks


@dataclass
class FittedGlicko2Ratings:
    """
    Queryable snapshot of Glicko-2 ratings on the public scale.

    Provides methods for:
    - Getting top/bottom N players
    - Predicting matchup outcomes
    - Filtering by RD or volatility
    - Exporting to a Polars DataFrame

    Attributes:
        player_ids: Player IDs; position i describes ratings[i], rd[i], volatility[i]
        ratings: Public-scale ratings
        rd: Public-scale rating deviations
        volatility: Volatilities
        periods_computed: Rating periods closed before the snapshot
    """

    player_ids: List[Hashable]
    ratings: np.ndarray
    rd: np.ndarray
    volatility: np.ndarray
    scale: float = 173.7178  # Glicko-2 scale factor
    initial_rating: float = 1500.0
    initial_rd: float = 350.0
    initial_volatility: float = 0.06
    tau: float = 0.5
    periods_computed: int = 0

    # Cached
    _ranks: Optional[np.ndarray] = field(default=None, repr=False)
    _index: Dict[Hashable, int] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        """Ensure arrays are contiguous."""
        self.player_ids = list(self.player_ids)
        self.ratings = np.ascontiguousarray(self.ratings, dtype=np.float64)
        self.rd = np.ascontiguousarray(self.rd, dtype=np.float64)
        self.volatility = np.ascontiguousarray(self.volatility, dtype=np.float64)
        self._ranks = None
        self._index = {pid: i for i, pid in enumerate(self.player_ids)}

    @property
    def num_players(self) -> int:
        return len(self.ratings)

    @property
    def ranks(self) -> np.ndarray:
        """Lazily computed ranks array (1 = highest rated)."""
        if self._ranks is None:
            self._ranks = _compute_ranks(self.ratings)
        return self._ranks

    def _position(self, player_id) -> int:
        try:
            return self._index[player_id]
        except KeyError:
            raise PlayerNotFoundError(player_id) from None

    def get_rating(self, player_id) -> Tuple[float, float, float]:
        """Get (rating, rd, volatility) for a single player."""
        i = self._position(player_id)
        return (
            float(self.ratings[i]),
            float(self.rd[i]),
            float(self.volatility[i]),
        )

    def predict(self, player1, player2) -> float:
        """Predict probability that player1 beats player2."""
        r1, rd1, _ = self.get_rating(player1)
        r2, rd2, _ = self.get_rating(player2)

        # Convert to Glicko-2 scale for calculation
        mu1 = (r1 - self.initial_rating) / self.scale
        mu2 = (r2 - self.initial_rating) / self.scale
        phi1 = rd1 / self.scale
        phi2 = rd2 / self.scale

        return float(predict_single(mu1, phi1, mu2, phi2))

    def predict_batch(
        self,
        player1: Iterable[Hashable],
        player2: Iterable[Hashable],
    ) -> np.ndarray:
        """
        Predict outcomes for multiple matchups (vectorized).

        Element i is the probability that player1[i] beats player2[i].
        """
        p1 = np.array([self._position(pid) for pid in player1], dtype=np.int64)
        p2 = np.array([self._position(pid) for pid in player2], dtype=np.int64)
        if len(p1) != len(p2):
            raise ValueError(
                f"player1 and player2 must have the same length, got {len(p1)} and {len(p2)}"
            )

        mu = (self.ratings - self.initial_rating) / self.scale
        phi = self.rd / self.scale
        return predict_proba_batch(mu[p1], phi[p1], mu[p2], phi[p2])

    def top(self, n: int = 10) -> pl.DataFrame:
        """Get top N rated players with RD and volatility."""
        indices = get_top_n_indices(self.ratings, max(n, 0))
        return self._indices_to_dataframe(indices)

    def bottom(self, n: int = 10) -> pl.DataFrame:
        """Get bottom N rated players."""
        indices = get_bottom_n_indices(self.ratings, max(n, 0))
        return self._indices_to_dataframe(indices)

    def rank(self, player_id) -> int:
        """Get rank of a specific player (1 = highest rated)."""
        return int(self.ranks[self._position(player_id)])

    def _indices_to_dataframe(self, indices: np.ndarray) -> pl.DataFrame:
        return pl.DataFrame({
            "rank": self.ranks[indices],
            "player_id": [self.player_ids[i] for i in indices],
            "rating": self.ratings[indices],
            "rd": self.rd[indices],
            "volatility": self.volatility[indices],
        })

    def matchup(self, player1, player2) -> pl.DataFrame:
        """Get detailed matchup analysis between two players."""
        r1, rd1, vol1 = self.get_rating(player1)
        r2, rd2, vol2 = self.get_rating(player2)
        p1_wins = self.predict(player1, player2)

        return pl.DataFrame({
            "player_id": [player1, player2],
            "rating": [r1, r2],
            "rd": [rd1, rd2],
            "volatility": [vol1, vol2],
            "win_prob": [p1_wins, 1.0 - p1_wins],
        })

    def confident_players(self, max_rd: float = 100.0, n: int = 10) -> pl.DataFrame:
        """Get top players with low RD (well-established ratings)."""
        mask = self.rd <= max_rd
        filtered_ratings = np.where(mask, self.ratings, -np.inf)
        indices = get_top_n_indices(filtered_ratings, max(n, 0))
        indices = indices[mask[indices]]
        return self._indices_to_dataframe(indices)

    def stable_players(self, max_volatility: float = 0.05, n: int = 10) -> pl.DataFrame:
        """Get top players with low volatility (stable ratings)."""
        mask = self.volatility <= max_volatility
        filtered_ratings = np.where(mask, self.ratings, -np.inf)
        indices = get_top_n_indices(filtered_ratings, max(n, 0))
        indices = indices[mask[indices]]
        return self._indices_to_dataframe(indices)

    def to_dataframe(self, include_rank: bool = True) -> pl.DataFrame:
        """Export all ratings to DataFrame, highest rating first."""
        data = {
            "player_id": self.player_ids,
            "rating": self.ratings,
            "rd": self.rd,
            "volatility": self.volatility,
        }

        if include_rank:
            data["rank"] = self.ranks

        return pl.DataFrame(data).sort("rating", descending=True)

    def __repr__(self) -> str:
        return (
            f"FittedGlicko2Ratings(players={self.num_players}, "
            f"periods={self.periods_computed}, tau={self.tau})"
        )

    def __str__(self) -> str:
        lines = [
            "Fitted Glicko-2 Ratings",
            f"  Players: {self.num_players:,}",
            f"  Periods computed: {self.periods_computed:,}",
            f"  Tau: {self.tau}",
        ]
        if self.num_players:
            lines += [
                f"  Rating range: {self.ratings.min():.1f} - {self.ratings.max():.1f}",
                f"  Mean RD: {self.rd.mean():.1f}",
                f"  Mean volatility: {self.volatility.mean():.4f}",
            ]
        return "\n".join(lines)
