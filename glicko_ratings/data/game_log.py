"""Pending games of the current rating period.

Games are collected here until the rating system consumes them. Player
IDs are not checked when a game is added; that happens when the period
is computed.
"""

from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Tuple

import polars as pl

from .types import Game, GameResult


class GameLog:
    """
    Append-only collection of games for one rating period.

    The order of games carries no meaning: a period is rated as if all of
    its games were played simultaneously.
    """

    def __init__(self, games: Iterable[Game] = ()):
        self._games: List[Game] = list(games)

    @classmethod
    def from_dataframe(cls, df) -> "GameLog":
        """
        Build a log from a DataFrame.

        Args:
            df: DataFrame with columns Player1, Player2, Score, where Score
                is player 1's result (1.0, 0.5 or 0.0). Can be pandas or
                polars.

        Returns:
            GameLog holding one game per row
        """
        if not isinstance(df, pl.DataFrame):
            # Assume pandas DataFrame - convert to polars
            df = pl.from_pandas(df)

        required = {"Player1", "Player2", "Score"}
        missing = required - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

        return cls(
            Game(p1, p2, GameResult.from_score(score))
            for p1, p2, score in zip(
                df["Player1"].to_list(),
                df["Player2"].to_list(),
                df["Score"].to_list(),
            )
        )

    def add_game(self, player1, player2, result: GameResult) -> Game:
        """Append a game and return it."""
        if not isinstance(result, GameResult):
            result = GameResult.from_score(result)
        game = Game(player1, player2, result)
        self._games.append(game)
        return game

    def extend(self, games: Iterable[Game]) -> None:
        self._games.extend(games)

    def games_for(self, player_id) -> Iterator[Tuple[object, float]]:
        """Yield (opponent_id, score) for every game of the given player."""
        for game in self._games:
            if game.player1 == player_id:
                yield game.player2, game.result.player1_score
            if game.player2 == player_id:
                yield game.player1, game.result.player2_score

    def games_by_player(self) -> Dict[object, List[Tuple[object, float]]]:
        """
        Group games by participant in a single pass.

        Returns:
            Mapping player_id -> list of (opponent_id, score), equivalent
            to calling games_for() for each player
        """
        grouped = defaultdict(list)
        for game in self._games:
            grouped[game.player1].append((game.player2, game.result.player1_score))
            grouped[game.player2].append((game.player1, game.result.player2_score))
        return grouped

    def clear(self) -> None:
        """Discard every game."""
        self._games.clear()

    def __iter__(self) -> Iterator[Game]:
        return iter(self._games)

    def __len__(self) -> int:
        return len(self._games)

    def __repr__(self) -> str:
        return f"GameLog(games={len(self)})"
