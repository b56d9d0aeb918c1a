"""
Tests for the Glicko-2 rating system.

Worked example from: http://www.glicko.net/glicko/glicko2.pdf
"""

import math

import numpy as np
import pytest

from glicko_ratings import (
    DuplicatePlayerError,
    GameResult,
    Glicko2,
    Glicko2Config,
    PlayerNotFoundError,
)
from glicko_ratings.systems.glicko2._numba_core import update_player
from glicko_ratings.utils.scaling import GLICKO2_SCALE


def _glickman_example() -> Glicko2:
    system = Glicko2(initial_volatility=0.06, tau=0.5)
    system.create_player(1, rating=1500.0, rd=200.0, volatility=0.06)
    system.create_player(2, rating=1400.0, rd=30.0, volatility=0.06)
    system.create_player(3, rating=1550.0, rd=100.0, volatility=0.06)
    system.create_player(4, rating=1700.0, rd=300.0, volatility=0.06)
    system.add_game(1, 2, GameResult.PLAYER1_WIN)
    system.add_game(1, 3, GameResult.PLAYER2_WIN)
    system.add_game(1, 4, GameResult.PLAYER2_WIN)
    return system


def test_glickman_worked_example():
    system = _glickman_example()
    system.compute_ratings()

    # the published example rounds every intermediate step
    assert system.get_rating(1) == pytest.approx(1464.06, abs=0.02)
    assert system.get_deviation(1) == pytest.approx(151.52, abs=0.02)
    assert system.get_volatility(1) == pytest.approx(0.05999, abs=1e-4)


def test_glickman_worked_example_internal_scale():
    system = _glickman_example()
    system.compute_ratings()

    mu = (system.get_rating(1) - 1500.0) / GLICKO2_SCALE
    phi = system.get_deviation(1) / GLICKO2_SCALE
    assert mu == pytest.approx(-0.2069, abs=5e-4)
    assert phi == pytest.approx(0.8722, abs=5e-4)


def test_game_log_cleared_after_compute():
    system = _glickman_example()
    assert system.num_pending_games == 3

    system.compute_ratings()
    assert system.num_pending_games == 0
    assert system.periods_computed == 1


def test_create_and_read_back():
    system = Glicko2()
    system.create_player("x", rating=1723.5, rd=87.25, volatility=0.071)

    assert system.get_rating("x") == pytest.approx(1723.5, abs=1e-9)
    assert system.get_deviation("x") == pytest.approx(87.25, abs=1e-9)
    assert system.get_volatility("x") == pytest.approx(0.071, abs=1e-12)


def test_default_player():
    system = Glicko2(initial_volatility=0.09, tau=0.3)
    system.create_player("x")

    assert system.get_rating("x") == pytest.approx(1500.0)
    assert system.get_deviation("x") == pytest.approx(350.0)
    assert system.get_volatility("x") == 0.09


def test_partial_explicit_values_use_defaults():
    system = Glicko2(initial_volatility=0.05)
    system.create_player("x", rating=1800.0)

    assert system.get_rating("x") == pytest.approx(1800.0)
    assert system.get_deviation("x") == pytest.approx(350.0)
    assert system.get_volatility("x") == 0.05


def test_empty_period_grows_deviation_only():
    system = Glicko2(initial_volatility=0.06)
    system.create_player("a")
    system.create_player("b", rating=1650.0, rd=120.0, volatility=0.08)

    system.compute_ratings()

    phi_a = 350.0 / GLICKO2_SCALE
    phi_b = 120.0 / GLICKO2_SCALE
    assert system.get_rating("a") == pytest.approx(1500.0)
    assert system.get_volatility("a") == 0.06
    assert system.get_deviation("a") == pytest.approx(
        math.sqrt(phi_a ** 2 + 0.06 ** 2) * GLICKO2_SCALE
    )
    assert system.get_rating("b") == pytest.approx(1650.0)
    assert system.get_volatility("b") == 0.08
    assert system.get_deviation("b") == pytest.approx(
        math.sqrt(phi_b ** 2 + 0.08 ** 2) * GLICKO2_SCALE
    )


def test_inactive_player_in_active_period():
    """Players without games only see their deviation grow."""
    system = _glickman_example()
    system.create_player(5, rating=1600.0, rd=50.0, volatility=0.06)

    system.compute_ratings()

    assert system.get_rating(5) == pytest.approx(1600.0)
    assert system.get_volatility(5) == 0.06
    assert system.get_deviation(5) == pytest.approx(
        math.sqrt((50.0 / GLICKO2_SCALE) ** 2 + 0.06 ** 2) * GLICKO2_SCALE
    )


def _state(system: Glicko2, player_id):
    return (
        system.get_rating(player_id),
        system.get_deviation(player_id),
        system.get_volatility(player_id),
    )


@pytest.mark.parametrize(
    "result",
    [GameResult.PLAYER1_WIN, GameResult.DRAW, GameResult.PLAYER2_WIN],
)
def test_swapping_players_and_result_is_equivalent(result):
    original = Glicko2()
    swapped = Glicko2()
    for system in (original, swapped):
        system.create_player("a", rating=1550.0, rd=90.0, volatility=0.06)
        system.create_player("b", rating=1480.0, rd=210.0, volatility=0.07)

    original.add_game("a", "b", result)
    swapped.add_game("b", "a", result.inverted())
    original.compute_ratings()
    swapped.compute_ratings()

    assert _state(original, "a") == _state(swapped, "a")
    assert _state(original, "b") == _state(swapped, "b")


def test_game_order_does_not_matter():
    forward = _glickman_example()

    backward = Glicko2(initial_volatility=0.06, tau=0.5)
    backward.create_player(4, rating=1700.0, rd=300.0, volatility=0.06)
    backward.create_player(3, rating=1550.0, rd=100.0, volatility=0.06)
    backward.create_player(2, rating=1400.0, rd=30.0, volatility=0.06)
    backward.create_player(1, rating=1500.0, rd=200.0, volatility=0.06)
    backward.add_game(4, 1, GameResult.PLAYER1_WIN)
    backward.add_game(3, 1, GameResult.PLAYER1_WIN)
    backward.add_game(2, 1, GameResult.PLAYER2_WIN)

    forward.compute_ratings()
    backward.compute_ratings()

    for player_id in (1, 2, 3, 4):
        assert _state(backward, player_id) == pytest.approx(
            _state(forward, player_id), rel=1e-6
        )


def test_updates_use_pre_period_opponent_values():
    """Player 2's update must see player 1's rating from before the period."""
    system = Glicko2(tau=0.5)
    system.create_player(1, rating=1500.0, rd=200.0, volatility=0.06)
    system.create_player(2, rating=1400.0, rd=30.0, volatility=0.06)
    system.add_game(1, 2, GameResult.PLAYER1_WIN)
    system.compute_ratings()

    # Player 1 is rated first; player 2 must still be rated against
    # player 1's original values.
    mu, phi, sigma = update_player(
        (1400.0 - 1500.0) / GLICKO2_SCALE,
        30.0 / GLICKO2_SCALE,
        0.06,
        np.array([0.0]),
        np.array([200.0 / GLICKO2_SCALE]),
        np.array([0.0]),
        0.5,
        1e-6,
    )
    assert system.get_rating(2) == pytest.approx(mu * GLICKO2_SCALE + 1500.0, rel=1e-12)
    assert system.get_deviation(2) == pytest.approx(phi * GLICKO2_SCALE, rel=1e-12)
    assert system.get_volatility(2) == pytest.approx(sigma, rel=1e-12)
    assert system.get_rating(1) > 1500.0
    assert system.get_rating(2) < 1400.0


def test_beating_weaker_opponent_gains_less():
    def gain_against(opponent_rating: float) -> float:
        system = Glicko2()
        system.create_player("p", rating=1500.0, rd=100.0, volatility=0.06)
        system.create_player("o", rating=opponent_rating, rd=100.0, volatility=0.06)
        system.add_game("p", "o", GameResult.PLAYER1_WIN)
        system.compute_ratings()
        return system.get_rating("p") - 1500.0

    assert 0.0 < gain_against(1100.0) < gain_against(1500.0)


def test_loss_lowers_rating():
    system = Glicko2()
    system.create_player("p")
    system.create_player("o")
    system.add_game("p", "o", GameResult.PLAYER2_WIN)
    system.compute_ratings()

    assert system.get_rating("p") < 1500.0
    assert system.get_rating("o") > 1500.0
    assert system.get_rating("p") - 1500.0 == pytest.approx(
        1500.0 - system.get_rating("o")
    )


def test_expected_win_across_huge_gap_changes_nothing_but_rd():
    system = Glicko2()
    system.create_player("top", rating=9000.0, rd=30.0)
    system.create_player("low", rating=1500.0, rd=30.0)
    system.add_game("top", "low", GameResult.PLAYER1_WIN)

    system.compute_ratings()

    grown_rd = math.sqrt((30.0 / GLICKO2_SCALE) ** 2 + 0.06 ** 2) * GLICKO2_SCALE
    assert system.get_rating("top") == pytest.approx(9000.0, rel=1e-9)
    assert system.get_rating("low") == pytest.approx(1500.0, rel=1e-9)
    for player in ("top", "low"):
        assert system.get_deviation(player) == pytest.approx(grown_rd, rel=1e-6)
        assert system.get_volatility(player) == pytest.approx(0.06, rel=1e-6)


def test_upset_across_huge_gap_stays_finite():
    system = Glicko2()
    system.create_player("top", rating=9000.0, rd=30.0)
    system.create_player("low", rating=1500.0, rd=30.0)
    system.add_game("top", "low", GameResult.PLAYER2_WIN)

    system.compute_ratings()

    for player in ("top", "low"):
        assert math.isfinite(system.get_rating(player))
        assert math.isfinite(system.get_deviation(player))
        assert system.get_deviation(player) > 0.0
        assert math.isfinite(system.get_volatility(player))
        assert system.get_volatility(player) > 0.0
    assert system.get_rating("top") < 9000.0
    assert system.get_rating("low") > 1500.0


def test_game_against_removed_player_is_dropped():
    system = Glicko2()
    system.create_player("a")
    system.create_player("b")
    system.add_game("a", "b", GameResult.PLAYER1_WIN)
    system.remove_player("b")

    system.compute_ratings()

    phi = 350.0 / GLICKO2_SCALE
    assert system.get_rating("a") == pytest.approx(1500.0)
    assert system.get_deviation("a") == pytest.approx(
        math.sqrt(phi ** 2 + 0.06 ** 2) * GLICKO2_SCALE
    )
    assert system.num_pending_games == 0


def test_game_with_unknown_players_is_accepted():
    system = Glicko2()
    system.create_player("a")
    system.add_game("ghost", "phantom", GameResult.DRAW)
    system.add_game("a", "ghost", GameResult.PLAYER1_WIN)
    assert system.num_pending_games == 2

    system.compute_ratings()
    assert system.get_rating("a") == pytest.approx(1500.0)


def test_add_game_accepts_scores():
    system = Glicko2()
    game = system.add_game("a", "b", 0.5)
    assert game.result is GameResult.DRAW

    with pytest.raises(ValueError):
        system.add_game("a", "b", 0.75)


def test_duplicate_player():
    system = Glicko2()
    system.create_player("a", rating=1600.0)

    with pytest.raises(DuplicatePlayerError) as excinfo:
        system.create_player("a")

    assert excinfo.value.player_id == "a"
    assert system.num_players == 1
    assert system.get_rating("a") == pytest.approx(1600.0)


def test_unknown_player():
    system = Glicko2()

    with pytest.raises(PlayerNotFoundError):
        system.get_rating("nobody")
    with pytest.raises(PlayerNotFoundError):
        system.get_deviation("nobody")
    with pytest.raises(PlayerNotFoundError):
        system.get_volatility("nobody")
    with pytest.raises(PlayerNotFoundError):
        system.remove_player("nobody")


def test_remove_player():
    system = Glicko2()
    system.create_player("a")
    system.remove_player("a")

    assert "a" not in system
    assert system.num_players == 0
    # The ID can be reused
    system.create_player("a", rating=1200.0)
    assert system.get_rating("a") == pytest.approx(1200.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rd": 0.0},
        {"rd": -10.0},
        {"rd": float("nan")},
        {"rd": float("inf")},
        {"volatility": 0.0},
        {"volatility": -0.1},
        {"volatility": float("nan")},
        {"rating": float("nan")},
    ],
)
def test_invalid_player_values(kwargs):
    system = Glicko2()
    with pytest.raises(ValueError):
        system.create_player("a", **kwargs)
    assert system.num_players == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tau": 0.0},
        {"tau": -0.5},
        {"tau": float("nan")},
        {"initial_volatility": 0.0},
        {"initial_volatility": float("nan")},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        Glicko2(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"epsilon": 0.0},
        {"epsilon": float("nan")},
        {"initial_rd": float("nan")},
        {"initial_rd": float("inf")},
        {"initial_rating": float("nan")},
    ],
)
def test_invalid_config_fields(kwargs):
    with pytest.raises(ValueError):
        Glicko2Config(**kwargs)


def test_config_is_immutable():
    system = Glicko2(initial_volatility=0.07, tau=0.8)
    assert system.tau == 0.8
    assert system.initial_volatility == 0.07

    with pytest.raises(AttributeError):
        system.config.tau = 1.0


def test_predict_proba():
    system = Glicko2()
    system.create_player("strong", rating=1800.0, rd=50.0)
    system.create_player("weak", rating=1400.0, rd=50.0)

    p = system.predict_proba("strong", "weak")
    assert 0.5 < p < 1.0
    assert p + system.predict_proba("weak", "strong") == pytest.approx(1.0)

    with pytest.raises(PlayerNotFoundError):
        system.predict_proba("strong", "nobody")


def test_hashable_ids():
    system = Glicko2()
    system.create_player(("team", 1))
    system.create_player(("team", 2))
    system.add_game(("team", 1), ("team", 2), GameResult.PLAYER1_WIN)
    system.compute_ratings()

    assert system.get_rating(("team", 1)) > system.get_rating(("team", 2))


def test_repr():
    system = Glicko2(tau=0.4)
    system.create_player("a")
    r = repr(system)
    assert "tau=0.4" in r
    assert "players=1" in r
