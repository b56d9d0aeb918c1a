"""
Numba-accelerated core functions for the Glicko-2 rating system.

All values are on the Glicko-2 scale (mu, phi, sigma). Functions here are
pure: they take the pre-period state of one player and its opponents and
return new values, leaving state management to the caller.
"""

import math
import numpy as np
from numba import njit, prange

# Variance cap for games whose expected scores have saturated
MAX_V = 1e10
MIN_V_INV = 1.0 / MAX_V


# =============================================================================
# Core Glicko-2 functions
# =============================================================================

@njit(cache=True, inline="always")
def _g(phi: float) -> float:
    """Calculate g(phi) function."""
    return 1.0 / math.sqrt(1.0 + 3.0 * (phi * phi) / (math.pi * math.pi))


@njit(cache=True, inline="always")
def _expected_score(mu: float, opp_mu: float, opp_phi: float) -> float:
    """Calculate expected score in Glicko-2 scale."""
    g_phi = _g(opp_phi)
    return 1.0 / (1.0 + math.exp(-g_phi * (mu - opp_mu)))


@njit(cache=True)
def _volatility_f(
    x: float,
    delta_sq: float,
    phi_sq: float,
    v: float,
    a: float,
    tau: float,
) -> float:
    """The function whose root is ln(sigma'^2)."""
    ex = math.exp(x)
    phi_sq_v_ex = phi_sq + v + ex
    num1 = ex * (delta_sq - phi_sq_v_ex)
    den1 = 2.0 * phi_sq_v_ex * phi_sq_v_ex
    return num1 / den1 - (x - a) / (tau * tau)


@njit(cache=True)
def update_volatility(
    sigma: float,
    phi: float,
    v: float,
    delta: float,
    tau: float,
    epsilon: float,
) -> float:
    """
    Solve for the new volatility (Step 5).

    Brackets the root of _volatility_f and narrows the bracket with the
    Illinois algorithm until it is narrower than epsilon.
    """
    a = math.log(sigma * sigma)
    phi_sq = phi * phi
    delta_sq = delta * delta

    # Set initial bounds
    A = a
    if delta_sq > phi_sq + v:
        B = math.log(delta_sq - phi_sq - v)
    else:
        # f decreases without bound as x -> -inf, so this terminates
        k = 1
        while _volatility_f(a - k * tau, delta_sq, phi_sq, v, a, tau) < 0:
            k += 1
        B = a - k * tau

    f_A = _volatility_f(A, delta_sq, phi_sq, v, a, tau)
    f_B = _volatility_f(B, delta_sq, phi_sq, v, a, tau)

    while abs(B - A) >= epsilon:
        C = A + (A - B) * f_A / (f_B - f_A)
        f_C = _volatility_f(C, delta_sq, phi_sq, v, a, tau)

        if f_C * f_B <= 0:
            A = B
            f_A = f_B
        else:
            # Illinois step: halve the retained endpoint
            f_A = f_A / 2.0

        B = C
        f_B = f_C

    return math.exp(A / 2.0)


@njit(cache=True)
def update_player(
    player_mu: float,
    player_phi: float,
    player_sigma: float,
    opp_mus: np.ndarray,
    opp_phis: np.ndarray,
    player_scores: np.ndarray,
    tau: float,
    epsilon: float,
) -> tuple:
    """
    Compute a single player's new rating, RD, and volatility.

    A player without games keeps rating and volatility while the RD grows
    by one period of volatility.

    Returns (new_mu, new_phi, new_sigma).
    """
    n_games = len(opp_mus)
    if n_games == 0:
        new_phi = math.sqrt(player_phi * player_phi + player_sigma * player_sigma)
        return player_mu, new_phi, player_sigma

    # Step 3: Compute variance v
    v_inv = 0.0
    delta_sum = 0.0

    for i in range(n_games):
        g_val = _g(opp_phis[i])
        e_val = _expected_score(player_mu, opp_mus[i], opp_phis[i])

        v_inv += g_val * g_val * e_val * (1.0 - e_val)
        delta_sum += g_val * (player_scores[i] - e_val)

    if v_inv > MIN_V_INV:
        v = 1.0 / v_inv
    else:
        # Expected scores saturated at 0 or 1: the games carry almost no
        # information, so v is capped instead of overflowing
        v = MAX_V

    # Step 4: Compute delta
    delta = v * delta_sum

    # Step 5: Update volatility
    new_sigma = update_volatility(player_sigma, player_phi, v, delta, tau, epsilon)

    # Step 6: Update phi*
    phi_star = math.sqrt(player_phi * player_phi + new_sigma * new_sigma)

    # Step 7: Update rating and RD
    new_phi = 1.0 / math.sqrt(1.0 / (phi_star * phi_star) + 1.0 / v)
    new_mu = player_mu + new_phi * new_phi * delta / v

    return new_mu, new_phi, new_sigma


# =============================================================================
# Prediction functions
# =============================================================================

@njit(cache=True, fastmath=True, parallel=True)
def predict_proba_batch(
    mu1: np.ndarray,
    phi1: np.ndarray,
    mu2: np.ndarray,
    phi2: np.ndarray,
) -> np.ndarray:
    """
    Predict win probabilities for a batch of matchups (parallelized).
    """
    n_games = len(mu1)
    proba = np.empty(n_games, dtype=np.float64)

    for i in prange(n_games):
        # Combined phi for prediction
        combined_phi = math.sqrt(phi1[i] * phi1[i] + phi2[i] * phi2[i])
        g_combined = _g(combined_phi)

        proba[i] = 1.0 / (1.0 + math.exp(-g_combined * (mu1[i] - mu2[i])))

    return proba


@njit(cache=True, fastmath=True)
def predict_single(
    mu1: float,
    phi1: float,
    mu2: float,
    phi2: float,
) -> float:
    """Predict win probability for a single matchup."""
    combined_phi = math.sqrt(phi1 * phi1 + phi2 * phi2)
    g_combined = _g(combined_phi)
    return 1.0 / (1.0 + math.exp(-g_combined * (mu1 - mu2)))


# =============================================================================
# Utility functions
# =============================================================================

@njit(cache=True)
def get_top_n_indices(ratings: np.ndarray, n: int) -> np.ndarray:
    """Get indices of top N rated players."""
    order = np.argsort(-ratings, kind="mergesort")
    return order[:n]


@njit(cache=True)
def get_bottom_n_indices(ratings: np.ndarray, n: int) -> np.ndarray:
    """Get indices of bottom N rated players."""
    order = np.argsort(ratings, kind="mergesort")
    return order[:n]
