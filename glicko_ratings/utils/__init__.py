"""Utility functions for rating systems."""

from .scaling import (
    GLICKO2_SCALE,
    INITIAL_DEVIATION,
    INITIAL_RATING,
    from_glicko2_deviation,
    from_glicko2_rating,
    to_glicko2_deviation,
    to_glicko2_rating,
)

__all__ = [
    "GLICKO2_SCALE",
    "INITIAL_DEVIATION",
    "INITIAL_RATING",
    "from_glicko2_deviation",
    "from_glicko2_rating",
    "to_glicko2_deviation",
    "to_glicko2_rating",
]
