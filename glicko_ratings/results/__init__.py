"""Results and fitted model classes."""

from .fitted_ratings import FittedGlicko2Ratings

__all__ = ["FittedGlicko2Ratings"]
