"""Conversion between the public rating scale and the internal Glicko-2 scale.

The public scale is the familiar one (ratings around 1500, deviations up
to 350). All computation happens on the Glicko-2 scale, where ratings are
centered at 0 and both rating and deviation are divided by GLICKO2_SCALE.

Every function works on plain floats and on numpy arrays.
"""

GLICKO2_SCALE = 173.7178  # 400 / ln(10)
INITIAL_RATING = 1500.0
INITIAL_DEVIATION = 350.0


def to_glicko2_rating(rating):
    """Convert a public rating to mu."""
    return (rating - INITIAL_RATING) / GLICKO2_SCALE


def to_glicko2_deviation(rd):
    """Convert a public rating deviation to phi."""
    return rd / GLICKO2_SCALE


def from_glicko2_rating(mu):
    """Convert mu back to a public rating."""
    return mu * GLICKO2_SCALE + INITIAL_RATING


def from_glicko2_deviation(phi):
    """Convert phi back to a public rating deviation."""
    return phi * GLICKO2_SCALE
