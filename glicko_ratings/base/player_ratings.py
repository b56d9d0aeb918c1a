"""Per-player rating record."""

import math
from dataclasses import dataclass, field


@dataclass
class Player:
    """
    Rating state of a single player.

    Holds the current rating, deviation and volatility, plus a staged
    ("new") copy of each. During a rating period the new values are
    written with stage() while every computation keeps reading the
    current ones; adopt_new_values() then makes the staged values current.

    All values are on the internal Glicko-2 scale.
    """

    rating: float      # mu
    deviation: float   # phi, > 0
    volatility: float  # sigma, > 0

    new_rating: float = field(init=False, repr=False)
    new_deviation: float = field(init=False, repr=False)
    new_volatility: float = field(init=False, repr=False)

    def __post_init__(self):
        if not math.isfinite(self.rating):
            raise ValueError(f"Rating must be finite, got {self.rating}")
        if not (0 < self.deviation < math.inf):
            raise ValueError(f"Deviation must be positive and finite, got {self.deviation}")
        if not (0 < self.volatility < math.inf):
            raise ValueError(f"Volatility must be positive and finite, got {self.volatility}")
        self.rating = float(self.rating)
        self.deviation = float(self.deviation)
        self.volatility = float(self.volatility)
        self.new_rating = self.rating
        self.new_deviation = self.deviation
        self.new_volatility = self.volatility

    def stage(self, rating: float, deviation: float, volatility: float) -> None:
        """Record the values to adopt at the end of the rating period."""
        self.new_rating = float(rating)
        self.new_deviation = float(deviation)
        self.new_volatility = float(volatility)

    def adopt_new_values(self) -> None:
        """Make the staged values current."""
        self.rating = self.new_rating
        self.deviation = self.new_deviation
        self.volatility = self.new_volatility
