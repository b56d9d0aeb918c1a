"""Rating system implementations.

- Glicko2: Glicko-2 rating system with volatility, rated per period

Per-player updates use Numba-compiled kernels.
"""

from .glicko2 import Glicko2, Glicko2Config

__all__ = [
    "Glicko2",
    "Glicko2Config",
]
