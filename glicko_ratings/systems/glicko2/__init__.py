"""Glicko-2 rating system implementation."""

from .glicko2 import Glicko2, Glicko2Config

__all__ = ["Glicko2", "Glicko2Config"]
