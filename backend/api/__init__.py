"""API route handlers."""
from . import auth, prices, simulation, wallet

__all__ = ["auth", "prices", "simulation", "wallet"]
