"""Cog & Salvage: turn-based hex combat core."""

__version__ = "0.1.0"
