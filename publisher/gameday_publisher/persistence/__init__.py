"""Persistence layer for games and updates."""

from .games import GameStore

__all__ = ["GameStore"]
