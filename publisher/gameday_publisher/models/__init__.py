"""Typed records handed out by the game store."""

from .schemas import GameRecord, UpdateRecord, UpdateType, UPDATE_TYPES

__all__ = ["GameRecord", "UpdateRecord", "UpdateType", "UPDATE_TYPES"]
