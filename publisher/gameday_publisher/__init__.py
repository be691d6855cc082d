"""Game-day live feed publisher: sanitized admin updates in, atomic JSON snapshots out."""

__version__ = "1.0.0"
