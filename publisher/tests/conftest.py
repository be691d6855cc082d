"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import os
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

# Ensure the publisher package is importable without an install
PUBLISHER_ROOT = Path(__file__).resolve().parents[1]
if str(PUBLISHER_ROOT) not in sys.path:
    sys.path.insert(0, str(PUBLISHER_ROOT))

# Set required environment variables before any imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from gameday_publisher.db import build_session_factory, init_db  # noqa: E402
from gameday_publisher.persistence import GameStore  # noqa: E402


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 1, 5, 0, 0, 0, tzinfo=UTC))


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session (and thread) in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory, clock) -> GameStore:
    return GameStore(session_factory, clock=clock)


@pytest.fixture
def output_path(tmp_path) -> Path:
    return tmp_path / "public" / "current.json"


@pytest.fixture
def make_game(store):
    """Create a game with sensible defaults; keyword overrides win."""

    def _make(**overrides):
        fields = {
            "title": "Devils vs Rangers",
            "home_team": "Devils",
            "away_team": "Rangers",
            "score_home": 0,
            "score_away": 0,
            "home_lineup_text": "",
            "away_lineup_text": "",
        }
        fields.update(overrides)
        return store.create_game(**fields)

    return _make
