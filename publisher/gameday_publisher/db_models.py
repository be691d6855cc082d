"""SQLAlchemy models for the game-day store.

Two tables:
1. games: one row per game; at most one row has is_live = true (enforced
   by a partial unique index), scores within 0..99
2. game_updates: timestamped feed entries owned by a game (no cascade;
   updates are deleted individually)
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .utils.datetime_utils import now_utc


class Base(DeclarativeBase):
    pass


class Game(Base):
    """A game that can be marked live and published."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    home_team: Mapped[str] = mapped_column(String(100), nullable=False)
    away_team: Mapped[str] = mapped_column(String(100), nullable=False)
    score_home: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    score_away: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    home_lineup_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    away_lineup_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_live: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=now_utc,
        server_default=func.now(),
        onupdate=now_utc,
        nullable=False,
    )

    updates: Mapped[list[GameUpdate]] = relationship(
        "GameUpdate", back_populates="game", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("score_home BETWEEN 0 AND 99", name="ck_games_score_home_range"),
        CheckConstraint("score_away BETWEEN 0 AND 99", name="ck_games_score_away_range"),
        # Partial unique index: at most one row may have is_live = true
        Index(
            "uq_games_single_live",
            "is_live",
            unique=True,
            postgresql_where=text("is_live"),
            sqlite_where=text("is_live"),
        ),
    )


class GameUpdate(Base):
    """One feed entry: sanitized HTML, an NHL goal link or a YouTube link."""

    __tablename__ = "game_updates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("games.id"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )

    game: Mapped[Game] = relationship("Game", back_populates="updates")

    __table_args__ = (
        Index("idx_game_updates_game_created", "game_id", "created_at"),
        CheckConstraint(
            "(type = 'html' AND content IS NOT NULL AND url IS NULL)"
            " OR (type IN ('nhl_goal', 'youtube') AND url IS NOT NULL AND content IS NULL)",
            name="ck_game_updates_payload_matches_type",
        ),
    )
