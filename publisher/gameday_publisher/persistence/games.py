"""Game and update persistence.

``GameStore`` is the single handle the feed generator and the admin write
paths share. It is built once per process around a session factory (or an
in-memory SQLite factory in tests) and passed to whoever needs it.

Every public method runs in its own transaction. SQLAlchemy errors are
rolled back and surfaced as PersistenceFailure; nothing is half-applied.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Iterator

from pydantic import ValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..db import get_session
from ..db_models import Game, GameUpdate
from ..exceptions import PersistenceFailure, ValidationFailure
from ..logging import logger
from ..models import GameRecord, UpdateRecord
from ..models.schemas import payload_matches_type
from ..utils.datetime_utils import now_utc

GAME_FIELDS = (
    "title",
    "home_team",
    "away_team",
    "score_home",
    "score_away",
    "home_lineup_text",
    "away_lineup_text",
)


class GameStore:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        try:
            with get_session(self._session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("store_operation_failed", operation=operation)
            raise PersistenceFailure(f"{operation} failed: {exc}") from exc
        except ValidationError as exc:
            # A stored row no longer satisfies the record invariants
            logger.exception("store_row_invalid", operation=operation)
            raise PersistenceFailure(f"{operation} returned an invalid row: {exc}") from exc

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    def get_game(self, game_id: int) -> GameRecord | None:
        with self._transaction("get_game") as session:
            game = session.get(Game, game_id)
            return GameRecord.model_validate(game) if game else None

    def get_live_game(self) -> GameRecord | None:
        """Return the live game, if any."""
        with self._transaction("get_live_game") as session:
            game = session.scalars(
                select(Game).where(Game.is_live.is_(True)).order_by(Game.id).limit(1)
            ).first()
            return GameRecord.model_validate(game) if game else None

    def list_games(self) -> list[GameRecord]:
        with self._transaction("list_games") as session:
            games = session.scalars(
                select(Game).order_by(Game.updated_at.desc(), Game.id.desc())
            ).all()
            return [GameRecord.model_validate(game) for game in games]

    def create_game(self, **fields: Any) -> GameRecord:
        now = self._clock()
        with self._transaction("create_game") as session:
            game = Game(
                **{name: fields[name] for name in GAME_FIELDS if name in fields},
                is_live=False,
                created_at=now,
                updated_at=now,
            )
            session.add(game)
            session.flush()
            record = GameRecord.model_validate(game)
        logger.info("game_created", game_id=record.id, title=record.title)
        return record

    def update_game(self, game_id: int, **fields: Any) -> GameRecord:
        with self._transaction("update_game") as session:
            game = session.get(Game, game_id)
            if game is None:
                raise ValidationFailure("Game not found.")
            for name in GAME_FIELDS:
                if name in fields:
                    setattr(game, name, fields[name])
            game.updated_at = self._clock()
            session.flush()
            record = GameRecord.model_validate(game)
        logger.info("game_updated", game_id=record.id)
        return record

    # ------------------------------------------------------------------
    # Live transitions
    # ------------------------------------------------------------------

    def _clear_live_flags(self, session: Session) -> None:
        # updated_at is pinned so clearing does not look like an edit
        session.execute(
            update(Game)
            .where(Game.is_live.is_(True))
            .values(is_live=False, updated_at=Game.updated_at)
            .execution_options(synchronize_session=False)
        )

    def _mark_live(self, session: Session, game_id: int, when: datetime) -> None:
        session.execute(
            update(Game)
            .where(Game.id == game_id)
            .values(is_live=True, updated_at=when)
            .execution_options(synchronize_session=False)
        )

    def set_live(self, game_id: int) -> GameRecord:
        """Make ``game_id`` the only live game.

        Clearing every flag and setting the new one share one transaction,
        so readers see either the old live game or the new one.
        """
        with self._transaction("set_live") as session:
            if session.get(Game, game_id) is None:
                raise ValidationFailure("No game to set live.")
            self._clear_live_flags(session)
            self._mark_live(session, game_id, self._clock())
            session.flush()
            game = session.get(Game, game_id, populate_existing=True)
            record = GameRecord.model_validate(game)
        logger.info("game_set_live", game_id=game_id)
        return record

    def unset_live(self, game_id: int) -> GameRecord:
        """Take ``game_id`` off air. Rejected unless it is currently live."""
        with self._transaction("unset_live") as session:
            game = session.get(Game, game_id)
            if game is None or not game.is_live:
                raise ValidationFailure("Game is not currently live.")
            game.is_live = False
            game.updated_at = self._clock()
            session.flush()
            record = GameRecord.model_validate(game)
        logger.info("game_unset_live", game_id=game_id)
        return record

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def list_updates(self, game_id: int, *, newest_first: bool = False) -> list[UpdateRecord]:
        """Updates for a game; oldest first for the feed, newest first for admin views."""
        if newest_first:
            ordering = (GameUpdate.created_at.desc(), GameUpdate.id.desc())
        else:
            ordering = (GameUpdate.created_at.asc(), GameUpdate.id.asc())
        with self._transaction("list_updates") as session:
            rows = session.scalars(
                select(GameUpdate).where(GameUpdate.game_id == game_id).order_by(*ordering)
            ).all()
            return [UpdateRecord.model_validate(row) for row in rows]

    def live_snapshot(self) -> tuple[GameRecord | None, list[UpdateRecord]]:
        """The live game and its updates (oldest first) from one committed state.

        A single joined SELECT sees one snapshot under any isolation level.
        """
        with self._transaction("live_snapshot") as session:
            rows = session.execute(
                select(Game, GameUpdate)
                .outerjoin(GameUpdate, GameUpdate.game_id == Game.id)
                .where(Game.is_live.is_(True))
                .order_by(Game.id, GameUpdate.created_at.asc(), GameUpdate.id.asc())
            ).all()
            if not rows:
                return None, []
            game = rows[0][0]
            updates = [
                UpdateRecord.model_validate(row_update)
                for row_game, row_update in rows
                if row_update is not None and row_game.id == game.id
            ]
            return GameRecord.model_validate(game), updates

    def get_update(self, update_id: int) -> UpdateRecord | None:
        with self._transaction("get_update") as session:
            row = session.get(GameUpdate, update_id)
            return UpdateRecord.model_validate(row) if row else None

    def add_update(
        self,
        game_id: int,
        update_type: str,
        *,
        content: str | None = None,
        url: str | None = None,
    ) -> UpdateRecord:
        """Insert an already-sanitized update."""
        if not payload_matches_type(update_type, content, url):
            raise ValidationFailure("Update payload does not match its type.")
        with self._transaction("add_update") as session:
            row = GameUpdate(
                game_id=game_id,
                type=update_type,
                content=content,
                url=url,
                created_at=self._clock(),
            )
            session.add(row)
            session.flush()
            record = UpdateRecord.model_validate(row)
        logger.info("update_added", game_id=game_id, update_id=record.id, type=update_type)
        return record

    def delete_update(self, update_id: int) -> bool:
        with self._transaction("delete_update") as session:
            result = session.execute(delete(GameUpdate).where(GameUpdate.id == update_id))
            deleted = result.rowcount > 0
        if deleted:
            logger.info("update_deleted", update_id=update_id)
        return deleted
