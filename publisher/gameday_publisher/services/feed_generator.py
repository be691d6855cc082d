"""Live feed snapshot generation.

Reads the live game and its updates, shapes them into the public document
and publishes it atomically. Content was sanitized when it was written, so
nothing is re-sanitized here. A failed read or write raises before the
target file is touched; the previous snapshot stays published.

Document shapes:

    no live game: {status, cache_control, generated_at}
    live game:    {cache_control, generated_at, game: {...}, updates: [...]}
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Callable

from ..config import settings
from ..exceptions import GamedayError
from ..logging import logger
from ..models import GameRecord, UpdateRecord
from ..persistence import GameStore
from ..sanitizer import youtube_embed_url
from ..utils.atomic_write import SnapshotWriter
from ..utils.datetime_utils import format_iso, now_utc, relative_time

CACHE_CONTROL = "no-store"
NO_LIVE_GAME_STATUS = "no_live_game"


def shape_update(update: UpdateRecord, now: datetime, tz: tzinfo | None = None) -> dict[str, Any]:
    """Public representation of one update, timed relative to ``now``."""
    shaped: dict[str, Any] = {
        "id": int(update.id),
        "type": update.type,
        "created_at": format_iso(update.created_at, tz),
        "relative_time": relative_time(update.created_at, now),
    }
    if update.type == "html":
        shaped["html"] = update.content
    else:
        shaped["url"] = update.url
        if update.type == "youtube":
            embed_url = youtube_embed_url(update.url)
            if embed_url:
                shaped["embed_url"] = embed_url
    return shaped


def shape_game(game: GameRecord, tz: tzinfo | None = None) -> dict[str, Any]:
    # Lineups are published verbatim; the client splits lines itself
    return {
        "title": game.title,
        "home_team": game.home_team,
        "away_team": game.away_team,
        "score": {"home": int(game.score_home), "away": int(game.score_away)},
        "home_lineup": game.home_lineup_text or "",
        "away_lineup": game.away_lineup_text or "",
        "last_updated": format_iso(game.updated_at, tz),
    }


class FeedGenerator:
    def __init__(
        self,
        store: GameStore,
        writer: SnapshotWriter,
        *,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.store = store
        self.writer = writer
        self.tz = tz if tz is not None else settings.tzinfo
        self._clock = clock

    def build_document(self, now: datetime) -> dict[str, Any]:
        generated_at = format_iso(now, self.tz)
        game, updates = self.store.live_snapshot()
        if game is None:
            return {
                "status": NO_LIVE_GAME_STATUS,
                "cache_control": CACHE_CONTROL,
                "generated_at": generated_at,
            }
        return {
            "cache_control": CACHE_CONTROL,
            "generated_at": generated_at,
            "game": shape_game(game, self.tz),
            "updates": [shape_update(update, now, self.tz) for update in updates],
        }

    def generate(self) -> dict[str, Any]:
        """Build the current document and publish it. Returns the document."""
        now = self._clock()
        try:
            document = self.build_document(now)
            self.writer.write(document)
        except GamedayError:
            logger.exception("feed_generation_failed", path=str(self.writer.path))
            raise

        logger.info(
            "feed_generated",
            path=str(self.writer.path),
            live=NO_LIVE_GAME_STATUS != document.get("status"),
            update_count=len(document.get("updates", [])),
        )
        return document
