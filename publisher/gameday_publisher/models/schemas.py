"""Pydantic records for games and updates.

Rows leave the store as these immutable records, never as ORM objects,
so the feed generator works on plain validated values.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, model_validator

UpdateType = Literal["html", "nhl_goal", "youtube"]
UPDATE_TYPES: tuple[str, ...] = get_args(UpdateType)
LINK_UPDATE_TYPES: frozenset[str] = frozenset({"nhl_goal", "youtube"})


def payload_matches_type(update_type: str, content: str | None, url: str | None) -> bool:
    """html updates carry content only; link updates carry a url only."""
    if update_type == "html":
        return content is not None and url is None
    if update_type in LINK_UPDATE_TYPES:
        return url is not None and content is None
    return False


class GameRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    home_team: str
    away_team: str
    score_home: int = Field(ge=0, le=99)
    score_away: int = Field(ge=0, le=99)
    home_lineup_text: str | None = None
    away_lineup_text: str | None = None
    is_live: bool = False
    created_at: datetime
    updated_at: datetime


class UpdateRecord(BaseModel):
    """A feed entry. ``html`` updates carry content; link updates carry url."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    game_id: int
    type: UpdateType
    content: str | None = None
    url: str | None = None
    created_at: datetime

    @model_validator(mode="after")
    def _payload_matches_type(self) -> UpdateRecord:
        if not payload_matches_type(self.type, self.content, self.url):
            raise ValueError(f"{self.type} update must carry exactly one of content/url")
        return self
