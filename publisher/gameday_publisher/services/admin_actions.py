"""Admin write paths.

The (external) admin UI calls these with raw form values. Everything is
validated and sanitized here, once, before it reaches the store; the feed
generator trusts what it reads back.
"""

from __future__ import annotations

from ..config import settings
from ..exceptions import ValidationFailure
from ..logging import logger
from ..models import GameRecord, UpdateRecord
from ..models.schemas import UPDATE_TYPES
from ..persistence import GameStore
from ..sanitizer import sanitize_html, validate_url

_URL_ERRORS = {
    "nhl_goal": (
        "NHL goal URL is required.",
        "Invalid NHL URL. Must be HTTPS and from nhl.com domain.",
    ),
    "youtube": (
        "YouTube URL is required.",
        "Invalid YouTube URL. Must be HTTPS and from an allowed YouTube domain.",
    ),
}


def normalize_lineup(text: str | None) -> str:
    """LF line endings, trailing whitespace removed."""
    if not text:
        return ""
    return text.replace("\r\n", "\n").replace("\r", "\n").rstrip()


def validate_game_fields(
    *,
    title: str | None,
    home_team: str | None,
    away_team: str | None,
    score_home: int,
    score_away: int,
    home_lineup_text: str | None = None,
    away_lineup_text: str | None = None,
) -> dict:
    """Return cleaned game fields or raise ValidationFailure listing every problem."""
    limits = settings.limits
    title = (title or "").strip()
    home_team = (home_team or "").strip()
    away_team = (away_team or "").strip()

    errors: list[str] = []
    if not title:
        errors.append("Game title is required.")
    if not home_team:
        errors.append("Home team is required.")
    if not away_team:
        errors.append("Away team is required.")
    if len(title) > limits.max_title_length:
        errors.append(f"Title is too long (max {limits.max_title_length} characters).")
    if len(home_team) > limits.max_team_length:
        errors.append(f"Home team name is too long (max {limits.max_team_length} characters).")
    if len(away_team) > limits.max_team_length:
        errors.append(f"Away team name is too long (max {limits.max_team_length} characters).")
    if not limits.min_score <= score_home <= limits.max_score:
        errors.append(f"Home team score must be between {limits.min_score} and {limits.max_score}.")
    if not limits.min_score <= score_away <= limits.max_score:
        errors.append(f"Away team score must be between {limits.min_score} and {limits.max_score}.")

    if errors:
        raise ValidationFailure(errors)

    return {
        "title": title,
        "home_team": home_team,
        "away_team": away_team,
        "score_home": score_home,
        "score_away": score_away,
        "home_lineup_text": normalize_lineup(home_lineup_text),
        "away_lineup_text": normalize_lineup(away_lineup_text),
    }


def save_game(store: GameStore, *, game_id: int | None = None, **form: object) -> GameRecord:
    """Create a game, or update ``game_id`` (which also refreshes its timestamp)."""
    fields = validate_game_fields(**form)
    if game_id is None:
        return store.create_game(**fields)
    return store.update_game(game_id, **fields)


def set_live(store: GameStore, game_id: int) -> GameRecord:
    return store.set_live(game_id)


def unset_live(store: GameStore, game_id: int) -> GameRecord:
    return store.unset_live(game_id)


def add_update(
    store: GameStore,
    game_id: int,
    update_type: str,
    *,
    content: str | None = None,
    url: str | None = None,
) -> UpdateRecord:
    """Sanitize and store one update for ``game_id``, which must be the live game.

    ``html`` updates keep only sanitized markup; link updates keep only a
    URL that passed the allowlist for their type.
    """
    live_game = store.get_live_game()
    if live_game is None:
        raise ValidationFailure("No live game. Set a game live before posting updates.")
    if live_game.id != game_id:
        raise ValidationFailure("Updates can only be posted to the current live game.")

    if update_type not in UPDATE_TYPES:
        raise ValidationFailure("Invalid update type.")

    if update_type == "html":
        content = (content or "").strip()
        if not content:
            raise ValidationFailure("HTML content is required.")
        sanitized = sanitize_html(content)
        if sanitized is None:
            logger.info("markup_rejected", game_id=game_id, length=len(content))
            raise ValidationFailure(
                f"HTML content is invalid or too long (max {settings.limits.max_markup_length} characters)."
            )
        return store.add_update(game_id, update_type, content=sanitized)

    missing_message, invalid_message = _URL_ERRORS[update_type]
    url = (url or "").strip()
    if not url:
        raise ValidationFailure(missing_message)
    validated = validate_url(url, update_type)
    if validated is None:
        logger.info("link_rejected", game_id=game_id, type=update_type)
        raise ValidationFailure(invalid_message)
    return store.add_update(game_id, update_type, url=validated)


def delete_update(store: GameStore, update_id: int, *, live_game_id: int) -> None:
    """Delete an update that belongs to the live game."""
    if update_id <= 0:
        raise ValidationFailure("Invalid update ID.")
    existing = store.get_update(update_id)
    if existing is None or existing.game_id != live_game_id:
        raise ValidationFailure("Update not found or does not belong to the current live game.")
    if not store.delete_update(update_id):
        raise ValidationFailure("Failed to delete update.")
