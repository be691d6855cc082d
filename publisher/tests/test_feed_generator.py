"""Tests for services/feed_generator.py module."""

from __future__ import annotations

import json
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from gameday_publisher.exceptions import PersistenceFailure, PublishFailure
from gameday_publisher.services.admin_actions import add_update
from gameday_publisher.services.feed_generator import (
    CACHE_CONTROL,
    NO_LIVE_GAME_STATUS,
    FeedGenerator,
    shape_game,
    shape_update,
)
from gameday_publisher.utils.atomic_write import SnapshotWriter

EASTERN = ZoneInfo("America/New_York")


@pytest.fixture
def generator(store, output_path, clock):
    return FeedGenerator(store, SnapshotWriter(output_path), tz=EASTERN, clock=clock)


def _published(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestNoLiveGame:
    def test_document(self, generator, output_path, make_game):
        make_game()
        document = generator.generate()
        assert document == {
            "status": NO_LIVE_GAME_STATUS,
            "cache_control": CACHE_CONTROL,
            "generated_at": "2025-01-04T19:00:00-05:00",
        }
        assert _published(output_path) == document

    def test_after_unset_live(self, generator, store, make_game):
        game = store.set_live(make_game().id)
        store.unset_live(game.id)
        assert generator.generate()["status"] == NO_LIVE_GAME_STATUS


class TestLiveGame:
    def test_end_to_end_publication(self, generator, store, output_path, make_game, clock):
        game = store.set_live(make_game().id)
        add_update(store, game.id, "html", content="<b>Goal!</b>")
        clock.advance(minutes=2)

        generator.generate()
        document = _published(output_path)

        assert document["cache_control"] == "no-store"
        assert document["generated_at"] == "2025-01-04T19:02:00-05:00"
        assert "status" not in document
        assert document["game"] == {
            "title": "Devils vs Rangers",
            "home_team": "Devils",
            "away_team": "Rangers",
            "score": {"home": 0, "away": 0},
            "home_lineup": "",
            "away_lineup": "",
            "last_updated": "2025-01-04T19:00:00-05:00",
        }
        assert len(document["updates"]) == 1
        update = document["updates"][0]
        assert update["html"] == "Goal!"
        assert update["type"] == "html"
        assert update["created_at"] == "2025-01-04T19:00:00-05:00"
        assert update["relative_time"] == "2 minutes ago"
        assert "url" not in update

    def test_updates_oldest_first(self, generator, store, make_game, clock):
        game = store.set_live(make_game().id)
        for text in ("first", "second", "third"):
            add_update(store, game.id, "html", content=text)
            clock.advance(minutes=1)

        document = generator.generate()
        assert [u["html"] for u in document["updates"]] == ["first", "second", "third"]
        assert [u["relative_time"] for u in document["updates"]] == [
            "3 minutes ago",
            "2 minutes ago",
            "1 minute ago",
        ]

    def test_only_live_game_updates(self, generator, store, make_game):
        other = make_game(title="Other")
        store.add_update(other.id, "html", content="elsewhere")
        game = store.set_live(make_game().id)
        add_update(store, game.id, "html", content="here")
        assert [u["html"] for u in generator.generate()["updates"]] == ["here"]

    def test_lineups_published_verbatim(self, generator, store, make_game):
        game = make_game(home_lineup_text="Hughes - Bratt\nHamilton", away_lineup_text="Panarin")
        store.set_live(game.id)
        shaped = generator.generate()["game"]
        assert shaped["home_lineup"] == "Hughes - Bratt\nHamilton"
        assert shaped["away_lineup"] == "Panarin"

    def test_link_updates(self, generator, store, make_game):
        game = store.set_live(make_game().id)
        add_update(store, game.id, "nhl_goal", url="https://www.nhl.com/gamecenter/goal/1")
        add_update(store, game.id, "youtube", url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")

        goal, video = generator.generate()["updates"]
        assert goal["url"] == "https://www.nhl.com/gamecenter/goal/1"
        assert "embed_url" not in goal
        assert "html" not in goal
        assert video["url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert video["embed_url"] == "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ"

    def test_youtube_without_video_id_has_no_embed(self, generator, store, make_game):
        game = store.set_live(make_game().id)
        add_update(store, game.id, "youtube", url="https://www.youtube.com/channel/UC123")
        (video,) = generator.generate()["updates"]
        assert video["url"] == "https://www.youtube.com/channel/UC123"
        assert "embed_url" not in video

    def test_document_is_pretty_printed(self, generator, store, output_path, make_game):
        store.set_live(make_game().id)
        generator.generate()
        text = output_path.read_text(encoding="utf-8")
        assert text.startswith('{\n    "cache_control"')

    def test_document_read_in_one_store_call(self, generator, store, make_game):
        game = store.set_live(make_game().id)
        store.add_update(game.id, "html", content="x")
        with patch.object(store, "live_snapshot", wraps=store.live_snapshot) as spy, patch.object(
            store, "list_updates", side_effect=AssertionError("separate read")
        ):
            document = generator.generate()
        spy.assert_called_once_with()
        assert len(document["updates"]) == 1


class TestFailures:
    """A failed run never replaces the published snapshot."""

    def test_read_failure_keeps_previous_snapshot(self, generator, store, output_path, make_game):
        store.set_live(make_game().id)
        generator.generate()
        before = output_path.read_bytes()

        with patch.object(store, "live_snapshot", side_effect=PersistenceFailure("live_snapshot failed")):
            with pytest.raises(PersistenceFailure):
                generator.generate()

        assert output_path.read_bytes() == before

    def test_publish_failure_propagates(self, store, tmp_path, clock, make_game):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        generator = FeedGenerator(
            store, SnapshotWriter(blocker / "current.json"), tz=EASTERN, clock=clock
        )
        store.set_live(make_game().id)
        with pytest.raises(PublishFailure):
            generator.generate()


class TestShaping:
    def test_shape_game_scores_are_ints(self, make_game):
        game = make_game(score_home=3, score_away=2)
        assert shape_game(game, EASTERN)["score"] == {"home": 3, "away": 2}

    def test_shape_game_missing_lineups(self, make_game):
        game = make_game(home_lineup_text=None, away_lineup_text=None)
        shaped = shape_game(game)
        assert shaped["home_lineup"] == ""
        assert shaped["away_lineup"] == ""

    def test_shape_update_without_zone_uses_utc(self, store, make_game, clock):
        game = make_game()
        update = store.add_update(game.id, "html", content="x")
        shaped = shape_update(update, clock.advance(days=1))
        assert shaped["created_at"] == "2025-01-05T00:00:00+00:00"
        assert shaped["relative_time"] == "yesterday"
        assert shaped["id"] == update.id
