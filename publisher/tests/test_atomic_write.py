"""Tests for utils/atomic_write.py module."""

from __future__ import annotations

import json
import os
import stat
import threading
from unittest.mock import patch

import pytest

from gameday_publisher.exceptions import PublishFailure
from gameday_publisher.utils.atomic_write import (
    SNAPSHOT_FILE_MODE,
    SnapshotWriter,
    write_json_atomic,
)


def _leftover_temp_files(directory):
    return [p.name for p in directory.iterdir() if p.name.startswith("tmp_")]


class TestWriteJsonAtomic:
    def test_writes_document(self, output_path):
        document = {"status": "no_live_game", "cache_control": "no-store"}
        write_json_atomic(output_path, document)
        assert json.loads(output_path.read_text()) == document

    def test_creates_missing_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "c" / "feed.json"
        write_json_atomic(target, {"ok": True})
        assert target.exists()

    def test_pretty_printed_with_unescaped_slashes(self, output_path):
        write_json_atomic(output_path, {"url": "https://youtu.be/abc"})
        text = output_path.read_text()
        assert '\n    "url": "https://youtu.be/abc"' in text
        assert "\\/" not in text

    def test_replaces_existing_snapshot(self, output_path):
        write_json_atomic(output_path, {"version": 1})
        write_json_atomic(output_path, {"version": 2})
        assert json.loads(output_path.read_text()) == {"version": 2}

    def test_no_temp_files_left_behind(self, output_path):
        write_json_atomic(output_path, {"x": 1})
        assert _leftover_temp_files(output_path.parent) == []

    def test_snapshot_is_world_readable(self, output_path):
        write_json_atomic(output_path, {"x": 1})
        assert stat.S_IMODE(os.stat(output_path).st_mode) == SNAPSHOT_FILE_MODE

    def test_returns_target_path(self, output_path):
        assert write_json_atomic(str(output_path), {}) == output_path


class TestWriteFailures:
    """A failed publish leaves the previous snapshot exactly as it was."""

    def test_unencodable_document(self, output_path):
        write_json_atomic(output_path, {"version": 1})
        with pytest.raises(PublishFailure, match="JSON encoding failed"):
            write_json_atomic(output_path, {"bad": object()})
        assert json.loads(output_path.read_text()) == {"version": 1}

    def test_write_error_keeps_target(self, output_path):
        write_json_atomic(output_path, {"version": 1})
        with patch("gameday_publisher.utils.atomic_write.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(PublishFailure, match="Failed to write temporary file"):
                write_json_atomic(output_path, {"version": 2})
        assert json.loads(output_path.read_text()) == {"version": 1}
        assert _leftover_temp_files(output_path.parent) == []

    def test_rename_error_removes_temp_file(self, output_path):
        write_json_atomic(output_path, {"version": 1})
        with patch("gameday_publisher.utils.atomic_write.os.replace", side_effect=OSError("EXDEV")):
            with pytest.raises(PublishFailure, match="Failed to rename"):
                write_json_atomic(output_path, {"version": 2})
        assert json.loads(output_path.read_text()) == {"version": 1}
        assert _leftover_temp_files(output_path.parent) == []

    def test_directory_creation_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        with pytest.raises(PublishFailure, match="Failed to create directory"):
            write_json_atomic(blocker / "current.json", {})


class TestConcurrentPublication:
    def test_reader_never_sees_partial_document(self, output_path):
        """Two writers race while a third party keeps reading the target."""
        write_json_atomic(output_path, {"writer": "seed", "updates": []})
        stop = threading.Event()
        errors: list[str] = []

        def writer(name: str, size: int) -> None:
            try:
                for i in range(60):
                    write_json_atomic(
                        output_path,
                        {"writer": name, "run": i, "updates": [{"html": "x" * 50}] * size},
                    )
            except Exception as exc:  # surfaced through the errors list
                errors.append(f"{name}: {exc!r}")

        def reader() -> None:
            while not stop.is_set():
                try:
                    document = json.loads(output_path.read_text())
                except (FileNotFoundError, json.JSONDecodeError) as exc:
                    errors.append(f"reader: {exc!r}")
                    return
                if document["writer"] not in {"seed", "a", "b"}:
                    errors.append(f"reader: unexpected {document['writer']}")
                    return

        reader_thread = threading.Thread(target=reader)
        writers = [
            threading.Thread(target=writer, args=("a", 5)),
            threading.Thread(target=writer, args=("b", 400)),
        ]
        reader_thread.start()
        for thread in writers:
            thread.start()
        for thread in writers:
            thread.join()
        stop.set()
        reader_thread.join()

        assert errors == []
        assert json.loads(output_path.read_text())["run"] == 59
        assert _leftover_temp_files(output_path.parent) == []


class TestSnapshotWriter:
    def test_write_targets_configured_path(self, output_path):
        writer = SnapshotWriter(output_path)
        writer.write({"a": 1})
        assert json.loads(output_path.read_text()) == {"a": 1}
        assert writer.path == output_path
