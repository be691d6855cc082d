"""Atomic JSON snapshot publication.

The target path is only ever replaced by ``os.replace`` of a fully written,
fsynced temp file in the same directory, so a reader never observes a
truncated document. A failed write leaves the previous snapshot in place.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..exceptions import PublishFailure
from ..logging import logger

SNAPSHOT_FILE_MODE = 0o644


def encode_document(document: dict[str, Any]) -> str:
    """Pretty-printed JSON; forward slashes are left unescaped."""
    return json.dumps(document, indent=4)


def write_json_atomic(path: str | Path, document: dict[str, Any]) -> Path:
    """Write ``document`` to ``path`` atomically.

    Raises:
        PublishFailure: the directory, temp file or rename failed. The
            target path is untouched and no temp file is left behind.
    """
    target = Path(path)
    directory = target.parent

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PublishFailure(f"Failed to create directory: {directory}") from exc

    try:
        payload = encode_document(document)
    except (TypeError, ValueError) as exc:
        raise PublishFailure(f"JSON encoding failed: {exc}") from exc

    try:
        fd, temp_name = tempfile.mkstemp(prefix="tmp_", suffix=".json", dir=directory)
    except OSError as exc:
        raise PublishFailure(f"Failed to create temporary file in: {directory}") from exc
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            # mkstemp creates 0600; the snapshot is served to the public client
            os.fchmod(handle.fileno(), SNAPSHOT_FILE_MODE)
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise PublishFailure(f"Failed to write temporary file: {temp_path}") from exc

    try:
        os.replace(temp_path, target)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise PublishFailure(f"Failed to rename temporary file to: {target}") from exc

    logger.debug("snapshot_written", path=str(target), size_bytes=len(payload))
    return target


class SnapshotWriter:
    """Publishes feed documents to a fixed path."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def write(self, document: dict[str, Any]) -> Path:
        return write_json_atomic(self.path, document)
