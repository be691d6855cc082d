"""Run one feed generation and report it the way every trigger expects.

The cron/beat task, the CLI and the manual admin endpoint all go through
``run_feed_generation`` and receive an exit status plus output lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..config import settings
from ..db import get_session_factory
from ..exceptions import GamedayError
from ..persistence import GameStore
from ..utils.atomic_write import SnapshotWriter
from .feed_generator import NO_LIVE_GAME_STATUS, FeedGenerator


@dataclass
class FeedRunResult:
    ok: bool
    exit_code: int
    output: list[str] = field(default_factory=list)
    document: dict[str, Any] | None = None

    @property
    def stdout(self) -> str:
        return "\n".join(self.output)


def build_feed_generator(output_path: str | Path | None = None) -> FeedGenerator:
    """Wire a generator against the configured database and output path."""
    store = GameStore(get_session_factory())
    writer = SnapshotWriter(output_path or settings.output_path)
    return FeedGenerator(store, writer, tz=settings.tzinfo)


def run_feed_generation(generator: FeedGenerator | None = None) -> FeedRunResult:
    """Generate and publish once; failures become exit code 1, never exceptions."""
    generator = generator or build_feed_generator()
    try:
        document = generator.generate()
    except GamedayError as exc:
        return FeedRunResult(ok=False, exit_code=1, output=[f"Error: {exc}"])

    is_live = document.get("status") != NO_LIVE_GAME_STATUS
    output = [
        f"JSON feed updated successfully: {generator.writer.path}",
        f"Generated at: {document['generated_at']}",
        f"Status: {'Live game active' if is_live else 'No live game'}",
    ]
    if is_live:
        output.append(f"Updates: {len(document['updates'])}")
    return FeedRunResult(ok=True, exit_code=0, output=output, document=document)
