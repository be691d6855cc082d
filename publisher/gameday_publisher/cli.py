"""Command-line trigger: ``gameday-publish`` regenerates the feed once.

Intended for cron (every minute) or a manual run; exit status is 0 on
success and 1 when the snapshot could not be produced.
"""

from __future__ import annotations

import argparse
import sys

from .services.feed_runner import build_feed_generator, run_feed_generation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Regenerate the live game-day JSON feed.")
    parser.add_argument(
        "--output",
        help="Snapshot path (defaults to JSON_OUTPUT_PATH)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    result = run_feed_generation(build_feed_generator(args.output))
    for line in result.output:
        print(line)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
