"""Celery tasks for feed publication."""

from __future__ import annotations

from celery import shared_task

from ..logging import logger


@shared_task(name="generate_live_feed")
def generate_live_feed() -> dict:
    """Regenerate the public snapshot from the live game.

    No retries: a failed run leaves the last good snapshot published and
    the next beat tick tries again.

    Returns:
        Summary dict with ok/exit_code/stdout, as the manual trigger reports it
    """
    from ..services.feed_runner import run_feed_generation

    result = run_feed_generation()
    if result.ok:
        logger.info("scheduled_feed_run_completed", output=result.stdout)
    else:
        logger.error("scheduled_feed_run_failed", output=result.stdout)

    return {
        "ok": result.ok,
        "exit_code": result.exit_code,
        "stdout": result.stdout,
    }
