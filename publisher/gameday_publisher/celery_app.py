"""Celery app configuration for scheduled feed regeneration."""

from __future__ import annotations

from datetime import timedelta

from celery import Celery

from .config import settings

FEED_QUEUE = "gameday-publisher"

celery_config = {
    "task_serializer": "json",
    "accept_content": ["json"],
    "result_serializer": "json",
    "timezone": "UTC",
    "enable_utc": True,
    "worker_prefetch_multiplier": 1,
    # A run is a couple of queries and one file write
    "task_time_limit": 120,
    "task_soft_time_limit": 90,
    "task_default_queue": FEED_QUEUE,
}

app = Celery(
    "gameday-publisher",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["gameday_publisher.jobs.feed_tasks"],
)
app.conf.update(**celery_config)
app.conf.task_routes = {
    "generate_live_feed": {"queue": FEED_QUEUE, "routing_key": FEED_QUEUE},
}
# Default period is one minute (FEED_INTERVAL_SECONDS).
# Overlapping runs are harmless: each publishes with an atomic rename.
app.conf.beat_schedule = {
    "live-feed-regeneration": {
        "task": "generate_live_feed",
        "schedule": timedelta(seconds=settings.feed.interval_seconds),
        "options": {"queue": FEED_QUEUE, "routing_key": FEED_QUEUE},
    },
}
