"""
Typed settings for the game-day feed publisher.

Uses Pydantic Settings to load configuration from environment variables
with validation and type safety. For local development a root .env file
is read when present.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .validate_env import validate_env

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_TIMEZONE = "America/New_York"


class ContentLimits(BaseModel):
    """Length and range limits applied at ingestion time."""

    max_markup_length: int = 1000
    max_url_length: int = 1000
    max_title_length: int = 255
    max_team_length: int = 100
    min_score: int = 0
    max_score: int = 99


class FeedConfig(BaseModel):
    # Path of the published snapshot; relative paths resolve against PROJECT_ROOT
    output_path: str = "./public/current.json"
    # Scheduled regeneration period for celery beat
    interval_seconds: int = Field(default=60, ge=1)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    In Docker, environment variables are passed directly. For local
    development, values are also read from the root .env file.
    """
    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="allow",
    )

    database_url: str = Field(..., alias="DATABASE_URL")

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_async_to_sync(cls, v: str) -> str:
        """The publisher uses a synchronous engine; rewrite asyncpg URLs to psycopg."""
        if isinstance(v, str) and "asyncpg" in v:
            return v.replace("asyncpg", "psycopg")
        return v

    redis_url: str = Field("redis://localhost:6379/3", alias="REDIS_URL")
    environment: str = Field("development", alias="ENVIRONMENT")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    timezone: str = Field(DEFAULT_TIMEZONE, alias="TIMEZONE")
    api_key: str | None = Field(None, alias="API_KEY")
    sql_echo: bool = Field(False, alias="SQL_ECHO")
    feed: FeedConfig = Field(default_factory=FeedConfig)
    limits: ContentLimits = Field(default_factory=ContentLimits)
    json_output_path_override: str | None = Field(None, alias="JSON_OUTPUT_PATH")
    feed_interval_seconds_override: int | None = Field(None, alias="FEED_INTERVAL_SECONDS")

    @field_validator("timezone", mode="after")
    @classmethod
    def _fallback_timezone(cls, v: str) -> str:
        """Unknown zone names fall back to the default instead of failing startup."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            return DEFAULT_TIMEZONE
        return v

    @model_validator(mode="after")
    def _apply_feed_overrides(self) -> Settings:
        """
        Allow top-level env vars (JSON_OUTPUT_PATH / FEED_INTERVAL_SECONDS)
        to override the nested feed config without double-underscore syntax.
        """
        if self.json_output_path_override:
            self.feed.output_path = self.json_output_path_override
        if self.feed_interval_seconds_override is not None:
            self.feed.interval_seconds = self.feed_interval_seconds_override
        return self

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def output_path(self) -> Path:
        path = Path(self.feed.output_path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Environment variables don't change during runtime, so parsing once
    per process is enough.
    """
    validate_env()
    return Settings()


# Global settings instance - import this in other modules
settings = get_settings()
