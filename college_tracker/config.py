"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from college_tracker.errors import InvalidArgument

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_timezone(name: Optional[str]) -> Optional[ZoneInfo]:
    """Zone for an IANA name, or None for the system local zone."""

    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidArgument(f"unknown timezone '{name}'") from exc


class Settings(BaseSettings):
    """Runtime settings for the dashboard surfaces."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_anon_key: Optional[str] = Field(default=None, description="Supabase anon key")
    owner_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("owner_id", "TRACKER_OWNER_ID"),
        description="Row owner every query is scoped to",
    )
    data_file: Path = Field(
        default=Path("examples/sample_snapshot.json"),
        validation_alias=AliasChoices("data_file", "TRACKER_DATA_FILE"),
        description="JSON snapshot used when Supabase is not configured",
    )
    timezone: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("timezone", "TRACKER_TIMEZONE"),
        description="IANA zone for 'today'; system local zone when unset",
    )
    log_level: str = Field(default="INFO", description="DEBUG/INFO/WARNING/ERROR/CRITICAL")

    @field_validator("supabase_url", "supabase_anon_key", "owner_id", "timezone", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: Optional[str]) -> Optional[str]:
        resolve_timezone(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise InvalidArgument(f"invalid LOG_LEVEL '{value}'")
        return level

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        return resolve_timezone(self.timezone)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment and an optional .env file."""

    try:
        if env_file is None:
            return Settings()
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        raise InvalidArgument(f"invalid settings: {exc}") from exc


def configure_logging(level: str = "INFO") -> logging.Logger:
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger("college_tracker")
