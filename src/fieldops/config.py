"""Application configuration and settings management."""

from datetime import time
from typing import Any, Optional
from zoneinfo import ZoneInfo

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDOPS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Field Operations Scheduling API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level for the API and the worker.")
    timezone: str = Field(
        default="Asia/Jerusalem",
        description="Wall-clock timezone used for visit times, calendar days and the nightly sweep.",
    )
    default_station_time: str = Field(
        default="09:00",
        description="Time of day used for stations that have no scheduled time.",
    )
    reconcile_hour: int = Field(default=22, ge=0, le=23)
    reconcile_minute: int = Field(default=0, ge=0, le=59)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )
    supabase_schema: str = "public"
    supabase_timeout_seconds: int = Field(default=10, ge=1, description="PostgREST request timeout.")

    # arq worker
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis URL used by the background worker (e.g., redis://localhost:6379).",
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        ZoneInfo(value)
        return value

    @field_validator("default_station_time")
    @classmethod
    def _validate_station_time(cls, value: str) -> str:
        hours, _, minutes = value.partition(":")
        time(int(hours), int(minutes or 0))
        return f"{int(hours):02d}:{int(minutes or 0):02d}"

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


settings = Settings()
