"""Application configuration and settings management."""

from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BOOKING_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Booking Assistant API"
    api_prefix: str = "/api"
    facility_timezone: str = Field(
        default="Europe/Stockholm",
        description="IANA timezone the weekly work templates are expressed in.",
    )

    # Search window and candidate enumeration
    search_window_days: int = Field(default=7, ge=1)
    single_slot_stride_minutes: int = Field(default=60, ge=1)
    team_slot_stride_minutes: int = Field(default=15, ge=1)
    travel_home_threshold_minutes: int = Field(default=90, ge=0)
    min_duration_minutes: int = Field(default=30, ge=1)
    max_duration_minutes: int = Field(default=480, ge=1)

    # Ranking and balancing
    high_quality_score: int = Field(default=80)
    max_per_group_high_quality: int = Field(default=5, ge=1)
    max_per_group_default: int = Field(default=2, ge=1)
    max_single_suggestions: int = Field(default=20, ge=1)
    max_team_suggestions: int = Field(default=10, ge=1)

    # Travel time provider
    travel_provider_url: str = Field(
        default="https://maps.googleapis.com/maps/api/distancematrix/json",
        description="Distance Matrix style endpoint used for driving times.",
    )
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="API key for the travel time provider.",
    )
    travel_batch_size: int = Field(default=25, ge=1, description="Maximum origins per provider call.")
    travel_batch_pause_seconds: float = Field(default=0.2, ge=0.0)
    travel_default_minutes: int = Field(default=30, ge=0)
    travel_same_address_minutes: int = Field(default=1, ge=0)
    travel_max_retries: int = Field(default=2, ge=0)
    travel_backoff_seconds: float = Field(default=0.5, ge=0.0)
    travel_timeout_seconds: float = Field(default=10.0, gt=0.0)
    travel_language: str = "sv"

    # Stores
    non_blocking_statuses: tuple[str, ...] = Field(
        default=("Stängt - slasklogg",),
        description="Booking statuses that do not occupy technician time.",
    )
    calendar_fetch_workers: int = Field(default=8, ge=1)
    slot_search_workers: int = Field(default=4, ge=1)

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

    @field_validator("facility_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("frontend_allowed_origins", "non_blocking_statuses", mode="before")
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
        return ZoneInfo(self.facility_timezone)


settings = Settings()
