"""Application configuration."""

import os
from datetime import date

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    intervals_api_key: str = ""
    intervals_athlete_id: str = ""
    intervals_base_url: str = "https://intervals.icu/api/v1"
    activity_cache_ttl_seconds: int = 300
    cycle_start_date: date = date(2026, 1, 19)
    race_date: date = date(2026, 5, 31)
    cycle_total_weeks: int = 20
    goal_time: str = "2:50:00"
    goal_pace: str = "4:02/km"
    athlete_weight_kg: float = 73.5
    athlete_height_cm: float = 175.0
    athlete_age: int = 35
    athlete_sex: str = "male"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
