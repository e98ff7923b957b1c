# clinic_booking/config.py

from __future__ import annotations

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings


load_dotenv()


class AppSettings(BaseSettings):
    database_url: str = Field(default="sqlite:///./clinic.db", alias="DATABASE_URL")

    # Hardcoded admin credential pair (not a stored user record)
    admin_username: str = Field(default="admin", alias="ADMIN_USERNAME")
    admin_password: str = Field(default="admin123", alias="ADMIN_PASSWORD")

    # Booking rules
    max_daily_appointments: int = Field(default=3, alias="MAX_DAILY_APPOINTMENTS")
    clinic_utc_offset_hours: int = Field(default=-3, alias="CLINIC_UTC_OFFSET_HOURS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()


settings = get_settings()
