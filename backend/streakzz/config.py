from __future__ import annotations
import os
from pydantic import BaseModel

def _csv(name: str, default: str = "") -> list[str]:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "streakzz-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Streakzz")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/streakzz_dev")

    # Registrations with these emails get the admin role
    admin_emails: list[str] = [e.lower() for e in _csv("ADMIN_EMAILS")]

    # Allowed submission hours, local wall clock [start, end)
    submission_timezone: str = os.getenv("SUBMISSION_TIMEZONE", "UTC")
    submission_start_hour: int = int(os.getenv("SUBMISSION_START_HOUR", "7"))
    submission_end_hour: int = int(os.getenv("SUBMISSION_END_HOUR", "24"))

    # Streak accounting
    milestone_projects: int = int(os.getenv("MILESTONE_PROJECTS", "30"))
    points_per_streak_day: int = int(os.getenv("POINTS_PER_STREAK_DAY", "10"))
    activity_window_days: int = int(os.getenv("ACTIVITY_WINDOW_DAYS", "365"))

    # Inactive participant cleanup
    cleanup_scheduler_enabled: bool = os.getenv("CLEANUP_SCHEDULER_ENABLED", "1") == "1"
    cleanup_cron: str = os.getenv("CLEANUP_CRON", "59 23 * * *")  # daily 23:59
    cleanup_timezone: str = os.getenv("CLEANUP_TIMEZONE", "UTC")

settings = Settings()
