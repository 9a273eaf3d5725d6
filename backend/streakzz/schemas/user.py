from __future__ import annotations
from pydantic import BaseModel
from uuid import UUID
from datetime import datetime


class ProfileUser(BaseModel):
    id: UUID
    full_name: str
    joined_at: datetime
    email: str | None = None
    role: str | None = None


class ProfileStats(BaseModel):
    total_projects: int
    current_streak: int
    longest_streak: int
    points: int | None = None
    # YYYY-MM-DD (UTC) -> number of projects submitted that day
    streak_data: dict[str, int]


class Profile(BaseModel):
    user: ProfileUser
    stats: ProfileStats
