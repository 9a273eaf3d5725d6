from __future__ import annotations
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Literal

SkipReason = Literal["no_established_participants", "all_reached_milestone", "milestone_reached"]


class ParticipantRow(BaseModel):
    id: UUID
    name: str
    email: str
    project_count: int
    streak_count: int
    longest_streak: int
    has_reached_thirty_projects: bool
    points: int
    joined_at: datetime


class ParticipantStats(BaseModel):
    total_participants: int = 0
    participants_with_projects: int = 0
    participants_with_zero_projects: int = 0
    participants_with_one_project: int = 0
    participants_with_two_plus_projects: int = 0


class CleanupResult(ParticipantStats):
    deleted_users: int = 0
    skipped_reason: SkipReason | None = None
    message: str


class SchedulerStart(BaseModel):
    expression: str | None = Field(default=None, description="5-field crontab, e.g. '59 23 * * *'")


class SchedulerStatus(BaseModel):
    running: bool
    expression: str | None = None
    timezone: str | None = None
    next_run_at: datetime | None = None


class SchedulerAction(BaseModel):
    message: str
    status: SchedulerStatus
