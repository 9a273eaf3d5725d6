from __future__ import annotations
from pydantic import BaseModel, Field, HttpUrl, field_validator
from uuid import UUID
from datetime import date, datetime


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(min_length=150, max_length=5000)
    live_link: HttpUrl
    github_link: HttpUrl
    technologies: list[str] = Field(min_length=1, max_length=20)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("technologies")
    @classmethod
    def clean_technologies(cls, v: list[str]) -> list[str]:
        cleaned = [t.strip() for t in v if t and t.strip()]
        if not cleaned:
            raise ValueError("At least one technology must be selected")
        return cleaned


class ProjectAuthor(BaseModel):
    id: UUID
    name: str


class ProjectPublic(BaseModel):
    id: UUID
    name: str
    description: str
    live_link: str
    github_link: str
    technologies: list[str]
    submitted_at: datetime
    submitted_on: date
    author: ProjectAuthor | None = None


class StreakSummary(BaseModel):
    current_streak: int
    longest_streak: int
    last_submission_date: date | None = None
    first_submission_date: date | None = None
    has_reached_thirty_projects: bool
    points: int


class SubmissionResult(BaseModel):
    message: str = "Project submitted successfully"
    project: ProjectPublic
    streak: StreakSummary
