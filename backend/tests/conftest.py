from __future__ import annotations
import os
import tempfile
import uuid
from datetime import date, datetime, time, timezone

# Point the app at a throwaway SQLite file before anything imports streakzz.config
_tmpdir = tempfile.mkdtemp(prefix="streakzz-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmpdir}/test.db"
os.environ["CLEANUP_SCHEDULER_ENABLED"] = "0"
os.environ.setdefault("SUBMISSION_START_HOUR", "0")
os.environ.setdefault("SUBMISSION_END_HOUR", "24")

import pytest
import pytest_asyncio
from streakzz.db import Base, SessionLocal, engine
from streakzz.models.user import User
from streakzz.models.project import Project


@pytest_asyncio.fixture
async def db_schema():
    """Fresh tables for the test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def session(db_schema):
    async with SessionLocal() as s:
        yield s


@pytest.fixture
def make_user(session):
    async def _make(role: str = "participant", **fields) -> User:
        u = User(
            full_name=fields.pop("full_name", "Test User"),
            email=fields.pop("email", f"u-{uuid.uuid4().hex[:10]}@ex.com"),
            password_hash="not-a-real-hash",
            role=role,
            **fields,
        )
        session.add(u)
        await session.commit()
        await session.refresh(u)
        return u
    return _make


@pytest.fixture
def add_projects(session):
    """Insert raw project rows (bypasses the accumulator)."""
    async def _add(user: User, n: int, day: date = date(2025, 1, 10)) -> None:
        at = datetime.combine(day, time(12, 0), tzinfo=timezone.utc)
        for i in range(n):
            session.add(Project(
                user_id=user.id,
                name=f"Project {i}",
                description="x" * 150,
                live_link="https://example.dev/",
                github_link="https://github.com/example/repo",
                technologies=["python"],
                created_at=at,
                submitted_on=day,
            ))
        await session.commit()
    return _add


def project_payload(**overrides) -> dict:
    body = {
        "name": "Habit tracker",
        "description": "A small web app that tracks daily habits and shows a heatmap of activity. " * 3,
        "live_link": "https://habits.example.dev",
        "github_link": "https://github.com/someone/habits",
        "technologies": ["python", "fastapi"],
    }
    body.update(overrides)
    return body
