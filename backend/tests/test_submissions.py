from __future__ import annotations
import asyncio
from datetime import date, datetime, timedelta, timezone
import uuid
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from streakzz.db import SessionLocal
from streakzz.models.project import Project
from streakzz.models.user import User
from streakzz.services import submissions
from streakzz.schemas.project import ProjectCreate
from streakzz.services.submissions import submit_project, lifetime_project_count, ParticipantNotFound
from conftest import project_payload


def _at(d: date, hour: int = 12) -> datetime:
    return datetime(d.year, d.month, d.day, hour, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_submission_updates_streak_across_days(session, make_user):
    user = await make_user()
    data = ProjectCreate.model_validate(project_payload())
    d = date(2025, 5, 1)

    project, u = await submit_project(session, user.id, data, now=_at(d))
    assert project.submitted_on == d
    assert (u.current_streak, u.longest_streak, u.points) == (1, 1, 10)
    assert u.first_submission_date == d

    _, u = await submit_project(session, user.id, data, now=_at(d + timedelta(days=1)))
    assert (u.current_streak, u.longest_streak, u.points) == (2, 2, 20)

    _, u = await submit_project(session, user.id, data, now=_at(d + timedelta(days=1), hour=22))
    assert (u.current_streak, u.points) == (2, 20)

    _, u = await submit_project(session, user.id, data, now=_at(d + timedelta(days=5)))
    assert (u.current_streak, u.longest_streak, u.points) == (1, 2, 20)
    assert u.last_submission_date == d + timedelta(days=5)

    assert await lifetime_project_count(session, user.id) == 4


@pytest.mark.asyncio
async def test_thirtieth_submission_sets_milestone_and_freezes(session, make_user, add_projects):
    d = date(2025, 6, 1)
    user = await make_user(
        current_streak=6, longest_streak=6, points=60,
        first_submission_date=d - timedelta(days=40), last_submission_date=d - timedelta(days=1),
    )
    await add_projects(user, 29, day=d - timedelta(days=1))
    data = ProjectCreate.model_validate(project_payload())

    _, u = await submit_project(session, user.id, data, now=_at(d))
    assert u.has_reached_thirty_projects is True
    assert u.current_streak == 7

    _, u = await submit_project(session, user.id, data, now=_at(d + timedelta(days=10)))
    assert u.current_streak == 7
    assert u.longest_streak == 7
    assert u.points == 70


@pytest.mark.asyncio
async def test_submission_uses_utc_day(session, make_user):
    user = await make_user()
    data = ProjectCreate.model_validate(project_payload())
    local = datetime(2025, 7, 1, 21, 0, tzinfo=timezone(timedelta(hours=-7)))  # 04:00Z on July 2
    project, u = await submit_project(session, user.id, data, now=local)
    assert project.submitted_on == date(2025, 7, 2)
    assert u.last_submission_date == date(2025, 7, 2)


@pytest.mark.asyncio
async def test_missing_or_deleted_participant_is_rejected(session, make_user):
    data = ProjectCreate.model_validate(project_payload())
    with pytest.raises(ParticipantNotFound):
        await submit_project(session, uuid.uuid4(), data)

    gone = await make_user(is_deleted=True)
    gone_id = gone.id
    with pytest.raises(ParticipantNotFound):
        await submit_project(session, gone_id, data)
    # nothing was recorded for the rejected submission
    assert await lifetime_project_count(session, gone_id) == 0


@pytest.mark.asyncio
async def test_failure_after_insert_leaves_nothing_behind(session, make_user, monkeypatch):
    d = date(2025, 8, 2)
    user = await make_user(current_streak=2, longest_streak=2, points=20,
                           first_submission_date=d - timedelta(days=2), last_submission_date=d - timedelta(days=1))
    user_id = user.id

    async def broken_count(session, user_id):
        raise OperationalError("SELECT count(projects.id)", {}, Exception("disk I/O error"))

    monkeypatch.setattr(submissions, "lifetime_project_count", broken_count)
    with pytest.raises(OperationalError):
        await submit_project(session, user_id, ProjectCreate.model_validate(project_payload()), now=_at(d))

    async with SessionLocal() as fresh:
        assert await fresh.scalar(select(func.count(Project.id))) == 0
        row = await fresh.get(User, user_id)
        assert (row.current_streak, row.points, row.last_submission_date) == (2, 20, d - timedelta(days=1))


@pytest.mark.asyncio
async def test_concurrent_submissions_for_one_participant_apply_in_turn(make_user, monkeypatch):
    d = date(2025, 9, 1)
    user = await make_user()
    user_id = user.id
    data = ProjectCreate.model_validate(project_payload())

    # hold the first submission inside its transaction until the second one has started
    first_inside = asyncio.Event()
    release = asyncio.Event()
    real_count = submissions.lifetime_project_count

    async def held_count(session, uid):
        if not first_inside.is_set():
            first_inside.set()
            await release.wait()
        return await real_count(session, uid)

    monkeypatch.setattr(submissions, "lifetime_project_count", held_count)

    async def submit_on(day):
        async with SessionLocal() as s:
            _, u = await submit_project(s, user_id, data, now=_at(day))
            return u.current_streak

    first = asyncio.create_task(submit_on(d))
    await first_inside.wait()
    second = asyncio.create_task(submit_on(d + timedelta(days=1)))
    await asyncio.sleep(0.1)
    release.set()
    assert await asyncio.gather(first, second) == [1, 2]

    async with SessionLocal() as fresh:
        row = await fresh.get(User, user_id)
        assert (row.current_streak, row.longest_streak, row.points) == (2, 2, 20)
        assert row.first_submission_date == d
        assert row.last_submission_date == d + timedelta(days=1)
        assert await fresh.scalar(select(func.count(Project.id)).where(Project.user_id == user_id)) == 2
