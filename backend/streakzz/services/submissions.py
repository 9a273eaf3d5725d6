from __future__ import annotations
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from streakzz.config import settings
from streakzz.models.project import Project
from streakzz.models.user import User
from streakzz.schemas.project import ProjectCreate
from streakzz.services.streak import StreakState, advance
from streakzz.services.time_windows import utc_day, utcnow

log = structlog.get_logger()


class ParticipantNotFound(Exception):
    pass


async def lifetime_project_count(session: AsyncSession, user_id: UUID) -> int:
    total = await session.scalar(select(func.count(Project.id)).where(Project.user_id == user_id))
    return int(total or 0)


async def _lock_participant(session: AsyncSession, user_id: UUID) -> User | None:
    """
    Load the participant row with a row lock so concurrent submissions by the
    same user apply one after the other. populate_existing refreshes a copy
    already sitting in the identity map from the auth dependency.
    """
    if session.bind is not None and session.bind.dialect.name == "sqlite":
        # SQLite ignores FOR UPDATE; a no-op write takes the database write lock
        await session.execute(
            update(User)
            .where(User.id == user_id)
            .values(is_deleted=User.is_deleted)
            .execution_options(synchronize_session=False)
        )
    return await session.scalar(
        select(User)
        .where(User.id == user_id, User.is_deleted.is_(False))
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def submit_project(
    session: AsyncSession,
    user_id: UUID,
    data: ProjectCreate,
    now: datetime | None = None,
) -> tuple[Project, User]:
    """
    Record a project and update the owner's streak accumulator in one
    transaction. Raises ParticipantNotFound (after rollback) if the owner is
    missing or soft-deleted; database errors roll back and propagate.
    """
    now = now or utcnow()
    today = utc_day(now)
    try:
        user = await _lock_participant(session, user_id)
        if user is None:
            raise ParticipantNotFound(str(user_id))

        project = Project(
            user_id=user.id,
            name=data.name,
            description=data.description,
            live_link=str(data.live_link),
            github_link=str(data.github_link),
            technologies=list(data.technologies),
            created_at=now,
            submitted_on=today,
        )
        session.add(project)
        await session.flush()

        count = await lifetime_project_count(session, user.id)
        before = StreakState.from_user(user)
        if before.is_backdated(today):
            log.warning(
                "streak_backdated_submission",
                user_id=str(user.id),
                day=today.isoformat(),
                last_submission_date=before.last_submission_date.isoformat(),
            )
        after = advance(
            before,
            today,
            count,
            milestone=settings.milestone_projects,
            points_per_day=settings.points_per_streak_day,
        )
        after.apply_to(user)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    await session.refresh(project)
    log.info(
        "project_submitted",
        user_id=str(user.id),
        project_id=str(project.id),
        day=today.isoformat(),
        lifetime_count=count,
        current_streak=after.current_streak,
        points=after.points,
        milestone=after.has_reached_thirty_projects,
    )
    if after.has_reached_thirty_projects and not before.has_reached_thirty_projects:
        log.info("participant_milestone_reached", user_id=str(user.id), lifetime_count=count)
    return project, user
