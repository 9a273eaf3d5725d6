from __future__ import annotations
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from streakzz.auth_deps import get_current_user
from streakzz.config import settings
from streakzz.db import get_session
from streakzz.models.project import Project
from streakzz.models.user import User
from streakzz.schemas.project import ProjectCreate, ProjectPublic, ProjectAuthor, StreakSummary, SubmissionResult
from streakzz.services.submissions import submit_project, ParticipantNotFound
from streakzz.services.time_windows import submission_window_open, utcnow

router = APIRouter(prefix="/projects", tags=["projects"])
log = structlog.get_logger()


def to_public(p: Project, author: User | None = None) -> ProjectPublic:
    return ProjectPublic(
        id=p.id,
        name=p.name,
        description=p.description,
        live_link=p.live_link,
        github_link=p.github_link,
        technologies=list(p.technologies or []),
        submitted_at=p.created_at,
        submitted_on=p.submitted_on,
        author=ProjectAuthor(id=author.id, name=author.full_name) if author else None,
    )


def streak_summary(u: User) -> StreakSummary:
    return StreakSummary(
        current_streak=u.current_streak,
        longest_streak=u.longest_streak,
        last_submission_date=u.last_submission_date,
        first_submission_date=u.first_submission_date,
        has_reached_thirty_projects=u.has_reached_thirty_projects,
        points=u.points,
    )


@router.post("", response_model=SubmissionResult, status_code=201)
async def create_project(
    payload: ProjectCreate,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    now = utcnow()
    start, end = settings.submission_start_hour, settings.submission_end_hour
    if not submission_window_open(now, start, end, settings.submission_timezone):
        raise HTTPException(
            status_code=400,
            detail=f"Project submissions are only allowed between {start:02d}:00 and {end % 24:02d}:00 ({settings.submission_timezone})",
        )
    # a rollback inside submit_project expires `user`; read the id before it
    user_id = user.id
    try:
        project, owner = await submit_project(session, user_id, payload, now=now)
    except ParticipantNotFound:
        log.warning("project_submit_owner_missing", user_id=str(user_id))
        raise HTTPException(status_code=404, detail="User not found")
    except SQLAlchemyError:
        log.exception("project_submit_failed", user_id=str(user_id))
        raise HTTPException(status_code=500, detail="Failed to submit project")
    return SubmissionResult(project=to_public(project), streak=streak_summary(owner))


@router.get("/mine", response_model=list[ProjectPublic])
async def my_projects(session: AsyncSession = Depends(get_session), user: User = Depends(get_current_user)):
    rows = (await session.execute(
        select(Project).where(Project.user_id == user.id).order_by(Project.created_at.desc())
    )).scalars().all()
    return [to_public(p) for p in rows]


@router.get("/streak", response_model=StreakSummary)
async def my_streak(user: User = Depends(get_current_user)):
    return streak_summary(user)


@router.get("", response_model=list[ProjectPublic])
async def gallery(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    # Public; projects by soft-deleted users are hidden
    rows = (await session.execute(
        select(Project, User)
        .join(User, User.id == Project.user_id)
        .where(User.is_deleted.is_(False))
        .order_by(Project.created_at.desc())
        .limit(limit)
        .offset(offset)
    )).all()
    return [to_public(p, u) for (p, u) in rows]
