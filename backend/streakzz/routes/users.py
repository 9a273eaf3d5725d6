from __future__ import annotations
import uuid
from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from streakzz.auth_deps import get_current_user
from streakzz.config import settings
from streakzz.db import get_session
from streakzz.models.user import User
from streakzz.schemas.user import Profile, ProfileUser, ProfileStats
from streakzz.services.activity import activity_calendar, daily_counts
from streakzz.services.submissions import lifetime_project_count
from streakzz.services.time_windows import utc_day, utcnow

router = APIRouter(prefix="/users", tags=["users"])


async def _stats(session: AsyncSession, user: User, include_points: bool) -> ProfileStats:
    today = utc_day(utcnow())
    span = settings.activity_window_days
    counts = await daily_counts(session, user.id, since=today - timedelta(days=span))
    return ProfileStats(
        total_projects=await lifetime_project_count(session, user.id),
        current_streak=user.current_streak,
        longest_streak=user.longest_streak,
        points=user.points if include_points else None,
        streak_data=activity_calendar(counts, today, span),
    )


@router.get("/me/profile", response_model=Profile)
async def my_profile(session: AsyncSession = Depends(get_session), user: User = Depends(get_current_user)):
    return Profile(
        user=ProfileUser(id=user.id, full_name=user.full_name, joined_at=user.created_at, email=user.email, role=user.role),
        stats=await _stats(session, user, include_points=True),
    )


@router.get("/{user_id}", response_model=Profile)
async def public_profile(user_id: uuid.UUID, session: AsyncSession = Depends(get_session)):
    user = await session.get(User, user_id)
    if not user or user.is_deleted:
        raise HTTPException(status_code=404, detail="User not found")
    return Profile(
        user=ProfileUser(id=user.id, full_name=user.full_name, joined_at=user.created_at),
        stats=await _stats(session, user, include_points=False),
    )
