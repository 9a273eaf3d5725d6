from __future__ import annotations
from datetime import date
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from streakzz.models.project import Project
from streakzz.services.time_windows import day_range


def activity_calendar(counts_by_day: dict[date, int], today: date, span_days: int = 365) -> dict[str, int]:
    """
    Day-by-day submission counts for the heatmap: every UTC day from
    `today - span_days` through `today` is present, zero-filled.
    Days outside the window are dropped.
    """
    return {d.isoformat(): int(counts_by_day.get(d, 0)) for d in day_range(today, span_days)}


async def daily_counts(session: AsyncSession, user_id: UUID, since: date) -> dict[date, int]:
    rows = (await session.execute(
        select(Project.submitted_on, func.count(Project.id))
        .where(Project.user_id == user_id, Project.submitted_on >= since)
        .group_by(Project.submitted_on)
    )).all()
    return {d: int(n) for (d, n) in rows}
